"""OpenAI Images Client

Creates, edits and varies images through the OpenAI Images API.
Every call is one POST and one response; nothing is retried.
"""

import asyncio
import functools
import logging
from typing import Any, Callable, Optional, TypeVar, Union

import httpx

from .errors import InvalidAPIKeyError, InvalidRequestError, TransportError, UnexpectedError
from .request_builder import (
    DEFAULT_MODELS,
    build_request_body,
    coerce_model,
    coerce_operation,
    encode_request_body,
)
from .response_mapper import map_response
from .types import (
    BackgroundType,
    ImageModel,
    ImageOperation,
    ImageQuality,
    ImageSize,
    ImageStyle,
    ImagesResponse,
    ModerationLevel,
    OutputFormat,
    RequestOptions,
    ResponseFormat,
)

logger = logging.getLogger(__name__)

DEFAULT_BASE_URL = "https://api.openai.com/v1"
DEFAULT_TIMEOUT = 120.0

T = TypeVar("T")


class OpenAIImagesClient:
    """OpenAI Images API client.

    Usage:
        client = OpenAIImagesClient(api_key)

        # Blocking
        response = client.create_image("A cute baby sea otter")
        print(response.data[0].url)

        # Async
        response = await client.acreate_image("A cute baby sea otter")

    Errors surface as subclasses of ``OpenAIImagesError``.
    """

    def __init__(
        self,
        api_key: str,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = DEFAULT_TIMEOUT,
        transport: Optional[httpx.BaseTransport] = None,
    ):
        self.api_key = api_key
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.api_key}",
        }

    def _endpoint(self, operation: ImageOperation) -> httpx.URL:
        try:
            url = httpx.URL(f"{self.base_url}{operation.path}")
        except httpx.InvalidURL as e:
            raise InvalidRequestError(f"Invalid endpoint URL: {e}") from e
        if url.scheme not in ("http", "https") or not url.host:
            raise InvalidRequestError(f"Invalid endpoint URL: {url}")
        return url

    # --- Synchronous API ---

    def send(
        self,
        operation: Union[ImageOperation, str],
        model: Union[ImageModel, str],
        options: RequestOptions,
    ) -> ImagesResponse:
        """Send one image request and wait for the parsed response."""
        if not self.api_key:
            raise InvalidAPIKeyError()

        operation = coerce_operation(operation)
        model = coerce_model(model)
        url = self._endpoint(operation)
        content = encode_request_body(build_request_body(operation, model, options))

        logger.debug("POST %s (model=%s, %d bytes)", url, model.value, len(content))
        try:
            with httpx.Client(timeout=self.timeout, transport=self._transport) as client:
                response = client.post(url, content=content, headers=self._headers())
        except httpx.RequestError as e:
            logger.warning("Request to %s failed: %s", url, e)
            raise TransportError(e) from e
        except httpx.HTTPError as e:
            raise UnexpectedError(str(e)) from e

        return map_response(response.status_code, response.content)

    def create_image(
        self,
        prompt: str,
        model: Union[ImageModel, str] = DEFAULT_MODELS[ImageOperation.GENERATE],
        n: Optional[int] = 1,
        quality: Optional[ImageQuality] = None,
        response_format: Optional[ResponseFormat] = None,
        size: Optional[ImageSize] = None,
        style: Optional[ImageStyle] = None,
        user: Optional[str] = None,
        background: Optional[BackgroundType] = None,
        output_format: Optional[OutputFormat] = None,
        output_compression: Optional[int] = None,
        moderation: Optional[ModerationLevel] = None,
    ) -> ImagesResponse:
        """Generate images from a prompt.

        Options a model does not accept are dropped from the request, e.g.
        ``style`` is only sent to dall-e-3.
        """
        options = RequestOptions(
            prompt=prompt,
            n=n,
            quality=quality,
            response_format=response_format,
            size=size,
            style=style,
            user=user,
            background=background,
            output_format=output_format,
            output_compression=output_compression,
            moderation=moderation,
        )
        return self.send(ImageOperation.GENERATE, model, options)

    def edit_image(
        self,
        image: bytes,
        prompt: str,
        mask: Optional[bytes] = None,
        model: Union[ImageModel, str] = DEFAULT_MODELS[ImageOperation.EDIT],
        n: Optional[int] = 1,
        size: Optional[ImageSize] = None,
        response_format: Optional[ResponseFormat] = None,
        user: Optional[str] = None,
    ) -> ImagesResponse:
        """Edit an image; transparent areas of ``mask`` mark what to change."""
        options = RequestOptions(
            prompt=prompt,
            image=image,
            mask=mask,
            n=n,
            size=size,
            response_format=response_format,
            user=user,
        )
        return self.send(ImageOperation.EDIT, model, options)

    def create_image_variation(
        self,
        image: bytes,
        model: Union[ImageModel, str] = DEFAULT_MODELS[ImageOperation.VARY],
        n: Optional[int] = 1,
        response_format: Optional[ResponseFormat] = None,
        size: Optional[ImageSize] = None,
        user: Optional[str] = None,
    ) -> ImagesResponse:
        options = RequestOptions(
            image=image,
            n=n,
            response_format=response_format,
            size=size,
            user=user,
        )
        return self.send(ImageOperation.VARY, model, options)

    # --- Async API ---

    @staticmethod
    async def _run_async(func: Callable[..., T], *args: Any, **kwargs: Any) -> T:
        """Run a blocking method in a worker thread."""
        return await asyncio.to_thread(functools.partial(func, *args, **kwargs))

    async def asend(
        self,
        operation: Union[ImageOperation, str],
        model: Union[ImageModel, str],
        options: RequestOptions,
    ) -> ImagesResponse:
        return await self._run_async(self.send, operation, model, options)

    async def acreate_image(self, prompt: str, **kwargs: Any) -> ImagesResponse:
        """Async version of :meth:`create_image`."""
        return await self._run_async(self.create_image, prompt, **kwargs)

    async def aedit_image(self, image: bytes, prompt: str, **kwargs: Any) -> ImagesResponse:
        """Async version of :meth:`edit_image`."""
        return await self._run_async(self.edit_image, image, prompt, **kwargs)

    async def acreate_image_variation(self, image: bytes, **kwargs: Any) -> ImagesResponse:
        """Async version of :meth:`create_image_variation`."""
        return await self._run_async(self.create_image_variation, image, **kwargs)
