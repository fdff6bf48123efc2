"""Map HTTP responses from the image endpoints to results or exceptions."""

import json
import logging
from dataclasses import dataclass
from typing import Any, Optional

from .errors import APIError, DecodeError, InvalidResponseError, OpenAIImagesError, RateLimitError
from .types import ImageData, ImagesResponse, TokenUsage, TokenUsageDetails

logger = logging.getLogger(__name__)

RATE_LIMIT_STATUS = 429


@dataclass(frozen=True)
class ErrorDetails:
    """Contents of the service's ``{"error": {...}}`` envelope."""
    message: str
    type: Optional[str] = None
    param: Optional[str] = None
    code: Optional[str] = None


def _require(mapping: dict, key: str, kind) -> Any:
    if key not in mapping:
        raise KeyError(f"missing field '{key}'")
    value = mapping[key]
    if not isinstance(value, kind) or isinstance(value, bool):
        raise TypeError(f"field '{key}' has type {type(value).__name__}")
    return value


def _optional(mapping: dict, key: str, kind) -> Any:
    value = mapping.get(key)
    if value is None:
        return None
    if not isinstance(value, kind) or isinstance(value, bool):
        raise TypeError(f"field '{key}' has type {type(value).__name__}")
    return value


def _as_object(value: Any, what: str) -> dict:
    if not isinstance(value, dict):
        raise TypeError(f"{what} must be an object, got {type(value).__name__}")
    return value


def parse_images_response(payload: Any) -> ImagesResponse:
    """Build an ImagesResponse from decoded JSON.

    Raises:
        KeyError, TypeError: payload does not have the expected shape
    """
    payload = _as_object(payload, "response")
    created = _require(payload, "created", int)
    items = _require(payload, "data", list)

    data = []
    for item in items:
        item = _as_object(item, "data entry")
        data.append(ImageData(
            url=_optional(item, "url", str),
            b64_json=_optional(item, "b64_json", str),
            revised_prompt=_optional(item, "revised_prompt", str),
        ))

    usage = None
    usage_data = payload.get("usage")
    if usage_data is not None:
        usage_data = _as_object(usage_data, "usage")
        details = None
        details_data = usage_data.get("input_tokens_details")
        if details_data is not None:
            details_data = _as_object(details_data, "input_tokens_details")
            details = TokenUsageDetails(
                text_tokens=_require(details_data, "text_tokens", int),
                image_tokens=_require(details_data, "image_tokens", int),
            )
        usage = TokenUsage(
            total_tokens=_require(usage_data, "total_tokens", int),
            input_tokens=_require(usage_data, "input_tokens", int),
            output_tokens=_require(usage_data, "output_tokens", int),
            input_tokens_details=details,
        )

    return ImagesResponse(created=created, data=data, usage=usage)


def parse_error_envelope(payload: Any) -> ErrorDetails:
    """Read the ``error`` object of an error response.

    Raises:
        KeyError, TypeError: payload is not an error envelope
    """
    payload = _as_object(payload, "error response")
    error = _as_object(_require(payload, "error", dict), "error")
    return ErrorDetails(
        message=_require(error, "message", str),
        type=_optional(error, "type", str),
        param=_optional(error, "param", str),
        code=_optional(error, "code", str),
    )


def _body_text(body: bytes) -> str:
    try:
        return body.decode("utf-8")
    except UnicodeDecodeError:
        return "Unknown error"


def map_error(status_code: int, body: bytes) -> OpenAIImagesError:
    """Exception for a response with status >= 400."""
    try:
        details = parse_error_envelope(json.loads(body))
    except (ValueError, KeyError, TypeError):
        if status_code == RATE_LIMIT_STATUS:
            return RateLimitError()
        return APIError(_body_text(body), status_code)

    return APIError(
        details.message,
        status_code,
        error_type=details.type,
        param=details.param,
        code=details.code,
    )


def map_response(status_code: int, body: Optional[bytes]) -> ImagesResponse:
    """Turn an HTTP status and body into an ImagesResponse.

    Args:
        status_code: HTTP status of the response
        body: raw response body, ``None`` if none was received

    Returns:
        parsed response for status < 400

    Raises:
        InvalidResponseError: no body was received
        DecodeError: success body is malformed
        APIError: service reported an error (RateLimitError for an
            unreadable 429)
    """
    if body is None:
        raise InvalidResponseError(status_code=status_code)

    if status_code >= 400:
        error = map_error(status_code, body)
        logger.warning("Images API returned %d: %s", status_code, error.message)
        raise error

    try:
        return parse_images_response(json.loads(body))
    except (ValueError, KeyError, TypeError) as e:
        raise DecodeError(e) from e
