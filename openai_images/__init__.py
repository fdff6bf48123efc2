"""OpenAI Images Python client

Creates, edits and varies images through the OpenAI Images API.
Offers blocking and async calls plus an ``openai-images`` command-line demo.
"""

__version__ = "1.0.0"

from .client import OpenAIImagesClient
from .errors import (
    APIError,
    DecodeError,
    EncodeError,
    InvalidAPIKeyError,
    InvalidRequestError,
    InvalidResponseError,
    OpenAIImagesError,
    RateLimitError,
    TransportError,
    UnexpectedError,
)
from .request_builder import build_request_body, parse_request_body
from .response_mapper import map_response
from .types import (
    BackgroundType,
    ImageData,
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
    TokenUsage,
    TokenUsageDetails,
)
