"""OpenAI Images Types"""

from dataclasses import dataclass, field
from enum import Enum
from typing import List, Optional


class ImageOperation(str, Enum):
    """Image operation, determines endpoint and payload shape."""
    GENERATE = "generate"
    EDIT = "edit"
    VARY = "vary"

    @property
    def path(self) -> str:
        return _OPERATION_PATHS[self]


_OPERATION_PATHS = {
    ImageOperation.GENERATE: "/images/generations",
    ImageOperation.EDIT: "/images/edits",
    ImageOperation.VARY: "/images/variations",
}


class ImageModel(str, Enum):
    GPT_IMAGE_1 = "gpt-image-1"
    DALL_E_2 = "dall-e-2"
    DALL_E_3 = "dall-e-3"


class ImageSize(str, Enum):
    AUTO = "auto"
    # dall-e-3
    SIZE_1024X1024 = "1024x1024"
    SIZE_1792X1024 = "1792x1024"
    SIZE_1024X1792 = "1024x1792"
    # dall-e-2
    SIZE_256X256 = "256x256"
    SIZE_512X512 = "512x512"
    # gpt-image-1 landscape / portrait
    SIZE_1536X1024 = "1536x1024"
    SIZE_1024X1536 = "1024x1536"


class ImageQuality(str, Enum):
    STANDARD = "standard"
    HD = "hd"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"
    AUTO = "auto"


class ImageStyle(str, Enum):
    VIVID = "vivid"
    NATURAL = "natural"


class ResponseFormat(str, Enum):
    URL = "url"
    B64_JSON = "b64_json"


class BackgroundType(str, Enum):
    TRANSPARENT = "transparent"
    OPAQUE = "opaque"
    AUTO = "auto"


class OutputFormat(str, Enum):
    PNG = "png"
    JPEG = "jpeg"
    WEBP = "webp"


class ModerationLevel(str, Enum):
    LOW = "low"
    AUTO = "auto"


@dataclass(frozen=True)
class RequestOptions:
    """Options for a single image request.

    ``None`` means "use the operation default". Enum fields accept either the
    enum member or its wire string; the request builder normalizes them.
    """
    prompt: str = ""
    image: Optional[bytes] = None
    mask: Optional[bytes] = None
    n: Optional[int] = None
    size: Optional[ImageSize] = None
    quality: Optional[ImageQuality] = None
    response_format: Optional[ResponseFormat] = None
    style: Optional[ImageStyle] = None
    background: Optional[BackgroundType] = None
    output_format: Optional[OutputFormat] = None
    output_compression: Optional[int] = None
    moderation: Optional[ModerationLevel] = None
    user: Optional[str] = None


@dataclass(frozen=True)
class ImageData:
    """One generated image: a URL or inline base64 payload."""
    url: Optional[str] = None
    b64_json: Optional[str] = None
    revised_prompt: Optional[str] = None

    @property
    def has_inline_data(self) -> bool:
        return self.b64_json is not None

    def image_bytes(self) -> bytes:
        """Decode the inline payload.

        Raises:
            ValueError: the entry has no inline payload
            DecodeError: the payload is not valid base64
        """
        from .image_utils import decode_base64

        if self.b64_json is None:
            raise ValueError("Image has no inline b64_json payload")
        return decode_base64(self.b64_json)


@dataclass(frozen=True)
class TokenUsageDetails:
    text_tokens: int
    image_tokens: int


@dataclass(frozen=True)
class TokenUsage:
    """Token accounting, only reported for gpt-image-1."""
    total_tokens: int
    input_tokens: int
    output_tokens: int
    input_tokens_details: Optional[TokenUsageDetails] = None


@dataclass(frozen=True)
class ImagesResponse:
    """Successful response from any of the image endpoints."""
    created: int
    data: List[ImageData] = field(default_factory=list)
    usage: Optional[TokenUsage] = None

    @property
    def urls(self) -> List[str]:
        return [item.url for item in self.data if item.url]
