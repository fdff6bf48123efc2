"""Image helpers: base64 transport encoding and file I/O."""

import base64
import binascii
import logging
from pathlib import Path
from typing import Union

from .errors import DecodeError, EncodeError
from .types import ImageData

logger = logging.getLogger(__name__)

PathLike = Union[str, Path]

# Extensions keyed by the leading bytes of the decoded image
_SIGNATURES = (
    (b"\x89PNG\r\n\x1a\n", ".png"),
    (b"\xff\xd8\xff", ".jpg"),
    (b"RIFF", ".webp"),
)


def encode_base64(data: bytes) -> str:
    """Encode image bytes for a JSON request body."""
    try:
        return base64.b64encode(data).decode("ascii")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Failed to encode image to base64: {e}") from e


def decode_base64(text: str) -> bytes:
    # Accept data URIs as well as bare base64
    if text.startswith("data:") and "," in text:
        text = text.split(",", 1)[1]
    try:
        return base64.b64decode(text, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(e) from e


def load_image_file(path: PathLike) -> bytes:
    """Read an image file. OSError propagates to the caller."""
    return Path(path).read_bytes()


def guess_extension(data: bytes, default: str = ".png") -> str:
    for signature, extension in _SIGNATURES:
        if data.startswith(signature):
            return extension
    return default


def save_image_data(item: ImageData, path: PathLike) -> Path:
    """Write the inline payload of a result entry to ``path``.

    If ``path`` has no suffix one is chosen from the image bytes.

    Raises:
        ValueError: the entry has no inline payload
        DecodeError: the payload is not valid base64
    """
    data = item.image_bytes()
    target = Path(path)
    if not target.suffix:
        target = target.with_suffix(guess_extension(data))
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_bytes(data)
    logger.info("Saved image to %s (%d bytes)", target, len(data))
    return target
