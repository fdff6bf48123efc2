"""Request body construction for the image endpoints.

Which fields go on the wire is decided by two tables: the fields each
endpoint accepts (``OPERATION_FIELDS``) and the model-gated fields each model
accepts (``MODEL_FIELDS``). A field that either table rules out is omitted
from the body entirely; the service rejects some of them even as ``null``.
"""

import json
import logging
from enum import Enum
from typing import Any, Dict, Tuple, Type

from .errors import DecodeError, EncodeError, InvalidRequestError
from .image_utils import decode_base64, encode_base64
from .types import (
    BackgroundType,
    ImageModel,
    ImageOperation,
    ImageQuality,
    ImageSize,
    ImageStyle,
    ModerationLevel,
    OutputFormat,
    RequestOptions,
    ResponseFormat,
)

logger = logging.getLogger(__name__)

MIN_IMAGES = 1
MAX_IMAGES = 10
MIN_COMPRESSION = 0
MAX_COMPRESSION = 100

# Endpoint field order is the serialization order
OPERATION_FIELDS: Dict[ImageOperation, Tuple[str, ...]] = {
    ImageOperation.GENERATE: (
        "model", "prompt", "n", "quality", "response_format", "size", "style",
        "user", "background", "output_format", "output_compression", "moderation",
    ),
    ImageOperation.EDIT: (
        "image", "mask", "model", "prompt", "n", "size", "response_format", "user",
    ),
    ImageOperation.VARY: (
        "image", "model", "n", "response_format", "size", "user",
    ),
}

# Allowed for every model wherever the endpoint lists them
UNGATED_FIELDS = frozenset({"model", "prompt", "n", "size", "user", "image", "mask"})

MODEL_FIELDS: Dict[ImageModel, frozenset] = {
    # Always answers with inline bytes, so no response_format
    ImageModel.GPT_IMAGE_1: frozenset({
        "quality", "background", "output_format", "output_compression", "moderation",
    }),
    ImageModel.DALL_E_2: frozenset({"response_format"}),
    ImageModel.DALL_E_3: frozenset({"quality", "response_format", "style"}),
}

DEFAULT_MODELS: Dict[ImageOperation, ImageModel] = {
    ImageOperation.GENERATE: ImageModel.GPT_IMAGE_1,
    ImageOperation.EDIT: ImageModel.DALL_E_2,
    ImageOperation.VARY: ImageModel.DALL_E_2,
}

OPERATION_DEFAULTS: Dict[ImageOperation, Dict[str, Any]] = {
    ImageOperation.GENERATE: {
        "n": 1,
        "size": ImageSize.AUTO,
        "response_format": ResponseFormat.URL,
        "style": ImageStyle.VIVID,
    },
    ImageOperation.EDIT: {
        "n": 1,
        "size": ImageSize.SIZE_1024X1024,
        "response_format": ResponseFormat.URL,
    },
    ImageOperation.VARY: {
        "n": 1,
        "size": ImageSize.SIZE_1024X1024,
        "response_format": ResponseFormat.URL,
    },
}

DEFAULT_QUALITY: Dict[ImageModel, ImageQuality] = {
    ImageModel.GPT_IMAGE_1: ImageQuality.AUTO,
    ImageModel.DALL_E_3: ImageQuality.STANDARD,
}

ENUM_FIELDS: Dict[str, Type[Enum]] = {
    "size": ImageSize,
    "quality": ImageQuality,
    "response_format": ResponseFormat,
    "style": ImageStyle,
    "background": BackgroundType,
    "output_format": OutputFormat,
    "moderation": ModerationLevel,
}

_REQUIRES_PROMPT = (ImageOperation.GENERATE, ImageOperation.EDIT)
_REQUIRES_IMAGE = (ImageOperation.EDIT, ImageOperation.VARY)


def _coerce_enum(enum_cls, value, name: str):
    try:
        return enum_cls(value)
    except ValueError:
        choices = ", ".join(member.value for member in enum_cls)
        raise InvalidRequestError(f"Invalid {name}: {value!r}. Must be one of: {choices}") from None


def coerce_operation(operation) -> ImageOperation:
    return _coerce_enum(ImageOperation, operation, "operation")


def coerce_model(model) -> ImageModel:
    return _coerce_enum(ImageModel, model, "model")


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def validate_options(operation: ImageOperation, options: RequestOptions) -> None:
    """Check required fields and ranges.

    Ranges are checked on whatever the caller supplied, even for fields the
    chosen model would not serialize.

    Raises:
        InvalidRequestError: on the first violation found
    """
    if operation in _REQUIRES_PROMPT and not options.prompt:
        raise InvalidRequestError("Prompt cannot be empty")

    if operation in _REQUIRES_IMAGE and not options.image:
        raise InvalidRequestError("Image cannot be empty")

    if options.n is not None:
        if not _is_int(options.n) or not (MIN_IMAGES <= options.n <= MAX_IMAGES):
            raise InvalidRequestError(
                f"Number of images must be between {MIN_IMAGES} and {MAX_IMAGES}, got {options.n!r}"
            )

    if options.output_compression is not None:
        compression = options.output_compression
        if not _is_int(compression) or not (MIN_COMPRESSION <= compression <= MAX_COMPRESSION):
            raise InvalidRequestError(
                f"Output compression must be between {MIN_COMPRESSION} and {MAX_COMPRESSION}, got {compression!r}"
            )

    if options.user is not None and not isinstance(options.user, str):
        raise InvalidRequestError("User must be a string")

    for name, enum_cls in ENUM_FIELDS.items():
        value = getattr(options, name)
        if value is not None:
            _coerce_enum(enum_cls, value, name)


def allowed_fields(operation: ImageOperation, model: ImageModel) -> Tuple[str, ...]:
    """Fields that may appear in a body for this operation and model."""
    gated = MODEL_FIELDS[model]
    return tuple(
        name for name in OPERATION_FIELDS[operation]
        if name in UNGATED_FIELDS or name in gated
    )


def _field_value(name: str, operation: ImageOperation, model: ImageModel, options: RequestOptions) -> Any:
    if name == "model":
        return model.value
    if name in ("image", "mask"):
        data = getattr(options, name)
        return encode_base64(data) if data is not None else None

    value = getattr(options, name)
    if value is None:
        if name == "quality":
            value = DEFAULT_QUALITY.get(model)
        else:
            value = OPERATION_DEFAULTS[operation].get(name)
    if value is None:
        return None

    if name in ENUM_FIELDS:
        return _coerce_enum(ENUM_FIELDS[name], value, name).value
    return value


def build_request_body(operation, model, options: RequestOptions) -> Dict[str, Any]:
    """Build the JSON body for one image request.

    Args:
        operation: ImageOperation or its value
        model: ImageModel or its value
        options: request options; ``None`` fields take the operation default

    Returns:
        dict ready for JSON encoding, holding only fields the endpoint and
        model both accept

    Raises:
        InvalidRequestError: missing or out-of-range fields
        EncodeError: image or mask bytes could not be base64-encoded
    """
    operation = coerce_operation(operation)
    model = coerce_model(model)
    validate_options(operation, options)

    body: Dict[str, Any] = {}
    for name in allowed_fields(operation, model):
        value = _field_value(name, operation, model, options)
        if value is not None:
            body[name] = value

    logger.debug("Built %s body for %s with fields %s", operation.value, model.value, list(body))
    return body


def encode_request_body(body: Dict[str, Any]) -> bytes:
    """Serialize a request body to compact UTF-8 JSON."""
    try:
        return json.dumps(body, separators=(",", ":"), ensure_ascii=False).encode("utf-8")
    except (TypeError, ValueError) as e:
        raise EncodeError(f"Failed to encode request: {e}") from e


def parse_request_body(operation, body: Dict[str, Any]) -> Tuple[ImageModel, RequestOptions]:
    """Turn a body produced by :func:`build_request_body` back into options.

    Fields absent from the body stay ``None`` in the returned options.

    Raises:
        InvalidRequestError: the body carries a field the endpoint does not
            accept, or a value that cannot be decoded
    """
    operation = coerce_operation(operation)
    unknown = set(body) - set(OPERATION_FIELDS[operation])
    if unknown:
        raise InvalidRequestError(f"Unexpected fields for {operation.value}: {sorted(unknown)}")

    model = coerce_model(body.get("model", DEFAULT_MODELS[operation]))
    kwargs: Dict[str, Any] = {}
    for name, value in body.items():
        if name == "model":
            continue
        if name in ("image", "mask"):
            if not isinstance(value, str):
                raise InvalidRequestError(f"Field '{name}' must be a base64 string")
            try:
                kwargs[name] = decode_base64(value)
            except DecodeError as e:
                raise InvalidRequestError(f"Invalid base64 {name}: {e.cause}") from e
        elif name in ENUM_FIELDS:
            kwargs[name] = _coerce_enum(ENUM_FIELDS[name], value, name)
        else:
            kwargs[name] = value

    return model, RequestOptions(**kwargs)
