"""Shared test data"""

import base64

API_KEY = "test-api-key"

PNG_B64 = "iVBORw0KGgoAAAANSUhEUgAAAAEAAAABCAYAAAAfFcSJAAAADUlEQVR42mP8z8BQDwAEhQGAhKmMIQAAAABJRU5ErkJggg=="
PNG_BYTES = base64.b64decode(PNG_B64)

OTTER_PROMPT = "A cute baby sea otter floating on its back in blue water"
REVISED_PROMPT = "A cute baby sea otter floating on its back in blue water."

CREATE_IMAGE_SUCCESS = {
    "created": 1677254147,
    "data": [
        {
            "url": "https://example.com/image.png",
            "revised_prompt": REVISED_PROMPT,
        }
    ],
}

CREATE_IMAGE_SUCCESS_B64 = {
    "created": 1677254147,
    "data": [
        {
            "b64_json": PNG_B64,
            "revised_prompt": REVISED_PROMPT,
        }
    ],
}

CREATE_IMAGE_WITH_USAGE = {
    "created": 1713833628,
    "data": [{"b64_json": PNG_B64}],
    "usage": {
        "total_tokens": 100,
        "input_tokens": 50,
        "output_tokens": 50,
        "input_tokens_details": {"text_tokens": 10, "image_tokens": 40},
    },
}

IMAGE_EDIT_SUCCESS = {
    "created": 1677254147,
    "data": [{"url": "https://example.com/edited-image.png"}],
}

IMAGE_VARIATION_SUCCESS = {
    "created": 1677254147,
    "data": [
        {"url": "https://example.com/variation-image.png"},
        {"url": "https://example.com/variation-image-2.png"},
    ],
}

INVALID_API_KEY_ERROR = {
    "error": {
        "message": "Incorrect API key provided",
        "type": "invalid_request_error",
        "param": None,
        "code": "invalid_api_key",
    }
}
