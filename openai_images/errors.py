"""Exceptions raised by the OpenAI Images client.

Every failure of a call surfaces as one of these. None of them is retried by
the client; callers decide whether to try again.
"""

from typing import Optional


class OpenAIImagesError(Exception):
    """Base exception for OpenAI Images errors"""

    def __init__(self, message: str, status_code: Optional[int] = None):
        self.message = message
        self.status_code = status_code
        super().__init__(self.message)


class InvalidAPIKeyError(OpenAIImagesError):
    """Empty API key, raised before any network traffic"""

    def __init__(self, message: str = "Invalid API key provided"):
        super().__init__(message)


class InvalidRequestError(OpenAIImagesError):
    """Missing or out-of-range request fields, or an unusable endpoint URL"""
    pass


class EncodeError(OpenAIImagesError):
    """Request body or image bytes could not be encoded"""
    pass


class TransportError(OpenAIImagesError):
    """The HTTP exchange itself failed"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Network error: {cause}")


class InvalidResponseError(OpenAIImagesError):
    """Response had no body"""

    def __init__(self, message: str = "Invalid response from the server", status_code: Optional[int] = None):
        super().__init__(message, status_code)


class DecodeError(OpenAIImagesError):
    """Success body was not valid JSON of the expected shape"""

    def __init__(self, cause: BaseException):
        self.cause = cause
        super().__init__(f"Error decoding response: {cause}")


class APIError(OpenAIImagesError):
    """Error reported by the service"""

    def __init__(
        self,
        message: str,
        status_code: int,
        error_type: Optional[str] = None,
        param: Optional[str] = None,
        code: Optional[str] = None,
    ):
        self.error_type = error_type
        self.param = param
        self.code = code
        super().__init__(message, status_code)

    def __str__(self) -> str:
        return f"API error ({self.status_code}): {self.message}"


class RateLimitError(OpenAIImagesError):
    """HTTP 429 without a readable error envelope"""

    def __init__(self, message: str = "Rate limit exceeded"):
        super().__init__(message, 429)


class UnexpectedError(OpenAIImagesError):
    """Anything the other errors do not cover"""

    def __str__(self) -> str:
        return f"Unexpected error: {self.message}"
