"""Package specific exception hierarchy."""

from __future__ import annotations


class GeminiTranslateError(Exception):
    """Base exception for gemini_translate package."""


class ConfigError(GeminiTranslateError):
    """Raised when required configuration is missing or invalid."""


class HttpError(GeminiTranslateError):
    """Raised when the API answers with a non-success HTTP status."""

    def __init__(self, status_code: int, body: str) -> None:
        super().__init__(f"HTTP request failed (status {status_code}): {body}")
        self.status_code = status_code
        self.body = body


class ResponseFormatError(GeminiTranslateError):
    """Raised when a buffered response does not carry any translated text."""

    def __init__(self, body: str) -> None:
        super().__init__(f"Unable to parse Gemini API response: {body}")
        self.body = body


class StreamError(GeminiTranslateError):
    """Raised when reading the streamed response body fails."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"Streaming response processing error: {cause}")
        self.cause = cause


class TransportError(GeminiTranslateError):
    """Raised when the request fails before a response status is received."""

    def __init__(self, cause: BaseException) -> None:
        super().__init__(f"HTTP request could not be completed: {cause}")
        self.cause = cause
