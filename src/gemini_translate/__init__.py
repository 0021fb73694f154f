"""Gemini-style translation adapter with buffered and streamed responses."""

from .client import GeminiTranslator, translate
from .errors import (
    ConfigError,
    GeminiTranslateError,
    HttpError,
    ResponseFormatError,
    StreamError,
    TransportError,
)
from .types import TranslationRequest, TranslatorConfig

__all__ = [
    "GeminiTranslator",
    "translate",
    "TranslatorConfig",
    "TranslationRequest",
    "GeminiTranslateError",
    "ConfigError",
    "HttpError",
    "ResponseFormatError",
    "StreamError",
    "TransportError",
]
