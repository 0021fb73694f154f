"""Configuration and request models."""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Mapping
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from gemini_translate.errors import ConfigError

ResultSink = Callable[[str], Any]

_logger = logging.getLogger(__name__)

_DEFAULT_TEMPERATURE = 0.0
_DEFAULT_TOP_P = 0.95
_INT_PREFIX_RE = re.compile(r"[+-]?\d+")
_FLOAT_PREFIX_RE = re.compile(r"[+-]?(?:\d+\.?\d*|\.\d+)(?:[eE][+-]?\d+)?")


def _is_blank(value: Any) -> bool:
    return value is None or (isinstance(value, str) and not value.strip())


def _leading_number(value: Any, pattern: re.Pattern[str], cast: Callable[[str], Any]) -> Any:
    """Read the numeric prefix of a string option ("1.5" -> 1 for ints, "0.3x" -> 0.3)."""
    if isinstance(value, bool) or not isinstance(value, (str, int, float)):
        return None
    if not isinstance(value, str):
        return cast(value)
    match = pattern.match(value.strip())
    return cast(match.group()) if match else None


def _float_option(name: str, value: Any, default: float) -> float:
    if _is_blank(value):
        return default
    number = _leading_number(value, _FLOAT_PREFIX_RE, float)
    if number is None:
        _logger.warning("Invalid %s %r, using %s", name, value, default)
        return default
    return number


class TranslatorConfig(BaseModel):
    """Options supplied by the host application.

    Field aliases match the host's configuration keys (``apiKey``,
    ``modelName``, ...); snake_case names are accepted as well. Defaults are
    applied here, once, so the request builder never deals with missing or
    string-typed values.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True, extra="ignore")

    api_key: str = Field(default="", alias="apiKey")
    api_base_url: str = Field(default="", alias="apiBaseUrl")
    model_name: str = Field(default="", alias="modelName")
    custom_model_name: str = Field(default="", alias="customModelName")
    system_prompt: str = Field(default="", alias="systemPrompt")
    user_prompt: str = Field(default="", alias="userPrompt")
    # raw JSON text, parsed by the request builder
    request_arguments: str = Field(default="", alias="requestArguments")
    thinking_budget: int | None = Field(default=None, alias="thinkingBudget")
    use_stream: bool = Field(default=True, alias="useStream")
    temperature: float = Field(default=_DEFAULT_TEMPERATURE)
    top_p: float = Field(default=_DEFAULT_TOP_P, alias="topP")

    @field_validator(
        "api_key",
        "api_base_url",
        "model_name",
        "custom_model_name",
        "system_prompt",
        "user_prompt",
        "request_arguments",
        mode="before",
    )
    @classmethod
    def _none_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value

    @field_validator("thinking_budget", mode="before")
    @classmethod
    def _parse_budget(cls, value: Any) -> int | None:
        if _is_blank(value):
            return None
        budget = _leading_number(value, _INT_PREFIX_RE, int)
        if budget is None:
            _logger.warning("Invalid thinkingBudget %r, omitting it", value)
        return budget

    @field_validator("use_stream", mode="before")
    @classmethod
    def _stream_flag(cls, value: Any) -> bool:
        # Only the literal "false" turns streaming off; absence means on.
        if isinstance(value, bool):
            return value
        return value != "false"

    @field_validator("temperature", mode="before")
    @classmethod
    def _parse_temperature(cls, value: Any) -> float:
        return _float_option("temperature", value, _DEFAULT_TEMPERATURE)

    @field_validator("top_p", mode="before")
    @classmethod
    def _parse_top_p(cls, value: Any) -> float:
        return _float_option("topP", value, _DEFAULT_TOP_P)

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> TranslatorConfig:
        """Build a config from a host mapping, raising ``ConfigError`` on bad values."""
        try:
            return cls.model_validate(dict(data))
        except ValidationError as exc:
            raise ConfigError(f"Invalid configuration: {exc}") from exc


class TranslationRequest(BaseModel):
    """Fully assembled HTTP request for one translation call."""

    model_config = ConfigDict(frozen=True)

    url: str
    headers: dict[str, str]
    body: dict[str, Any]
    stream: bool
