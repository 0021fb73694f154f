"""Async translation client for the Gemini generateContent API."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import TracebackType
from typing import Any

import httpx

from gemini_translate.errors import HttpError, StreamError, TransportError
from gemini_translate.parsing import parse_response
from gemini_translate.request_builder import build_request
from gemini_translate.streaming import StreamAssembler
from gemini_translate.types import ResultSink, TranslationRequest, TranslatorConfig

_DEFAULT_TIMEOUT_S: float | None = None


class GeminiTranslator:
    """Issues one translation request per ``translate`` call.

    An ``httpx.AsyncClient`` can be injected so a host can share connections;
    otherwise the translator owns one and closes it in ``aclose``.
    """

    _logger = logging.getLogger(__name__)

    def __init__(
        self,
        *,
        client: httpx.AsyncClient | None = None,
        timeout_s: float | None = _DEFAULT_TIMEOUT_S,
    ) -> None:
        self._owns_client = client is None
        self._client = client or httpx.AsyncClient(timeout=timeout_s)

    async def aclose(self) -> None:
        """Close the underlying HTTP client if this translator created it."""
        if self._owns_client:
            await self._client.aclose()

    async def __aenter__(self) -> GeminiTranslator:
        return self

    async def __aexit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        await self.aclose()

    async def translate(
        self,
        text: str,
        source_lang: str,
        target_lang: str,
        *,
        config: TranslatorConfig | Mapping[str, Any],
        detected_lang: str | None = None,
        result_sink: ResultSink | None = None,
    ) -> str:
        """Translate ``text`` and return the final string.

        In streaming mode ``result_sink`` receives the cumulative translation
        after every fragment; each call replaces the previous value.
        """
        if not isinstance(config, TranslatorConfig):
            config = TranslatorConfig.from_mapping(config)
        request = build_request(text, source_lang, target_lang, config, detected_lang)
        self._logger.debug(
            "POST %s (stream=%s)", httpx.URL(request.url).copy_remove_param("key"), request.stream
        )

        if request.stream:
            return await self._translate_stream(request, result_sink)
        return await self._translate_buffered(request)

    async def _translate_buffered(self, request: TranslationRequest) -> str:
        try:
            response = await self._client.post(request.url, headers=request.headers, json=request.body)
        except httpx.HTTPError as exc:
            raise TransportError(exc) from exc
        if not response.is_success:
            raise HttpError(response.status_code, response.text)
        return parse_response(response.text)

    async def _translate_stream(self, request: TranslationRequest, sink: ResultSink | None) -> str:
        try:
            async with self._client.stream(
                "POST",
                request.url,
                headers=request.headers,
                json=request.body,
            ) as response:
                if not response.is_success:
                    body = await response.aread()
                    raise HttpError(response.status_code, body.decode(errors="replace"))

                assembler = StreamAssembler(sink)
                try:
                    async for chunk in response.aiter_bytes():
                        assembler.feed(chunk)
                except httpx.HTTPError as exc:
                    raise StreamError(exc) from exc
                return assembler.finish()
        except httpx.HTTPError as exc:
            # Raised before the body was read: connect, DNS, timeout waiting for headers.
            raise TransportError(exc) from exc


async def translate(
    text: str,
    source_lang: str,
    target_lang: str,
    *,
    config: TranslatorConfig | Mapping[str, Any],
    detected_lang: str | None = None,
    result_sink: ResultSink | None = None,
    timeout_s: float | None = _DEFAULT_TIMEOUT_S,
) -> str:
    """Translate ``text`` with a short-lived ``GeminiTranslator``."""
    async with GeminiTranslator(timeout_s=timeout_s) as translator:
        return await translator.translate(
            text,
            source_lang,
            target_lang,
            config=config,
            detected_lang=detected_lang,
            result_sink=result_sink,
        )
