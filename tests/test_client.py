import asyncio
import json
import unittest
from collections.abc import AsyncIterator, Callable

import httpx

from gemini_translate.client import GeminiTranslator
from gemini_translate.errors import (
    ConfigError,
    GeminiTranslateError,
    HttpError,
    ResponseFormatError,
    StreamError,
    TransportError,
)

_CONFIG = {"apiKey": "secret", "apiBaseUrl": "example.com/v1beta"}


def _record(text: str) -> str:
    return json.dumps({"candidates": [{"content": {"parts": [{"text": text}]}}]})


async def _chunks(*parts: bytes, error: Exception | None = None) -> AsyncIterator[bytes]:
    for part in parts:
        yield part
    if error is not None:
        raise error


def _run(
    handler: Callable[[httpx.Request], httpx.Response],
    config: dict[str, str],
    sink: Callable[[str], None] | None = None,
) -> str:
    async def _go() -> str:
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as http:
            translator = GeminiTranslator(client=http)
            return await translator.translate(
                "hello",
                "en",
                "fr",
                config=config,
                detected_lang="en",
                result_sink=sink,
            )

    return asyncio.run(_go())


class BufferedTranslateTests(unittest.TestCase):
    def test_success(self) -> None:
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text=_record(" Bonjour "))

        result = _run(handler, {**_CONFIG, "useStream": "false"})
        self.assertEqual(result, "Bonjour")
        request = seen[0]
        self.assertEqual(request.method, "POST")
        self.assertEqual(request.url.path, "/v1beta/models/gemini-2.0-flash:generateContent")
        self.assertEqual(request.url.params["key"], "secret")
        self.assertNotEqual(request.headers.get("accept"), "text/event-stream")
        body = json.loads(request.content)
        self.assertIn("hello", body["contents"][0]["parts"][0]["text"])

    def test_http_error_carries_status_and_body(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(403, text='{"error": "denied"}')

        with self.assertRaises(HttpError) as ctx:
            _run(handler, {**_CONFIG, "useStream": "false"})
        self.assertEqual(ctx.exception.status_code, 403)
        self.assertEqual(ctx.exception.body, '{"error": "denied"}')

    def test_missing_candidates(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, text="{}")

        with self.assertRaises(ResponseFormatError) as ctx:
            _run(handler, {**_CONFIG, "useStream": "false"})
        self.assertEqual(ctx.exception.body, "{}")

    def test_config_error_before_network(self) -> None:
        calls: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            calls.append(request)
            return httpx.Response(200, text=_record("x"))

        for config in ({"apiBaseUrl": "example.com"}, {"apiKey": "k"}, {"apiKey": "k", "apiBaseUrl": ""}):
            with self.assertRaises(ConfigError):
                _run(handler, config)
        self.assertEqual(calls, [])


class ConnectionFailureTests(unittest.TestCase):
    def test_connect_error_wrapped_in_both_modes(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ConnectError("no route", request=request)

        for config in ({**_CONFIG, "useStream": "false"}, _CONFIG):
            with self.assertRaises(TransportError) as ctx:
                _run(handler, config)
            self.assertIsInstance(ctx.exception.cause, httpx.ConnectError)
            self.assertIs(ctx.exception.__cause__, ctx.exception.cause)
            self.assertIsInstance(ctx.exception, GeminiTranslateError)

    def test_timeout_waiting_for_headers(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            raise httpx.ReadTimeout("timed out", request=request)

        with self.assertRaises(TransportError):
            _run(handler, _CONFIG)

    def test_no_timeout_by_default(self) -> None:
        async def _go() -> httpx.Timeout:
            async with GeminiTranslator() as translator:
                return translator._client.timeout

        timeout = asyncio.run(_go())
        self.assertIsNone(timeout.connect)
        self.assertIsNone(timeout.read)


class StreamingTranslateTests(unittest.TestCase):
    def test_streamed_chunks_accumulate(self) -> None:
        payload = f"data: {_record('Hel')}\ndata: {_record('lo')}\ndata: [DONE]\n".encode()
        cut = payload.index(b"Hel") + 2
        seen: list[httpx.Request] = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, content=_chunks(payload[:cut], payload[cut:]))

        updates: list[str] = []
        result = _run(handler, _CONFIG, updates.append)
        self.assertEqual(result, "Hello")
        self.assertEqual(updates, ["Hel", "Hello"])
        self.assertTrue(seen[0].url.path.endswith(":streamGenerateContent"))
        self.assertEqual(seen[0].headers["accept"], "text/event-stream")

    def test_stream_http_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(429, content=_chunks(b"quota ", b"exceeded"))

        with self.assertRaises(HttpError) as ctx:
            _run(handler, _CONFIG)
        self.assertEqual(ctx.exception.status_code, 429)
        self.assertEqual(ctx.exception.body, "quota exceeded")

    def test_read_error_becomes_stream_error(self) -> None:
        def handler(request: httpx.Request) -> httpx.Response:
            content = _chunks(f"data: {_record('partial')}\n".encode(), error=httpx.ReadError("connection reset"))
            return httpx.Response(200, content=content)

        updates: list[str] = []
        with self.assertRaises(StreamError) as ctx:
            _run(handler, _CONFIG, updates.append)
        self.assertIsInstance(ctx.exception.cause, httpx.ReadError)
        self.assertIs(ctx.exception.__cause__, ctx.exception.cause)
        self.assertEqual(updates, ["partial"])


if __name__ == "__main__":
    unittest.main()
