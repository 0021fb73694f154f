"""Incremental assembly of streamGenerateContent responses."""

from __future__ import annotations

import codecs
import json
import logging
from collections.abc import Iterable

from gemini_translate.parsing import candidate_text, delta_text, has_content_parts
from gemini_translate.types import ResultSink

_DONE_SENTINEL = "data: [DONE]"


class StreamAssembler:
    """Accumulate translated text from a chunked, newline-delimited stream.

    Records are either raw JSON documents or SSE ``data: <json>`` lines.
    Chunks may split lines, JSON objects and multi-byte characters anywhere.
    Every line that yields text calls ``sink`` with the full text so far.
    """

    _logger = logging.getLogger(__name__)

    def __init__(self, sink: ResultSink | None = None) -> None:
        self._sink = sink
        self._decoder = codecs.getincrementaldecoder("utf-8")(errors="replace")
        self._buffer = ""
        self._text = ""

    @property
    def text(self) -> str:
        return self._text

    def feed(self, chunk: bytes) -> None:
        """Decode ``chunk`` and process every line it completes."""
        self._buffer += self._decoder.decode(chunk)
        lines = self._buffer.split("\n")
        # The last segment may be an incomplete line.
        self._buffer = lines.pop()
        self._process_lines(lines)

    def finish(self) -> str:
        """Flush pending bytes, process what is left and return the full text."""
        self._buffer += self._decoder.decode(b"", final=True)
        if self._buffer:
            remaining, self._buffer = self._buffer, ""
            self._process_lines(remaining.split("\n"))
        return self._text

    def _process_lines(self, lines: Iterable[str]) -> None:
        for line in lines:
            stripped = line.strip()
            if not stripped or stripped == _DONE_SENTINEL:
                continue

            payload = line
            if line.startswith("data:"):
                payload = line[len("data:") :].strip()

            try:
                event = json.loads(payload)
            except json.JSONDecodeError:
                self._logger.debug("Skipping non-JSON streaming line: %s", payload)
                continue

            if has_content_parts(event):
                fragment = candidate_text(event)
            else:
                fragment = delta_text(event)
            if fragment:
                self._append(fragment)

    def _append(self, fragment: str) -> None:
        self._text += fragment
        if self._sink is not None:
            self._sink(self._text)
