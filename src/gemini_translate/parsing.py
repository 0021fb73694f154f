"""Text extraction from generateContent response documents."""

from __future__ import annotations

import json
from typing import Any

from gemini_translate.errors import ResponseFormatError


def parse_response(body: str) -> str:
    """Return the first candidate's text from a buffered response, stripped."""
    try:
        data = json.loads(body)
    except json.JSONDecodeError as exc:
        raise ResponseFormatError(body) from exc

    text = candidate_text(data)
    if not text:
        raise ResponseFormatError(body)
    return text.strip()


def candidate_text(data: Any) -> str:
    """Extract ``candidates[0].content.parts[0].text``, or ``""`` when absent."""
    candidate = _first_candidate(data)
    if candidate is None:
        return ""
    content = candidate.get("content")
    if not isinstance(content, dict):
        return ""
    parts = content.get("parts")
    if not isinstance(parts, list) or not parts or not isinstance(parts[0], dict):
        return ""
    text = parts[0].get("text")
    return text if isinstance(text, str) else ""


def delta_text(data: Any) -> str:
    """Extract the incremental ``candidates[0].delta.textDelta.text`` field."""
    candidate = _first_candidate(data)
    if candidate is None:
        return ""
    delta = candidate.get("delta")
    if not isinstance(delta, dict):
        return ""
    text_delta = delta.get("textDelta")
    if not isinstance(text_delta, dict):
        return ""
    text = text_delta.get("text")
    return text if isinstance(text, str) else ""


def has_content_parts(data: Any) -> bool:
    """True when the first candidate carries a non-empty ``content.parts`` list."""
    candidate = _first_candidate(data)
    if candidate is None:
        return False
    content = candidate.get("content")
    return isinstance(content, dict) and isinstance(content.get("parts"), list) and bool(content["parts"])


def _first_candidate(data: Any) -> dict[str, Any] | None:
    if not isinstance(data, dict):
        return None
    candidates = data.get("candidates")
    if not isinstance(candidates, list) or not candidates:
        return None
    first = candidates[0]
    return first if isinstance(first, dict) else None
