"""Relaxed JSON parsing for model-written argument strings."""

from __future__ import annotations

import ast
import json
import re
from typing import Any


_FENCE_RE = re.compile(r"```(?:json5?)?\s*(.*?)```", re.DOTALL | re.IGNORECASE)
_UNQUOTED_KEY_RE = re.compile(r"([{,]\s*)([A-Za-z_$][A-Za-z0-9_$]*)(\s*:)")


class JsonRepairError(ValueError):
    """Raised when a relaxed JSON string cannot be parsed."""


def _strip_fences(text: str) -> str:
    match = _FENCE_RE.search(text)
    if match:
        return match.group(1).strip()
    return text.strip()


def _remove_trailing_commas(text: str) -> str:
    return re.sub(r",\s*([}\]])", r"\1", text)


def _replace_single_quotes(text: str) -> str:
    return re.sub(r"(?<!\\)'([^'\\\"]*(?:\\.[^'\\\"]*)*)'", r'"\1"', text)


def _quote_keys(text: str) -> str:
    """Quote bare object keys, skipping anything inside string literals."""
    pieces: list[str] = []
    buffer: list[str] = []
    in_string = False
    escape = False
    for char in text:
        if in_string:
            pieces.append(char)
            if escape:
                escape = False
            elif char == "\\":
                escape = True
            elif char == '"':
                in_string = False
            continue
        if char == '"':
            pieces.append(_UNQUOTED_KEY_RE.sub(r'\1"\2"\3', "".join(buffer)))
            buffer = []
            pieces.append(char)
            in_string = True
            continue
        buffer.append(char)
    pieces.append(_UNQUOTED_KEY_RE.sub(r'\1"\2"\3', "".join(buffer)))
    return "".join(pieces)


def _literal_eval(text: str) -> Any:
    value = ast.literal_eval(text)
    return json.loads(json.dumps(value))


def parse_relaxed_json(text: str) -> Any:
    """Parse JSON allowing trailing commas, bare keys and single quotes."""
    if text is None:
        raise JsonRepairError("No JSON input")
    stripped = _strip_fences(text)
    if not stripped:
        raise JsonRepairError("Empty JSON input")
    try:
        return json.loads(stripped)
    except json.JSONDecodeError:
        pass
    cleaned = _remove_trailing_commas(stripped)
    cleaned = _replace_single_quotes(cleaned)
    cleaned = _quote_keys(cleaned)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as exc:
        last_error: Exception = exc
    try:
        return _literal_eval(stripped)
    except (ValueError, SyntaxError, TypeError, MemoryError, RecursionError) as exc:
        last_error = exc
    raise JsonRepairError(f"Failed to parse JSON: {last_error}") from last_error
