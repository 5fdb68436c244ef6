"""Recover a JSON value from free-text model output."""

import json
import re
from typing import Any, Optional

from brandquiz.core.errors import ParseError

_FENCE_PATTERN = re.compile(r"```(?:json)?\s*([\s\S]*?)```")


def _reject_constant(name: str) -> Any:
    raise ValueError(f"{name} is not valid JSON")


def _try_parse(text: str) -> tuple[bool, Any]:
    # NaN and Infinity are Python extensions, not JSON; deep nesting overflows the decoder
    try:
        return True, json.loads(text, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        return False, None


def _find_start(text: str) -> Optional[int]:
    """Index of the first '{' or '[' in text, whichever comes first."""
    candidates = [pos for pos in (text.find("{"), text.find("[")) if pos != -1]
    return min(candidates) if candidates else None


def _balanced_prefix(text: str) -> Optional[str]:
    """
    Return the prefix of text that closes the opening bracket at position 0.

    Tracks nesting depth of the opening bracket kind only, skipping anything
    inside string literals (backslash escapes respected).
    """
    open_char = text[0]
    close_char = "}" if open_char == "{" else "]"
    depth = 0
    in_string = False
    escape = False

    for index, char in enumerate(text):
        if escape:
            escape = False
            continue
        if char == "\\":
            escape = True
            continue
        if char == '"':
            in_string = not in_string
            continue
        if in_string:
            continue

        if char == open_char:
            depth += 1
        elif char == close_char:
            depth -= 1

        if depth == 0:
            return text[: index + 1]

    return None


def extract_json(raw: str) -> Any:
    """
    Extract a JSON value from model output.

    Tries, in order: the whole trimmed text, the content of the first fenced
    code block, the first balanced object/array, and finally everything from
    the first bracket onward. Only the location of the JSON is guessed, never
    its content.

    Args:
        raw: Raw response text that may wrap JSON in prose or markdown

    Returns:
        The parsed JSON value (object, array or scalar)

    Raises:
        ParseError: If no valid JSON can be recovered
    """
    if not isinstance(raw, str):
        raise ParseError(f"Expected text from AI response, got {type(raw).__name__}")

    trimmed = raw.strip()

    ok, value = _try_parse(trimmed)
    if ok:
        return value

    fence = _FENCE_PATTERN.search(trimmed)
    if fence:
        ok, value = _try_parse(fence.group(1).strip())
        if ok:
            return value

    start = _find_start(trimmed)
    if start is None:
        raise ParseError("No JSON object or array found in AI response")

    sub = trimmed[start:]
    candidate = _balanced_prefix(sub)
    if candidate is not None:
        ok, value = _try_parse(candidate)
        if ok:
            return value

    ok, value = _try_parse(sub)
    if ok:
        return value

    raise ParseError("Failed to extract valid JSON from AI response")
