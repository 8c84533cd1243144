"""Decode structured objects from free-text reasoning-service responses."""

from __future__ import annotations

import json
from typing import TypeVar

import structlog
from pydantic import BaseModel, ValidationError

from movement_research.errors import DecodeError

logger = structlog.get_logger()

T = TypeVar("T", bound=BaseModel)


def _balanced_end(text: str, start: int) -> int:
    """Index of the brace closing the one at start, or -1 when it never closes."""
    depth = 0
    in_string = False
    escaped = False
    for i in range(start, len(text)):
        ch = text[i]
        if in_string:
            if escaped:
                escaped = False
            elif ch == "\\":
                escaped = True
            elif ch == '"':
                in_string = False
            continue
        if ch == '"':
            in_string = True
        elif ch == "{":
            depth += 1
        elif ch == "}":
            depth -= 1
            if depth == 0:
                return i
    return -1


def extract_first_object(text: str) -> str:
    """Return the first balanced ``{...}`` span in text.

    Braces inside JSON string literals are ignored so that a summary such
    as ``"guidance {raised}"`` does not end the span early. A ``{`` that
    never closes is skipped and the scan restarts at the next one.
    """
    start = text.find("{")
    if start == -1:
        raise DecodeError("no '{' in response")

    while start != -1:
        end = _balanced_end(text, start)
        if end != -1:
            return text[start : end + 1]
        start = text.find("{", start + 1)

    raise DecodeError("unbalanced braces in response")


def decode_object(text: str, model: type[T]) -> T:
    """Extract the first object from text and validate it against model."""
    if not text or not text.strip():
        raise DecodeError("empty response")

    span = extract_first_object(text)
    try:
        data = json.loads(span)
    except json.JSONDecodeError as e:
        raise DecodeError(f"invalid JSON: {e}") from e
    if not isinstance(data, dict):
        raise DecodeError("decoded value is not an object")

    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise DecodeError(f"{model.__name__} validation failed: {e.error_count()} errors") from e


def decode_or_default(text: str, model: type[T], default: T, *, stage: str) -> T:
    """Decode text into model, substituting default on any decode failure."""
    try:
        return decode_object(text, model)
    except DecodeError as e:
        logger.warning("decode_fallback", stage=stage, error=str(e), raw_text=text[:200])
        return default
