# tasks/ai_engine/json_extract.py
"""
Normalization of model output before JSON parsing.

Language models asked for "JSON only" still wrap it in Markdown fences or
add a sentence around it. This module turns such text back into the JSON
value it carries, independently of any model call.
"""

import json
import re
from typing import Any

_FENCE_OPEN = re.compile(r"^```[a-zA-Z0-9_-]*[ \t]*\n?")


def strip_code_fence(text: str) -> str:
    """
    Remove a surrounding ``` / ```json fence, if any.

    Only a fence opening the text is treated as a wrapper; the closing fence
    is the last ``` found after it (a missing one is tolerated).
    """
    cleaned = text.strip()
    if not cleaned.startswith("```"):
        return cleaned

    cleaned = _FENCE_OPEN.sub("", cleaned, count=1)
    closing_index = cleaned.rfind("```")
    if closing_index != -1:
        cleaned = cleaned[:closing_index]
    return cleaned.strip()


def extract_json(text: str) -> Any:
    """
    Parse the JSON value carried by possibly wrapped model output.

    Tries the fence-stripped text first, then the outermost {...} block.

    Raises:
        ValueError: empty input or no parseable JSON (json.JSONDecodeError
            is a ValueError subclass).
    """
    if not text or not text.strip():
        raise ValueError("Empty model output")

    cleaned = strip_code_fence(text)
    try:
        return _loads(cleaned)
    except json.JSONDecodeError:
        start = cleaned.find("{")
        end = cleaned.rfind("}")
        if start == -1 or end <= start:
            raise
        return _loads(cleaned[start:end + 1])


def _loads(text: str) -> Any:
    try:
        return json.loads(text)
    except RecursionError as e:
        raise ValueError("JSON nesting too deep") from e


def extract_json_object(text: str) -> dict:
    """Like extract_json, but the top-level value must be an object."""
    data = extract_json(text)
    if not isinstance(data, dict):
        raise ValueError(f"Expected a JSON object, got {type(data).__name__}")
    return data
