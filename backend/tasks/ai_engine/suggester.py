# tasks/ai_engine/suggester.py
"""
Turns a free-text transcript (usually a voice note) into a task draft.

suggest_task() never raises: without a model, or when the model fails or
answers with something unusable, the draft is cut from the transcript itself.
"""

from __future__ import annotations

import logging
import re
from typing import Dict, Optional

from .json_extract import extract_json_object
from .llm_client import LanguageModelClient, ModelError, ModelUnavailableError, get_llm_client

logger = logging.getLogger(__name__)

# Same bounds as the Task columns the draft ends up in
TITLE_MAX_LENGTH = 80
DESCRIPTION_MAX_LENGTH = 400

DEFAULT_TITLE = "New task"
DEFAULT_DESCRIPTION = "Created from a voice note"

_SENTENCE_END = re.compile(r"[.!?\n]")

SYSTEM_PROMPT = (
    "You turn a spoken note into a single to-do item.\n\n"
    "RULES:\n"
    f"1. The title is a short imperative phrase of at most {TITLE_MAX_LENGTH} characters.\n"
    f"2. The description keeps the useful details, at most {DESCRIPTION_MAX_LENGTH} characters.\n"
    "3. Return ONLY valid JSON. No markdown, no commentary.\n"
    '4. The output must strictly follow this schema: {"title": "string", "description": "string"}'
)


def _truncate(text: str, limit: int) -> str:
    return text[:limit].strip()


def local_suggestion(transcript: str) -> Dict[str, str]:
    """Draft built from the transcript alone: first sentence as the title."""
    text = (transcript or "").strip()
    first_sentence = _SENTENCE_END.split(text, maxsplit=1)[0]
    return {
        "title": _truncate(first_sentence, TITLE_MAX_LENGTH) or DEFAULT_TITLE,
        "description": _truncate(text, DESCRIPTION_MAX_LENGTH) or DEFAULT_DESCRIPTION,
    }


def suggest_task(transcript: str, client: Optional[LanguageModelClient] = None) -> Dict[str, str]:
    """
    Returns {"title": str, "description": str} for the given transcript.
    """
    text = (transcript or "").strip()
    if not text:
        return local_suggestion(text)

    llm = client if client is not None else get_llm_client()
    try:
        raw_content = llm.complete(SYSTEM_PROMPT, f"Transcript: {text}")
    except ModelUnavailableError:
        return local_suggestion(text)
    except ModelError as e:
        logger.warning(f"Task suggestion model call failed ({e.error_code}): {e}")
        return local_suggestion(text)

    try:
        data = extract_json_object(raw_content or "")
    except ValueError as e:
        logger.warning(f"Task suggestion returned unparseable output: {e}")
        return local_suggestion(text)

    title = data.get("title")
    description = data.get("description")
    if not isinstance(title, str) or not title.strip() or not isinstance(description, str):
        logger.warning("Task suggestion returned an unexpected shape, using local draft")
        return local_suggestion(text)

    return {
        "title": _truncate(title.strip(), TITLE_MAX_LENGTH) or DEFAULT_TITLE,
        "description": _truncate(description.strip(), DESCRIPTION_MAX_LENGTH) or DEFAULT_DESCRIPTION,
    }
