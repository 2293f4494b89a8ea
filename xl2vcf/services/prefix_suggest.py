from __future__ import annotations

import logging
import os
import re
from collections.abc import Iterable

import google.generativeai as genai

from ..models.config_models import DEFAULT_GEMINI_MODEL
from ..models.contact import Contact

"""Optional AI prefix suggestion via Gemini.

Given a few sample names, ask the model for a short organizational prefix
("Biz -", "Gym -") to prepend to every exported contact name. Best effort:
every failure (missing key, network error, empty or odd response) yields ""
and is only logged.

Staleness is the caller's concern: if the prefix changed while a request was
in flight, the caller drops the late result.
"""

__all__ = [
    "suggest_prefix",
    "suggest_prefix_async",
    "sample_names",
    "build_prompt",
    "clean_suggestion",
    "MAX_SAMPLE_NAMES",
    "API_KEY_ENV_VARS",
]

logger = logging.getLogger(__name__)

MAX_SAMPLE_NAMES = 5
API_KEY_ENV_VARS = ("GEMINI_API_KEY", "API_KEY")

_WRAPPING_QUOTES = re.compile(r'^"|"$')


def _api_key() -> str | None:
    for var in API_KEY_ENV_VARS:
        value = os.getenv(var)
        if value:
            return value
    return None


def sample_names(contacts: Iterable[Contact]) -> list[str]:
    """Original names of valid contacts, in order (the request sends the first few)."""
    return [c.original_name for c in contacts if c.is_valid and c.original_name]


def build_prompt(names: list[str]) -> str:
    sample = ", ".join(names[:MAX_SAMPLE_NAMES])
    return (
        f"I have a contact list with names like: {sample}.\n"
        "Suggest a short, professional, and organizational prefix (max 5 chars) "
        "to add to these contacts for better sorting.\n"
        'Examples of output: "Biz -", "Lead-", "Gym -".\n'
        "Return ONLY the prefix text, nothing else."
    )


def clean_suggestion(text: str | None) -> str:
    """Trim the model output and drop one pair of wrapping double quotes."""
    if not text:
        return ""
    return _WRAPPING_QUOTES.sub("", text.strip())


def _response_text(response: object) -> str:
    # response.text raises ValueError when the candidate was blocked / empty
    try:
        return getattr(response, "text", "") or ""
    except ValueError:
        return ""


def _model(model_name: str):
    api_key = _api_key()
    if not api_key:
        logger.warning("prefix suggestion skipped: GEMINI_API_KEY not set")
        return None
    genai.configure(api_key=api_key)
    return genai.GenerativeModel(model_name)


def suggest_prefix(names: list[str], model_name: str = DEFAULT_GEMINI_MODEL) -> str:
    """Ask Gemini for a prefix; returns "" on any failure."""
    if not names:
        return ""
    try:
        model = _model(model_name)
        if model is None:
            return ""
        response = model.generate_content(build_prompt(names))
        return clean_suggestion(_response_text(response))
    except Exception as e:  # network / auth / SDK errors all degrade to no suggestion
        logger.warning(f"prefix suggestion failed: {e}")
        return ""


async def suggest_prefix_async(names: list[str], model_name: str = DEFAULT_GEMINI_MODEL) -> str:
    """Async variant of :func:`suggest_prefix` with the same failure contract."""
    if not names:
        return ""
    try:
        model = _model(model_name)
        if model is None:
            return ""
        response = await model.generate_content_async(build_prompt(names))
        return clean_suggestion(_response_text(response))
    except Exception as e:
        logger.warning(f"prefix suggestion failed: {e}")
        return ""
