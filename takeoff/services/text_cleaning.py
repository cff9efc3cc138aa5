"""Normalisation applied to document text before it is sent to a provider."""

from __future__ import annotations

import re

DEFAULT_MAX_CHARS = 50_000
TRUNCATION_MARKER = "\n[Text truncated for processing]"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_SMART_QUOTES = str.maketrans(
    {
        "“": '"',
        "”": '"',
        "„": '"',
        "‟": '"',
        "″": '"',
        "‘": '"',
        "’": '"',
        "‚": '"',
        "‛": '"',
        "′": '"',
    }
)
_NEWLINE_RUN_RE = re.compile(r"\n{3,}")
_SPACE_RUN_RE = re.compile(r"[ \t]{3,}")


def normalize_source_text(text: str) -> str:
    """Return ``text`` with control characters, quotes and whitespace normalised.

    Applying this function to its own output is a no-op.
    """

    if not text:
        return ""
    cleaned = _CONTROL_RE.sub(" ", text)
    cleaned = cleaned.translate(_SMART_QUOTES)
    cleaned = cleaned.replace("\r\n", "\n").replace("\r", "\n")
    cleaned = _NEWLINE_RUN_RE.sub("\n\n", cleaned)
    cleaned = _SPACE_RUN_RE.sub(" ", cleaned)
    return cleaned.strip()


def truncate_source_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Cut ``text`` to ``max_chars`` characters, appending a marker when cut."""

    if max_chars <= 0:
        raise ValueError("max_chars must be positive")
    if len(text) <= max_chars:
        return text
    return text[:max_chars] + TRUNCATION_MARKER


def prepare_source_text(text: str, max_chars: int = DEFAULT_MAX_CHARS) -> str:
    """Normalise then truncate ``text`` for prompt embedding."""

    return truncate_source_text(normalize_source_text(text), max_chars)


__all__ = [
    "DEFAULT_MAX_CHARS",
    "TRUNCATION_MARKER",
    "normalize_source_text",
    "prepare_source_text",
    "truncate_source_text",
]
