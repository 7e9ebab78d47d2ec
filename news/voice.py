"""
Turn a finalized voice transcript into a search query.
"""
from __future__ import annotations

from typing import Optional, Sequence

COMMAND_PREFIXES = (
    "search for",
    "find",
    "show me",
    "get",
    "look for",
    "filter",
)


def normalize_voice_command(raw_phrase: str, prefixes: Sequence[str] = COMMAND_PREFIXES) -> Optional[str]:
    """
    Strip the first matching command prefix (checked in order, case-insensitive)
    and return the rest of the phrase with its original casing.

    Returns ``None`` when nothing is left, so callers keep their current query.
    """
    phrase = (raw_phrase or "").strip()
    lowered = phrase.lower()
    for prefix in prefixes:
        if lowered.startswith(prefix):
            phrase = phrase[len(prefix):].strip()
            break
    return phrase or None
