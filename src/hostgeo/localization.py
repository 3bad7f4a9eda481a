"""Pick a display name out of a MaxMind ``names`` mapping."""

from __future__ import annotations

from typing import Mapping, Optional

from .constants import FALLBACK_LANGUAGE


def resolve_name(names: Optional[Mapping[str, str]], language: str) -> str:
    """Return the name for ``language``, falling back to English, else ``""``."""
    if not names:
        return ""
    if language in names:
        return names[language]
    return names.get(FALLBACK_LANGUAGE, "")
