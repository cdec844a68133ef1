"""Symbol name sanitization and Markdown escaping."""

from __future__ import annotations

import re
from typing import Dict

from .errors import NameCollision

# Order matters only for readability; no token contains another mapped character.
_REPLACEMENTS: tuple[tuple[str, str], ...] = (
    ("*", "_STAR_"),
    ("?", "_QMARK_"),
    (".", "_DOT_"),
    ("<", "_LT_"),
    (">", "_GT_"),
    ("-", "_DASH_"),
    ("/", "_SLASH_"),
    ("!", "_BANG_"),
    ("=", "_EQ_"),
    ("+", "_PLUS_"),
    ("'", "_SQUOTE_"),
)

_TRANSLATION = str.maketrans(dict(_REPLACEMENTS))

_MARKDOWN_SPECIAL = re.compile(r"([\\`*_\[\]])")


def sanitize(raw: str) -> str:
    """Return the path and link segment used for ``raw``."""
    return raw.translate(_TRANSLATION).strip("_")


def escape_markdown(text: str) -> str:
    """Backslash-escape characters that Markdown would treat as markup."""
    return _MARKDOWN_SPECIAL.sub(r"\\\1", text)


class SanitizedNameRegistry:
    """Tracks sanitized names within one scope and rejects collisions."""

    def __init__(self) -> None:
        self._owners: Dict[str, str] = {}

    def claim(self, raw: str) -> str:
        sanitized = sanitize(raw)
        if not sanitized:
            raise NameCollision(raw, sanitized)
        owner = self._owners.get(sanitized)
        if owner is not None and owner != raw:
            raise NameCollision(raw, sanitized, existing=owner)
        self._owners[sanitized] = raw
        return sanitized

    def __contains__(self, sanitized: object) -> bool:
        return sanitized in self._owners

    def __len__(self) -> int:
        return len(self._owners)


__all__ = ["SanitizedNameRegistry", "escape_markdown", "sanitize"]
