from __future__ import annotations

"""Map free-text ``@rend`` values onto ``simple_*`` CSS classes."""

import re
from typing import Dict, List, Mapping, Optional

__all__ = ["RENDITION_SYNONYMS", "FALLBACK_CLASS", "map_rendition"]

FALLBACK_CLASS = "tei-hi"

RENDITION_SYNONYMS: Dict[str, str] = {
    "sup": "simple_superscript",
    "super": "simple_superscript",
    "superscript": "simple_superscript",
    "sub": "simple_subscript",
    "subscript": "simple_subscript",
    "italic": "simple_italic",
    "italics": "simple_italic",
    "bold": "simple_bold",
    "underline": "simple_underline",
    "strikethrough": "simple_strikethrough",
    "smallcaps": "simple_smallcaps",
    "small-caps": "simple_smallcaps",
    "allcaps": "simple_allcaps",
    "uppercase": "simple_allcaps",
    "larger": "simple_larger",
    "smaller": "simple_smaller",
    "letter-space": "simple_letterspace",
    "letterspace": "simple_letterspace",
    "letterspacing": "simple_letterspace",
    "spaced": "simple_letterspace",
    "gesperrt": "simple_letterspace",
    "sperrung": "simple_letterspace",
    "center": "simple_centre",
    "centre": "simple_centre",
    "right": "simple_right",
    "left": "simple_left",
}

_PASSTHROUGH_PREFIXES = ("simple:", "simple_", "simple-")
_UNSAFE_CHARS = re.compile(r"[^a-z0-9_-]")


def _passthrough(token: str) -> Optional[str]:
    for prefix in _PASSTHROUGH_PREFIXES:
        if token.startswith(prefix):
            rest = _UNSAFE_CHARS.sub("", token[len(prefix):])
            return f"simple_{rest}" if rest else None
    return None


def map_rendition(rend: Optional[str],
                  synonyms: Optional[Mapping[str, str]] = None) -> List[str]:
    """Return the CSS classes for a ``@rend`` value.

    Tokens are whitespace-separated and case-insensitive. ``simple:x``,
    ``simple_x`` and ``simple-x`` pass through as ``simple_x``; other tokens
    are looked up in *synonyms* (default :data:`RENDITION_SYNONYMS`), first
    with ``_`` read as ``-`` and then with hyphens removed. Unknown tokens
    are dropped. The result keeps first-seen order without duplicates and is
    never empty: it falls back to ``["tei-hi"]``.

    >>> map_rendition("bold sup")
    ['simple_bold', 'simple_superscript']
    """
    table = RENDITION_SYNONYMS if synonyms is None else synonyms
    classes: List[str] = []

    for token in (rend or "").lower().split():
        if token.startswith(_PASSTHROUGH_PREFIXES):
            mapped = _passthrough(token)
        else:
            normalized = token.replace("_", "-")
            mapped = table.get(normalized) or table.get(normalized.replace("-", ""))
        if mapped and mapped not in classes:
            classes.append(mapped)

    return classes or [FALLBACK_CLASS]
