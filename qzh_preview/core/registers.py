from __future__ import annotations

"""Entity registers: deduplication and German-collation ordering.

Sorting follows DIN 5007-1 as used by German dictionaries: umlauts sort with
their base letter, ``ß`` sorts as ``ss``, and accents and case only break
ties (unaccented before accented, lower case before upper case).
"""

import logging
import unicodedata
from typing import Dict, Iterable, List, Tuple

from qzh_preview.core.models import EntityEntry

__all__ = ["german_sort_key", "dedupe"]

logger = logging.getLogger(__name__)


def german_sort_key(text: str) -> Tuple[str, Tuple[str, ...], Tuple[bool, ...], str]:
    """Return a key that orders strings like German locale collation.

    >>> sorted(["Zürich", "Zug", "Ägeri", "Basel"], key=german_sort_key)
    ['Ägeri', 'Basel', 'Zug', 'Zürich']
    """
    bases: List[str] = []
    accents: List[str] = []
    for ch in unicodedata.normalize("NFD", text):
        if unicodedata.combining(ch):
            if accents:
                accents[-1] += ch
            continue
        bases.append(ch)
        accents.append("")

    primary = "".join(bases).casefold()
    case = tuple(ch.isupper() for ch in bases)
    return primary, tuple(accents), case, text


def dedupe(entries: Iterable[EntityEntry]) -> List[EntityEntry]:
    """Drop repeated entities and sort the rest by name.

    Two entries are the same entity when their :attr:`EntityEntry.key`
    (``ref`` if set, else ``name``) matches; the first occurrence is kept and
    later ones are discarded, not merged.
    """
    seen: Dict[str, EntityEntry] = {}
    total = 0
    for entry in entries:
        total += 1
        if entry.key not in seen:
            seen[entry.key] = entry

    result = sorted(seen.values(), key=lambda e: german_sort_key(e.name))
    if logger.isEnabledFor(logging.DEBUG):
        logger.debug("Registers: dedupe in=%d out=%d", total, len(result))
    return result
