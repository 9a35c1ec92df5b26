from __future__ import annotations

"""Shared data structures used across the QZH preview core.

The objects here are free of I/O and XML parsing so they can be handed to any
front-end (browser bridge, tests, batch scripts) as plain values.
"""

from dataclasses import asdict, dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional

__all__ = [
    "TooltipType",
    "EntityKind",
    "EntityEntry",
    "Footnote",
    "Registers",
    "Keyword",
    "Editor",
    "DocumentMetadata",
    "DocumentHeading",
    "TransformContext",
    "TransformResult",
]


class TooltipType(Enum):
    """Values of the ``data-tooltip-type`` attribute.

    The tooltip widget shows :attr:`label` above the tooltip text.
    """

    PERSON = "person"
    PLACE = "place"
    ORGANIZATION = "organization"
    TERM = "term"
    TEXTCRITICAL = "textcritical"
    ABBR = "abbr"
    DATE = "date"
    TIME = "time"
    DURATION = "duration"
    HIGHLIGHT = "highlight"
    MEASURE = "measure"
    NUM = "num"
    NOTE = "note"
    APPARATUS = "apparatus"
    FIGURE = "figure"
    PAGE = "page"

    @property
    def label(self) -> str:
        return _TOOLTIP_LABELS[self]


_TOOLTIP_LABELS: Dict[TooltipType, str] = {
    TooltipType.PERSON: "Person",
    TooltipType.PLACE: "Ort",
    TooltipType.ORGANIZATION: "Organisation",
    TooltipType.TERM: "Begriff",
    TooltipType.TEXTCRITICAL: "Textkritisch",
    TooltipType.ABBR: "Abkürzung",
    TooltipType.DATE: "Datum",
    TooltipType.TIME: "Zeit",
    TooltipType.DURATION: "Dauer",
    TooltipType.HIGHLIGHT: "Hervorgehoben",
    TooltipType.MEASURE: "Maßangabe",
    TooltipType.NUM: "Zahl",
    TooltipType.NOTE: "Anmerkung",
    TooltipType.APPARATUS: "Lesarten",
    TooltipType.FIGURE: "Abbildung",
    TooltipType.PAGE: "Seite",
}


class EntityKind(Enum):
    """Kinds of named entities collected into registers."""

    PERSON = "person"
    PLACE = "place"
    ORGANIZATION = "organization"
    TERM = "term"

    @property
    def tooltip_type(self) -> TooltipType:
        return TooltipType(self.value)


@dataclass(frozen=True)
class EntityEntry:
    """A named entity mention: trimmed text, ``@ref`` and ``@role``."""

    name: str
    ref: str = ""
    role: str = ""

    @property
    def key(self) -> str:
        """Identity used for deduplication: ``ref`` when set, else ``name``."""
        return self.ref or self.name


@dataclass(frozen=True)
class Footnote:
    number: int
    content: str


@dataclass
class Registers:
    """Deduplicated, sorted entity registers of one document."""

    persons: List[EntityEntry] = field(default_factory=list)
    places: List[EntityEntry] = field(default_factory=list)
    organizations: List[EntityEntry] = field(default_factory=list)
    terms: List[EntityEntry] = field(default_factory=list)


@dataclass(frozen=True)
class Keyword:
    text: str
    ref: str = ""


@dataclass(frozen=True)
class Editor:
    name: str
    role: str = ""


@dataclass
class DocumentMetadata:
    """Descriptive data taken from the ``teiHeader`` (Stückbeschreibung)."""

    title: str = ""
    idno: str = ""
    idno_source: str = ""
    date: str = ""
    date_text: str = ""
    keywords: List[Keyword] = field(default_factory=list)
    text_lang: str = ""
    filiation: str = ""
    filiation_original: str = ""
    edition: str = ""
    material: str = ""
    dimensions: str = ""
    condition: str = ""
    seals: List[str] = field(default_factory=list)
    editors: List[Editor] = field(default_factory=list)


@dataclass
class DocumentHeading:
    """Title line shown above the document: title, date and series number."""

    title: str = ""
    date: str = ""
    idno: str = ""


@dataclass
class TransformContext:
    """Mutable state of a single ``transform()`` call.

    A fresh instance is created for every call and threaded through all
    element handlers; it is never stored on the transformer.
    """

    normalized: bool = False
    footnote_counter: int = 0
    footnotes: List[Footnote] = field(default_factory=list)
    persons: List[EntityEntry] = field(default_factory=list)
    places: List[EntityEntry] = field(default_factory=list)
    organizations: List[EntityEntry] = field(default_factory=list)
    terms: List[EntityEntry] = field(default_factory=list)
    unhandled_tags: Dict[str, int] = field(default_factory=dict)

    def add_footnote(self, content: str) -> int:
        """Register *content* as the next footnote and return its number."""
        self.footnote_counter += 1
        self.footnotes.append(Footnote(number=self.footnote_counter, content=content))
        return self.footnote_counter

    def add_entity(self, kind: EntityKind, entry: EntityEntry) -> None:
        self._accumulator(kind).append(entry)

    def _accumulator(self, kind: EntityKind) -> List[EntityEntry]:
        if kind is EntityKind.PERSON:
            return self.persons
        if kind is EntityKind.PLACE:
            return self.places
        if kind is EntityKind.ORGANIZATION:
            return self.organizations
        return self.terms


@dataclass
class TransformResult:
    """Everything produced by one transform; owned by the caller.

    Attributes
    ----------
    metadata
        Header description, or None when the document has no ``teiHeader``.
    summary
        Rendered Regest (HTML), empty when absent.
    heading
        Title line data, or None without header.
    body, back
        Rendered HTML of ``body`` and of the commentary in ``back``, or None.
    footnotes
        Footnotes in document order.
    registers
        Deduplicated, sorted entity registers.
    """

    metadata: Optional[DocumentMetadata] = None
    summary: str = ""
    heading: Optional[DocumentHeading] = None
    body: Optional[str] = None
    back: Optional[str] = None
    footnotes: List[Footnote] = field(default_factory=list)
    registers: Registers = field(default_factory=Registers)

    def to_dict(self) -> Dict[str, Any]:
        """Return the result as plain dicts and lists (JSON-serialisable)."""
        return asdict(self)
