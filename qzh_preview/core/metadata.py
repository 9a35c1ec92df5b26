from __future__ import annotations

"""Extraction of descriptive header data (``teiHeader``).

Produces the values shown in the document title line and the
"Stückbeschreibung" table. The table itself is rendered by the front-end.
"""

import logging
from typing import Optional

from lxml import etree as ET

from qzh_preview.core.dates import format_date
from qzh_preview.core.models import DocumentHeading, DocumentMetadata, Editor, Keyword
from qzh_preview.core.utils import attr, find_all, find_first, text_content

__all__ = ["find_header", "extract_metadata", "extract_heading"]

logger = logging.getLogger(__name__)


def find_header(root: ET._Element) -> Optional[ET._Element]:
    """Return the first ``teiHeader`` at or below *root*, or None."""
    found = root.xpath("(descendant-or-self::*[local-name()='teiHeader'])[1]")
    return found[0] if found else None


def _text(node: Optional[ET._Element]) -> str:
    return text_content(node).strip() if node is not None else ""


def _first_match(node: ET._Element, *paths: tuple) -> Optional[ET._Element]:
    """First hit of the first selector chain in *paths* that matches anything."""
    for path in paths:
        found = find_first(node, *path)
        if found is not None:
            return found
    return None


def _title_node(header: ET._Element) -> Optional[ET._Element]:
    return _first_match(header, ("msDesc", "head"), ("head",))


def _orig_date_text(orig_date: ET._Element) -> str:
    """Date of the original in a ``filiation``: text, else formatted attributes."""
    text = _text(orig_date)
    if text:
        return text
    when = attr(orig_date, "when")
    date_from = attr(orig_date, "from")
    date_to = attr(orig_date, "to")
    if when:
        return format_date(when)
    if date_from and date_to:
        return f"{format_date(date_from)} - {format_date(date_to)}"
    if date_from:
        return f"ab {format_date(date_from)}"
    return ""


def extract_metadata(root: ET._Element) -> Optional[DocumentMetadata]:
    """Collect the header description; None when there is no ``teiHeader``."""
    header = find_header(root)
    if header is None:
        return None

    meta = DocumentMetadata()
    meta.title = _text(_title_node(header))

    idno = _first_match(header, ("msIdentifier", "idno"), ("idno",))
    if idno is not None:
        meta.idno = _text(idno)
        meta.idno_source = attr(idno, "source")

    orig_date = find_first(header, "origDate")
    if orig_date is not None:
        meta.date = attr(orig_date, "when") or attr(orig_date, "from")
        meta.date_text = _text(orig_date) or format_date(meta.date)

    for term in find_all(header, "keywords", "term"):
        meta.keywords.append(Keyword(text=_text(term), ref=attr(term, "ref")))

    meta.text_lang = _text(find_first(header, "textLang"))

    current = [f for f in find_all(header, "filiation") if attr(f, "type") == "current"]
    meta.filiation = _text(current[0] if current else find_first(header, "filiation"))

    original = [f for f in find_all(header, "filiation") if attr(f, "type") == "original"]
    if original:
        nested_date = find_first(original[0], "origDate")
        if nested_date is not None:
            meta.filiation_original = _orig_date_text(nested_date)
        else:
            meta.filiation_original = _text(original[0])

    bibl = find_first(header, "additional", "listBibl", "bibl")
    meta.edition = _text(bibl)

    meta.material = _text(find_first(header, "material"))

    dimensions = find_first(header, "dimensions")
    if dimensions is not None:
        width = find_first(dimensions, "width")
        height = find_first(dimensions, "height")
        if width is not None and height is not None:
            width_value = attr(width, "quantity") or _text(width)
            height_value = attr(height, "quantity") or _text(height)
            if width_value and height_value:
                meta.dimensions = f"{width_value} × {height_value} cm"

    meta.condition = _text(find_first(header, "condition"))
    meta.seals = [_text(seal) for seal in find_all(header, "seal")]

    for resp_stmt in find_all(header, "respStmt"):
        pers_name = find_first(resp_stmt, "persName")
        if pers_name is None:
            continue
        resp = find_first(resp_stmt, "resp")
        role = (attr(resp, "key") or _text(resp)) if resp is not None else ""
        meta.editors.append(Editor(name=_text(pers_name), role=role))

    logger.debug(
        "Metadata: title=%r idno=%r keywords=%d editors=%d",
        meta.title, meta.idno, len(meta.keywords), len(meta.editors),
    )
    return meta


def extract_heading(root: ET._Element) -> Optional[DocumentHeading]:
    """Title, date and series number for the document title line."""
    header = find_header(root)
    if header is None:
        return None

    heading = DocumentHeading()
    heading.title = _text(_title_node(header))

    orig_date = find_first(header, "origDate")
    if orig_date is not None:
        when = attr(orig_date, "when") or attr(orig_date, "from")
        heading.date = _text(orig_date) or format_date(when)

    series_idno = find_first(header, "seriesStmt", "idno")
    if series_idno is None:
        all_idnos = find_all(header, "idno")
        series_idno = all_idnos[1] if len(all_idnos) > 1 else None
    heading.idno = _text(series_idno)
    return heading
