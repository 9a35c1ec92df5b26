from __future__ import annotations

"""TEI-XML to HTML transform following QZH edition conventions.

The transform is a recursive descent over an immutable lxml tree. Every
element is dispatched on its local name through :data:`_HANDLERS`; names
without a handler are passed through (their children are rendered without a
wrapper), since TEI allows far more elements than the preview models.

All mutable state of one call (footnote numbering, entity accumulators, the
normalized-mode flag) lives in a :class:`TransformContext` created per call,
so a single :class:`TeiTransformer` can be reused and shared freely.

Every element is visited exactly once. Children a handler does not show
(a correction, an expansion, variant readings) are still walked through
:meth:`_Renderer.visit`, so their footnotes and register entries are kept
even though their HTML is discarded.
"""

import logging
from typing import Callable, Dict, List, Mapping, Optional, Union

from lxml import etree as ET

from qzh_preview.core.dates import build_date_tooltip
from qzh_preview.core.exceptions import TransformError
from qzh_preview.core.metadata import extract_heading, extract_metadata, find_header
from qzh_preview.core.models import (
    EntityEntry,
    EntityKind,
    Registers,
    TooltipType,
    TransformContext,
    TransformResult,
)
from qzh_preview.core.registers import dedupe
from qzh_preview.core.rendition import RENDITION_SYNONYMS, map_rendition
from qzh_preview.core.utils import (
    XML_NS,
    attr,
    attribute_tooltip,
    count_ancestors,
    escape_attr,
    escape_html,
    find_all,
    find_first,
    find_sibling,
    has_ancestor,
    is_element,
    local_name,
    text_content,
    tooltip_attrs,
)

__all__ = ["TeiTransformer", "heading_level"]

logger = logging.getLogger(__name__)

_ENTITY_LABELS: Dict[EntityKind, str] = {
    EntityKind.PERSON: "Person",
    EntityKind.PLACE: "Ort",
    EntityKind.ORGANIZATION: "Organisation",
    EntityKind.TERM: "Begriff",
}

_HI_LABELS = {"rend": "Darstellung", "hand": "Hand", "type": "Typ"}

_MARGIN_PLACES = ("margin", "left", "right")

# Attributes that produce a date phrase or qualifier; a tooltip built without
# any of them consists of the duration alone.
_DATE_ATTRS = ("when", "from", "to", "notBefore", "notAfter", "calendar", "type", "period")

_MAX_HEADING_LEVEL = 6


class _Renderer:
    """Per-call walker binding a :class:`TransformContext` to the handlers."""

    def __init__(self, ctx: TransformContext, synonyms: Mapping[str, str]) -> None:
        self.ctx = ctx
        self.synonyms = synonyms

    def node(self, node: ET._Element) -> str:
        if not is_element(node):
            return ""
        name = local_name(node)
        handler = _HANDLERS.get(name)
        if handler is None:
            self.ctx.unhandled_tags[name] = self.ctx.unhandled_tags.get(name, 0) + 1
            return self.children(node)
        return handler(self, node)

    def children(self, node: ET._Element) -> str:
        parts: List[str] = []
        if node.text:
            parts.append(escape_html(node.text))
        for child in node:
            parts.append(self.node(child))
            if child.tail:
                parts.append(escape_html(child.tail))
        return "".join(parts)

    def visit(self, node: ET._Element, *shown: ET._Element) -> None:
        """Walk the element children of *node* except *shown*, dropping the HTML."""
        for child in node:
            if any(child is s for s in shown):
                continue
            if any(a is child for s in shown for a in s.iterancestors()):
                self.visit(child, *shown)
            else:
                self.node(child)


Handler = Callable[[_Renderer, ET._Element], str]


def _span(cls: str, content: str, tooltip: str = "",
          kind: Optional[TooltipType] = None, extra: str = "") -> str:
    tip = tooltip_attrs(tooltip, kind) if tooltip and kind is not None else ""
    return f'<span class="{cls}"{tip}{extra}>{content}</span>'


def _stripped_text(node: Optional[ET._Element]) -> str:
    return text_content(node).strip() if node is not None else ""


# ---------------------------------------------------------------------------
# Structure
# ---------------------------------------------------------------------------

def _body(r: _Renderer, node: ET._Element) -> str:
    return f'<div class="body">{r.children(node)}</div>'


def _div(r: _Renderer, node: ET._Element) -> str:
    return f'<div class="tei-div">{r.children(node)}</div>'


def _p(r: _Renderer, node: ET._Element) -> str:
    return f'<p class="tei-p">{r.children(node)}</p>'


def _ab(r: _Renderer, node: ET._Element) -> str:
    cls = "tei-ab tei-ab1" if attr(node, "place") else "tei-ab"
    prefix = ""
    if attr(node, "type").lower() == "dorsal":
        n = attr(node, "n")
        label = f"S. {n}" if n else "verso"
        prefix = _span(
            "pb-marker tei-ab-dorsal-marker", f"[{escape_html(label)}]",
            "Verso-Angabe", TooltipType.PAGE,
        ) + " "
    return f'<div class="{cls}">{prefix}{r.children(node)}</div>'


def heading_level(node: ET._Element) -> int:
    """Heading level of a ``head``: 2 plus enclosing ``div`` count, at most 6."""
    return min(2 + count_ancestors(node, "div"), _MAX_HEADING_LEVEL)


def _head(r: _Renderer, node: ET._Element) -> str:
    if attr(node, "type") == "subtitle":
        return f'<h2 class="tei-head-subtitle">{r.children(node)}</h2>'
    level = heading_level(node)
    return f'<h{level} class="tei-head{level}">{r.children(node)}</h{level}>'


def _lb(r: _Renderer, node: ET._Element) -> str:
    if r.ctx.normalized:
        return ""
    if attr(node, "break") == "no":
        return "-<br>"
    return "<br>"


def _pb(r: _Renderer, node: ET._Element) -> str:
    n = attr(node, "n")
    facs = attr(node, "facs")
    label = f"S. {escape_html(n)}" if n else ""
    tooltip = f"Faksimile: {facs}" if facs else ""
    return _span("pb-marker", f"[{label}]", tooltip, TooltipType.PAGE)


def _cb(r: _Renderer, node: ET._Element) -> str:
    return '<span class="column-break"> | </span>'


# ---------------------------------------------------------------------------
# Named entities
# ---------------------------------------------------------------------------

def _semantic(r: _Renderer, node: ET._Element, kind: EntityKind) -> str:
    content = r.children(node)
    ref = attr(node, "ref")
    role = attr(node, "role")
    r.ctx.add_entity(kind, EntityEntry(name=_stripped_text(node), ref=ref, role=role))

    parts = [_ENTITY_LABELS[kind]]
    if ref:
        parts.append(f"Ref: {ref}")
    if role:
        parts.append(f"Rolle: {role}")

    return _span(
        f"semantic {kind.value}", content, " | ".join(parts), kind.tooltip_type,
        extra=f' data-ref="{escape_attr(ref)}"',
    )


def _pers_name(r: _Renderer, node: ET._Element) -> str:
    return _semantic(r, node, EntityKind.PERSON)


def _place_name(r: _Renderer, node: ET._Element) -> str:
    return _semantic(r, node, EntityKind.PLACE)


def _org_name(r: _Renderer, node: ET._Element) -> str:
    return _semantic(r, node, EntityKind.ORGANIZATION)


def _term(r: _Renderer, node: ET._Element) -> str:
    # keywords in the header are metadata, not annotations
    if has_ancestor(node, "teiHeader"):
        return r.children(node)
    return _semantic(r, node, EntityKind.TERM)


# ---------------------------------------------------------------------------
# Text-critical elements
# ---------------------------------------------------------------------------

_CHOICE_PAIRS = (
    ("sic", "corr", "text-critical", "Korrektur: ", TooltipType.TEXTCRITICAL),
    ("abbr", "expan", "tei-abbr text-critical", "", TooltipType.ABBR),
    ("orig", "reg", "text-critical", "Normalisiert: ", TooltipType.TEXTCRITICAL),
)


def _choice(r: _Renderer, node: ET._Element) -> str:
    for shown_name, hidden_name, cls, label, kind in _CHOICE_PAIRS:
        shown, hidden = find_first(node, shown_name), find_first(node, hidden_name)
        if shown is not None and hidden is not None:
            content = r.children(shown)
            r.visit(node, shown)
            return _span(cls, content, label + _stripped_text(hidden), kind)
    return r.children(node)


def _sic(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-sic text-critical", r.children(node), "So im Original", TooltipType.TEXTCRITICAL)


def _corr(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-corr", r.children(node))


def _abbr(r: _Renderer, node: ET._Element) -> str:
    expansion = _stripped_text(find_sibling(node, "expan"))
    return _span("tei-abbr text-critical", r.children(node), expansion, TooltipType.ABBR)


def _hidden(r: _Renderer, node: ET._Element) -> str:
    """``expan``, ``reg`` and ``rdg`` only appear inside tooltips."""
    r.visit(node)
    return ""


def _orig(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-orig", r.children(node))


def _add(r: _Renderer, node: ET._Element) -> str:
    info = f"Hinzufügung ({attr(node, 'place') or 'unbekannt'})"
    hand = attr(node, "hand")
    if hand:
        info += f" von {hand}"
    return _span("tei-add text-critical", r.children(node), info, TooltipType.TEXTCRITICAL)


def _del(r: _Renderer, node: ET._Element) -> str:
    info = f"Gestrichen: {attr(node, 'rend') or 'durchgestrichen'}"
    return _span("tei-del text-critical", r.children(node), info, TooltipType.TEXTCRITICAL)


def _subst(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-subst text-critical", r.children(node), "Ersetzung", TooltipType.TEXTCRITICAL)


def _supplied(r: _Renderer, node: ET._Element) -> str:
    source = attr(node, "source") or attr(node, "resp")
    reason = attr(node, "reason")
    info = "Ergänzung"
    if reason:
        info += f": {reason}"
    if source:
        info += f" ({source})"
    return _span("tei-supplied text-critical", r.children(node), info, TooltipType.TEXTCRITICAL)


def _unclear(r: _Renderer, node: ET._Element) -> str:
    info = attr(node, "reason") or "unsichere Lesung"
    return _span("tei-unclear text-critical", r.children(node), info, TooltipType.TEXTCRITICAL)


def _gap(r: _Renderer, node: ET._Element) -> str:
    reason = attr(node, "reason")
    unit = attr(node, "unit")
    quantity = attr(node, "quantity")
    info = "Lücke"
    if reason:
        info += f": {reason}"
    if quantity and unit:
        info += f" ({quantity} {unit})"
    r.visit(node)
    return _span("tei-gap text-critical", "", info, TooltipType.TEXTCRITICAL)


def _damage(r: _Renderer, node: ET._Element) -> str:
    info = attr(node, "agent") or "Beschädigung"
    return _span("tei-damage text-critical", r.children(node), info, TooltipType.TEXTCRITICAL)


def _space(r: _Renderer, node: ET._Element) -> str:
    unit = attr(node, "unit")
    quantity = attr(node, "quantity")
    info = f"Leerraum: {quantity} {unit}" if quantity and unit else "Leerraum"
    r.visit(node)
    return _span("tei-space text-critical", "", info, TooltipType.TEXTCRITICAL)


def _app(r: _Renderer, node: ET._Element) -> str:
    readings = []
    for rdg in find_all(node, "rdg"):
        wit = attr(rdg, "wit")
        text = _stripped_text(rdg)
        readings.append(f"{wit}: {text}" if wit else text)

    lem = find_first(node, "lem")
    if lem is not None:
        content = r.children(lem)
        r.visit(node, lem)
    else:
        content = r.children(node)

    if readings:
        return _span(
            "text-critical", content,
            f"Varianten: {'; '.join(readings)}", TooltipType.APPARATUS,
        )
    return _span("tei-app", content)


def _lem(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-lem", r.children(node))


# ---------------------------------------------------------------------------
# Inline phrase-level elements
# ---------------------------------------------------------------------------

def _q(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-q", r.children(node))


def _hi(r: _Renderer, node: ET._Element) -> str:
    classes = map_rendition(attr(node, "rend"), r.synonyms)
    tooltip = attribute_tooltip(node, _HI_LABELS)
    if tooltip:
        classes = classes + ["tei-hi-annotated"]
    return _span(" ".join(classes), r.children(node), tooltip, TooltipType.TEXTCRITICAL)


def _foreign(r: _Renderer, node: ET._Element) -> str:
    lang = node.get(f"{{{XML_NS}}}lang") or attr(node, "lang")
    return _span("tei-foreign", r.children(node), extra=f' data-lang="{escape_attr(lang)}"')


def _note(r: _Renderer, node: ET._Element) -> str:
    content = r.children(node)
    if attr(node, "place") in _MARGIN_PLACES:
        return _span("tei-note-margin text-critical", "[*]", content, TooltipType.NOTE)
    number = r.ctx.add_footnote(content)
    return f'<span class="footnote-ref" data-footnote="{number}">{number}</span>'


def _ref(r: _Renderer, node: ET._Element) -> str:
    target = attr(node, "target")
    if target.startswith("http"):
        return (f'<a href="{escape_attr(target)}" target="_blank" rel="noopener" '
                f'class="ref-link">{r.children(node)}</a>')
    return _span("tei-ref", r.children(node))


def _bibl(r: _Renderer, node: ET._Element) -> str:
    if attr(node, "type") == "url":
        url = _stripped_text(node)
        return (f'<a href="{escape_attr(url)}" target="_blank" rel="noopener" '
                f'class="bibl-link">{r.children(node)}</a>')
    return _span("tei-bibl", r.children(node))


def _figure(r: _Renderer, node: ET._Element) -> str:
    fig_type = attr(node, "type") or "Abbildung"
    r.visit(node)
    return _span(
        "tei-figure", f"[{escape_html(fig_type)}]",
        f"Abbildung: {fig_type}", TooltipType.FIGURE,
    )


def _fig_desc(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-figDesc", r.children(node))


def _dated(r: _Renderer, node: ET._Element, cls: str, kind: TooltipType) -> str:
    tooltip = build_date_tooltip(node.attrib)
    if not tooltip:
        return _span(cls, r.children(node))
    if not any(attr(node, name) for name in _DATE_ATTRS):
        kind = TooltipType.DURATION
    return _span(f"{cls} text-critical", r.children(node), tooltip, kind)


def _date(r: _Renderer, node: ET._Element) -> str:
    return _dated(r, node, "tei-date", TooltipType.DATE)


def _time(r: _Renderer, node: ET._Element) -> str:
    return _dated(r, node, "tei-time", TooltipType.TIME)


def _orig_date(r: _Renderer, node: ET._Element) -> str:
    return _span("tei-origDate", r.children(node))


def _measure(r: _Renderer, node: ET._Element) -> str:
    info = [attr(node, name) for name in ("quantity", "unit", "commodity")]
    measure_type = attr(node, "type")
    if measure_type:
        info.append(f"({measure_type})")
    tooltip = " ".join(part for part in info if part)
    return _span(
        "tei-measure text-critical" if tooltip else "tei-measure",
        r.children(node), tooltip, TooltipType.MEASURE,
    )


def _num(r: _Renderer, node: ET._Element) -> str:
    value = attr(node, "value")
    if value:
        return _span("tei-num text-critical", r.children(node), f"Wert: {value}", TooltipType.NUM)
    return _span("tei-num", r.children(node))


def _signed(r: _Renderer, node: ET._Element) -> str:
    return f'<div class="tei-signed">[Unterzeichnet:] {r.children(node)}</div>'


# ---------------------------------------------------------------------------
# Tables and lists
# ---------------------------------------------------------------------------

def _table(r: _Renderer, node: ET._Element) -> str:
    return f'<table class="tei-table">{r.children(node)}</table>'


def _row(r: _Renderer, node: ET._Element) -> str:
    cls = "tei-row tei-row1" if attr(node, "role") == "label" else "tei-row"
    return f'<tr class="{cls}">{r.children(node)}</tr>'


def _cell(r: _Renderer, node: ET._Element) -> str:
    parent = node.getparent()
    is_label = parent is not None and attr(parent, "role") == "label"
    tag = "th" if is_label else "td"
    return f'<{tag} class="tei-cell">{r.children(node)}</{tag}>'


def _list(r: _Renderer, node: ET._Element) -> str:
    tag = "ol" if attr(node, "type") == "ordered" else "ul"
    return f'<{tag} class="tei-list">{r.children(node)}</{tag}>'


def _item(r: _Renderer, node: ET._Element) -> str:
    return f'<li class="tei-item">{r.children(node)}</li>'


def _label(r: _Renderer, node: ET._Element) -> str:
    cls = "tei-label tei-label1" if attr(node, "type") == "keyword" else "tei-label"
    return _span(cls, r.children(node))


def _seg(r: _Renderer, node: ET._Element) -> str:
    if not r.ctx.normalized:
        return _span("tei-seg", r.children(node))
    n = attr(node, "n")
    label = f'<span class="tei-seg-label">[{escape_html(n)}]</span> ' if n else ""
    return _span("tei-seg tei-seg-normalized", label + r.children(node))


def _hand_shift(r: _Renderer, node: ET._Element) -> str:
    new_hand = attr(node, "new")
    text = f"Handwechsel: {new_hand}" if new_hand else "Handwechsel"
    number = r.ctx.add_footnote(escape_html(text))
    return f'<span class="footnote-ref" data-footnote="{number}">{number}</span>'


_HANDLERS: Dict[str, Handler] = {
    "body": _body,
    "div": _div,
    "p": _p,
    "ab": _ab,
    "head": _head,
    "lb": _lb,
    "pb": _pb,
    "cb": _cb,
    "persName": _pers_name,
    "placeName": _place_name,
    "origPlace": _place_name,
    "orgName": _org_name,
    "term": _term,
    "choice": _choice,
    "sic": _sic,
    "corr": _corr,
    "abbr": _abbr,
    "expan": _hidden,
    "orig": _orig,
    "reg": _hidden,
    "add": _add,
    "del": _del,
    "subst": _subst,
    "supplied": _supplied,
    "unclear": _unclear,
    "gap": _gap,
    "damage": _damage,
    "space": _space,
    "app": _app,
    "lem": _lem,
    "rdg": _hidden,
    "q": _q,
    "quote": _q,
    "hi": _hi,
    "foreign": _foreign,
    "note": _note,
    "ref": _ref,
    "bibl": _bibl,
    "figure": _figure,
    "figDesc": _fig_desc,
    "date": _date,
    "origDate": _orig_date,
    "time": _time,
    "measure": _measure,
    "num": _num,
    "signed": _signed,
    "table": _table,
    "row": _row,
    "cell": _cell,
    "list": _list,
    "item": _item,
    "label": _label,
    "seg": _seg,
    "handShift": _hand_shift,
}


# ---------------------------------------------------------------------------
# Document sections
# ---------------------------------------------------------------------------

def _first_by_name(root: ET._Element, name: str) -> Optional[ET._Element]:
    found = root.xpath(f"(descendant-or-self::*[local-name()='{name}'])[1]")
    return found[0] if found else None


def _render_summary(r: _Renderer, root: ET._Element) -> str:
    """Regest from the header's ``summary``; '' when absent."""
    header = find_header(root)
    summary = find_first(header, "summary") if header is not None else None
    if summary is None:
        return ""
    html = r.children(summary).strip()
    if html:
        return html
    return escape_html(_stripped_text(summary))


def _render_back(r: _Renderer, back: ET._Element) -> str:
    """Commentary: every paragraph of the ``div``s in ``back``."""
    parts = ["<h3>Kommentar</h3>"]
    paragraphs = back.xpath(".//*[local-name()='div']//*[local-name()='p']")
    if paragraphs:
        parts.extend(f"<p>{r.children(p)}</p>" for p in paragraphs)
    else:
        parts.append(r.children(back))
    return "".join(parts)


class TeiTransformer:
    """Transform parsed TEI documents into :class:`TransformResult` objects.

    The instance only keeps the rendition synonym table; every call to
    :meth:`transform` works on its own :class:`TransformContext`.

    Examples
    --------
    >>> from qzh_preview.core.loader import parse
    >>> result = TeiTransformer().transform(parse("<TEI><text><body><p>x</p></body></text></TEI>"))
    >>> result.body
    '<div class="body"><p class="tei-p">x</p></div>'
    """

    def __init__(self, rendition_synonyms: Optional[Mapping[str, str]] = None) -> None:
        synonyms = dict(RENDITION_SYNONYMS)
        if rendition_synonyms:
            synonyms.update(rendition_synonyms)
        self._synonyms: Mapping[str, str] = synonyms

    def transform(self, tree: Union[ET._Element, ET._ElementTree],
                  normalized: bool = False) -> TransformResult:
        """Render *tree* to HTML and collect footnotes and registers.

        Parameters
        ----------
        tree
            Parsed document (root element or element tree).
        normalized
            When True, line breaks are dropped and segment numbers shown.

        Raises
        ------
        TransformError
            On any unexpected failure while rendering.
        """
        root = tree.getroot() if isinstance(tree, ET._ElementTree) else tree
        ctx = TransformContext(normalized=normalized)
        renderer = _Renderer(ctx, self._synonyms)

        try:
            result = TransformResult(
                metadata=extract_metadata(root),
                summary=_render_summary(renderer, root),
                heading=extract_heading(root),
            )

            body = _first_by_name(root, "body")
            if body is not None:
                result.body = renderer.node(body)

            back = _first_by_name(root, "back")
            if back is not None:
                result.back = _render_back(renderer, back)

            result.footnotes = list(ctx.footnotes)
            result.registers = Registers(
                persons=dedupe(ctx.persons),
                places=dedupe(ctx.places),
                organizations=dedupe(ctx.organizations),
                terms=dedupe(ctx.terms),
            )
        except Exception as exc:
            logger.error("Transform FAIL: %s", exc, exc_info=True)
            raise TransformError(f"Transform failed: {exc}", cause=exc) from exc

        if ctx.unhandled_tags:
            logger.debug("Transform: passed through %s", sorted(ctx.unhandled_tags))
        logger.debug(
            "Transform OK: normalized=%s footnotes=%d persons=%d places=%d orgs=%d terms=%d",
            normalized, len(result.footnotes), len(result.registers.persons),
            len(result.registers.places), len(result.registers.organizations),
            len(result.registers.terms),
        )
        return result
