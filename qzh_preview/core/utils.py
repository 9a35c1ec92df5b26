from __future__ import annotations

"""Simple reusable helpers for walking TEI trees and writing HTML.

These helpers are side-effect-free and namespace-agnostic: TEI documents may
use the TEI namespace, a prefix, or no namespace at all, so every lookup goes
through local names.
"""

from html import escape
from typing import Dict, List, Mapping, Optional, Union

from lxml import etree as ET

from qzh_preview.core.models import TooltipType

__all__ = [
    "TEI_NS",
    "XML_NS",
    "local_name",
    "is_element",
    "text_content",
    "attr",
    "qualified_attr_name",
    "find_all",
    "find_first",
    "find_sibling",
    "has_ancestor",
    "count_ancestors",
    "escape_html",
    "escape_attr",
    "tooltip_attrs",
    "attribute_tooltip",
]

TEI_NS = "http://www.tei-c.org/ns/1.0"
XML_NS = "http://www.w3.org/XML/1998/namespace"

_PREFIXES: Dict[str, str] = {XML_NS: "xml"}


# ---------------------------------------------------------------------------
# Tree helpers
# ---------------------------------------------------------------------------

def is_element(node) -> bool:
    """Return True for real elements (not comments, PIs or entities)."""
    return isinstance(getattr(node, "tag", None), str)


def local_name(node: ET._Element) -> str:
    """Return the namespace-stripped tag name of *node* ('' for non-elements)."""
    if not is_element(node):
        return ""
    return ET.QName(node).localname


def text_content(node: ET._Element) -> str:
    """Concatenated descendant text of *node*, like DOM ``textContent``."""
    return str(node.xpath("string()"))


def attr(node: ET._Element, name: str) -> str:
    """Return attribute *name* of *node* or '' when absent."""
    return node.get(name) or ""


def qualified_attr_name(name: str) -> str:
    """Turn lxml's ``{ns}local`` attribute names into ``prefix:local``."""
    if not name.startswith("{"):
        return name
    ns, _, local = name[1:].partition("}")
    prefix = _PREFIXES.get(ns)
    return f"{prefix}:{local}" if prefix else local


def _local_path(names: tuple[str, ...]) -> str:
    steps = [f"*[local-name()='{n}']" for n in names]
    return ".//" + "//".join(steps)


def find_all(node: ET._Element, *names: str) -> List[ET._Element]:
    """Descendants matching a chain of local names, in document order.

    ``find_all(header, "msDesc", "head")`` behaves like the CSS selector
    ``msDesc head`` evaluated below *node*.
    """
    if not names:
        return []
    return node.xpath(_local_path(names))


def find_first(node: ET._Element, *names: str) -> Optional[ET._Element]:
    found = find_all(node, *names)
    return found[0] if found else None


def find_sibling(node: ET._Element, name: str) -> Optional[ET._Element]:
    """First element sibling of *node* whose local name is *name*."""
    parent = node.getparent()
    if parent is None:
        return None
    for child in parent:
        if child is not node and local_name(child) == name:
            return child
    return None


def has_ancestor(node: ET._Element, name: str) -> bool:
    parent = node.getparent()
    while parent is not None:
        if local_name(parent) == name:
            return True
        parent = parent.getparent()
    return False


def count_ancestors(node: ET._Element, name: str) -> int:
    count = 0
    parent = node.getparent()
    while parent is not None:
        if local_name(parent) == name:
            count += 1
        parent = parent.getparent()
    return count


# ---------------------------------------------------------------------------
# HTML output helpers
# ---------------------------------------------------------------------------

def escape_html(text: Optional[str]) -> str:
    """Escape ``& < > " '`` for use in element content."""
    return escape(text or "", quote=True)


def escape_attr(text: Optional[str]) -> str:
    """Escape a value for a double-quoted HTML attribute."""
    return escape(str(text or ""), quote=True)


def tooltip_attrs(text: str, kind: Union[TooltipType, str]) -> str:
    """Return the ``data-tooltip``/``data-tooltip-type`` pair (leading space).

    Segments of *text* are separated by `` | ``; the tooltip widget renders
    the first segment as a title when there is more than one.
    """
    type_value = kind.value if isinstance(kind, TooltipType) else kind
    return f' data-tooltip="{escape_attr(text)}" data-tooltip-type="{escape_attr(type_value)}"'


def attribute_tooltip(node: ET._Element, labels: Mapping[str, str]) -> str:
    """Build ``Label: value`` segments for every non-empty attribute of *node*."""
    parts = []
    for name, value in node.attrib.items():
        if not value:
            continue
        qname = qualified_attr_name(name)
        parts.append(f"{labels.get(qname, qname)}: {value}")
    return " | ".join(parts)
