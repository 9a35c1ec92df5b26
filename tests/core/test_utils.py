from lxml import etree as ET

from qzh_preview.core.models import TooltipType
from qzh_preview.core.utils import (
    attribute_tooltip,
    count_ancestors,
    escape_html,
    find_all,
    find_first,
    find_sibling,
    has_ancestor,
    local_name,
    qualified_attr_name,
    text_content,
    tooltip_attrs,
)

TEI = "http://www.tei-c.org/ns/1.0"


class TestTreeHelpers:
    """Test cases for the namespace-agnostic tree helpers."""

    def test_local_name_ignores_namespace(self):
        node = ET.fromstring(f'<p xmlns="{TEI}"/>')
        assert local_name(node) == "p"
        assert local_name(ET.Comment("x")) == ""

    def test_text_content_concatenates_descendants(self):
        node = ET.fromstring("<p>Wir <b>der</b> Rat</p>")
        assert text_content(node) == "Wir der Rat"

    def test_find_all_descendant_chain(self):
        root = ET.fromstring(
            f'<TEI xmlns="{TEI}"><msDesc><x><head>A</head></x></msDesc><head>B</head></TEI>'
        )
        assert [n.text for n in find_all(root, "msDesc", "head")] == ["A"]
        assert [n.text for n in find_all(root, "head")] == ["A", "B"]
        assert find_first(root, "missing") is None

    def test_find_sibling(self):
        root = ET.fromstring("<choice><abbr>Hr.</abbr><expan>Herr</expan></choice>")
        assert find_sibling(root[0], "expan").text == "Herr"
        assert find_sibling(root[0], "abbr") is None

    def test_ancestors(self):
        root = ET.fromstring("<div><div><p><head/></p></div></div>")
        head = root.find(".//head")
        assert count_ancestors(head, "div") == 2
        assert has_ancestor(head, "p")
        assert not has_ancestor(head, "teiHeader")

    def test_qualified_attr_name(self):
        assert qualified_attr_name("{http://www.w3.org/XML/1998/namespace}lang") == "xml:lang"
        assert qualified_attr_name("rend") == "rend"


class TestHtmlHelpers:
    """Test cases for the HTML output helpers."""

    def test_escape_html(self):
        assert escape_html('<a & "b">') == "&lt;a &amp; &quot;b&quot;&gt;"
        assert escape_html(None) == ""

    def test_tooltip_attrs(self):
        assert tooltip_attrs('Korrektur: "x"', TooltipType.TEXTCRITICAL) == (
            ' data-tooltip="Korrektur: &quot;x&quot;" data-tooltip-type="textcritical"'
        )

    def test_attribute_tooltip_uses_labels(self):
        node = ET.fromstring('<hi rend="sup" hand="#h2" n=""/>')
        assert attribute_tooltip(node, {"rend": "Darstellung"}) == "Darstellung: sup | hand: #h2"
