import pytest

from qzh_preview.core.exceptions import ParseError, QzhPreviewError
from qzh_preview.core.loader import parse
from qzh_preview.core.utils import local_name


class TestParse:
    """Test cases for parse."""

    def test_parses_namespaced_document(self, sample_xml):
        root = parse(sample_xml)
        assert local_name(root) == "TEI"

    def test_accepts_bytes(self):
        root = parse("<TEI><text/></TEI>".encode("utf-8"))
        assert local_name(root) == "TEI"

    def test_str_with_encoding_declaration(self):
        """Decoded text keeps working even when the declaration names an encoding."""
        root = parse('<?xml version="1.0" encoding="ISO-8859-1"?><TEI><p>Zürich</p></TEI>')
        assert root[0].text == "Zürich"

    def test_bytes_follow_declaration(self):
        data = '<?xml version="1.0" encoding="ISO-8859-1"?><p>Zürich</p>'.encode("iso-8859-1")
        assert parse(data).text == "Zürich"

    @pytest.mark.parametrize("raw", ["", "   \n", b""])
    def test_empty_input(self, raw):
        with pytest.raises(ParseError, match="empty"):
            parse(raw)

    def test_malformed_reports_position(self):
        with pytest.raises(ParseError) as info:
            parse("<TEI>\n<p>unclosed</TEI>")
        err = info.value
        assert err.line == 2
        assert err.column is not None
        assert "line 2" in str(err)
        assert err.cause is not None

    def test_parse_error_is_package_error(self):
        with pytest.raises(QzhPreviewError):
            parse("<a><b></a>")

    def test_external_entities_not_resolved(self, tmp_path):
        secret = tmp_path / "secret.txt"
        secret.write_text("geheim", encoding="utf-8")
        xml = (
            f'<!DOCTYPE p [<!ENTITY x SYSTEM "file://{secret}">]>'
            "<p>&x;</p>"
        )
        root = parse(xml)
        assert "geheim" not in (root.xpath("string()") or "")

    def test_internal_entities_expanded(self):
        root = parse('<!DOCTYPE p [<!ENTITY zh "Zürich">]><p>Rat von &zh;</p>')
        assert root.text == "Rat von Zürich"
