from unittest.mock import MagicMock, Mock

import pytest

from qzh_preview.core.exceptions import TransformError
from qzh_preview.core.services.preview_service import PreviewResult, PreviewService
from qzh_preview.core.transformer import TeiTransformer


@pytest.fixture
def service():
    return PreviewService(transformer=TeiTransformer(), default_normalized=False)


class TestRenderDocument:
    """Test cases for PreviewService.render_document."""

    def test_success(self, service, sample_xml):
        res = service.render_document(sample_xml)
        assert isinstance(res, PreviewResult)
        assert res.success is True
        assert res.message == ""
        assert res.details is None
        assert res.content.heading.idno == "QZH 123"

    def test_accepts_bytes(self, service, sample_xml):
        res = service.render_document(sample_xml.encode("utf-8"))
        assert res.success is True

    def test_parse_error(self, service):
        res = service.render_document("<TEI>\n<p></TEI>")
        assert res.success is False
        assert res.content is None
        assert res.message.startswith("Fehler beim Verarbeiten der XML-Datei: ")
        assert res.details["reason"] == "parse_error"
        assert res.details["line"] == 2

    def test_empty_document(self, service):
        res = service.render_document("")
        assert res.success is False
        assert res.details["reason"] == "parse_error"

    def test_transform_error(self):
        transformer = Mock()
        transformer.transform.side_effect = TransformError("Transform failed: x", cause=KeyError("x"))
        res = PreviewService(transformer=transformer, default_normalized=False).render_document("<TEI/>")
        assert res.success is False
        assert res.content is None
        assert res.details == {"reason": "transform_error", "exception_type": "KeyError"}

    def test_unexpected_exception(self):
        transformer = Mock()
        transformer.transform.side_effect = RuntimeError("boom")
        res = PreviewService(transformer=transformer, default_normalized=False).render_document("<TEI/>")
        assert res.success is False
        assert res.message == "Fehler beim Verarbeiten der XML-Datei: boom"
        assert res.details["reason"] == "exception"
        assert res.details["exception_type"] == "RuntimeError"

    def test_default_mode_used(self):
        transformer = MagicMock()
        PreviewService(transformer=transformer, default_normalized=True).render_document("<TEI/>")
        assert transformer.transform.call_args.kwargs["normalized"] is True

    def test_explicit_mode_wins(self):
        transformer = MagicMock()
        PreviewService(transformer=transformer, default_normalized=True).render_document("<TEI/>", normalized=False)
        assert transformer.transform.call_args.kwargs["normalized"] is False

    def test_normalized_output(self, service):
        res = service.render_document("<TEI><text><body><p>a<lb/>b</p></body></text></TEI>", normalized=True)
        assert res.content.body == '<div class="body"><p class="tei-p">ab</p></div>'


class TestConfiguredDefaults:
    """PreviewService picks missing settings from ConfigManager."""

    def test_packaged_defaults(self, isolated_config):
        service = PreviewService()
        assert service.default_normalized is False
        res = service.render_document('<TEI><text><body><hi rend="kursiv">x</hi></body></text></TEI>')
        assert 'class="simple_italic tei-hi-annotated"' in res.content.body

    def test_user_override(self, isolated_config):
        (isolated_config / "preview.yml").write_text("normalized: true\n", encoding="utf-8")
        (isolated_config / "rendition_map.yml").write_text(
            "synonyms:\n  Rot: simple_red\n", encoding="utf-8"
        )
        service = PreviewService()
        assert service.default_normalized is True
        res = service.render_document('<TEI><text><body><hi rend="rot">x</hi></body></text></TEI>')
        assert 'class="simple_red tei-hi-annotated"' in res.content.body
