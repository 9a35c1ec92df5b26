"""Shared fixtures for the QZH preview tests."""

import os
import sys
from pathlib import Path

import pytest

# Ensure project root is importable when running pytest from repository root
_REPO_ROOT = os.path.abspath(os.path.join(os.path.dirname(__file__), ".."))
if _REPO_ROOT not in sys.path:
    sys.path.insert(0, _REPO_ROOT)

lxml = pytest.importorskip("lxml")

from qzh_preview.config import ConfigManager
from qzh_preview.core.loader import parse
from qzh_preview.core.transformer import TeiTransformer

TEI_NS = "http://www.tei-c.org/ns/1.0"


def tei_document(body: str, header: str = "", back: str = "") -> str:
    """Wrap *body* (inner XML of ``<body>``) into a namespaced TEI document."""
    back_xml = f"<back>{back}</back>" if back else ""
    return (
        f'<TEI xmlns="{TEI_NS}">{header}'
        f"<text><body>{body}</body>{back_xml}</text></TEI>"
    )


@pytest.fixture(scope="session")
def fixtures_dir() -> Path:
    return Path(__file__).parent / "fixtures"


@pytest.fixture(scope="session")
def sample_xml(fixtures_dir) -> str:
    return (fixtures_dir / "sample_tei.xml").read_text(encoding="utf-8")


@pytest.fixture
def sample_root(sample_xml):
    return parse(sample_xml)


@pytest.fixture
def transformer() -> TeiTransformer:
    return TeiTransformer()


@pytest.fixture
def render(transformer):
    """Transform a body snippet and return the full result."""
    def _render(body: str, normalized: bool = False, header: str = "", back: str = ""):
        return transformer.transform(parse(tei_document(body, header, back)), normalized=normalized)
    return _render


@pytest.fixture
def isolated_config(tmp_path, monkeypatch):
    """Point user overrides at an empty temp dir and drop the cached config."""
    config_dir = tmp_path / "config"
    config_dir.mkdir()
    monkeypatch.setenv("QZH_PREVIEW_CONFIG_DIR", str(config_dir))
    ConfigManager.reset()
    yield config_dir
    ConfigManager.reset()
