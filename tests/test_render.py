import subprocess
from pathlib import Path

import pytest

from mobility_digitizer.exceptions import RenderError
from mobility_digitizer.ingest.pdf_to_svg import render_page_svg
from mobility_digitizer.utils import pdf as pdfu

SVG = '<svg xmlns="http://www.w3.org/2000/svg"><path d="M 0 0 L 1 1"/></svg>'


def _writer(text):
    def engine(pdf, page, out):
        Path(out).write_text(text, encoding="utf-8")
    return engine


def _failing(pdf, page, out):
    raise subprocess.CalledProcessError(1, ["pdftocairo"])


def test_missing_tool_falls_through_to_next_engine(tmp_path, monkeypatch):
    monkeypatch.setattr(pdfu, "has_tool", lambda name: False)
    monkeypatch.setitem(pdfu.ENGINES, "pymupdf", _writer(SVG))
    info = pdfu.export_page_svg("r.pdf", 1, str(tmp_path / "p.svg"), ["inkscape", "pymupdf"])
    assert info == {"engine": "pymupdf", "attempts": ["inkscape:missing"]}


def test_failed_engine_is_recorded(tmp_path, monkeypatch):
    monkeypatch.setattr(pdfu, "has_tool", lambda name: True)
    monkeypatch.setitem(pdfu.ENGINES, "pdftocairo", _failing)
    monkeypatch.setitem(pdfu.ENGINES, "pymupdf", _writer(SVG))
    info = pdfu.export_page_svg("r.pdf", 2, str(tmp_path / "p.svg"), ["pdftocairo", "pymupdf"])
    assert info["engine"] == "pymupdf"
    assert info["attempts"] == ["pdftocairo_failed:CalledProcessError"]


def test_unknown_engine_is_a_config_mistake(tmp_path):
    with pytest.raises(ValueError):
        pdfu.export_page_svg("r.pdf", 1, str(tmp_path / "p.svg"), ["ghostscript"])


def test_render_returns_svg_text(tmp_path, monkeypatch):
    monkeypatch.setitem(pdfu.ENGINES, "pymupdf", _writer(SVG))
    assert render_page_svg("r.pdf", 1, str(tmp_path / "original-1.svg"), ["pymupdf"]) == SVG


def test_render_error_when_every_engine_fails(tmp_path, monkeypatch):
    monkeypatch.setattr(pdfu, "has_tool", lambda name: True)
    monkeypatch.setitem(pdfu.ENGINES, "pdftocairo", _failing)
    with pytest.raises(RenderError) as exc:
        render_page_svg("r.pdf", 1, str(tmp_path / "p.svg"), ["pdftocairo"])
    assert exc.value.page == 1
    assert exc.value.attempts == ["pdftocairo_failed:CalledProcessError"]


def test_render_error_when_page_has_no_vectors(tmp_path, monkeypatch):
    monkeypatch.setitem(pdfu.ENGINES, "pymupdf", _writer("<svg><text>scanned</text></svg>"))
    with pytest.raises(RenderError):
        render_page_svg("r.pdf", 1, str(tmp_path / "p.svg"), ["pymupdf"])
