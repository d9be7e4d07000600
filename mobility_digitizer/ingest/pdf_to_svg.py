# mobility_digitizer/ingest/pdf_to_svg.py
from pathlib import Path
from typing import Sequence

from loguru import logger

from mobility_digitizer.exceptions import RenderError
from mobility_digitizer.utils import pdf as pdfu
from mobility_digitizer.utils.svg import count_vector_elements

def render_page_svg(pdf: str, page: int, export_path: str, engines: Sequence[str]) -> str:
    """Render one page of `pdf` to `export_path` and return the SVG text."""
    pdf_path = Path(pdf)
    export_path = Path(export_path)
    info = pdfu.export_page_svg(str(pdf_path), page, str(export_path), list(engines))
    if info["engine"] is None:
        raise RenderError(str(pdf_path), page, info["attempts"])

    svg = export_path.read_text(encoding="utf-8", errors="ignore")
    n = count_vector_elements(svg)
    logger.info(f"[render] {pdf_path.name} page-{page}: engine={info['engine']} vector elements={n}")
    if n == 0:
        raise RenderError(str(pdf_path), page, info["attempts"] + [f"{info['engine']}:no_vectors"])
    return svg
