# pdf page -> svg engine wrappers (inkscape, pdftocairo, PyMuPDF)
# mobility_digitizer/utils/pdf.py
from pathlib import Path
import subprocess, shutil
from typing import Callable, Dict, List

def has_tool(name: str) -> bool:
    return shutil.which(name) is not None

def _call_inkscape_svg(pdf_path: str, page: int, out_svg: str) -> None:
    cmd = [
        "inkscape",
        "--pdf-poppler",
        f"--pdf-page={page}",
        "--export-type=svg",
        "--export-plain-svg",
        "--export-area-page",
        "--vacuum-defs",
        f"--export-filename={out_svg}",
        pdf_path,
    ]
    subprocess.check_call(cmd, stdout=subprocess.DEVNULL, stderr=subprocess.DEVNULL)

def _call_pdftocairo_svg(pdf_path: str, page: int, out_svg: str) -> None:
    # -svg always writes a single file; -f/-l pin the page range
    cmd = ["pdftocairo", "-svg", "-f", str(page), "-l", str(page), pdf_path, out_svg]
    subprocess.check_call(cmd)

def _export_with_pymupdf(pdf_path: str, page: int, out_svg: str) -> None:
    """Fallback using PyMuPDF's SVG writer; keeps vector paths, text stays as text."""
    import fitz  # PyMuPDF

    with fitz.open(pdf_path) as doc:
        if page < 1 or page > len(doc):
            raise ValueError(f"page {page} out of range (1..{len(doc)})")
        svg_str = doc[page - 1].get_svg_image(matrix=fitz.Identity)
    Path(out_svg).write_text(svg_str, encoding="utf-8")

ENGINES: Dict[str, Callable[[str, int, str], None]] = {
    "inkscape": _call_inkscape_svg,
    "pdftocairo": _call_pdftocairo_svg,
    "pymupdf": _export_with_pymupdf,
}

EXTERNAL_TOOLS = {"inkscape", "pdftocairo"}

def export_page_svg(pdf_path: str, page: int, out_svg: str, engines: List[str]) -> Dict[str, object]:
    """
    Export a single (1-based) page to SVG.
    Tries each engine in order; returns {"engine": name, "attempts": [...]}.
    The "engine" key is None when every engine failed.
    """
    Path(out_svg).parent.mkdir(parents=True, exist_ok=True)
    attempts = []
    for name in engines:
        if name not in ENGINES:
            raise ValueError(f"unknown render engine '{name}' (choose from {sorted(ENGINES)})")
        if name in EXTERNAL_TOOLS and not has_tool(name):
            attempts.append(f"{name}:missing")
            continue
        try:
            ENGINES[name](str(pdf_path), int(page), str(out_svg))
        except (subprocess.CalledProcessError, OSError, RuntimeError, ValueError) as e:
            attempts.append(f"{name}_failed:{e.__class__.__name__}")
            continue
        if Path(out_svg).exists():
            return {"engine": name, "attempts": attempts}
        attempts.append(f"{name}:no_output")
    return {"engine": None, "attempts": attempts}
