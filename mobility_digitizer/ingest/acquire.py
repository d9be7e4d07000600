# mobility_digitizer/ingest/acquire.py
from pathlib import Path
import os

import requests
from loguru import logger

from mobility_digitizer.exceptions import AcquisitionFailure
from mobility_digitizer.schema.types import Geography

def make_pdf_url(url_template: str, vintage: str, code: str) -> str:
    return url_template.format(vintage=vintage, code=code)

def pdf_path_for(pdfs_root: str, vintage: str, geo: Geography, pdf_name: str = "mobility.pdf") -> Path:
    return Path(pdfs_root) / vintage / geo.code / pdf_name

def download_pdf(url: str, dest: Path, timeout: float = 60, session=None) -> Path:
    """Stream a pdf to dest via a .part file; only a complete download lands at dest."""
    dest = Path(dest)
    dest.parent.mkdir(parents=True, exist_ok=True)
    tmp = dest.with_suffix(dest.suffix + ".part")
    getter = session.get if session is not None else requests.get
    with getter(url, stream=True, timeout=timeout) as resp:
        resp.raise_for_status()
        with open(tmp, "wb") as f:
            for chunk in resp.iter_content(chunk_size=1 << 16):
                if chunk:
                    f.write(chunk)
    os.replace(tmp, dest)
    return dest

def acquire_report(geo: Geography, cfg) -> Path:
    """Fetch the report for one geography. Raises AcquisitionFailure."""
    vintage = str(cfg.source.vintage)
    dest = pdf_path_for(cfg.paths.pdfs, vintage, geo, cfg.source.pdf_name)
    if bool(cfg.source.skip_existing) and dest.exists():
        logger.info(f"[acquire] Reusing {dest}")
        return dest

    url = make_pdf_url(cfg.source.url_template, vintage, geo.code)
    logger.info(f"[acquire] Downloading... {url}")
    try:
        return download_pdf(url, dest, timeout=float(cfg.runtime.request_timeout))
    except requests.RequestException as e:
        raise AcquisitionFailure(geo.code, f"{e.__class__.__name__}: {e}", url) from e
    except OSError as e:
        raise AcquisitionFailure(geo.code, f"write failed: {e}", url) from e
