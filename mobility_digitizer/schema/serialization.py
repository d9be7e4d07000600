# mobility_digitizer/schema/serialization.py
from __future__ import annotations
from pathlib import Path
from typing import List
import json

import pandas as pd
from loguru import logger

from mobility_digitizer.exceptions import MissingPriorRecord
from mobility_digitizer.schema.types import CHART_TYPES, GeographyResult, Geography, param_case
from mobility_digitizer.utils.io import ensure_dir, read_json, write_json

RECORD_NAME = "mobility.json"

def geography_output_dir(output_root: str | Path, geo: Geography) -> Path:
    if geo.parent:
        return Path(output_root) / geo.parent / geo.key
    return Path(output_root) / geo.key

def load_result(out_dir: str | Path, geo: Geography) -> GeographyResult:
    p = Path(out_dir) / RECORD_NAME
    if not p.exists():
        raise MissingPriorRecord(str(p))
    return GeographyResult.from_record(geo.code, geo.category, read_json(p))

def load_prior_or_empty(out_dir: str | Path, geo: Geography) -> GeographyResult:
    try:
        prior = load_result(out_dir, geo)
        logger.info(f"[persist] Found {RECORD_NAME} for {geo.code}")
        return prior
    except MissingPriorRecord:
        logger.info(f"[persist] {RECORD_NAME} not found for {geo.code}, starting fresh")
        return GeographyResult.empty(geo.code, geo.category)
    except json.JSONDecodeError as e:
        # a half-written record would otherwise be merged as if it were history
        raise ValueError(f"corrupt record at {Path(out_dir) / RECORD_NAME}: {e}") from e

def write_result(out_dir: str | Path, result: GeographyResult) -> Path:
    p = Path(out_dir) / RECORD_NAME
    write_json(result.to_record(), p)
    return p

def export_chart_csvs(out_dir: str | Path, result: GeographyResult) -> List[str]:
    """Write mobility-<chart-type>.csv (date,value) per chart; returns the paths."""
    out_dir = Path(out_dir)
    ensure_dir(out_dir)
    written = []
    for t in CHART_TYPES:
        rows = [p.model_dump(mode="json") for p in result.get(t).points]
        df = pd.DataFrame(rows, columns=["date", "value"])
        out = out_dir / f"mobility-{param_case(t)}.csv"
        df.to_csv(out, index=False)
        written.append(str(out))
    return written
