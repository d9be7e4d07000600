# mobility_digitizer/pipeline/digitize.py
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime
from pathlib import Path
from typing import List, Optional, Tuple

from loguru import logger

from mobility_digitizer.exceptions import ChartCountMismatch, ConfigurationError
from mobility_digitizer.geometry.charts import derive_geometry, sample_series, segment_charts
from mobility_digitizer.geometry.classify import classify_paths
from mobility_digitizer.geometry.mapping import AxisWindow, map_points
from mobility_digitizer.geometry.provider import SvgDocument
from mobility_digitizer.ingest.pdf_to_svg import render_page_svg
from mobility_digitizer.schema.types import CHART_TYPES, ChartSeries
from mobility_digitizer.series.downsample import downsample_daily
from mobility_digitizer.utils.svg import compress_svg

@dataclass(frozen=True)
class DigitizeSettings:
    """Everything a worker process needs; plain values so it pickles."""
    series_stroke: str
    gridline_stroke: str
    min_gridline_length: float
    resolution: int
    x_date_min: datetime
    x_date_max: datetime
    y_max: float
    engines: Tuple[str, ...] = ("inkscape", "pdftocairo", "pymupdf")
    pages: Tuple[int, ...] = (1, 2)
    keep_original: bool = True
    write_processed: bool = True
    compress: bool = True
    precision: int = 10
    log_level: str = "INFO"

    @property
    def window(self) -> AxisWindow:
        return AxisWindow(self.x_date_min, self.x_date_max, self.y_max)

    @classmethod
    def from_cfg(cls, cfg, vintage: Optional[str] = None) -> "DigitizeSettings":
        vintage = str(vintage or cfg.source.vintage)
        win = cfg.get("vintages", {}).get(vintage)
        if win is None:
            raise ConfigurationError(f"no x-axis date window configured for vintage {vintage}",
                                     f"vintages.{vintage}")
        try:
            x_min = datetime.fromisoformat(str(win.x_date_min))
            x_max = datetime.fromisoformat(str(win.x_date_max))
        except ValueError as e:
            raise ConfigurationError(str(e), f"vintages.{vintage}") from e
        if x_max <= x_min:
            raise ConfigurationError("x_date_max must be after x_date_min", f"vintages.{vintage}")
        resolution = int(cfg.sampling.resolution)
        if resolution < 1:
            raise ConfigurationError("resolution must be >= 1", "sampling.resolution")
        return cls(
            series_stroke=str(cfg.classify.series_stroke),
            gridline_stroke=str(cfg.classify.gridline_stroke),
            min_gridline_length=float(cfg.classify.min_gridline_length),
            resolution=resolution,
            x_date_min=x_min,
            x_date_max=x_max,
            y_max=float(cfg.axes.y_max),
            engines=tuple(cfg.render.engines),
            pages=tuple(int(p) for p in cfg.source.pages),
            keep_original=bool(cfg.svg.keep_original),
            write_processed=bool(cfg.svg.write_processed),
            compress=bool(cfg.svg.compress),
            precision=int(cfg.svg.precision),
            log_level=str(cfg.logging.level),
        )

def digitize_document(doc: SvgDocument, settings: DigitizeSettings,
                      page: Optional[int] = None) -> List[ChartSeries]:
    """Classify, segment, sample, map and downsample every chart of one rendered page."""
    classified = classify_paths(doc.paths, settings.series_stroke, settings.gridline_stroke,
                                settings.min_gridline_length)
    for p in classified.discarded:
        doc.remove(p)
    logger.debug(f"[digitize] page-{page}: series={len(classified.series)} "
                 f"gridlines={len(classified.gridlines)} discarded={len(classified.discarded)}")

    charts = segment_charts(classified.series, classified.gridlines, page)
    window = settings.window
    out = []
    for i, chart in enumerate(charts):
        derive_geometry(chart, i, page)
        raw = sample_series(chart.series_path, settings.resolution)
        out.append(downsample_daily(map_points(raw, chart, window)))
    return out

def digitize_svg(svg_text: str, settings: DigitizeSettings,
                 page: Optional[int] = None) -> Tuple[List[ChartSeries], SvgDocument]:
    doc = SvgDocument.from_string(svg_text)
    return digitize_document(doc, settings, page), doc

def digitize_page(pdf: str, page: int, out_dir: str, settings: DigitizeSettings) -> List[ChartSeries]:
    out = Path(out_dir)
    out.mkdir(parents=True, exist_ok=True)
    original = out / f"original-{page}.svg"
    svg = render_page_svg(pdf, page, str(original), settings.engines)
    charts, doc = digitize_svg(svg, settings, page)
    if not settings.keep_original:
        original.unlink(missing_ok=True)

    if settings.write_processed:
        processed = doc.to_svg()
        if settings.compress:
            processed = compress_svg(processed, settings.precision)
        (out / f"processed-{page}.svg").write_text(processed, encoding="utf-8")
    logger.info(f"[digitize] {Path(pdf).name} page-{page}: {len(charts)} charts")
    return charts

def digitize_geography(pdf: str, out_dir: str, settings: DigitizeSettings) -> List[ChartSeries]:
    """Pages in fixed order; chart types are assigned by position in the concatenation."""
    charts: List[ChartSeries] = []
    for page in settings.pages:
        charts.extend(digitize_page(pdf, page, out_dir, settings))
    if len(charts) != len(CHART_TYPES):
        raise ChartCountMismatch(len(CHART_TYPES), len(charts))
    return charts
