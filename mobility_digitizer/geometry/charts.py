# chart segmentation + pixel geometry + arc-length sampling
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Sequence, Tuple

import numpy as np

from mobility_digitizer.exceptions import GridlineOrderMismatch, StructuralMismatch
from mobility_digitizer.geometry.provider import VectorPath

GRIDLINES_PER_CHART = 5

RawPoint = Tuple[float, float]

@dataclass
class ChartRecord:
    series_path: VectorPath
    grid_paths: List[VectorPath]
    x: float = 0.0
    y: float = 0.0
    width: float = 0.0
    height: float = 0.0

def segment_charts(series: Sequence[VectorPath], gridlines: Sequence[VectorPath],
                   page: Optional[int] = None) -> List[ChartRecord]:
    """
    Pair series paths with consecutive groups of five gridlines, both in encounter order.
    Raises StructuralMismatch unless there are exactly five gridlines per series path.
    """
    if len(gridlines) != GRIDLINES_PER_CHART * len(series):
        raise StructuralMismatch(len(series), len(gridlines), page)
    return [
        ChartRecord(
            series_path=s,
            grid_paths=list(gridlines[i * GRIDLINES_PER_CHART:(i + 1) * GRIDLINES_PER_CHART]),
        )
        for i, s in enumerate(series)
    ]

def check_gridline_order(chart: ChartRecord, chart_index: int = 0, page: Optional[int] = None) -> None:
    """Gridlines are emitted floor first: bbox y must strictly decrease from 0 to 4."""
    ys = [g.bbox().y for g in chart.grid_paths]
    if any(a <= b for a, b in zip(ys, ys[1:])):
        raise GridlineOrderMismatch(chart_index, ys, page)

def derive_geometry(chart: ChartRecord, chart_index: int = 0, page: Optional[int] = None) -> ChartRecord:
    check_gridline_order(chart, chart_index, page)
    floor = chart.grid_paths[0].bbox()
    top = chart.grid_paths[-1].bbox()
    chart.x = floor.x
    chart.width = floor.width
    chart.y = top.y
    chart.height = floor.y - top.y
    return chart

def sample_series(path: VectorPath, resolution: int) -> List[RawPoint]:
    """resolution + 1 evenly spaced arc-length samples, then the terminal point again."""
    total = path.length()
    points = [path.point_at_length(float(d)) for d in np.linspace(0.0, total, resolution + 1)]
    points.append(path.point_at_length(total))
    return points
