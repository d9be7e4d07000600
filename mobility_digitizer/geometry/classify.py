# stroke-color based path classification
from __future__ import annotations
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterable, List

from mobility_digitizer.geometry.provider import VectorPath, normalize_color

class PathClass(str, Enum):
    SERIES = "series"
    GRIDLINE = "gridline"
    DISCARD = "discard"

@dataclass
class ClassifiedPaths:
    series: List[VectorPath] = field(default_factory=list)
    gridlines: List[VectorPath] = field(default_factory=list)
    discarded: List[VectorPath] = field(default_factory=list)

def classify_path(path: VectorPath, series_stroke: str, gridline_stroke: str,
                  min_gridline_length: float) -> PathClass:
    stroke = normalize_color(path.stroke) if path.stroke else None
    if stroke is not None and stroke == normalize_color(series_stroke):
        return PathClass.SERIES
    # short gridline-coloured strokes are axis ticks
    if stroke is not None and stroke == normalize_color(gridline_stroke) \
            and path.length() > min_gridline_length:
        return PathClass.GRIDLINE
    return PathClass.DISCARD

def classify_paths(paths: Iterable[VectorPath], series_stroke: str, gridline_stroke: str,
                   min_gridline_length: float) -> ClassifiedPaths:
    """Split paths into series / gridline / discard, keeping encounter order in each."""
    out = ClassifiedPaths()
    buckets = {
        PathClass.SERIES: out.series,
        PathClass.GRIDLINE: out.gridlines,
        PathClass.DISCARD: out.discarded,
    }
    for p in paths:
        buckets[classify_path(p, series_stroke, gridline_stroke, min_gridline_length)].append(p)
    return out
