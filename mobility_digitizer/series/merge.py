# union of extraction runs per chart type
from __future__ import annotations
from typing import Literal

from mobility_digitizer.schema.types import CHART_TYPES, ChartSeries, GeographyResult

MergePreference = Literal["prior", "latest"]

def merge_series(a: ChartSeries, b: ChartSeries) -> ChartSeries:
    """
    Union of a and b by date, newest date first.
    On a date collision the value from `a` wins: the date set is symmetric in (a, b),
    the values are not.
    """
    seen = set()
    points = []
    for p in [*a.points, *b.points]:
        if p.date in seen:
            continue
        seen.add(p.date)
        points.append(p)
    points.sort(key=lambda p: p.date, reverse=True)
    return ChartSeries(points=points)

def merge_results(prior: GeographyResult, new: GeographyResult,
                  prefer: MergePreference = "prior") -> GeographyResult:
    if prefer not in ("prior", "latest"):
        raise ValueError(f"prefer must be 'prior' or 'latest', got {prefer!r}")
    series = {}
    for t in CHART_TYPES:
        if prefer == "prior":
            series[t] = merge_series(prior.get(t), new.get(t))
        else:
            series[t] = merge_series(new.get(t), prior.get(t))
    return GeographyResult(code=new.code, category=new.category, series=series)
