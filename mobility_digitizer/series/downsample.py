# one value per calendar day
from __future__ import annotations
from typing import Iterable, List, Sequence

from mobility_digitizer.geometry.mapping import DomainPoint
from mobility_digitizer.schema.types import ChartSeries, DailyPoint

def downsample_daily(points: Sequence[DomainPoint]) -> ChartSeries:
    """
    Scan from the end of the curve backwards and keep the first sample seen for each
    calendar date, i.e. the latest arc-length sample of that day.
    Output is latest date first; no sorting happens here.
    """
    done = set()
    out: List[DailyPoint] = []
    for p in reversed(points):
        day = p.timestamp.date()
        if day in done:
            continue
        done.add(day)
        out.append(DailyPoint(date=day, value=p.value))
    return ChartSeries(points=out)
