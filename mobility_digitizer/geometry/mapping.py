# pixel -> domain mapping (date axis, percent axis)
from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, List
import math

from mobility_digitizer.exceptions import DegenerateChart
from mobility_digitizer.geometry.charts import ChartRecord, RawPoint

@dataclass(frozen=True)
class DomainPoint:
    timestamp: datetime
    value: int

def round_half_up(v: float) -> int:
    # not round(): banker's rounding would shift .5 cases against the reference data
    return int(math.floor(v + 0.5))

def scale(num: float, in_min: float, in_max: float, out_min: float, out_max: float,
          axis: str = "value") -> int:
    if in_max == in_min:
        raise DegenerateChart(axis, in_min, in_max)
    return round_half_up((num - in_min) * (out_max - out_min) / (in_max - in_min) + out_min)

@dataclass(frozen=True)
class AxisWindow:
    x_date_min: datetime
    x_date_max: datetime
    y_max: float

    def to_timestamp(self, x: float, chart: ChartRecord) -> datetime:
        span_ms = (self.x_date_max - self.x_date_min) / timedelta(milliseconds=1)
        ms = scale(x, chart.x, chart.x + chart.width, 0, span_ms, axis="x")
        return self.x_date_min + timedelta(milliseconds=ms)

    def to_value(self, y: float, chart: ChartRecord) -> int:
        # the chart spans a symmetric band around zero: scale onto [0, 2*ymax], then flip
        scaled = scale(y, chart.y, chart.y + chart.height, 0, self.y_max + self.y_max, axis="y")
        return round_half_up(self.y_max - scaled)

def map_points(points: Iterable[RawPoint], chart: ChartRecord, window: AxisWindow) -> List[DomainPoint]:
    return [
        DomainPoint(timestamp=window.to_timestamp(x, chart), value=window.to_value(y, chart))
        for x, y in points
    ]
