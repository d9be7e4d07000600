# pydantic models: DailyPoint, ChartSeries, GeographyResult, Geography
from __future__ import annotations
import datetime as dt
from typing import Dict, List, Literal, Optional
import re

from pydantic import BaseModel, Field

Category = Literal["country", "state"]

# positional: page 1 holds the first three charts, page 2 the last three
CHART_TYPES = (
    "retailAndRecreation",
    "groceryAndPharmacy",
    "parks",
    "transitStations",
    "workplaces",
    "residential",
)

def param_case(name: str) -> str:
    """retailAndRecreation -> retail-and-recreation"""
    return re.sub(r"(?<!^)(?=[A-Z])", "-", name).lower()

class DailyPoint(BaseModel):
    date: dt.date
    value: int

class ChartSeries(BaseModel):
    points: List[DailyPoint] = []

    def dates(self) -> List[dt.date]:
        return [p.date for p in self.points]

class GeographyResult(BaseModel):
    code: str
    category: Category
    series: Dict[str, ChartSeries] = Field(default_factory=dict)

    @classmethod
    def empty(cls, code: str, category: Category) -> "GeographyResult":
        return cls(code=code, category=category, series={t: ChartSeries() for t in CHART_TYPES})

    @classmethod
    def from_charts(cls, code: str, category: Category, charts: List[ChartSeries]) -> "GeographyResult":
        if len(charts) != len(CHART_TYPES):
            raise ValueError(f"expected {len(CHART_TYPES)} charts, got {len(charts)}")
        return cls(code=code, category=category, series=dict(zip(CHART_TYPES, charts)))

    def get(self, chart_type: str) -> ChartSeries:
        return self.series.get(chart_type) or ChartSeries()

    def to_record(self) -> dict:
        """{category: {chartType: {points: [{date, value}, ...]}}}"""
        return {
            self.category: {
                t: self.get(t).model_dump(mode="json") for t in CHART_TYPES
            }
        }

    @classmethod
    def from_record(cls, code: str, category: Category, record: dict) -> "GeographyResult":
        body = record.get(category) or {}
        series = {t: ChartSeries.model_validate(body[t]) for t in CHART_TYPES if t in body}
        return cls(code=code, category=category, series=series)

class Geography(BaseModel):
    code: str                       # fetch locator code, e.g. "DE" or "US_New_York"
    category: Category
    key: str                        # output directory key, e.g. "DE" or "NY"
    name: Optional[str] = None
    parent: Optional[str] = None    # "US" for states

    model_config = {"frozen": True}
