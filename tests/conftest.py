import math
from datetime import datetime

import pytest
from omegaconf import OmegaConf

from mobility_digitizer.geometry.provider import BBox
from mobility_digitizer.pipeline.digitize import DigitizeSettings

SERIES = "#4285f4"
GRID = "#dadce0"


class FakePath:
    """Polyline stand-in for a rendered vector path."""

    def __init__(self, points, stroke=None):
        self.points = [(float(x), float(y)) for x, y in points]
        self.stroke = stroke

    def _segments(self):
        return [(a, b, math.dist(a, b)) for a, b in zip(self.points, self.points[1:])]

    def length(self):
        return sum(ln for _, _, ln in self._segments())

    def point_at_length(self, d):
        acc = 0.0
        for a, b, ln in self._segments():
            if d <= acc + ln:
                t = 0.0 if ln == 0 else (d - acc) / ln
                return (a[0] + (b[0] - a[0]) * t, a[1] + (b[1] - a[1]) * t)
            acc += ln
        return self.points[-1]

    def bbox(self):
        xs = [p[0] for p in self.points]
        ys = [p[1] for p in self.points]
        return BBox(min(xs), min(ys), max(xs) - min(xs), max(ys) - min(ys))


def gridlines_for(top, x0=0.0, width=420.0, spacing=25.0):
    """Five horizontal gridlines, floor first (largest y), as the renderer emits them."""
    return [FakePath([(x0, top + spacing * k), (x0 + width, top + spacing * k)], GRID)
            for k in range(4, -1, -1)]


@pytest.fixture
def settings():
    return DigitizeSettings(
        series_stroke=SERIES,
        gridline_stroke=GRID,
        min_gridline_length=6,
        resolution=1000,
        x_date_min=datetime(2020, 2, 16),
        x_date_max=datetime(2020, 3, 29),
        y_max=80,
        keep_original=False,
        write_processed=False,
        compress=False,
    )


@pytest.fixture
def cfg(tmp_path):
    return OmegaConf.create({
        "paths": {
            "pdfs": str(tmp_path / "pdfs"),
            "output": str(tmp_path / "output"),
            "runs": str(tmp_path / "runs"),
        },
        "logging": {"level": "DEBUG"},
        "runtime": {"acquire_concurrency": 4, "process_concurrency": 2, "request_timeout": 5},
        "phases": {"acquire": True, "process": True},
        "source": {
            "vintage": "2020-04-11",
            "url_template": "https://example.test/{vintage}_{code}_Mobility_Report_en.pdf",
            "pdf_name": "mobility.pdf",
            "pages": [1, 2],
            "skip_existing": False,
        },
        "render": {"engines": ["pymupdf"]},
        "classify": {"series_stroke": SERIES, "gridline_stroke": GRID, "min_gridline_length": 6},
        "sampling": {"resolution": 1000},
        "axes": {"y_max": 80},
        "vintages": {"2020-04-11": {"x_date_min": "2020-02-16", "x_date_max": "2020-03-29"}},
        "merge": {"prefer": "prior"},
        "svg": {"keep_original": False, "write_processed": False, "compress": False, "precision": 10},
    })
