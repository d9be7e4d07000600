"""
Exceptions for the mobility chart digitizer.

Every error carries a short ``error_code`` so batch summaries can group failures
without parsing messages.
"""

from typing import Optional, Sequence


class MobilityError(Exception):
    """Base exception for digitization errors."""

    def __init__(self, message: str, error_code: Optional[str] = None):
        self.message = message
        self.error_code = error_code
        super().__init__(self.message)


class AcquisitionFailure(MobilityError):
    """Raised when a report document could not be fetched for one geography."""

    def __init__(self, code: str, reason: str, url: Optional[str] = None):
        self.code = code
        self.reason = reason
        self.url = url
        full_message = f"acquisition failed for {code}: {reason}"
        if url:
            full_message += f" (url: {url})"
        super().__init__(full_message, "ACQUISITION_FAILURE")


class StructuralMismatch(MobilityError):
    """Raised when classified paths cannot be assembled into charts."""

    def __init__(self, series_count: Optional[int] = None, gridline_count: Optional[int] = None,
                 page: Optional[int] = None, message: Optional[str] = None):
        self.series_count = series_count
        self.gridline_count = gridline_count
        self.page = page
        full_message = message or (
            f"each series path must have 5 gridline paths, found: "
            f"gridline paths - {gridline_count} and series paths - {series_count}"
        )
        if page is not None:
            full_message += f" (page: {page})"
        super().__init__(full_message, "STRUCTURAL_MISMATCH")


class GridlineOrderMismatch(StructuralMismatch):
    """Raised when a chart's five gridlines are not stacked floor-first."""

    def __init__(self, chart_index: int, ys: Sequence[float], page: Optional[int] = None):
        self.chart_index = chart_index
        self.ys = list(ys)
        super().__init__(
            1, len(self.ys), page,
            message=(f"gridline y positions must strictly decrease from gridline 0 to 4, "
                     f"chart {chart_index} has {self.ys}"),
        )
        self.error_code = "GRIDLINE_ORDER"


class ChartCountMismatch(StructuralMismatch):
    """Raised when a geography's pages together do not yield one chart per chart type."""

    def __init__(self, expected: int, got: int):
        self.expected = expected
        self.got = got
        super().__init__(message=f"expected to receive {expected} charts, got: {got}")
        self.error_code = "CHART_COUNT"


class DegenerateChart(MobilityError):
    """Raised when a chart axis has zero pixel extent."""

    def __init__(self, axis: str, lo: float, hi: float):
        self.axis = axis
        self.lo = lo
        self.hi = hi
        super().__init__(f"degenerate chart: {axis} axis spans [{lo}, {hi}]", "DEGENERATE_CHART")


class MissingPriorRecord(MobilityError):
    """Raised when no persisted record exists yet for a geography (first run)."""

    def __init__(self, path: str):
        self.path = path
        super().__init__(f"no prior record at {path}", "MISSING_PRIOR")


class RenderError(MobilityError):
    """Raised when no render engine could produce an SVG for a page."""

    def __init__(self, pdf: str, page: int, attempts: Sequence[str]):
        self.pdf = pdf
        self.page = page
        self.attempts = list(attempts)
        super().__init__(
            f"could not render page {page} of {pdf} (attempts: {', '.join(self.attempts) or 'none'})",
            "RENDER_ERROR",
        )


class ConfigurationError(MobilityError):
    """Raised for missing or invalid configuration."""

    def __init__(self, message: str, config_key: Optional[str] = None):
        self.config_key = config_key
        full_message = message
        if config_key:
            full_message += f" (key: {config_key})"
        super().__init__(full_message, "CONFIG_ERROR")
