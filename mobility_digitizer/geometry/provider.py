# svgelements-backed geometry: path enumeration, arc length, point-at-length, bbox
from __future__ import annotations
from dataclasses import dataclass
from typing import List, Optional, Protocol, Tuple
import io
import math
import xml.etree.ElementTree as ET

import numpy as np

from svgelements import SVG, Close, Color, Linear, Move, Path as SvgPath

Point = Tuple[float, float]

@dataclass(frozen=True)
class BBox:
    x: float
    y: float
    width: float
    height: float

class VectorPath(Protocol):
    stroke: Optional[str]

    def length(self) -> float: ...
    def point_at_length(self, d: float) -> Point: ...
    def bbox(self) -> BBox: ...

def normalize_color(c) -> Optional[str]:
    """svgelements Color / css string -> '#rrggbb' (alpha ignored), None for 'none'."""
    if c is None:
        return None
    if not isinstance(c, Color):
        c = Color(c)
    if c.value is None:
        return None
    return f"#{c.red:02x}{c.green:02x}{c.blue:02x}"

# subdivisions used to tabulate arc length along a curved segment
CURVE_STEPS = 256

def _arc_table(seg, steps: int = CURVE_STEPS):
    """(t values, cumulative chord length) along a curved segment."""
    ts = np.linspace(0.0, 1.0, steps + 1)
    pts = [seg.point(float(t)) for t in ts]
    xy = np.array([(p.x, p.y) for p in pts], dtype=np.float64)
    cum = np.concatenate([[0.0], np.cumsum(np.hypot(*np.diff(xy, axis=0).T))])
    return ts, cum

class SvgVectorPath:
    """
    One <path> of a parsed document, transforms already applied.
    Arc length is resolved segment by segment: exact on linear segments,
    inverted from a tabulated arc-length curve on Béziers and arcs.
    """

    def __init__(self, element: SvgPath):
        self.element = element
        self.id = element.id
        self.stroke = normalize_color(element.stroke)
        self._segments = []
        self._lengths = []
        self._tables = []
        for seg in element:
            if isinstance(seg, Move) or seg.start is None or seg.end is None:
                continue
            if isinstance(seg, (Linear, Close)):
                ln = math.hypot(seg.end.x - seg.start.x, seg.end.y - seg.start.y)
                table = None
            else:
                table = _arc_table(seg)
                ln = float(table[1][-1])
            self._segments.append(seg)
            self._lengths.append(ln)
            self._tables.append(table)
        self._total = float(sum(self._lengths))

    def length(self) -> float:
        return self._total

    def point_at_length(self, d: float) -> Point:
        if not self._segments:
            bb = self.element.bbox()
            return (float(bb[0]), float(bb[1])) if bb else (0.0, 0.0)
        d = min(max(d, 0.0), self._total)
        acc = 0.0
        for seg, ln, table in zip(self._segments, self._lengths, self._tables):
            if d <= acc + ln or seg is self._segments[-1]:
                local = min(max(d - acc, 0.0), ln)
                if table is None:
                    t = 0.0 if ln == 0 else local / ln
                    x = seg.start.x + (seg.end.x - seg.start.x) * t
                    y = seg.start.y + (seg.end.y - seg.start.y) * t
                    return (float(x), float(y))
                ts, cum = table
                p = seg.point(float(np.interp(local, cum, ts)))
                return (float(p.x), float(p.y))
            acc += ln
        last = self._segments[-1].end
        return (float(last.x), float(last.y))

    def bbox(self) -> BBox:
        bb = self.element.bbox()
        if bb is None:
            return BBox(0.0, 0.0, 0.0, 0.0)
        x0, y0, x1, y1 = (float(v) for v in bb)
        return BBox(x0, y0, x1 - x0, y1 - y0)

    def d(self) -> str:
        return self.element.d()

    def __repr__(self):
        return f"SvgVectorPath(id={self.id!r}, stroke={self.stroke!r}, length={self._total:.2f})"

class SvgDocument:
    """A rendered page: its paths in document order plus the viewport size."""

    def __init__(self, svg: SVG):
        self.width = float(svg.width) if svg.width is not None else None
        self.height = float(svg.height) if svg.height is not None else None
        # paths without d="" carry no geometry
        self.paths: List[SvgVectorPath] = [
            SvgVectorPath(el) for el in svg.elements()
            if isinstance(el, SvgPath) and len(el) > 0
        ]

    @classmethod
    def from_string(cls, svg_text: str) -> "SvgDocument":
        return cls(SVG.parse(io.BytesIO(svg_text.encode("utf-8")), reify=True))

    def remove(self, path: SvgVectorPath) -> None:
        self.paths = [p for p in self.paths if p is not path]

    def to_svg(self) -> str:
        """Flattened SVG of the remaining paths (absolute path data, no transforms)."""
        attrs = {"xmlns": "http://www.w3.org/2000/svg", "version": "1.1"}
        if self.width and self.height:
            attrs.update({
                "width": f"{self.width:g}",
                "height": f"{self.height:g}",
                "viewBox": f"0 0 {self.width:g} {self.height:g}",
            })
        root = ET.Element("svg", attrs)
        for p in self.paths:
            el = ET.SubElement(root, "path", {"d": p.d(), "fill": "none", "stroke": p.stroke or "none"})
            if p.id:
                el.set("id", p.id)
        return ET.tostring(root, encoding="unicode")
