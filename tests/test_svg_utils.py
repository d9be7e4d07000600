import pytest

from mobility_digitizer.geometry.provider import SvgDocument
from mobility_digitizer.utils.svg import compress_svg, count_vector_elements

SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="100" height="100" viewBox="0 0 100 100">'
    '<!-- keep me -->'
    '<g><g><path id="series-1" d="M 10.1234567 20 L 30.5 40.25" fill="none" stroke="#4285f4"/></g></g>'
    '<text x="1" y="1">t</text>'
    '</svg>'
)


def test_count_vector_elements():
    assert count_vector_elements(SVG) == 1
    assert count_vector_elements("<svg><text>no paths</text></svg>") == 0


def test_compression_keeps_ids_and_geometry():
    out = compress_svg(SVG, precision=10)
    assert 'id="series-1"' in out
    assert "keep me" in out
    before = SvgDocument.from_string(SVG).paths[0]
    after = SvgDocument.from_string(out).paths[0]
    assert after.id == "series-1"
    assert after.stroke == before.stroke
    assert abs(after.length() - before.length()) < 1e-6
    assert after.point_at_length(0) == pytest.approx(before.point_at_length(0))
