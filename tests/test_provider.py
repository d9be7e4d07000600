import pytest

from mobility_digitizer.geometry.provider import SvgDocument, normalize_color

SVG = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="200" height="200" viewBox="0 0 200 200">'
    '<path id="a" style="fill:none;stroke:rgb(66,133,244)" d="M 10 10 L 40 10 L 40 50"/>'
    '<g transform="translate(100,100)">'
    '<path id="b" style="fill:none;stroke:#DADCE0" d="M 0 0 L 20 0"/>'
    '</g>'
    '<path id="c" fill="#000000" d="M 0 0 L 5 5 L 0 5 Z"/>'
    '<text x="5" y="5">x</text>'
    '</svg>'
)


@pytest.fixture
def doc():
    return SvgDocument.from_string(SVG)


def test_paths_enumerated_in_document_order(doc):
    assert [p.id for p in doc.paths] == ["a", "b", "c"]


def test_stroke_normalised_to_hex(doc):
    a, b, c = doc.paths
    assert a.stroke == "#4285f4"
    assert b.stroke == "#dadce0"
    assert c.stroke is None


def test_normalize_color_accepts_css_strings():
    assert normalize_color("rgb(218, 220, 224)") == "#dadce0"
    assert normalize_color("none") is None
    assert normalize_color(None) is None


def test_arc_length_and_point_at_length(doc):
    a = doc.paths[0]
    assert a.length() == pytest.approx(70.0)
    assert a.point_at_length(0) == pytest.approx((10.0, 10.0))
    assert a.point_at_length(15) == pytest.approx((25.0, 10.0))
    assert a.point_at_length(30) == pytest.approx((40.0, 10.0))
    assert a.point_at_length(50) == pytest.approx((40.0, 30.0))
    assert a.point_at_length(70) == pytest.approx((40.0, 50.0))
    # clamped past the end
    assert a.point_at_length(80) == pytest.approx((40.0, 50.0))


def test_transforms_are_applied(doc):
    b = doc.paths[1]
    bb = b.bbox()
    assert (bb.x, bb.y, bb.width, bb.height) == pytest.approx((100.0, 100.0, 20.0, 0.0))
    assert b.point_at_length(10) == pytest.approx((110.0, 100.0))


def test_closed_path_length_includes_close_segment(doc):
    c = doc.paths[2]
    assert c.length() == pytest.approx(5 * 2 ** 0.5 + 5 + 5)


def test_remove_and_serialise(doc):
    doc.remove(doc.paths[2])
    out = doc.to_svg()
    assert out.count("<path") == 2
    assert 'id="a"' in out and 'id="b"' in out and 'id="c"' not in out
    again = SvgDocument.from_string(out)
    assert [p.id for p in again.paths] == ["a", "b"]
    assert again.paths[1].bbox().x == pytest.approx(100.0)


CURVES = (
    '<svg xmlns="http://www.w3.org/2000/svg" width="500" height="300" viewBox="0 0 500 300">'
    # both control points on the start point: x = 400 t^3, so t and arc length diverge
    '<path id="lopsided" style="fill:none;stroke:#4285f4" d="M 0 100 C 0 100 0 100 400 100"/>'
    '<path id="bend" style="fill:none;stroke:#4285f4" d="M 0 0 L 100 0 Q 200 0 200 100"/>'
    '</svg>'
)


def test_point_at_length_follows_arc_length_on_uneven_cubic():
    p = SvgDocument.from_string(CURVES).paths[0]
    assert p.length() == pytest.approx(400.0, abs=1e-6)
    for d in (50, 100, 200, 300, 399):
        x, y = p.point_at_length(d)
        assert x == pytest.approx(d, abs=1.0)
        assert y == pytest.approx(100.0)


def test_samples_on_curves_are_evenly_spaced():
    from mobility_digitizer.geometry.charts import sample_series

    for path in SvgDocument.from_string(CURVES).paths:
        pts = sample_series(path, 100)[:-1]
        steps = [((b[0] - a[0]) ** 2 + (b[1] - a[1]) ** 2) ** 0.5 for a, b in zip(pts, pts[1:])]
        expected = path.length() / 100
        assert max(steps) == pytest.approx(expected, rel=0.02)
        assert min(steps) == pytest.approx(expected, rel=0.02)


def test_mixed_path_continues_from_line_into_curve():
    bend = SvgDocument.from_string(CURVES).paths[1]
    assert bend.point_at_length(100) == pytest.approx((100.0, 0.0))
    assert bend.length() > 100 + 100 * 2 ** 0.5 * 0.9
    assert bend.point_at_length(bend.length()) == pytest.approx((200.0, 100.0))
