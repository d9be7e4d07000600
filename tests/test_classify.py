from conftest import GRID, SERIES, FakePath

from mobility_digitizer.geometry.classify import PathClass, classify_path, classify_paths


def _classify(p):
    return classify_path(p, SERIES, GRID, 6)


def test_series_stroke_wins_regardless_of_length():
    assert _classify(FakePath([(0, 0), (1, 0)], SERIES)) is PathClass.SERIES


def test_gridline_needs_more_than_min_length():
    assert _classify(FakePath([(0, 0), (100, 0)], GRID)) is PathClass.GRIDLINE
    # ticks are gridline-coloured but short; exactly 6 is still a tick
    assert _classify(FakePath([(0, 0), (6, 0)], GRID)) is PathClass.DISCARD
    assert _classify(FakePath([(0, 0), (0, 3)], GRID)) is PathClass.DISCARD


def test_other_strokes_and_unstroked_paths_are_discarded():
    assert _classify(FakePath([(0, 0), (100, 0)], "#000000")) is PathClass.DISCARD
    assert _classify(FakePath([(0, 0), (100, 0)], None)) is PathClass.DISCARD


def test_stroke_comparison_is_case_insensitive():
    assert _classify(FakePath([(0, 0), (1, 0)], "#4285F4")) is PathClass.SERIES


def test_classify_paths_is_total_and_keeps_encounter_order():
    s1 = FakePath([(0, 0), (5, 5)], SERIES)
    g1 = FakePath([(0, 10), (50, 10)], GRID)
    tick = FakePath([(0, 0), (0, 2)], GRID)
    s2 = FakePath([(0, 0), (9, 9)], SERIES)
    g2 = FakePath([(0, 20), (50, 20)], GRID)
    text = FakePath([(0, 0), (30, 0)], "#3c4043")
    paths = [s1, g1, tick, s2, g2, text]

    out = classify_paths(paths, SERIES, GRID, 6)

    assert out.series == [s1, s2]
    assert out.gridlines == [g1, g2]
    assert out.discarded == [tick, text]
    assert len(out.series) + len(out.gridlines) + len(out.discarded) == len(paths)
