"""Geometry tests for the graph renderers."""

import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

import globalsQg
from conftest import make_ohlc_series, make_series
from graphRenderer import (
    EPSILON,
    Candle,
    CandlestickGraph,
    ColumnGraph,
    Label,
    Line,
    LineGraph,
    Point,
    Rect,
    Viewport,
    commandsOfType,
    computeBounds,
    getRenderer,
)

TOLERANCE = 1e-6

prices = st.floats(min_value=-1e6, max_value=1e6, allow_nan=False, allow_infinity=False)
price_lists = st.lists(prices, min_size=1, max_size=120)
viewports = st.builds(
    Viewport.create,
    st.integers(min_value=1, max_value=2000),
    st.integers(min_value=1, max_value=2000),
)


def inside(viewport, x, y):
    return -TOLERANCE <= x <= viewport.width + TOLERANCE and -TOLERANCE <= y <= viewport.height + TOLERANCE


class TestLineGraph:
    @given(price_lists, viewports)
    @settings(max_examples=100)
    def test_one_point_per_record_inside_viewport(self, closes, viewport):
        commands = LineGraph().render(make_series(closes), viewport)
        points = commandsOfType(commands, Point)
        assert len(points) == len(closes)
        assert all(inside(viewport, p.x, p.y) for p in points)
        assert len(commandsOfType(commands, Line)) == len(closes) - 1

    @given(price_lists, viewports)
    @settings(max_examples=50)
    def test_render_is_pure(self, closes, viewport):
        series = make_series(closes)
        renderer = LineGraph()
        assert renderer.render(series, viewport) == renderer.render(series, viewport)

    def test_single_record_is_a_point_without_lines(self):
        commands = LineGraph().render(make_series([10.0]), Viewport.create(200, 100))
        points = commandsOfType(commands, Point)
        assert len(points) == 1
        assert points[0].x == 100.0
        assert points[0].y == pytest.approx(50.0, abs=1e-3)
        assert commandsOfType(commands, Line) == []

    def test_empty_series_fails(self):
        with pytest.raises(globalsQg.EmptySeries):
            LineGraph().render((), Viewport.create(200, 100))

    def test_identical_closes_land_on_mid_height(self):
        commands = LineGraph().render(make_series([42.0] * 10), Viewport.create(300, 200))
        ys = [p.y for p in commandsOfType(commands, Point)]
        assert len(set(ys)) == 1
        assert ys[0] == pytest.approx(100.0, abs=1e-3)

    def test_scaling_matches_min_and_max(self):
        commands = LineGraph().render(make_series([10.0, 20.0, 15.0]), Viewport.create(100, 50))
        points = commandsOfType(commands, Point)
        assert points == [Point(0.0, 50.0), Point(50.0, 0.0), Point(100.0, 25.0)]
        assert commandsOfType(commands, Line)[0] == Line(0.0, 50.0, 50.0, 0.0)

    def test_lines_join_consecutive_points(self):
        commands = LineGraph().render(make_series([1.0, 3.0, 2.0, 5.0]), Viewport.create(90, 40))
        points = commandsOfType(commands, Point)
        for i, line in enumerate(commandsOfType(commands, Line)):
            assert (line.x1, line.y1) == (points[i].x, points[i].y)
            assert (line.x2, line.y2) == (points[i + 1].x, points[i + 1].y)

    def test_extreme_values_stay_finite(self):
        viewport = Viewport.create(100, 50)
        commands = LineGraph().render(make_series([1e308, -1e308, 0.0]), viewport)
        points = commandsOfType(commands, Point)
        assert [p.y for p in points] == pytest.approx([0.0, 50.0, 25.0])
        assert all(inside(viewport, p.x, p.y) for p in points)

    def test_huge_identical_values_stay_finite(self):
        commands = LineGraph().render(make_series([1.7e308] * 3), Viewport.create(100, 50))
        assert all(inside(Viewport(100.0, 50.0), p.x, p.y) for p in commandsOfType(commands, Point))

    def test_labels_show_max_and_min(self):
        commands = LineGraph().render(make_series([10.0, 20.0]), Viewport.create(100, 50))
        assert [l.text for l in commandsOfType(commands, Label)] == ["20.00", "10.00"]


class TestColumnGraph:
    @given(price_lists, viewports)
    @settings(max_examples=100)
    def test_one_bar_per_record_inside_viewport(self, closes, viewport):
        rects = commandsOfType(ColumnGraph().render(make_series(closes), viewport), Rect)
        assert len(rects) == len(closes)
        for r in rects:
            assert inside(viewport, r.x, r.y)
            assert inside(viewport, r.x + r.width, r.y + r.height)
            assert r.height >= 0

    def test_taller_close_gives_taller_bar(self):
        rects = commandsOfType(ColumnGraph().render(make_series([10.0, 20.0]), Viewport.create(100, 100)), Rect)
        assert rects[1].height > rects[0].height
        assert rects[1].height == pytest.approx(100.0)

    def test_empty_series_fails(self):
        with pytest.raises(globalsQg.EmptySeries):
            ColumnGraph().render((), Viewport.create(100, 100))


class TestCandlestickGraph:
    def test_candles_inside_viewport(self):
        series = make_ohlc_series([(10, 12, 9, 11), (11, 11.5, 8, 9), (9, 14, 9, 13)])
        viewport = Viewport.create(300, 150)
        candles = commandsOfType(CandlestickGraph().render(series, viewport), Candle)
        assert len(candles) == 3
        for c in candles:
            assert inside(viewport, c.x - c.width / 2, c.high)
            assert inside(viewport, c.x + c.width / 2, c.low)
            assert c.high <= c.bodyTop <= c.bodyBottom <= c.low

    def test_rising_and_falling(self):
        series = make_ohlc_series([(10, 12, 9, 11), (11, 11.5, 8, 9)])
        candles = commandsOfType(CandlestickGraph().render(series, Viewport.create(100, 100)), Candle)
        assert [c.rising for c in candles] == [True, False]

    def test_close_only_records_are_flat_candles(self):
        candles = commandsOfType(CandlestickGraph().render(make_series([5.0, 6.0]), Viewport.create(100, 100)), Candle)
        assert all(c.bodyTop == c.bodyBottom for c in candles)

    def test_empty_series_fails(self):
        with pytest.raises(globalsQg.EmptySeries):
            CandlestickGraph().render((), Viewport.create(100, 100))


class TestHelpers:
    def test_bounds_widen_equal_values(self):
        assert computeBounds([3.0, 3.0]) == (3.0 - EPSILON, 3.0 + EPSILON)

    def test_bounds(self):
        assert computeBounds([3.0, -1.0, 7.5]) == (-1.0, 7.5)

    @pytest.mark.parametrize("name, kind", [("line", LineGraph), ("column", ColumnGraph), ("candlestick", CandlestickGraph)])
    def test_get_renderer(self, name, kind):
        assert isinstance(getRenderer(name), kind)

    def test_unknown_renderer(self):
        with pytest.raises(ValueError):
            getRenderer("pie")

    @pytest.mark.parametrize("width, height", [(0, 10), (10, 0), (-5, 5)])
    def test_viewport_must_be_positive(self, width, height):
        with pytest.raises(ValueError):
            Viewport.create(width, height)
