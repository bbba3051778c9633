from __future__ import annotations

import math
import unittest

from chartsy.config import ChartConfig
from chartsy.engine import ChartEngine
from chartsy.errors import ChartDataError
from chartsy.scales import Bounds


def _register_bars(engine: ChartEngine, series_id: int, pairs: list[tuple[str, float]], color: str = "#f00") -> None:
    for label, value in pairs:
        engine.register_point(series_id, label, value, color, False)


class ChartEngineTests(unittest.TestCase):
    def test_empty_engine_renders_default_axis(self) -> None:
        frame = ChartEngine("bar").frame()
        self.assertTrue(frame.is_empty)
        self.assertEqual(frame.y.bounds, Bounds(0.0, 1.0))
        self.assertEqual(len(frame.y.ticks), 11)
        self.assertIsNone(frame.x)

    def test_bar_frame_for_mixed_sign_series(self) -> None:
        engine = ChartEngine("bar")
        _register_bars(engine, 1, [("a", 10.0), ("b", -5.0), ("c", 20.0)])
        frame = engine.frame()
        self.assertEqual(frame.y.bounds, Bounds(-10.0, 30.0))
        self.assertEqual(frame.y.ticks, (-10.0, 0.0, 10.0, 20.0, 30.0))
        self.assertEqual(frame.y.tick_labels, ("-10", "0", "10", "20", "30"))
        self.assertEqual(frame.y.gridlines_pct, (100.0, 75.0, 50.0, 25.0, 0.0))
        self.assertEqual(frame.labels, ("a", "b", "c"))
        bars = frame.series[0].bars
        self.assertEqual([b.height_pct for b in bars], [50.0, 12.5, 75.0])

    def test_frame_is_memoized_on_inputs(self) -> None:
        engine = ChartEngine("bar")
        _register_bars(engine, 1, [("a", 1.0)])
        first = engine.frame()
        self.assertIs(engine.frame(), first)

        engine.set_hidden(1, False)
        self.assertIs(engine.frame(), first)

        engine.set_hidden(1, True)
        hidden = engine.frame()
        self.assertIsNot(hidden, first)
        self.assertTrue(hidden.series[0].hidden)

        engine.set_clamp(y=(-100.0, 100.0))
        self.assertEqual(engine.frame().y.bounds, Bounds(-100.0, 100.0))

    def test_hide_round_trip_restores_geometry_without_moving_axis(self) -> None:
        engine = ChartEngine("bar")
        _register_bars(engine, 1, [("a", 10.0), ("b", 20.0)], color="#f00")
        _register_bars(engine, 2, [("a", 40.0), ("b", -15.0)], color="#00f")
        before = engine.frame()

        engine.set_hidden(2, True)
        during = engine.frame()
        self.assertEqual(during.y.bounds, before.y.bounds)
        self.assertTrue(all(b.height_pct == 0.0 and b.top_pct == 100.0 for b in during.series[1].bars))
        self.assertEqual(len(during.series[1].bars), 2)

        engine.set_hidden(2, False)
        after = engine.frame()
        self.assertEqual(after.y.bounds, before.y.bounds)
        self.assertEqual(after.series, before.series)

    def test_registration_order_does_not_change_bounds(self) -> None:
        points = {"A": ("a", 12.0), "B": ("b", -3.0), "C": ("c", 47.0)}

        one = ChartEngine("bar")
        _register_bars(one, 1, [points["A"], points["B"]])
        _register_bars(one, 2, [points["C"]])

        two = ChartEngine("bar")
        _register_bars(two, 1, [points["A"]])
        first_pass = two.frame().y.bounds
        _register_bars(two, 2, [points["B"], points["C"]])

        self.assertEqual(one.frame().y.bounds, two.frame().y.bounds)
        self.assertNotEqual(first_pass, two.frame().y.bounds)

    def test_scatter_segments_need_connection_and_surface(self) -> None:
        engine = ChartEngine("scatter", ChartConfig(clamp_x=(0.0, 10.0)))
        for x, y in [(0.0, 0.0), (5.0, 5.0), (10.0, 10.0)]:
            engine.register_point(1, x, y, "#000", False, True)

        frame = engine.frame()
        self.assertIsNotNone(frame.x)
        self.assertTrue(frame.series[0].connected)
        self.assertEqual(frame.series[0].segments, ())

        engine.resize(200, 100)
        segments = engine.frame().series[0].segments
        self.assertEqual(len(segments), 2)
        self.assertTrue(all(s.visible for s in segments))

        engine.set_connected(1, False)
        self.assertEqual(engine.frame().series[0].segments, ())

    def test_scatter_normalized_points(self) -> None:
        engine = ChartEngine("scatter")
        engine.register_point(1, 0.0, 0.0, "#000", False)
        engine.register_point(1, 10.0, 10.0, "#000", False)
        frame = engine.frame()
        assert frame.x is not None
        self.assertEqual(frame.x.bounds, Bounds(0.0, 20.0))
        self.assertEqual([(p.fx, p.fy) for p in frame.series[0].points], [(0.0, 1.0), (0.5, 0.5)])

    def test_huge_bar_value_still_renders(self) -> None:
        engine = ChartEngine("bar")
        engine.register_point(1, "a", 1.7e308, "#000", False)
        frame = engine.frame()
        self.assertGreaterEqual(frame.y.bounds.max, 1.7e308)
        self.assertTrue(all(math.isfinite(t) for t in frame.y.ticks))
        self.assertTrue(0.0 <= frame.series[0].points[0].fy <= 1.0)

    def test_bar_fractions_grow_downward(self) -> None:
        engine = ChartEngine("bar")
        _register_bars(engine, 1, [("a", 10.0), ("b", -5.0), ("c", 20.0)])
        frame = engine.frame()
        self.assertEqual(frame.y.bounds, Bounds(-10.0, 30.0))
        self.assertEqual([p.fy for p in frame.series[0].points], [0.5, 0.875, 0.25])
        self.assertEqual([b.top_pct for b in frame.series[0].bars], [50.0, 87.5, 25.0])

    def test_scatter_rejects_label_keys(self) -> None:
        engine = ChartEngine("scatter")
        with self.assertRaises(ChartDataError):
            engine.register_point(1, "a", 1.0, "#000", False)

    def test_unknown_series_toggle_is_harmless(self) -> None:
        engine = ChartEngine("bar")
        before = engine.frame()
        with self.assertLogs("chartsy.registry", level="WARNING"):
            self.assertFalse(engine.set_connected(42, True))
        self.assertIs(engine.frame(), before)

    def test_port_exposes_callbacks_only(self) -> None:
        engine = ChartEngine("bar")
        port = engine.port()
        port.register_point(5, "x", 3.0, "#123", False)
        self.assertTrue(port.set_hidden(5, True))
        self.assertEqual(port.config(), engine.config)
        self.assertTrue(engine.frame().series_by_id(5).hidden)  # type: ignore[union-attr]

    def test_rejects_unknown_kind(self) -> None:
        with self.assertRaises(ValueError):
            ChartEngine("pie")  # type: ignore[arg-type]


if __name__ == "__main__":
    unittest.main()
