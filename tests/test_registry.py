from __future__ import annotations

import threading
import unittest

from chartsy.errors import ChartDataError
from chartsy.registry import SeriesRegistry


class SeriesRegistryTests(unittest.TestCase):
    def test_register_appends_to_series_bucket(self) -> None:
        reg = SeriesRegistry()
        reg.register(7, "a", 10.0, "#f00")
        reg.register(7, "b", -5.0, "#f00")
        reg.register(8, "a", 3.0, "#0f0")

        snap = reg.snapshot()
        self.assertEqual(snap.revision, 3)
        self.assertEqual([r.series_id for r in snap.records], [7, 8])
        self.assertEqual(snap.records[0].values(), (10.0, -5.0))
        self.assertEqual(snap.keys, ("a", "b"))
        self.assertEqual([r.series_id for r in snap.records if any(p.key == "a" for p in r.points)], [7, 8])

    def test_registration_carries_flags(self) -> None:
        reg = SeriesRegistry()
        reg.register(1, 0.0, 1.0, "#000", hidden=True, connected=True)
        reg.register(2, 0.0, 1.0, "#000")
        self.assertTrue(reg.is_hidden(1))
        self.assertTrue(reg.is_connected(1))
        self.assertFalse(reg.is_hidden(2))
        self.assertFalse(reg.is_connected(2))

    def test_set_hidden_is_idempotent(self) -> None:
        reg = SeriesRegistry()
        reg.register(1, "a", 1.0, "#000")
        self.assertTrue(reg.set_hidden(1, True))
        revision = reg.revision
        state = reg.visibility()

        self.assertFalse(reg.set_hidden(1, True))
        self.assertEqual(reg.revision, revision)
        self.assertEqual(reg.visibility(), state)

    def test_force_rebroadcasts_unchanged_value(self) -> None:
        reg = SeriesRegistry()
        reg.register(1, "a", 1.0, "#000")
        revision = reg.revision
        self.assertTrue(reg.set_connected(1, False, force=True))
        self.assertEqual(reg.revision, revision + 1)
        self.assertFalse(reg.is_connected(1))

    def test_unknown_series_flag_update_is_noop(self) -> None:
        reg = SeriesRegistry()
        with self.assertLogs("chartsy.registry", level="WARNING"):
            self.assertFalse(reg.set_hidden(999, True))
        self.assertEqual(reg.revision, 0)
        self.assertEqual(reg.visibility().hidden, frozenset())

    def test_rejects_malformed_points(self) -> None:
        reg = SeriesRegistry()
        with self.assertRaises(ChartDataError):
            reg.register(True, "a", 1.0, "#000")  # type: ignore[arg-type]
        with self.assertRaises(ChartDataError):
            reg.register(1, "a", "tall", "#000")  # type: ignore[arg-type]
        with self.assertRaises(ChartDataError):
            reg.register(1, "a", float("inf"), "#000")
        self.assertEqual(len(reg), 0)

    def test_concurrent_registration_keeps_every_point(self) -> None:
        reg = SeriesRegistry()

        def provider(series_id: int) -> None:
            for i in range(200):
                reg.register(series_id, i, float(i), "#000")

        threads = [threading.Thread(target=provider, args=(sid,)) for sid in range(1, 9)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        snap = reg.snapshot()
        self.assertEqual(snap.revision, 8 * 200)
        self.assertEqual(sum(len(r.points) for r in snap.records), 8 * 200)
        self.assertEqual(len(reg), 8)
        self.assertTrue(all(r.points[0].key == 0 for r in snap.records))


if __name__ == "__main__":
    unittest.main()
