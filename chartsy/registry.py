from __future__ import annotations

from dataclasses import dataclass
import logging
import math
import threading

from chartsy.errors import ChartDataError
from chartsy.series import DataPoint, PointKey, SeriesRecord, VisibilityState


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class RegistrySnapshot:
    revision: int
    records: tuple[SeriesRecord, ...]
    keys: tuple[PointKey, ...]
    visibility: VisibilityState


class SeriesRegistry:
    """Aggregate store of every registered series plus its hidden/connected flags.

    Points are append-only: a series id is created on first registration and
    never removed. Every mutation is committed under one lock and bumps
    ``revision`` so derived state can be cached against it.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._colors: dict[int, str] = {}
        self._points: dict[int, list[DataPoint]] = {}
        self._by_key: dict[PointKey, list[DataPoint]] = {}
        self._hidden: set[int] = set()
        self._connected: set[int] = set()
        self._revision = 0

    @property
    def revision(self) -> int:
        return self._revision

    def __len__(self) -> int:
        return len(self._points)

    def register(
        self,
        series_id: int,
        key: PointKey,
        value: float,
        color: str,
        hidden: bool = False,
        connected: bool | None = None,
    ) -> DataPoint:
        if isinstance(series_id, bool) or not isinstance(series_id, int):
            raise ChartDataError(f"series id must be an integer, got {series_id!r}")
        try:
            numeric = float(value)
        except (TypeError, ValueError) as exc:
            raise ChartDataError(f"value for key {key!r} is not numeric: {value!r}") from exc
        if not math.isfinite(numeric):
            raise ChartDataError(f"value for key {key!r} must be finite, got {numeric!r}")

        point = DataPoint(series_id=series_id, key=key, value=numeric, color=str(color))
        with self._lock:
            bucket = self._points.get(series_id)
            if bucket is None:
                bucket = []
                self._points[series_id] = bucket
                self._colors[series_id] = point.color
            bucket.append(point)
            self._by_key.setdefault(key, []).append(point)
            _apply_flag(self._hidden, series_id, bool(hidden))
            if connected is not None:
                _apply_flag(self._connected, series_id, bool(connected))
            self._revision += 1
            revision = self._revision
        LOGGER.debug("registered point series=%d key=%r value=%g revision=%d", series_id, key, numeric, revision)
        return point

    def set_hidden(self, series_id: int, hidden: bool, *, force: bool = False) -> bool:
        return self._set_flag(self._hidden, "hidden", series_id, hidden, force)

    def set_connected(self, series_id: int, connected: bool, *, force: bool = False) -> bool:
        return self._set_flag(self._connected, "connected", series_id, connected, force)

    def is_hidden(self, series_id: int) -> bool:
        return series_id in self._hidden

    def is_connected(self, series_id: int) -> bool:
        return series_id in self._connected

    def visibility(self) -> VisibilityState:
        with self._lock:
            return VisibilityState(hidden=frozenset(self._hidden), connected=frozenset(self._connected))

    def snapshot(self) -> RegistrySnapshot:
        with self._lock:
            records = tuple(
                SeriesRecord(series_id=sid, color=self._colors[sid], points=tuple(points))
                for sid, points in self._points.items()
            )
            return RegistrySnapshot(
                revision=self._revision,
                records=records,
                keys=tuple(self._by_key.keys()),
                visibility=VisibilityState(hidden=frozenset(self._hidden), connected=frozenset(self._connected)),
            )

    def _set_flag(self, flags: set[int], name: str, series_id: int, value: bool, force: bool) -> bool:
        with self._lock:
            if series_id not in self._points:
                LOGGER.warning("ignoring %s update for unknown series=%r", name, series_id)
                return False
            if (series_id in flags) == bool(value) and not force:
                return False
            _apply_flag(flags, series_id, bool(value))
            self._revision += 1
            revision = self._revision
        LOGGER.debug("series=%d %s=%s force=%s revision=%d", series_id, name, bool(value), force, revision)
        return True


def _apply_flag(flags: set[int], series_id: int, value: bool) -> None:
    if value:
        flags.add(series_id)
    else:
        flags.discard(series_id)
