from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
import logging
import math

import numpy as np

from chartsy.config import ChartConfig
from chartsy.errors import ChartDataError
from chartsy.mapping import (
    BarGeometry,
    LineSegment,
    MarkerGeometry,
    PlotTransform,
    bar_geometry,
    build_transform,
    gridline_offsets_pct,
    line_segments,
    map_to_pixels,
    marker_geometry,
    normalize,
    to_fraction,
)
from chartsy.registry import RegistrySnapshot, SeriesRegistry
from chartsy.scales import Bounds, compute_bounds, format_ticks_for_axis, ticks_for_bounds
from chartsy.series import PointKey, SeriesKind, SeriesRecord, VisibilityState


LOGGER = logging.getLogger(__name__)


@dataclass(frozen=True)
class AxisState:
    bounds: Bounds
    ticks: tuple[float, ...]
    tick_labels: tuple[str, ...]
    gridlines_pct: tuple[float, ...]


@dataclass(frozen=True)
class NormalizedPoint:
    """Render-space fractions in [0, 1]; ``fy`` grows downward like the surface."""

    key: PointKey
    value: float
    fx: float | None
    fy: float


@dataclass(frozen=True)
class SeriesView:
    series_id: int
    color: str
    hidden: bool
    connected: bool
    points: tuple[NormalizedPoint, ...]
    bars: tuple[BarGeometry, ...] = ()
    markers: tuple[MarkerGeometry, ...] = ()
    segments: tuple[LineSegment, ...] = ()


@dataclass(frozen=True)
class ChartFrame:
    """Everything a surface renderer needs for one pass, derived from one registry revision."""

    kind: SeriesKind
    revision: int
    y: AxisState
    x: AxisState | None
    labels: tuple[PointKey, ...]
    series: tuple[SeriesView, ...]

    @property
    def is_empty(self) -> bool:
        return not self.series

    def series_by_id(self, series_id: int) -> SeriesView | None:
        for view in self.series:
            if view.series_id == series_id:
                return view
        return None


@dataclass(frozen=True)
class RegistrationPort:
    """The only handles a series provider gets on its chart."""

    kind: SeriesKind
    register_point: Callable[..., None]
    set_hidden: Callable[..., bool]
    set_connected: Callable[..., bool]
    config: Callable[[], ChartConfig]


class ChartEngine:
    def __init__(self, kind: SeriesKind, config: ChartConfig | None = None) -> None:
        if kind not in ("bar", "scatter"):
            raise ValueError(f"unsupported chart kind: {kind!r}")
        self.kind: SeriesKind = kind
        self._config = config or ChartConfig()
        self._registry = SeriesRegistry()
        self._cache: tuple[tuple[object, ...], ChartFrame] | None = None

    @property
    def config(self) -> ChartConfig:
        return self._config

    @property
    def registry(self) -> SeriesRegistry:
        return self._registry

    def set_clamp(self, **axes: tuple[float, float] | None) -> None:
        self._config = self._config.with_clamp(**axes)

    def resize(self, width: int, height: int) -> None:
        self._config = self._config.with_surface(width, height)
        LOGGER.debug("surface resized width=%d height=%d", width, height)

    def register_point(
        self,
        series_id: int,
        key: PointKey,
        value: float,
        color: str,
        hidden: bool = False,
        connected: bool | None = None,
    ) -> None:
        if self.kind == "scatter":
            key = _coerce_x_key(key)
        self._registry.register(series_id, key, value, color, hidden=hidden, connected=connected)

    def set_hidden(self, series_id: int, hidden: bool, force: bool = False) -> bool:
        return self._registry.set_hidden(series_id, hidden, force=force)

    def set_connected(self, series_id: int, connected: bool, force: bool = False) -> bool:
        return self._registry.set_connected(series_id, connected, force=force)

    def port(self) -> RegistrationPort:
        return RegistrationPort(
            kind=self.kind,
            register_point=self.register_point,
            set_hidden=self.set_hidden,
            set_connected=self.set_connected,
            config=lambda: self._config,
        )

    def frame(self) -> ChartFrame:
        snapshot = self._registry.snapshot()
        cfg = self._config
        key = (
            snapshot.revision,
            snapshot.visibility.hidden,
            snapshot.visibility.connected,
            cfg.clamp_x,
            cfg.clamp_y,
            cfg.surface,
        )
        if self._cache is not None and self._cache[0] == key:
            return self._cache[1]
        frame = derive_frame(self.kind, snapshot, cfg)
        self._cache = (key, frame)
        LOGGER.debug(
            "derived frame kind=%s revision=%d series=%d y=[%g, %g]",
            self.kind,
            frame.revision,
            len(frame.series),
            frame.y.bounds.min,
            frame.y.bounds.max,
        )
        return frame


def derive_frame(kind: SeriesKind, snapshot: RegistrySnapshot, config: ChartConfig) -> ChartFrame:
    values = np.fromiter((p.value for r in snapshot.records for p in r.points), dtype=np.float64)
    y_bounds = compute_bounds(values, config.clamp_y)
    y_axis = axis_state(y_bounds, vertical=True)

    if kind == "bar":
        views = tuple(_bar_view(record, y_bounds, snapshot.visibility) for record in snapshot.records)
        return ChartFrame(kind=kind, revision=snapshot.revision, y=y_axis, x=None, labels=snapshot.keys, series=views)

    xs = np.fromiter((float(p.key) for r in snapshot.records for p in r.points), dtype=np.float64)
    x_bounds = compute_bounds(xs, config.clamp_x)
    transform = None
    height = 0
    if config.surface is not None:
        transform = build_transform(x_bounds, y_bounds, config.surface.width, config.surface.height)
        height = config.surface.height
    views = tuple(
        _scatter_view(record, x_bounds, y_bounds, snapshot.visibility, transform, height)
        for record in snapshot.records
    )
    return ChartFrame(
        kind=kind,
        revision=snapshot.revision,
        y=y_axis,
        x=axis_state(x_bounds, vertical=False),
        labels=(),
        series=views,
    )


def axis_state(bounds: Bounds, *, vertical: bool) -> AxisState:
    ticks = ticks_for_bounds(bounds)
    if vertical:
        offsets = gridline_offsets_pct(ticks, bounds)
    else:
        offsets = normalize(ticks, bounds) * 100.0
    return AxisState(
        bounds=bounds,
        ticks=tuple(float(t) for t in ticks),
        tick_labels=tuple(format_ticks_for_axis(ticks)),
        gridlines_pct=tuple(float(o) for o in offsets),
    )


def _bar_view(record: SeriesRecord, y_bounds: Bounds, visibility: VisibilityState) -> SeriesView:
    hidden = visibility.is_hidden(record.series_id)
    return SeriesView(
        series_id=record.series_id,
        color=record.color,
        hidden=hidden,
        connected=False,
        points=tuple(
            NormalizedPoint(key=p.key, value=p.value, fx=None, fy=to_fraction(p.value, y_bounds, vertical=True))
            for p in record.points
        ),
        bars=tuple(bar_geometry(p, y_bounds, hidden=hidden) for p in record.points),
    )


def _scatter_view(
    record: SeriesRecord,
    x_bounds: Bounds,
    y_bounds: Bounds,
    visibility: VisibilityState,
    transform: PlotTransform | None,
    height: int,
) -> SeriesView:
    hidden = visibility.is_hidden(record.series_id)
    connected = visibility.is_connected(record.series_id)
    segments: tuple[LineSegment, ...] = ()
    if connected and transform is not None:
        xs = np.asarray([float(p.key) for p in record.points], dtype=np.float64)
        ys = np.asarray(record.values(), dtype=np.float64)
        px, py = map_to_pixels(xs, ys, transform, height)
        segments = tuple(
            line_segments(px, py, series_id=record.series_id, color=record.color, visible=not hidden)
        )
    return SeriesView(
        series_id=record.series_id,
        color=record.color,
        hidden=hidden,
        connected=connected,
        points=tuple(
            NormalizedPoint(
                key=p.key,
                value=p.value,
                fx=to_fraction(float(p.key), x_bounds),
                fy=to_fraction(p.value, y_bounds, vertical=True),
            )
            for p in record.points
        ),
        markers=tuple(marker_geometry(p, x_bounds, y_bounds, hidden=hidden) for p in record.points),
        segments=segments,
    )


def _coerce_x_key(key: PointKey) -> float:
    if isinstance(key, bool) or not isinstance(key, (int, float)):
        raise ChartDataError(f"scatter points are keyed by a numeric x, got {key!r}")
    x = float(key)
    if not math.isfinite(x):
        raise ChartDataError(f"scatter x must be finite, got {x!r}")
    return x
