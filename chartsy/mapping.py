from __future__ import annotations

from dataclasses import dataclass

import numpy as np

from chartsy.scales import Bounds
from chartsy.series import DataPoint, PointKey


@dataclass(frozen=True)
class PlotTransform:
    sx: float
    tx: float
    sy: float
    ty: float


@dataclass(frozen=True)
class BarGeometry:
    series_id: int
    label: PointKey
    value: float
    color: str
    top_pct: float
    height_pct: float
    visible: bool


@dataclass(frozen=True)
class MarkerGeometry:
    series_id: int
    x: float
    y: float
    color: str
    left_pct: float
    top_pct: float
    size_scale: float
    visible: bool


@dataclass(frozen=True)
class LineSegment:
    """A rendered line piece anchored at its start point, rotated then stretched."""

    series_id: int
    x_px: float
    y_px: float
    length_px: float
    angle_deg: float
    color: str
    visible: bool


def to_fraction(value: float, bounds: Bounds, *, vertical: bool = False) -> float:
    frac = (float(value) - bounds.min) / bounds.span
    # Render space grows downward while data space grows upward.
    return 1.0 - frac if vertical else frac


def normalize(values: np.ndarray, bounds: Bounds) -> np.ndarray:
    arr = np.asarray(values, dtype=np.float64)
    return (arr - bounds.min) / bounds.span


def gridline_offsets_pct(ticks: np.ndarray, bounds: Bounds) -> np.ndarray:
    return (1.0 - normalize(ticks, bounds)) * 100.0


def bar_geometry(point: DataPoint, bounds: Bounds, *, hidden: bool) -> BarGeometry:
    if hidden:
        # Collapsed onto the baseline but still holding its slot in the column.
        top_pct, height_pct = 100.0, 0.0
    else:
        frac = to_fraction(point.value, bounds)
        top_pct, height_pct = (1.0 - frac) * 100.0, frac * 100.0
    return BarGeometry(
        series_id=point.series_id,
        label=point.key,
        value=point.value,
        color=point.color,
        top_pct=top_pct,
        height_pct=height_pct,
        visible=not hidden,
    )


def marker_geometry(point: DataPoint, x_bounds: Bounds, y_bounds: Bounds, *, hidden: bool) -> MarkerGeometry:
    x = float(point.key)
    return MarkerGeometry(
        series_id=point.series_id,
        x=x,
        y=point.value,
        color=point.color,
        left_pct=to_fraction(x, x_bounds) * 100.0,
        top_pct=to_fraction(point.value, y_bounds, vertical=True) * 100.0,
        size_scale=0.0 if hidden else 1.0,
        visible=not hidden,
    )


def build_transform(x_bounds: Bounds, y_bounds: Bounds, width: int, height: int) -> PlotTransform:
    if width <= 0 or height <= 0:
        raise ValueError("surface width/height must be > 0")
    sx = width / x_bounds.span
    tx = -x_bounds.min * sx
    sy = height / y_bounds.span
    ty = -y_bounds.min * sy
    return PlotTransform(sx=sx, tx=tx, sy=sy, ty=ty)


def map_to_pixels(x: np.ndarray, y: np.ndarray, transform: PlotTransform, height: int) -> tuple[np.ndarray, np.ndarray]:
    px = np.asarray(x, dtype=np.float64) * transform.sx + transform.tx
    py = float(height) - (np.asarray(y, dtype=np.float64) * transform.sy + transform.ty)
    return px, py


def line_segments(
    px: np.ndarray,
    py: np.ndarray,
    *,
    series_id: int,
    color: str,
    visible: bool = True,
) -> list[LineSegment]:
    if px.size < 2:
        return []
    dx = np.diff(px)
    dy = np.diff(py)
    lengths = np.hypot(dx, dy)
    angles = np.degrees(np.arctan2(dy, dx))
    out: list[LineSegment] = []
    for i in range(dx.size):
        out.append(
            LineSegment(
                series_id=series_id,
                x_px=float(px[i]),
                y_px=float(py[i]),
                length_px=float(lengths[i]) if visible else 0.0,
                angle_deg=float(angles[i]),
                color=color,
                visible=visible,
            )
        )
    return out
