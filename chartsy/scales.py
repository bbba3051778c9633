from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
import math

import numpy as np


MAX_TICK_STEPS = 10
UPPER_PAD_RATIO = 1.1
LOWER_PAD_RATIO = 0.9
EMPTY_BOUNDS = (0.0, 1.0)
HALF_FLOAT_MAX = float(np.finfo(np.float64).max) / 2


@dataclass(frozen=True)
class Bounds:
    min: float
    max: float

    @property
    def span(self) -> float:
        return self.max - self.min

    def widen(self, clamp: tuple[float, float] | None) -> Bounds:
        """Grow the bounds so they cover ``clamp``; never shrinks them."""
        if clamp is None:
            return self
        lo, hi = clamp
        return Bounds(min=min(self.min, float(lo)), max=max(self.max, float(hi)))


def adjust_range(value: float, round_up: bool) -> float:
    """Snap an axis extreme outward to a round boundary.

    The step is the smallest power of ten that brings ``|value|`` within ten
    of it, halved once it reaches ten, so 1234 snaps to 1500 and 150 stays 150.
    """
    if value == 0 or not math.isfinite(value):
        return float(value)
    magnitude = abs(value)
    factor = 1.0
    while magnitude / factor > 10:
        factor *= 10.0
    if factor >= 10:
        factor /= 2.0
    if round_up:
        return float(math.ceil(value / factor) * factor)
    return float(math.floor(value / factor) * factor)


def compute_bounds(values: Iterable[float] | np.ndarray, clamp: tuple[float, float] | None = None) -> Bounds:
    """Padded, rounded (min, max) for every finite value in ``values``.

    An empty aggregate yields ``Bounds(0, 1)`` so downstream normalization
    never divides by zero while providers are still mounting.
    """
    arr = _as_float_array(values)
    finite = arr[np.isfinite(arr)]
    if finite.size == 0:
        return Bounds(*EMPTY_BOUNDS).widen(clamp)

    raw_max = float(np.max(finite))
    raw_min = float(np.min(finite))

    # Pad outward from zero by 10%, keeping the raw extreme if padding overflows.
    vmax = _finite_or(raw_max * (UPPER_PAD_RATIO if raw_max > 0 else LOWER_PAD_RATIO), raw_max)
    vmin = _finite_or(raw_min * (LOWER_PAD_RATIO if raw_min > 0 else UPPER_PAD_RATIO), raw_min)

    if vmax - vmin > 1:
        if vmin > 0:
            vmin = 0.0
        vmax = _finite_or(float(np.ceil(np.ceil(vmax) / 10) * 10), vmax)
        vmin = _finite_or(float(np.floor(np.floor(vmin) / 10) * 10), vmin)
    else:
        vmax = _snap_half(vmax, round_up=True)
        vmin = _snap_half(vmin, round_up=False)

    if vmax == vmin:
        vmax += 1.0

    if vmax >= 10:
        vmax = _finite_or(adjust_range(vmax, True), vmax)
    if vmin <= -10:
        vmin = _finite_or(adjust_range(vmin, False), vmin)
    vmax = max(vmax, raw_max)
    vmin = min(vmin, raw_min)

    if not math.isfinite(vmax - vmin):
        # Opposite extremes near the float limit: clip so the span stays finite.
        vmax = min(vmax, HALF_FLOAT_MAX)
        vmin = max(vmin, -HALF_FLOAT_MAX)

    return Bounds(min=vmin, max=vmax).widen(clamp)


def generate_ticks(vmin: float, vmax: float) -> np.ndarray:
    span = vmax - vmin
    if not span > 0:
        raise ValueError("tick range must satisfy max > min")
    step_count = math.ceil(span / 10) if span > 10 else math.ceil(span * 10)
    step_count = min(max(int(step_count), 1), MAX_TICK_STEPS)
    step = span / step_count
    ticks = vmin + np.arange(step_count + 1, dtype=np.float64) * step
    # The last tick is pinned so float drift never leaves it short of max.
    ticks[-1] = vmax
    return ticks


def ticks_for_bounds(bounds: Bounds) -> np.ndarray:
    return generate_ticks(bounds.min, bounds.max)


def format_tick(value: float, *, step: float | None = None) -> str:
    if not np.isfinite(value):
        return str(value)
    if step is not None and np.isfinite(step) and step > 0 and abs(value) <= step * 1e-9:
        value = 0.0
    if value == 0 or abs(value) > 1:
        # Half-up rounding, then thousands grouping.
        return f"{math.floor(value + 0.5):,}"
    return f"{value:.2f}"


def format_ticks_for_axis(ticks: np.ndarray) -> list[str]:
    if ticks.size == 0:
        return []
    if ticks.size == 1:
        return [format_tick(float(ticks[0]))]
    step = float(abs(ticks[1] - ticks[0]))
    return [format_tick(float(v), step=step) for v in ticks]


def _finite_or(value: float, fallback: float) -> float:
    return value if math.isfinite(value) else fallback


def _snap_half(value: float, *, round_up: bool) -> float:
    rounded = math.floor(value * 2 + 0.5) / 2
    if round_up:
        return float(rounded) if rounded > value else float(math.ceil(value))
    return float(rounded) if rounded < value else float(math.floor(value))


def _as_float_array(values: Iterable[float] | np.ndarray) -> np.ndarray:
    if isinstance(values, np.ndarray):
        return values.astype(np.float64, copy=False).ravel()
    return np.fromiter((float(v) for v in values), dtype=np.float64)
