from __future__ import annotations

import logging
import math

import numpy as np


LOGGER = logging.getLogger(__name__)


def sort_by_x(x: np.ndarray, y: np.ndarray) -> tuple[np.ndarray, np.ndarray]:
    order = np.argsort(x, kind="stable")
    return x[order], y[order]


def decimation_stride(count: int, surface_width_px: int) -> int:
    if surface_width_px <= 0:
        raise ValueError("surface_width_px must be > 0")
    if count <= surface_width_px:
        return 1
    return max(1, int(math.floor(count / surface_width_px + 0.5)))


def decimate(x: np.ndarray, y: np.ndarray, surface_width_px: int) -> tuple[np.ndarray, np.ndarray]:
    """Sort by x, then keep every k-th point so roughly one sample lands per pixel column.

    Display-only and lossy: callers that decimate before registration get
    bounds computed from the kept subset.
    """
    xs, ys = sort_by_x(np.asarray(x, dtype=np.float64), np.asarray(y, dtype=np.float64))
    stride = decimation_stride(xs.size, surface_width_px)
    if stride == 1:
        return xs, ys
    kept_x = xs[::stride]
    kept_y = ys[::stride]
    LOGGER.debug(
        "decimated scatter input count=%d kept=%d stride=%d width=%d",
        xs.size,
        kept_x.size,
        stride,
        surface_width_px,
    )
    return kept_x, kept_y
