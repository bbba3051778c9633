from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from decimal import Decimal
import logging
from typing import Any

import numpy as np

from chartsy.errors import ChartDataError, MissingDataError
from chartsy.series import PointKey


LOGGER = logging.getLogger(__name__)

try:
    import pandas as pd
except Exception:  # pragma: no cover - optional dependency
    pd = None  # type: ignore[assignment]


def normalize_xy(x: Any, y: Any, *, source_name: str | None = None) -> tuple[np.ndarray, np.ndarray]:
    """Coerce scatter input to two aligned float arrays holding only finite pairs."""
    if y is None:
        raise MissingDataError("y input is required")
    y_arr = _coerce_1d_numeric(y, label="y")
    if x is None:
        x_arr = np.arange(y_arr.size, dtype=np.float64)
    else:
        x_arr = _coerce_1d_numeric(x, label="x")

    if x_arr.shape != y_arr.shape:
        raise ChartDataError(f"x and y length mismatch: {x_arr.size} != {y_arr.size}")
    if y_arr.size == 0:
        raise MissingDataError("empty series")

    mask = np.isfinite(x_arr) & np.isfinite(y_arr)
    if not np.any(mask):
        raise MissingDataError("series contains no finite points")
    dropped = int(mask.size - np.count_nonzero(mask))
    if dropped:
        LOGGER.warning("dropped non-finite points source=%s count=%d", source_name or "<anonymous>", dropped)
    return x_arr[mask], y_arr[mask]


def normalize_bar_data(data: Any, *, source_name: str | None = None) -> list[tuple[PointKey, float]]:
    """Accept ``[{label, value}, ...]``, ``[(label, value), ...]``, a mapping or a pandas Series."""
    if data is None:
        raise MissingDataError("bar data is required")
    if pd is not None and isinstance(data, pd.Series):
        pairs: Iterable[Any] = zip(data.index.tolist(), data.tolist(), strict=True)
    elif isinstance(data, Mapping):
        pairs = data.items()
    elif isinstance(data, Iterable) and not isinstance(data, (str, bytes, bytearray)):
        pairs = data
    else:
        raise ChartDataError(f"unsupported bar data type: {type(data)!r}")

    out: list[tuple[PointKey, float]] = []
    dropped = 0
    for i, item in enumerate(pairs):
        label, raw = _split_bar_item(item, index=i)
        value = _coerce_scalar(raw, label=f"value[{i}]")
        if not np.isfinite(value):
            dropped += 1
            continue
        out.append((label, value))
    if dropped:
        LOGGER.warning("dropped non-finite bars source=%s count=%d", source_name or "<anonymous>", dropped)
    if not out:
        raise MissingDataError("bar series contains no finite values")
    return out


def _split_bar_item(item: Any, *, index: int) -> tuple[PointKey, Any]:
    if isinstance(item, Mapping):
        try:
            return _coerce_label(item["label"], index), item["value"]
        except KeyError as exc:
            raise ChartDataError(f"bar entry {index} missing field: {exc.args[0]}") from exc
    if isinstance(item, Sequence) and not isinstance(item, (str, bytes, bytearray)) and len(item) == 2:
        return _coerce_label(item[0], index), item[1]
    raise ChartDataError(f"bar entry {index} must be a {{label, value}} mapping or a pair, got {item!r}")


def _coerce_label(label: Any, index: int) -> PointKey:
    if isinstance(label, bool) or not isinstance(label, (str, int, float)):
        raise ChartDataError(f"bar entry {index} label must be a string or number, got {label!r}")
    return label


def _coerce_1d_numeric(value: Any, *, label: str) -> np.ndarray:
    if pd is not None and isinstance(value, pd.Series):
        return _coerce_ndarray(value.to_numpy(), label=label)

    if isinstance(value, np.ndarray):
        if value.ndim != 1:
            raise ChartDataError(f"{label} must be 1-D")
        return _coerce_ndarray(value, label=label)

    if isinstance(value, Sequence) and not isinstance(value, (str, bytes, bytearray)):
        return _coerce_ndarray(np.asarray(value, dtype=object), label=label)

    raise ChartDataError(f"unsupported {label} input type: {type(value)!r}")


def _coerce_ndarray(arr: np.ndarray, *, label: str) -> np.ndarray:
    if arr.ndim != 1:
        raise ChartDataError(f"{label} must be 1-D")
    if arr.dtype.kind in {"i", "u", "f"}:
        return arr.astype(np.float64, copy=False)

    out = np.empty(arr.shape[0], dtype=np.float64)
    for i, raw in enumerate(arr.tolist()):
        out[i] = _coerce_scalar(raw, label=f"{label}[{i}]")
    return out


def _coerce_scalar(raw: Any, *, label: str) -> float:
    if raw is None:
        return float("nan")
    if isinstance(raw, bool):
        raise ChartDataError(f"{label} must be numeric, got {raw!r}")
    if isinstance(raw, Decimal):
        return float(raw)
    try:
        return float(raw)
    except (TypeError, ValueError) as exc:
        raise ChartDataError(f"{label} is not numeric: {raw!r}") from exc
