from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, replace
import math
from pathlib import Path
import tomllib

from chartsy.series import DEFAULT_SERIES_COLOR


_KEEP = object()


@dataclass(frozen=True)
class SurfaceSize:
    width: int
    height: int

    def __post_init__(self) -> None:
        if self.width <= 0 or self.height <= 0:
            raise ValueError("surface width and height must be > 0")


@dataclass(frozen=True)
class ChartConfig:
    clamp_x: tuple[float, float] | None = None
    clamp_y: tuple[float, float] | None = None
    surface: SurfaceSize | None = None
    decimate: bool = True
    default_color: str = DEFAULT_SERIES_COLOR

    def __post_init__(self) -> None:
        object.__setattr__(self, "clamp_x", _validate_clamp(self.clamp_x, "clamp_x"))
        object.__setattr__(self, "clamp_y", _validate_clamp(self.clamp_y, "clamp_y"))

    def with_surface(self, width: int, height: int) -> ChartConfig:
        return replace(self, surface=SurfaceSize(width=int(width), height=int(height)))

    def with_clamp(self, *, x: object = _KEEP, y: object = _KEEP) -> ChartConfig:
        """Replace the clamp of each named axis; pass ``None`` to clear one."""
        changes: dict[str, object] = {}
        if x is not _KEEP:
            changes["clamp_x"] = x
        if y is not _KEEP:
            changes["clamp_y"] = y
        return replace(self, **changes)

    @classmethod
    def from_mapping(cls, raw: Mapping[str, object]) -> ChartConfig:
        width = _coerce_optional_int(raw.get("width"), "width")
        height = _coerce_optional_int(raw.get("height"), "height")
        if (width is None) != (height is None):
            raise ValueError("width and height must be provided together")
        surface = SurfaceSize(width=width, height=height) if width is not None and height is not None else None
        decimate = raw.get("decimate", True)
        if not isinstance(decimate, bool):
            raise ValueError("decimate must be a boolean")
        default_color = raw.get("default_color", DEFAULT_SERIES_COLOR)
        if not isinstance(default_color, str) or not default_color:
            raise ValueError("default_color must be a non-empty string")
        return cls(
            clamp_x=_coerce_clamp(raw.get("clamp_x"), "clamp_x"),
            clamp_y=_coerce_clamp(raw.get("clamp_y"), "clamp_y"),
            surface=surface,
            decimate=decimate,
            default_color=default_color,
        )


def load_config(path: str | Path) -> ChartConfig:
    config_path = Path(path)
    if not config_path.exists():
        raise FileNotFoundError(f"chart config not found: {config_path}")
    with config_path.open("rb") as f:
        raw = tomllib.load(f)
    return ChartConfig.from_mapping(raw)


def _coerce_clamp(value: object, field_name: str) -> tuple[float, float] | None:
    if value is None:
        return None
    return _coerce_pair(value, field_name)


def _coerce_pair(value: object, field_name: str) -> tuple[float, float]:
    if not isinstance(value, (list, tuple)) or len(value) != 2:
        raise ValueError(f"{field_name} must be a [min, max] pair")
    lo, hi = value
    if isinstance(lo, bool) or isinstance(hi, bool) or not isinstance(lo, (int, float)) or not isinstance(hi, (int, float)):
        raise ValueError(f"{field_name} entries must be numbers")
    return (float(lo), float(hi))


def _validate_clamp(value: tuple[float, float] | None, field_name: str) -> tuple[float, float] | None:
    if value is None:
        return None
    clamp = _coerce_pair(value, field_name)
    lo, hi = clamp
    if not (math.isfinite(lo) and math.isfinite(hi)):
        raise ValueError(f"{field_name} must be finite")
    if not lo < hi:
        raise ValueError(f"{field_name} must satisfy min < max")
    return clamp


def _coerce_optional_int(value: object, field_name: str) -> int | None:
    if value is None:
        return None
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{field_name} must be an integer if provided")
    return value
