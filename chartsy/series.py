from __future__ import annotations

from dataclasses import dataclass
from typing import Literal, TypeAlias


SeriesKind = Literal["bar", "scatter"]
PointKey: TypeAlias = str | int | float

DEFAULT_SERIES_COLOR = "#888"


@dataclass(frozen=True)
class DataPoint:
    """One registered sample.

    Bar series key points by category label; scatter series key them by
    their x coordinate so ``value`` is always the dependent (y) quantity.
    """

    series_id: int
    key: PointKey
    value: float
    color: str


@dataclass(frozen=True)
class SeriesRecord:
    series_id: int
    color: str
    points: tuple[DataPoint, ...]

    def values(self) -> tuple[float, ...]:
        return tuple(p.value for p in self.points)


@dataclass(frozen=True)
class VisibilityState:
    hidden: frozenset[int] = frozenset()
    connected: frozenset[int] = frozenset()

    def is_hidden(self, series_id: int) -> bool:
        return series_id in self.hidden

    def is_connected(self, series_id: int) -> bool:
        return series_id in self.connected
