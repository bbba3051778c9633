from __future__ import annotations

from typing import ClassVar

from chartsy.config import ChartConfig
from chartsy.engine import ChartEngine, ChartFrame
from chartsy.providers import SeriesProvider
from chartsy.series import SeriesKind


class Chart:
    """Host for a set of series providers sharing one engine.

    ``render`` is one scheduling pass: every provider gets a chance to
    register or re-broadcast its flags, then the frame is derived.
    """

    kind: ClassVar[SeriesKind]

    def __init__(self, config: ChartConfig | None = None) -> None:
        self._engine = ChartEngine(self.kind, config)
        self._providers: list[SeriesProvider] = []

    @property
    def engine(self) -> ChartEngine:
        return self._engine

    @property
    def providers(self) -> tuple[SeriesProvider, ...]:
        return tuple(self._providers)

    def add(self, *providers: SeriesProvider) -> Chart:
        port = self._engine.port()
        for provider in providers:
            provider.attach(port)
            self._providers.append(provider)
        return self

    def set_clamp(self, **axes: tuple[float, float] | None) -> None:
        """Set the clamp of the named axes (``x=``, ``y=``); others keep theirs."""
        self._engine.set_clamp(**axes)

    def render(self) -> ChartFrame:
        for provider in self._providers:
            provider.render()
        return self._engine.frame()

    def frame(self) -> ChartFrame:
        return self._engine.frame()


class BarChart(Chart):
    kind = "bar"


class Scatterplot(Chart):
    kind = "scatter"

    def resize(self, width: int, height: int) -> None:
        self._engine.resize(width, height)
