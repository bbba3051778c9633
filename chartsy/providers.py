from __future__ import annotations

import itertools
import logging
from typing import Any, ClassVar

from chartsy.adapters.normalize import normalize_bar_data, normalize_xy
from chartsy.decimate import decimate, sort_by_x
from chartsy.engine import RegistrationPort
from chartsy.errors import ChartDataError, MissingDataError
from chartsy.series import SeriesKind


LOGGER = logging.getLogger(__name__)

_SERIES_IDS = itertools.count(1)


def next_series_id() -> int:
    return next(_SERIES_IDS)


class SeriesProvider:
    """A mounted data series: registers its points once, then only re-broadcasts flags."""

    kind: ClassVar[SeriesKind]

    def __init__(self, *, color: str | None = None, hidden: bool = False, name: str | None = None) -> None:
        self.series_id = next_series_id()
        self.color = color
        self.hidden = bool(hidden)
        self.name = name
        self._port: RegistrationPort | None = None
        self._mounted = False
        self._missing = False
        self._flags_broadcast = False

    @property
    def missing(self) -> bool:
        return self._missing

    @property
    def source_name(self) -> str:
        return self.name or f"series-{self.series_id}"

    def attach(self, port: RegistrationPort) -> None:
        if self._port is not None and self._port is not port:
            raise RuntimeError(f"{self.source_name} is already attached to a chart")
        if port.kind != self.kind:
            raise ChartDataError(f"{type(self).__name__} cannot be added to a {port.kind} chart")
        self._port = port

    def render(self) -> None:
        if self._port is None:
            raise RuntimeError(f"{self.source_name} is not attached to a chart")
        if not self._mounted:
            self._mounted = True
            try:
                self._mount(self._port)
            except MissingDataError as exc:
                self._missing = True
                LOGGER.warning("series %s has no data to plot: %s", self.source_name, exc)
            return
        if self._missing:
            return
        # The first flag broadcast after mount must reach the registry even when
        # it matches the default, so it is forced.
        force = not self._flags_broadcast
        self._flags_broadcast = True
        self._broadcast_flags(self._port, force)

    def update(self, *, hidden: bool | None = None) -> None:
        if hidden is not None:
            self.hidden = bool(hidden)
        self.render()

    def _resolve_color(self, port: RegistrationPort) -> str:
        return self.color or port.config().default_color

    def _mount(self, port: RegistrationPort) -> None:
        raise NotImplementedError

    def _broadcast_flags(self, port: RegistrationPort, force: bool) -> None:
        port.set_hidden(self.series_id, self.hidden, force=force)


class BarDataSeries(SeriesProvider):
    kind = "bar"

    def __init__(self, data: Any, *, color: str | None = None, hidden: bool = False, name: str | None = None) -> None:
        super().__init__(color=color, hidden=hidden, name=name)
        self.data = data

    def _mount(self, port: RegistrationPort) -> None:
        pairs = normalize_bar_data(self.data, source_name=self.source_name)
        color = self._resolve_color(port)
        for label, value in pairs:
            port.register_point(self.series_id, label, value, color, self.hidden)


class ScatterDataSeries(SeriesProvider):
    kind = "scatter"

    def __init__(
        self,
        x: Any,
        y: Any,
        *,
        color: str | None = None,
        hidden: bool = False,
        connected: bool = False,
        name: str | None = None,
    ) -> None:
        super().__init__(color=color, hidden=hidden, name=name)
        self.x = x
        self.y = y
        self.connected = bool(connected)

    def update(self, *, hidden: bool | None = None, connected: bool | None = None) -> None:
        if connected is not None:
            self.connected = bool(connected)
        super().update(hidden=hidden)

    def _mount(self, port: RegistrationPort) -> None:
        xs, ys = normalize_xy(self.x, self.y, source_name=self.source_name)
        config = port.config()
        if config.decimate and config.surface is not None:
            xs, ys = decimate(xs, ys, config.surface.width)
        else:
            xs, ys = sort_by_x(xs, ys)
        color = self._resolve_color(port)
        for xv, yv in zip(xs.tolist(), ys.tolist(), strict=True):
            port.register_point(self.series_id, float(xv), float(yv), color, self.hidden, self.connected)

    def _broadcast_flags(self, port: RegistrationPort, force: bool) -> None:
        super()._broadcast_flags(port, force)
        port.set_connected(self.series_id, self.connected, force=force)
