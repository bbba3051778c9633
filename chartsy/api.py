from __future__ import annotations

from chartsy.charts import BarChart, Scatterplot
from chartsy.config import ChartConfig
from chartsy.providers import BarDataSeries, ScatterDataSeries


def bar_chart(
    *series: BarDataSeries,
    config: ChartConfig | None = None,
    clamp: tuple[float, float] | None = None,
) -> BarChart:
    cfg = config or ChartConfig()
    if clamp is not None:
        cfg = cfg.with_clamp(y=clamp)
    chart = BarChart(cfg)
    chart.add(*series)
    return chart


def scatterplot(
    *series: ScatterDataSeries,
    config: ChartConfig | None = None,
    width: int | None = None,
    height: int | None = None,
) -> Scatterplot:
    cfg = config or ChartConfig()
    if width is not None or height is not None:
        if width is None or height is None:
            raise ValueError("width and height must be provided together")
        cfg = cfg.with_surface(width, height)
    chart = Scatterplot(cfg)
    chart.add(*series)
    return chart
