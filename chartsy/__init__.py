from chartsy.api import bar_chart, scatterplot
from chartsy.charts import BarChart, Chart, Scatterplot
from chartsy.config import ChartConfig, SurfaceSize, load_config
from chartsy.engine import AxisState, ChartEngine, ChartFrame, RegistrationPort, SeriesView
from chartsy.errors import ChartDataError, MissingDataError
from chartsy.providers import BarDataSeries, ScatterDataSeries
from chartsy.scales import Bounds, adjust_range, compute_bounds, generate_ticks

__all__ = [
    "AxisState",
    "BarChart",
    "BarDataSeries",
    "Bounds",
    "Chart",
    "ChartConfig",
    "ChartDataError",
    "ChartEngine",
    "ChartFrame",
    "MissingDataError",
    "RegistrationPort",
    "ScatterDataSeries",
    "Scatterplot",
    "SeriesView",
    "SurfaceSize",
    "adjust_range",
    "bar_chart",
    "compute_bounds",
    "generate_ticks",
    "load_config",
    "scatterplot",
]
