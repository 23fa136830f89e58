"""UI module - Interface Streamlit."""

from progress_tracker.ui.components.charts import LineChart, BarChart, DonutChart, GaugeChart
from progress_tracker.ui.components.tables import DataTable, AtRiskTable
from progress_tracker.ui.components.widgets import MetricCard, MasteryBadge

__all__ = [
    "LineChart",
    "BarChart",
    "DonutChart",
    "GaugeChart",
    "DataTable",
    "AtRiskTable",
    "MetricCard",
    "MasteryBadge",
]
