from __future__ import annotations

from datetime import timezone
from typing import Sequence

from PySide6.QtCharts import QChart, QChartView, QDateTimeAxis, QLineSeries, QPieSeries, QValueAxis
from PySide6.QtCore import QDateTime, QMargins, Qt
from PySide6.QtGui import QColor, QPainter
from PySide6.QtWidgets import QVBoxLayout, QWidget

from pulsemon.core.models import MetricSample
from pulsemon.core.status import FleetSummary
from pulsemon.ui.strings import status_display, tr

METRICS = ("cpu", "ram", "disk", "network")


class MetricsChart(QWidget):
    """CPU/RAM/disk/network history of one device on a shared 0-100 axis."""

    def __init__(self, *, compact: bool = False) -> None:
        super().__init__()
        self._series: dict[str, QLineSeries] = {}

        chart = QChart()
        chart.legend().setVisible(not compact)

        self._axis_x = QDateTimeAxis()
        self._axis_x.setFormat("HH:mm:ss")
        self._axis_x.setTitleText(tr("chart.axis.time") if not compact else "")
        chart.addAxis(self._axis_x, Qt.AlignBottom)

        self._axis_y = QValueAxis()
        self._axis_y.setRange(0, 100)
        self._axis_y.setTitleText(tr("chart.axis.pct") if not compact else "")
        chart.addAxis(self._axis_y, Qt.AlignLeft)

        for name in METRICS:
            series = QLineSeries()
            series.setName(tr(f"chart.series.{name}"))
            chart.addSeries(series)
            series.attachAxis(self._axis_x)
            series.attachAxis(self._axis_y)
            self._series[name] = series

        self.view = QChartView(chart)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)
        self.setLayout(layout)

        if compact:
            self.view.setMinimumHeight(160)
            self.view.setMaximumHeight(220)

    def point_count(self, metric: str) -> int:
        return self._series[metric].count()

    def set_history(self, history: Sequence[MetricSample]) -> None:
        for series in self._series.values():
            series.clear()
        if not history:
            return

        xs = []
        for s in history:
            ts = s.timestamp
            if ts.tzinfo is None:
                ts = ts.replace(tzinfo=timezone.utc)
            x = QDateTime(ts.astimezone()).toMSecsSinceEpoch()
            xs.append(x)
            for name in METRICS:
                self._series[name].append(x, float(getattr(s, name)))

        lo, hi = min(xs), max(xs)
        if lo == hi:
            hi = lo + 1000
        self._axis_x.setRange(QDateTime.fromMSecsSinceEpoch(lo), QDateTime.fromMSecsSinceEpoch(hi))


PIE_COLORS = {
    "ONLINE": "#10b981",
    "WARNING": "#f59e0b",
    "ERROR": "#f43f5e",
    "OFFLINE": "#64748b",
}


class StatusPieChart(QWidget):
    """Donut of the fleet's status distribution."""

    def __init__(self) -> None:
        super().__init__()
        self._series = QPieSeries()
        self._series.setHoleSize(0.55)
        self._slices = {}
        for status, color in PIE_COLORS.items():
            sl = self._series.append(status_display(status), 0)
            sl.setColor(QColor(color))
            self._slices[status] = sl

        chart = QChart()
        chart.addSeries(self._series)
        chart.setTitle(tr("chart.status_title"))
        chart.legend().setAlignment(Qt.AlignRight)
        chart.setMargins(QMargins(0, 0, 0, 0))

        self.view = QChartView(chart)
        self.view.setRenderHint(QPainter.Antialiasing)
        self.view.setMinimumSize(260, 140)
        self.view.setMaximumHeight(180)

        layout = QVBoxLayout()
        layout.setContentsMargins(0, 0, 0, 0)
        layout.addWidget(self.view)
        self.setLayout(layout)

    def slice_value(self, status: str) -> float:
        return self._slices[status].value()

    def set_summary(self, summary: FleetSummary) -> None:
        counts = {
            "ONLINE": summary.online,
            "WARNING": summary.warning,
            "ERROR": summary.error,
            "OFFLINE": summary.offline,
        }
        for status, n in counts.items():
            sl = self._slices[status]
            sl.setValue(float(n))
            sl.setLabel(f"{status_display(status)} {n}")
