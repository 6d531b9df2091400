from __future__ import annotations

from datetime import datetime, timezone

from PySide6.QtCore import Qt
from PySide6.QtGui import QFont, QPalette
from PySide6.QtWidgets import QGridLayout, QLabel, QVBoxLayout, QWidget

from pulsemon.core.models import Device
from pulsemon.ui.strings import status_display, tr
from pulsemon.ui.widgets.charts import MetricsChart

STATUS_COLORS = {
    "ONLINE": Qt.green,
    "WARNING": Qt.yellow,
    "ERROR": Qt.red,
    "OFFLINE": Qt.gray,
}


class DeviceDetailsPanel(QWidget):
    def __init__(self) -> None:
        super().__init__()
        self.device_id: str | None = None

        self.title = QLabel(tr("details.title"))
        self.title.setStyleSheet("font-size: 16px; font-weight: 700;")

        self.host_label = QLabel(tr("placeholder.na"))
        host_font = QFont()
        host_font.setPointSize(13)
        host_font.setBold(True)
        self.host_label.setFont(host_font)
        self.host_label.setWordWrap(True)

        self.status_label = QLabel(tr("details.status_label", status=tr("placeholder.na")))
        status_font = QFont()
        status_font.setPointSize(12)
        status_font.setBold(True)
        self.status_label.setFont(status_font)

        na = tr("placeholder.na")
        self.cpu_label = QLabel(tr("details.metric.cpu", value=na))
        self.ram_label = QLabel(tr("details.metric.ram", value=na))
        self.disk_label = QLabel(tr("details.metric.disk", value=na))
        self.net_label = QLabel(tr("details.metric.network", value=na))
        self.last_label = QLabel(tr("details.last_label", value=na))

        metrics = QGridLayout()
        metrics.addWidget(self.cpu_label, 0, 0)
        metrics.addWidget(self.ram_label, 0, 1)
        metrics.addWidget(self.disk_label, 1, 0)
        metrics.addWidget(self.net_label, 1, 1)
        metrics.addWidget(self.last_label, 2, 0, 1, 2)

        self.chart = MetricsChart(compact=True)

        root = QVBoxLayout()
        root.setContentsMargins(10, 10, 10, 10)
        root.setSpacing(8)
        root.addWidget(self.title)
        root.addWidget(self.host_label)
        root.addWidget(self.status_label)
        root.addLayout(metrics)
        root.addWidget(self.chart, 1)
        self.setLayout(root)

    def set_device(self, device: Device) -> None:
        self.device_id = device.id
        self.host_label.setText(f"{device.name}\n{device.address}  •  {device.type}  •  {device.location}")
        self.status_label.setText(tr("details.status_label", status=status_display(device.status)))
        self._apply_status_color(device.status)

        last = device.latest
        if last is None:
            na = tr("placeholder.na")
            values = {"cpu": na, "ram": na, "disk": na, "network": na}
        else:
            values = {
                "cpu": f"{last.cpu:.1f}%",
                "ram": f"{last.ram:.1f}%",
                "disk": f"{last.disk:.1f}%",
                "network": f"{last.network:.1f}%",
            }
        self.cpu_label.setText(tr("details.metric.cpu", value=values["cpu"]))
        self.ram_label.setText(tr("details.metric.ram", value=values["ram"]))
        self.disk_label.setText(tr("details.metric.disk", value=values["disk"]))
        self.net_label.setText(tr("details.metric.network", value=values["network"]))
        self.last_label.setText(tr("details.last_label", value=self.format_timestamp(device.last_update)))
        self.chart.set_history(device.history)

    def clear(self) -> None:
        self.device_id = None
        na = tr("placeholder.na")
        self.host_label.setText(na)
        self.status_label.setText(tr("details.status_label", status=na))
        self.cpu_label.setText(tr("details.metric.cpu", value=na))
        self.ram_label.setText(tr("details.metric.ram", value=na))
        self.disk_label.setText(tr("details.metric.disk", value=na))
        self.net_label.setText(tr("details.metric.network", value=na))
        self.last_label.setText(tr("details.last_label", value=na))
        self.chart.set_history(())
        self._apply_status_color("UNKNOWN")

    def _apply_status_color(self, status: str) -> None:
        pal = self.status_label.palette()
        color = STATUS_COLORS.get(status.upper())
        if color is not None:
            pal.setColor(QPalette.WindowText, color)
        else:
            pal = self.style().standardPalette()
        self.status_label.setPalette(pal)

    @staticmethod
    def format_timestamp(ts: datetime | None) -> str:
        if not ts:
            return tr("placeholder.na")
        if ts.tzinfo is None:
            ts = ts.replace(tzinfo=timezone.utc)
        return ts.astimezone().strftime("%Y-%m-%d %H:%M:%S")
