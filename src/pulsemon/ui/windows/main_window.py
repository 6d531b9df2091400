from __future__ import annotations

from PySide6.QtCore import Qt
from PySide6.QtGui import QAction
from PySide6.QtWidgets import (
    QComboBox,
    QHBoxLayout,
    QLabel,
    QLineEdit,
    QMainWindow,
    QMenu,
    QMenuBar,
    QSplitter,
    QVBoxLayout,
    QWidget,
)

from pulsemon.core.models import DEVICE_STATUSES
from pulsemon.core.query import SORT_KEYS
from pulsemon.ui.strings import status_display, tr
from pulsemon.ui.widgets.alerts_panel import AlertsPanel
from pulsemon.ui.widgets.charts import StatusPieChart
from pulsemon.ui.widgets.device_cards import DeviceCardsView
from pulsemon.ui.widgets.device_details import DeviceDetailsPanel


class DashboardWindow(QMainWindow):
    def __init__(self) -> None:
        super().__init__()
        self.setWindowTitle(tr("app.title"))
        self.resize(1400, 900)

        menubar = QMenuBar()
        menu = QMenu(tr("menu.title"), self)
        self.action_thresholds = QAction(tr("menu.thresholds"), self)
        self.action_mute = QAction(tr("menu.mute"), self)
        self.action_mute.setCheckable(True)
        self.action_exit = QAction(tr("menu.exit"), self)
        menu.addAction(self.action_thresholds)
        menu.addAction(self.action_mute)
        menu.addSeparator()
        menu.addAction(self.action_exit)
        menubar.addMenu(menu)
        self.setMenuBar(menubar)

        # filter / sort toolbar
        self.search = QLineEdit()
        self.search.setPlaceholderText(tr("toolbar.search_placeholder"))
        self.search.setClearButtonEnabled(True)

        self.status_filter = QComboBox()
        self.status_filter.addItem(tr("toolbar.status_all"), None)
        for s in DEVICE_STATUSES:
            self.status_filter.addItem(status_display(s), s)

        self.sort_key = QComboBox()
        for k in SORT_KEYS:
            self.sort_key.addItem(tr(f"toolbar.sort.{k}"), k)

        self.sort_order = QComboBox()
        self.sort_order.addItem(tr("toolbar.order.asc"), "asc")
        self.sort_order.addItem(tr("toolbar.order.desc"), "desc")

        self.view_mode = QComboBox()
        self.view_mode.addItem(tr("toolbar.view.grid"), "grid")
        self.view_mode.addItem(tr("toolbar.view.list"), "list")

        toolbar = QHBoxLayout()
        toolbar.addWidget(self.search, 2)
        toolbar.addWidget(self.status_filter)
        toolbar.addWidget(self.sort_key)
        toolbar.addWidget(self.sort_order)
        toolbar.addWidget(self.view_mode)

        self.stats_label = QLabel("")
        self.stats_label.setStyleSheet("font-weight: 600;")
        self.thresholds_label = QLabel("")
        self.thresholds_label.setStyleSheet("color: #8a8a8a;")

        self.status_pie = StatusPieChart()

        labels = QVBoxLayout()
        labels.addWidget(self.stats_label)
        labels.addWidget(self.thresholds_label)
        labels.addStretch(1)

        stats_row = QHBoxLayout()
        stats_row.addLayout(labels, 1)
        stats_row.addWidget(self.status_pie)

        self.cards = DeviceCardsView()
        self.details = DeviceDetailsPanel()
        self.alerts = AlertsPanel()

        right = QSplitter(Qt.Vertical)
        right.addWidget(self.details)
        right.addWidget(self.alerts)
        right.setStretchFactor(0, 3)
        right.setStretchFactor(1, 2)

        split = QSplitter()
        split.addWidget(self.cards)
        split.addWidget(right)
        split.setStretchFactor(0, 3)
        split.setStretchFactor(1, 2)

        central = QWidget()
        root = QVBoxLayout()
        root.addLayout(toolbar)
        root.addLayout(stats_row)
        root.addWidget(split, 1)
        central.setLayout(root)
        self.setCentralWidget(central)

    def current_status_filter(self) -> str | None:
        return self.status_filter.currentData()

    def current_sort(self) -> tuple[str, str]:
        return str(self.sort_key.currentData()), str(self.sort_order.currentData())

    def list_mode_selected(self) -> bool:
        return self.view_mode.currentData() == "list"
