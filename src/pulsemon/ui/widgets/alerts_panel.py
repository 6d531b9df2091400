from __future__ import annotations

from datetime import timezone
from typing import Dict, Sequence

from PySide6.QtCore import Qt, Signal
from PySide6.QtWidgets import (
    QHBoxLayout,
    QLabel,
    QListWidget,
    QListWidgetItem,
    QPushButton,
    QVBoxLayout,
    QWidget,
)

from pulsemon.core.models import Alert, ConditionKey
from pulsemon.ui.strings import tr


class AlertsPanel(QWidget):
    """
    Active alerts, newest first. The panel only mirrors what the engine
    reports; Dismiss asks the controller, which removes the row on the next
    snapshot.
    """

    dismiss_requested = Signal(object)  # ConditionKey

    def __init__(self) -> None:
        super().__init__()

        self._alerts: Dict[ConditionKey, Alert] = {}

        title = QLabel(tr("alerts.title"))
        title.setStyleSheet("font-size: 16px; font-weight: 700;")

        self.empty_label = QLabel(tr("alerts.empty"))
        self.empty_label.setStyleSheet("color: #8a8a8a;")

        self.list = QListWidget()

        root = QVBoxLayout()
        root.setContentsMargins(8, 8, 8, 8)
        root.setSpacing(8)
        root.addWidget(title)
        root.addWidget(self.empty_label)
        root.addWidget(self.list, 1)
        self.setLayout(root)

    def keys(self) -> list[ConditionKey]:
        return list(self._alerts)

    def set_alerts(self, alerts: Sequence[Alert]) -> None:
        incoming = {a.key: a for a in alerts}
        if incoming.keys() == self._alerts.keys():
            return
        self._alerts = incoming
        self._rebuild()

    def _rebuild(self) -> None:
        self.list.clear()
        self.empty_label.setVisible(not self._alerts)

        for a in sorted(self._alerts.values(), key=lambda x: x.raised_at, reverse=True):
            item = QListWidgetItem()
            w = QWidget()
            lay = QHBoxLayout()
            lay.setContentsMargins(8, 6, 8, 6)
            lay.setSpacing(10)

            raised = a.raised_at
            if raised.tzinfo is None:
                raised = raised.replace(tzinfo=timezone.utc)
            msg = tr(
                "alerts.message",
                metric=a.metric,
                device=a.device_name,
                value=a.observed_value,
                threshold=a.key.threshold,
                secs=a.key.sustain_seconds,
            )
            when = tr("alerts.raised_at", time=raised.astimezone().strftime("%H:%M:%S"))
            text = QLabel(f"{msg}\n{when}")
            text.setWordWrap(True)
            text.setAlignment(Qt.AlignVCenter | Qt.AlignLeft)

            btn = QPushButton(tr("alerts.button.dismiss"))
            btn.setFixedWidth(90)
            btn.clicked.connect(lambda _=False, _key=a.key: self.dismiss_requested.emit(_key))

            lay.addWidget(text, 1)
            lay.addWidget(btn, 0)
            w.setLayout(lay)

            item.setSizeHint(w.sizeHint())
            self.list.addItem(item)
            self.list.setItemWidget(item, w)
