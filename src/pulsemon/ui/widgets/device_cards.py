from __future__ import annotations

from typing import AbstractSet, Dict, List, Sequence

from PySide6.QtCore import Qt, QTimer, Signal
from PySide6.QtGui import QFont
from PySide6.QtWidgets import (
    QFrame,
    QGridLayout,
    QHBoxLayout,
    QLabel,
    QScrollArea,
    QSizePolicy,
    QVBoxLayout,
    QWidget,
)

from pulsemon.core.models import Device
from pulsemon.ui.strings import status_display, tr

STATUS_BG = {
    "ONLINE": "#1e4d2b",
    "WARNING": "#6b5a1e",
    "ERROR": "#5a1e1e",
    "OFFLINE": "#2a2a2a",
}


class DeviceCardWidget(QFrame):
    clicked = Signal(str)

    def __init__(self, device_id: str, tile_px: int = 240) -> None:
        super().__init__()
        self._device_id = device_id
        self._tile_px = int(tile_px)

        self.setObjectName("DeviceCard")
        self.setFrameShape(QFrame.StyledPanel)
        self.setSizePolicy(QSizePolicy.Fixed, QSizePolicy.Fixed)
        self.setFixedSize(self._tile_px, int(self._tile_px * 0.62))

        self.lbl_title = QLabel("")
        f = QFont()
        f.setPointSize(12)
        f.setBold(True)
        self.lbl_title.setFont(f)

        self.lbl_status = QLabel("")
        self.lbl_metrics = QLabel("")
        self.lbl_meta = QLabel("")
        self.lbl_meta.setWordWrap(True)
        meta_font = QFont()
        meta_font.setPointSize(9)
        self.lbl_meta.setFont(meta_font)

        lay = QVBoxLayout()
        lay.setContentsMargins(12, 10, 12, 10)
        lay.setSpacing(4)
        lay.addWidget(self.lbl_title)
        lay.addWidget(self.lbl_status)
        lay.addWidget(self.lbl_metrics)
        lay.addWidget(self.lbl_meta, 1)
        self.setLayout(lay)

        self._apply_bg(STATUS_BG["OFFLINE"], alerting=False)

    @property
    def device_id(self) -> str:
        return self._device_id

    def mousePressEvent(self, ev) -> None:  # type: ignore[override]
        if ev.button() == Qt.LeftButton:
            self.clicked.emit(self._device_id)
        super().mousePressEvent(ev)

    def _apply_bg(self, bg: str, *, alerting: bool) -> None:
        border = "#e0443e" if alerting else "#3a3a3a"
        self.setStyleSheet(
            f"""
QFrame#DeviceCard {{
  border: 2px solid {border};
  border-radius: 10px;
  background: {bg};
}}
QLabel {{
  color: #f0f0f0;
}}
"""
        )

    def set_device(self, device: Device, *, alerting: bool = False) -> None:
        self.lbl_title.setText(device.name)
        self.lbl_status.setText(status_display(device.status))

        last = device.latest
        if last is None:
            self.lbl_metrics.setText(tr("placeholder.na"))
        else:
            self.lbl_metrics.setText(tr("device.metrics", cpu=last.cpu, ram=last.ram))
        self.lbl_meta.setText(tr("device.meta", type=device.type, address=device.address, location=device.location))

        self._apply_bg(STATUS_BG.get(device.status, STATUS_BG["OFFLINE"]), alerting=alerting)


class DeviceCardsView(QWidget):
    device_selected = Signal(str)

    def __init__(self, *, tile_px: int = 240, spacing: int = 12, margins: int = 14) -> None:
        super().__init__()
        self._tile_px = int(tile_px)
        self._spacing = int(spacing)
        self._margins = int(margins)

        self._cards: Dict[str, DeviceCardWidget] = {}
        self._order: List[str] = []
        self._relayout_pending = False
        self._list_mode = False

        self._grid_host = QWidget()
        self._grid = QGridLayout()
        self._grid.setContentsMargins(self._margins, self._margins, self._margins, self._margins)
        self._grid.setHorizontalSpacing(self._spacing)
        self._grid.setVerticalSpacing(self._spacing)
        self._grid.setAlignment(Qt.AlignLeft | Qt.AlignTop)
        self._grid_host.setLayout(self._grid)

        wrapper = QWidget()
        wrap_h = QHBoxLayout()
        wrap_h.setContentsMargins(0, 0, 0, 0)
        wrap_h.addWidget(self._grid_host, 0, Qt.AlignLeft | Qt.AlignTop)
        wrap_h.addStretch(1)
        wrapper.setLayout(wrap_h)

        self._scroll = QScrollArea()
        self._scroll.setWidgetResizable(True)
        self._scroll.setFrameShape(QScrollArea.NoFrame)
        self._scroll.setHorizontalScrollBarPolicy(Qt.ScrollBarAlwaysOff)
        self._scroll.setWidget(wrapper)

        root = QVBoxLayout()
        root.setContentsMargins(0, 0, 0, 0)
        root.addWidget(self._scroll)
        self.setLayout(root)

    def card(self, device_id: str) -> DeviceCardWidget | None:
        return self._cards.get(device_id)

    def visible_ids(self) -> list[str]:
        return list(self._order)

    def is_list_mode(self) -> bool:
        return self._list_mode

    def set_list_mode(self, enabled: bool) -> None:
        """One card per row instead of a grid filling the viewport width."""
        enabled = bool(enabled)
        if enabled == self._list_mode:
            return
        self._list_mode = enabled
        self._rebuild_grid()

    def column_count(self) -> int:
        if self._list_mode:
            return 1
        vw = int(self._scroll.viewport().width())
        return max(1, (vw - self._margins * 2 + self._spacing) // (self._tile_px + self._spacing))

    def set_devices(self, devices: Sequence[Device], alerting_ids: AbstractSet[str] = frozenset()) -> None:
        """Show exactly `devices`, in the given order."""
        order = [d.id for d in devices]

        for did in set(self._cards) - set(order):
            w = self._cards.pop(did)
            w.setParent(None)
            w.deleteLater()

        for d in devices:
            card = self._cards.get(d.id)
            if card is None:
                card = DeviceCardWidget(d.id, tile_px=self._tile_px)
                card.clicked.connect(self.device_selected.emit)
                self._cards[d.id] = card
            card.set_device(d, alerting=d.id in alerting_ids)

        if order != self._order:
            self._order = order
            self._rebuild_grid()

    def resizeEvent(self, ev) -> None:  # type: ignore[override]
        super().resizeEvent(ev)
        self._schedule_relayout()

    def _schedule_relayout(self) -> None:
        if self._relayout_pending:
            return
        self._relayout_pending = True
        QTimer.singleShot(0, self._flush_relayout)

    def _flush_relayout(self) -> None:
        self._relayout_pending = False
        self._rebuild_grid()

    def _clear_grid(self) -> None:
        while self._grid.count():
            it = self._grid.takeAt(0)
            w = it.widget()
            if w is not None:
                self._grid.removeWidget(w)

    def _rebuild_grid(self) -> None:
        self._clear_grid()
        if not self._order:
            return

        cols = self.column_count()
        for i, did in enumerate(self._order):
            self._grid.addWidget(self._cards[did], i // cols, i % cols)
