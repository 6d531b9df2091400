from __future__ import annotations

from PySide6.QtWidgets import (
    QDialog,
    QDoubleSpinBox,
    QFormLayout,
    QHBoxLayout,
    QLabel,
    QPushButton,
    QVBoxLayout,
)

from pulsemon.core.thresholds import ThresholdConfig
from pulsemon.ui.strings import tr


class ThresholdsDialog(QDialog):
    """
    Operator edit of the alert thresholds. Only collects values; validation
    and applying happen in the engine so the previous config survives a
    rejected edit.
    """

    def __init__(self, initial: ThresholdConfig | None = None, parent=None) -> None:
        super().__init__(parent)
        self.setWindowTitle(tr("thresholds.title"))
        self.setModal(True)

        initial = initial or ThresholdConfig()

        self.cpu = QDoubleSpinBox()
        self.cpu.setRange(0.0, 100.0)
        self.cpu.setDecimals(1)
        self.cpu.setValue(float(initial.cpu_threshold_pct))

        self.ram = QDoubleSpinBox()
        self.ram.setRange(0.0, 100.0)
        self.ram.setDecimals(1)
        self.ram.setValue(float(initial.ram_threshold_pct))

        self.sustain = QDoubleSpinBox()
        self.sustain.setRange(0.01, 24 * 60 * 60)
        self.sustain.setDecimals(2)
        self.sustain.setSingleStep(3)
        self.sustain.setValue(float(initial.sustain_seconds))

        form = QFormLayout()
        form.addRow(tr("thresholds.label.cpu"), self.cpu)
        form.addRow(tr("thresholds.label.ram"), self.ram)
        form.addRow(tr("thresholds.label.sustain"), self.sustain)

        hint = QLabel(tr("thresholds.hint"))
        hint.setWordWrap(True)
        hint.setStyleSheet("color: #8a8a8a; font-style: italic;")

        btn_ok = QPushButton(tr("thresholds.button.save"))
        btn_cancel = QPushButton(tr("thresholds.button.cancel"))
        btn_ok.clicked.connect(self.accept)
        btn_cancel.clicked.connect(self.reject)

        buttons = QHBoxLayout()
        buttons.addStretch(1)
        buttons.addWidget(btn_ok)
        buttons.addWidget(btn_cancel)

        root = QVBoxLayout()
        root.addLayout(form)
        root.addWidget(hint)
        root.addLayout(buttons)
        self.setLayout(root)

    def payload(self) -> dict:
        def _num(v: float):
            return int(v) if float(v).is_integer() else float(v)

        return {
            "cpu_threshold_pct": _num(self.cpu.value()),
            "ram_threshold_pct": _num(self.ram.value()),
            "sustain_seconds": _num(self.sustain.value()),
        }
