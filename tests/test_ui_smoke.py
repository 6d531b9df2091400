from __future__ import annotations

import threading
from pathlib import Path

import pytest

pytest.importorskip("PySide6.QtWidgets", exc_type=ImportError)

from pulsemon.config import AppPaths
from pulsemon.core.monitor_engine import MonitorEngine
from pulsemon.core.thresholds import ThresholdConfig
from pulsemon.storage.db import SQLiteDatabase
from pulsemon.storage.migrations import apply_migrations
from pulsemon.storage.repositories import SettingsRepo
from pulsemon.ui import app_controller as app_controller_module
from pulsemon.ui.app_controller import AppController
from pulsemon.ui.dialogs.settings_dialog import ThresholdsDialog
from pulsemon.ui.widgets.device_cards import DeviceCardWidget
from pulsemon.ui.windows.main_window import DashboardWindow

from conftest import FixedRandom, make_device

HOT_CPU = ThresholdConfig(cpu_threshold_pct=50, ram_threshold_pct=100, sustain_seconds=60)


class DummySoundManager:
    def __init__(self, alert_wav: Path, *, volume: float = 0.9) -> None:
        self.alert_wav = alert_wav
        self.muted = False
        self.played = 0

    def set_muted(self, muted: bool) -> None:
        self.muted = muted

    def play_alert(self) -> None:
        self.played += 1


class DummyMessageBox:
    warnings: list[str] = []

    @classmethod
    def warning(cls, _parent, title, message) -> None:
        cls.warnings.append(message)


def _make_paths(tmp_path: Path) -> AppPaths:
    base = tmp_path / "pulsemon"
    data = base / "data"
    logs = base / "logs"
    data.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)
    return AppPaths(base_dir=base, data_dir=data, logs_dir=logs, db_path=data / "pulsemon.db")


@pytest.fixture
def controller(qtbot, tmp_path, monkeypatch):
    monkeypatch.setattr(app_controller_module, "SoundManager", DummySoundManager)
    monkeypatch.setattr(app_controller_module, "QMessageBox", DummyMessageBox)

    paths = _make_paths(tmp_path)
    db = SQLiteDatabase(paths.db_path)
    apply_migrations(db)

    engine = MonitorEngine(fleet_size=3, rng=FixedRandom(0.99), thresholds=HOT_CPU)
    ctl = AppController(db=db, paths=paths, engine=engine)
    ctl._show_window()
    qtbot.addWidget(ctl.window)
    qtbot.waitExposed(ctl.window)
    yield ctl
    engine.stop()


def test_window_shows_fleet(controller):
    win = controller.window
    assert win.cards.visible_ids() == ["dev-0", "dev-1", "dev-2"]
    assert "3/3" in win.stats_label.text()
    assert win.alerts.keys() == []


def test_tick_populates_alerts_and_dismiss_removes(controller):
    controller.engine.tick()
    win = controller.window
    assert len(win.alerts.keys()) == 3

    key = win.alerts.keys()[0]
    controller.dismiss_alert(key)
    assert key not in win.alerts.keys()
    assert len(win.alerts.keys()) == 2

    controller.engine.tick()
    assert key not in win.alerts.keys()


def test_queued_snapshot_does_not_undo_a_dismissal(controller, qtbot):
    worker = threading.Thread(target=controller.engine.tick)
    worker.start()
    worker.join()

    key = controller.engine.snapshot().alerts[0].key
    controller.dismiss_alert(key)
    assert key not in controller.window.alerts.keys()

    # the tick's snapshot is delivered only now, after the dismissal
    qtbot.wait(50)
    assert key not in controller.window.alerts.keys()
    assert len(controller.window.alerts.keys()) == 2


def test_status_pie_and_view_mode(controller):
    win = controller.window
    assert win.status_pie.slice_value("ONLINE") == 3
    assert win.status_pie.slice_value("ERROR") == 0

    win.view_mode.setCurrentIndex(win.view_mode.findData("list"))
    assert win.cards.is_list_mode()
    assert win.cards.column_count() == 1
    assert win.cards.visible_ids() == ["dev-0", "dev-1", "dev-2"]


def test_search_and_status_filter(controller):
    win = controller.window
    win.search.setText("no-such-device")
    assert win.cards.visible_ids() == []

    win.search.setText("")
    idx = win.status_filter.findData("ERROR")
    win.status_filter.setCurrentIndex(idx)
    assert win.cards.visible_ids() == []


def test_selection_updates_details(controller):
    controller._select_device("dev-1")
    assert "EU-CENTRAL-DB-02" in controller.window.details.host_label.text()
    assert controller.window.details.chart.point_count("cpu") == 20


def test_threshold_edits(controller):
    DummyMessageBox.warnings.clear()
    assert controller.apply_thresholds({"sustain_seconds": 0}) is False
    assert DummyMessageBox.warnings
    assert controller.engine.thresholds == HOT_CPU

    assert controller.apply_thresholds({"cpu_threshold_pct": 70, "sustain_seconds": 30}) is True
    assert controller.engine.thresholds == ThresholdConfig(70, 100, 30)
    assert SettingsRepo(controller.db).load_thresholds() == ThresholdConfig(70, 100, 30)
    assert "70" in controller.window.thresholds_label.text()


def test_thresholds_dialog_payload(qtbot):
    dlg = ThresholdsDialog(initial=ThresholdConfig(85, 92.5, 45))
    qtbot.addWidget(dlg)
    assert dlg.payload() == {"cpu_threshold_pct": 85, "ram_threshold_pct": 92.5, "sustain_seconds": 45}


def test_unedited_dialog_keeps_fractional_config(qtbot):
    cfg = ThresholdConfig(90, 90, 12.5)
    dlg = ThresholdsDialog(initial=cfg)
    qtbot.addWidget(dlg)
    payload = dlg.payload()
    assert payload["sustain_seconds"] == 12.5
    assert cfg.updated(**payload) == cfg


def test_dashboard_window_smoke(qtbot):
    win = DashboardWindow()
    qtbot.addWidget(win)
    win.show()
    qtbot.waitExposed(win)


def test_device_card_smoke(qtbot):
    card = DeviceCardWidget(device_id="dev-0")
    qtbot.addWidget(card)
    card.set_device(make_device([42.0, 43.5]), alerting=True)
    card.show()
    qtbot.waitExposed(card)
    assert card.lbl_title.text() == "US-WEST-SRV-01"
    assert "43.5" in card.lbl_metrics.text()
