from __future__ import annotations

import logging

from PySide6.QtCore import QObject, QTimer, Signal
from PySide6.QtWidgets import QDialog, QMessageBox

from pulsemon.config import AppPaths, EngineSettings, resource_path
from pulsemon.core.models import Alert, ConditionKey
from pulsemon.core.monitor_engine import EngineSnapshot, MonitorEngine
from pulsemon.core.query import filter_devices, sort_devices
from pulsemon.core.status import summarize_fleet
from pulsemon.core.thresholds import ConfigError
from pulsemon.services.sound import SoundManager
from pulsemon.storage.db import SQLiteDatabase
from pulsemon.storage.repositories import SettingsRepo
from pulsemon.ui.dialogs.settings_dialog import ThresholdsDialog
from pulsemon.ui.strings import tr as _t
from pulsemon.ui.windows.main_window import DashboardWindow

logger = logging.getLogger("pulsemon.controller")


class AppController(QObject):
    # engine thread -> GUI thread
    snapshot_received = Signal(object)
    alert_received = Signal(object)

    def __init__(
        self,
        db: SQLiteDatabase,
        paths: AppPaths,
        engine_settings: EngineSettings | None = None,
        engine: MonitorEngine | None = None,
    ) -> None:
        super().__init__()
        self.db = db
        self.paths = paths
        self.settings = SettingsRepo(db)

        if engine is None:
            es = engine_settings or EngineSettings()
            engine = MonitorEngine(
                fleet_size=es.fleet_size,
                period_secs=es.tick_secs,
                thresholds=self.settings.load_thresholds(),
            )
        self._engine = engine
        self._engine.on_tick = self.snapshot_received.emit
        self._engine.on_alert = self.alert_received.emit

        self._sound = SoundManager(alert_wav=resource_path("resources/sounds/alert.wav"))
        self._sound.set_muted(self.settings.get("sound_muted", "0") == "1")

        self._win: DashboardWindow | None = None
        self._snapshot: EngineSnapshot = self._engine.snapshot()
        self._selected_device_id: str | None = None

        self.snapshot_received.connect(self._on_snapshot)
        self.alert_received.connect(self._on_alert)

    @property
    def engine(self) -> MonitorEngine:
        return self._engine

    @property
    def window(self) -> DashboardWindow | None:
        return self._win

    def start(self) -> None:
        self._show_window()
        self._engine.start()

    def _show_window(self) -> None:
        win = DashboardWindow()
        self._win = win
        self._wire_window(win)
        self.refresh_view()
        win.show()

    def _wire_window(self, win: DashboardWindow) -> None:
        win.action_thresholds.triggered.connect(self.open_thresholds)
        win.action_exit.triggered.connect(self.exit_app)
        win.action_mute.setChecked(self._sound.muted)
        win.action_mute.toggled.connect(self.set_muted)

        win.search.textChanged.connect(lambda _text: self.refresh_view())
        win.status_filter.currentIndexChanged.connect(lambda _i: self.refresh_view())
        win.sort_key.currentIndexChanged.connect(lambda _i: self.refresh_view())
        win.sort_order.currentIndexChanged.connect(lambda _i: self.refresh_view())
        win.view_mode.currentIndexChanged.connect(lambda _i: win.cards.set_list_mode(win.list_mode_selected()))

        win.cards.device_selected.connect(self._select_device)
        win.alerts.dismiss_requested.connect(self.dismiss_alert)

    def exit_app(self) -> None:
        self._engine.stop()
        if self._win:
            self._win.close()
            self._win.deleteLater()
            self._win = None
        from PySide6.QtWidgets import QApplication
        QApplication.quit()

    # --- engine events ---

    def _on_snapshot(self, snap: EngineSnapshot) -> None:
        # queued from the engine thread; an operator action may already have
        # pulled a newer one
        if snap.version < self._snapshot.version:
            logger.debug("UI: stale snapshot dropped version=%s current=%s", snap.version, self._snapshot.version)
            return
        self._snapshot = snap
        self.refresh_view()

    def _on_alert(self, alert: Alert) -> None:
        logger.info("UI: alert shown device=%s metric=%s", alert.device_id, alert.metric)
        QTimer.singleShot(0, self._sound.play_alert)

    # --- view ---

    def visible_devices(self) -> list:
        win = self._win
        devices = list(self._snapshot.devices)
        if win is None:
            return devices
        key, order = win.current_sort()
        shown = filter_devices(devices, win.search.text(), win.current_status_filter())
        return sort_devices(shown, key, order)

    def refresh_view(self) -> None:
        win = self._win
        if win is None:
            return
        snap = self._snapshot

        alerting = {a.device_id for a in snap.alerts}
        win.cards.set_devices(self.visible_devices(), alerting_ids=alerting)
        win.alerts.set_alerts(snap.alerts)

        s = summarize_fleet(snap.devices)
        win.status_pie.set_summary(s)
        win.stats_label.setText(
            _t(
                "stats.line",
                online=s.online,
                total=s.total,
                warning=s.warning,
                error=s.error,
                offline=s.offline,
                cpu=s.avg_cpu,
                ram=s.avg_ram,
            )
        )
        cfg = snap.thresholds
        win.thresholds_label.setText(
            _t("stats.thresholds", cpu=cfg.cpu_threshold_pct, ram=cfg.ram_threshold_pct, secs=cfg.sustain_seconds)
        )

        if self._selected_device_id is not None:
            self._update_details_panel(self._selected_device_id)

    def _select_device(self, device_id: str) -> None:
        self._selected_device_id = device_id
        logger.info("UI: device selected id=%s", device_id)
        self._update_details_panel(device_id)

    def _update_details_panel(self, device_id: str) -> None:
        if self._win is None:
            return
        device = next((d for d in self._snapshot.devices if d.id == device_id), None)
        if device is None:
            self._win.details.clear()
            return
        self._win.details.set_device(device)

    # --- operator actions ---

    def dismiss_alert(self, key: ConditionKey) -> None:
        self._engine.dismiss(key)
        self._snapshot = self._engine.snapshot()
        self.refresh_view()

    def set_muted(self, muted: bool) -> None:
        self._sound.set_muted(muted)
        self.settings.set("sound_muted", "1" if muted else "0")

    def apply_thresholds(self, payload: dict) -> bool:
        try:
            cfg = self._engine.set_thresholds(**payload)
        except ConfigError as e:
            logger.warning("UI: thresholds rejected payload=%s error=%s", payload, e)
            QMessageBox.warning(
                self._win,
                _t("dialog.config_error_title"),
                _t("dialog.config_error_message", error=e),
            )
            return False

        self.settings.save_thresholds(cfg)
        self._snapshot = self._engine.snapshot()
        self.refresh_view()
        return True

    def open_thresholds(self) -> None:
        dlg = ThresholdsDialog(initial=self._engine.thresholds, parent=self._win)
        if dlg.exec() != QDialog.Accepted:
            return
        self.apply_thresholds(dlg.payload())
