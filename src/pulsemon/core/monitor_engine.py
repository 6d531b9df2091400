from __future__ import annotations

import logging
import random
import threading
import time
from dataclasses import dataclass
from datetime import datetime, timezone
from typing import Any, Callable

from pulsemon.core.alerts import SAMPLING_PERIOD_SECS, dismiss, evaluate, reconcile
from pulsemon.core.fleet import advance, create_fleet
from pulsemon.core.models import Alert, ConditionKey, Device
from pulsemon.core.telemetry import RandomSource
from pulsemon.core.thresholds import ThresholdConfig

logger = logging.getLogger("pulsemon.engine")


@dataclass(frozen=True)
class EngineSnapshot:
    devices: tuple[Device, ...]
    alerts: tuple[Alert, ...]
    thresholds: ThresholdConfig
    dismissed: frozenset[ConditionKey]
    tick_no: int
    ts: datetime
    # bumped by every state change (tick, dismiss, thresholds); newer wins
    version: int = 0


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class MonitorEngine:
    """
    Tick driver:
    - every `period_secs` advances the fleet, evaluates and reconciles alerts
    - one tick is one critical section; readers only see whole snapshots
    - operator actions (thresholds, dismiss) apply to the next tick
    - results leave through callbacks, called outside the lock
    """

    def __init__(
        self,
        fleet_size: int = 16,
        period_secs: float = SAMPLING_PERIOD_SECS,
        thresholds: ThresholdConfig | None = None,
        rng: RandomSource | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        if period_secs <= 0:
            raise ValueError(f"tick period must be positive, got {period_secs}")
        self._lock = threading.RLock()
        self._rng = rng or random.Random()
        self._clock = clock
        self.period_secs = float(period_secs)

        now = self._clock()
        self._devices: tuple[Device, ...] = tuple(
            create_fleet(fleet_size, rng=self._rng, now=now, period_secs=self.period_secs)
        )
        self._alerts: tuple[Alert, ...] = ()
        self._dismissed: frozenset[ConditionKey] = frozenset()
        self._thresholds = thresholds or ThresholdConfig()
        self._tick_no = 0
        self._ts = now
        self._version = 0

        self._stop = threading.Event()
        self._thread: threading.Thread | None = None

        self.on_tick: Callable[[EngineSnapshot], None] | None = None
        self.on_alert: Callable[[Alert], None] | None = None

    # --- read side ---

    def snapshot(self) -> EngineSnapshot:
        with self._lock:
            return self._snapshot_locked()

    def _snapshot_locked(self) -> EngineSnapshot:
        return EngineSnapshot(
            devices=self._devices,
            alerts=self._alerts,
            thresholds=self._thresholds,
            dismissed=self._dismissed,
            tick_no=self._tick_no,
            ts=self._ts,
            version=self._version,
        )

    @property
    def thresholds(self) -> ThresholdConfig:
        with self._lock:
            return self._thresholds

    # --- operator actions ---

    def set_thresholds(self, **changes: Any) -> ThresholdConfig:
        """Validate and apply; on ConfigError the previous config stays in force."""
        with self._lock:
            new_cfg = self._thresholds.updated(**changes)
            if new_cfg != self._thresholds:
                logger.info("thresholds changed %s -> %s", self._thresholds, new_cfg)
            self._thresholds = new_cfg
            self._version += 1
            return new_cfg

    def dismiss(self, key: ConditionKey) -> bool:
        with self._lock:
            before = len(self._alerts)
            remaining, self._dismissed = dismiss(self._alerts, self._dismissed, key)
            self._alerts = tuple(remaining)
            self._version += 1
            removed = len(self._alerts) < before
        logger.info("alert dismissed key=%s removed=%s", key, removed)
        return removed

    # --- tick ---

    def tick(self) -> EngineSnapshot:
        with self._lock:
            now = self._clock()
            if now < self._ts:
                now = self._ts

            devices = advance(self._devices, rng=self._rng, now=now)
            for old, new in zip(self._devices, devices):
                if old.status != new.status:
                    logger.info("status transition device=%s %s->%s", new.id, old.status, new.status)

            qualifying = evaluate(devices, self._thresholds, self._dismissed, period_secs=self.period_secs)
            alerts = reconcile(self._alerts, qualifying, now=now)
            raised = alerts[len(self._alerts):]

            self._devices = tuple(devices)
            self._alerts = tuple(alerts)
            self._tick_no += 1
            self._ts = now
            self._version += 1
            snap = self._snapshot_locked()

        for a in raised:
            logger.info(
                "alert raised device=%s metric=%s value=%.1f threshold=%s sustain=%ss",
                a.device_id,
                a.metric,
                a.observed_value,
                a.key.threshold,
                a.key.sustain_seconds,
            )
            self._emit(self.on_alert, a)
        self._emit(self.on_tick, snap)
        return snap

    @staticmethod
    def _emit(callback: Callable[[Any], None] | None, payload: Any) -> None:
        if callback is None:
            return
        try:
            callback(payload)
        except Exception:
            logger.exception("engine callback failed")

    # --- background loop ---

    def start(self) -> None:
        if self._thread and self._thread.is_alive():
            return
        self._stop.clear()
        self._thread = threading.Thread(target=self._run, name="MonitorEngine", daemon=True)
        self._thread.start()

    def stop(self) -> None:
        self._stop.set()
        if self._thread:
            self._thread.join(timeout=2.0)
            self._thread = None

    def is_running(self) -> bool:
        return bool(self._thread and self._thread.is_alive())

    def _run(self) -> None:
        logger.info("engine started period=%ss devices=%s", self.period_secs, len(self._devices))
        next_tick = time.perf_counter() + self.period_secs
        try:
            while not self._stop.is_set():
                nowp = time.perf_counter()
                if nowp < next_tick:
                    self._stop.wait(min(0.05, next_tick - nowp))
                    continue
                next_tick += self.period_secs
                self.tick()
        except Exception:
            logger.exception("engine crashed")
            raise
        finally:
            logger.info("engine stopped")
