from __future__ import annotations

import logging
from datetime import datetime, timezone

from pulsemon.core.thresholds import ConfigError, ThresholdConfig
from pulsemon.storage.db import SQLiteDatabase

logger = logging.getLogger("pulsemon.repo")

THRESHOLD_KEYS = ("cpu_threshold_pct", "ram_threshold_pct", "sustain_seconds")


def utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


class SettingsRepo:
    def __init__(self, db: SQLiteDatabase) -> None:
        self.db = db

    def get(self, key: str, default: str = "") -> str:
        row = self.db.connect().execute("SELECT value FROM settings WHERE key=?;", (key,)).fetchone()
        return str(row["value"]) if row else default

    def set(self, key: str, value: str) -> None:
        self.db.connect().execute(
            """
            INSERT INTO settings(key, value, updated_at_utc) VALUES (?,?,?)
            ON CONFLICT(key) DO UPDATE SET value=excluded.value, updated_at_utc=excluded.updated_at_utc;
            """,
            (key, str(value), utc_now_iso()),
        )

    def load_thresholds(self, fallback: ThresholdConfig | None = None) -> ThresholdConfig:
        """Stored thresholds, or `fallback` (defaults) if nothing usable is stored."""
        fallback = fallback or ThresholdConfig()
        raw = {k: self.get(k) for k in THRESHOLD_KEYS}
        try:
            return ThresholdConfig.from_mapping(raw, fallback)
        except ConfigError:
            logger.warning("stored thresholds rejected, using %s", fallback, exc_info=True)
            return fallback

    def save_thresholds(self, cfg: ThresholdConfig) -> None:
        with self.db.transaction():
            for key, value in cfg.as_mapping().items():
                self.set(key, value)
        logger.info("thresholds saved %s", cfg)
