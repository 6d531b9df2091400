from __future__ import annotations

import logging
import os
import sys
from dataclasses import dataclass
from pathlib import Path

logger = logging.getLogger("pulsemon.config")

DEFAULT_FLEET_SIZE = 16
DEFAULT_TICK_SECS = 3.0


@dataclass(frozen=True)
class AppPaths:
    base_dir: Path
    data_dir: Path
    logs_dir: Path
    db_path: Path


@dataclass(frozen=True)
class EngineSettings:
    fleet_size: int = DEFAULT_FLEET_SIZE
    tick_secs: float = DEFAULT_TICK_SECS


def _portable_enabled() -> bool:
    raw = os.environ.get("PULSEMON_PORTABLE", "")
    return raw.strip().lower() in {"1", "true", "yes", "on"}


def _app_root() -> Path:
    if getattr(sys, "frozen", False):
        return Path(sys.executable).resolve().parent
    return Path(__file__).resolve().parents[2]


def resource_path(rel: str) -> Path:
    if getattr(sys, "frozen", False) and hasattr(sys, "_MEIPASS"):
        return Path(sys._MEIPASS) / rel  # type: ignore[attr-defined]
    return _app_root() / rel


def get_paths() -> AppPaths:
    if _portable_enabled():
        base = _app_root() / "PulsemonData"
    else:
        appdata = os.environ.get("APPDATA")
        if appdata:
            base = Path(appdata) / "Pulsemon"
        else:
            base = Path.home() / ".local" / "share" / "Pulsemon"
    data = base / "data"
    logs = base / "logs"

    data.mkdir(parents=True, exist_ok=True)
    logs.mkdir(parents=True, exist_ok=True)

    return AppPaths(base_dir=base, data_dir=data, logs_dir=logs, db_path=data / "pulsemon.db")


def _env_number(name: str, default, cast, minimum):
    raw = os.environ.get(name, "").strip()
    if not raw:
        return default
    try:
        value = cast(raw)
    except ValueError:
        logger.warning("ignoring %s=%r: not a number", name, raw)
        return default
    if value < minimum:
        logger.warning("ignoring %s=%r: below %s", name, raw, minimum)
        return default
    return value


def get_engine_settings() -> EngineSettings:
    fleet = _env_number("PULSEMON_FLEET_SIZE", DEFAULT_FLEET_SIZE, int, 0)
    tick = _env_number("PULSEMON_TICK_SECS", DEFAULT_TICK_SECS, float, 0.1)
    return EngineSettings(fleet_size=fleet, tick_secs=tick)
