from __future__ import annotations

import logging
from pathlib import Path

from PySide6.QtCore import QUrl
from PySide6.QtMultimedia import QSoundEffect

logger = logging.getLogger("pulsemon.sound")


class SoundManager:
    def __init__(self, alert_wav: Path, *, volume: float = 0.9) -> None:
        self._alert_path = str(alert_wav)
        self._volume = float(volume)
        self._muted = False

        self._alert = QSoundEffect()
        self._alert.setSource(QUrl.fromLocalFile(self._alert_path))
        self._alert.setLoopCount(1)
        self._alert.setVolume(self._volume)

        if not Path(self._alert_path).exists():
            logger.warning("alert sound missing: %s (run tools/generate_wavs.py)", self._alert_path)

    @property
    def muted(self) -> bool:
        return self._muted

    def set_muted(self, muted: bool) -> None:
        self._muted = bool(muted)
        logger.info("sound muted=%s", self._muted)

    def play_alert(self) -> None:
        if self._muted:
            return
        try:
            logger.info("sound alert file=%s volume=%s play()", self._alert_path, self._volume)
            self._alert.play()
        except Exception:
            logger.exception("failed to play sound")
