from __future__ import annotations

import math
from dataclasses import dataclass, replace
from typing import Any, Mapping


class ConfigError(ValueError):
    """Operator supplied a threshold configuration the engine cannot use."""


def _as_number(field: str, value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ConfigError(f"{field} must be a number, got {value!r}")
    if not math.isfinite(value):
        raise ConfigError(f"{field} must be finite, got {value!r}")
    return value


@dataclass(frozen=True)
class ThresholdConfig:
    cpu_threshold_pct: float = 90
    ram_threshold_pct: float = 90
    sustain_seconds: float = 60

    def __post_init__(self) -> None:
        for field in ("cpu_threshold_pct", "ram_threshold_pct"):
            value = _as_number(field, getattr(self, field))
            if not 0 <= value <= 100:
                raise ConfigError(f"{field} must be within [0, 100], got {value!r}")
        sustain = _as_number("sustain_seconds", self.sustain_seconds)
        if sustain <= 0:
            raise ConfigError(f"sustain_seconds must be positive, got {sustain!r}")

    def updated(self, **changes: Any) -> "ThresholdConfig":
        unknown = set(changes) - {"cpu_threshold_pct", "ram_threshold_pct", "sustain_seconds"}
        if unknown:
            raise ConfigError(f"unknown threshold fields: {', '.join(sorted(unknown))}")
        return replace(self, **changes)

    def as_mapping(self) -> dict[str, str]:
        return {
            "cpu_threshold_pct": repr(self.cpu_threshold_pct),
            "ram_threshold_pct": repr(self.ram_threshold_pct),
            "sustain_seconds": repr(self.sustain_seconds),
        }

    @classmethod
    def from_mapping(cls, raw: Mapping[str, str], fallback: "ThresholdConfig | None" = None) -> "ThresholdConfig":
        """
        Build a config from stored string values. Missing keys come from
        `fallback` (defaults if not given); unparsable ones raise ConfigError.
        """
        base = fallback or cls()
        changes: dict[str, float] = {}
        for field in ("cpu_threshold_pct", "ram_threshold_pct", "sustain_seconds"):
            text = raw.get(field)
            if text is None or str(text).strip() == "":
                continue
            try:
                num = float(text)
            except ValueError as e:
                raise ConfigError(f"{field} is not a number: {text!r}") from e
            changes[field] = int(num) if num.is_integer() else num
        return base.updated(**changes)


DEFAULT_THRESHOLDS = ThresholdConfig()
