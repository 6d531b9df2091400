from __future__ import annotations

import math

import pytest

from pulsemon.core.thresholds import DEFAULT_THRESHOLDS, ConfigError, ThresholdConfig


def test_defaults():
    assert DEFAULT_THRESHOLDS == ThresholdConfig(90, 90, 60)


@pytest.mark.parametrize(
    "changes",
    [
        {"sustain_seconds": 0},
        {"sustain_seconds": -3},
        {"cpu_threshold_pct": 100.5},
        {"ram_threshold_pct": -1},
        {"cpu_threshold_pct": "90"},
        {"ram_threshold_pct": True},
        {"sustain_seconds": math.nan},
        {"cpu_threshold_pct": math.inf},
    ],
)
def test_invalid_values_are_rejected(changes):
    with pytest.raises(ConfigError):
        DEFAULT_THRESHOLDS.updated(**changes)


def test_failed_update_keeps_previous_config():
    cfg = ThresholdConfig(80, 70, 30)
    with pytest.raises(ConfigError):
        cfg.updated(sustain_seconds=-1)
    assert cfg == ThresholdConfig(80, 70, 30)


def test_boundary_values_are_accepted():
    cfg = ThresholdConfig(cpu_threshold_pct=0, ram_threshold_pct=100, sustain_seconds=0.5)
    assert cfg.ram_threshold_pct == 100


def test_unknown_field():
    with pytest.raises(ConfigError, match="unknown"):
        DEFAULT_THRESHOLDS.updated(disk_threshold_pct=50)


def test_config_error_is_a_value_error():
    assert issubclass(ConfigError, ValueError)


def test_from_mapping_parses_and_falls_back():
    cfg = ThresholdConfig.from_mapping({"cpu_threshold_pct": "75", "ram_threshold_pct": "", "sustain_seconds": "12.5"})
    assert cfg == ThresholdConfig(75, 90, 12.5)
    assert isinstance(cfg.cpu_threshold_pct, int)

    with pytest.raises(ConfigError):
        ThresholdConfig.from_mapping({"cpu_threshold_pct": "high"})


def test_mapping_survives_a_save_and_load():
    cfg = ThresholdConfig(82.5, 91, 45)
    assert ThresholdConfig.from_mapping(cfg.as_mapping()) == cfg
