from __future__ import annotations

import pytest

from pulsemon.core.status import STATUS_PRIORITY, roll_status, summarize_fleet

from conftest import FixedRandom, make_device


def test_degrading_rolls():
    assert roll_status("ONLINE", FixedRandom(0.9995)) == "OFFLINE"
    assert roll_status("ONLINE", FixedRandom(0.997)) == "ERROR"
    assert roll_status("ONLINE", FixedRandom(0.99)) == "WARNING"
    assert roll_status("ERROR", FixedRandom(0.99)) == "WARNING"


def test_recovery_uses_a_second_independent_roll():
    # first roll selects nothing, second roll recovers
    assert roll_status("WARNING", FixedRandom(0.5, 0.05)) == "ONLINE"
    assert roll_status("OFFLINE", FixedRandom(0.5, 0.05)) == "ONLINE"
    # second roll too high: unchanged
    assert roll_status("ERROR", FixedRandom(0.5, 0.5)) == "ERROR"
    # already online stays online
    assert roll_status("ONLINE", FixedRandom(0.5, 0.05)) == "ONLINE"


def test_status_priority_order():
    ordered = sorted(STATUS_PRIORITY, key=STATUS_PRIORITY.get)
    assert ordered == ["ERROR", "WARNING", "ONLINE", "OFFLINE"]


def test_summarize_fleet_counts_and_averages():
    devices = [
        make_device([10.0, 40.0], rams=[5.0, 60.0], device_id="a", status="ONLINE"),
        make_device([90.0, 80.0], rams=[5.0, 20.0], device_id="b", status="WARNING"),
        make_device([50.0, 30.0], rams=[5.0, 40.0], device_id="c", status="ERROR"),
        make_device([50.0, 10.0], rams=[5.0, 0.0], device_id="d", status="OFFLINE"),
    ]
    s = summarize_fleet(devices)

    assert (s.total, s.online, s.warning, s.error, s.offline) == (4, 1, 1, 1, 1)
    assert s.avg_cpu == pytest.approx((40.0 + 80.0 + 30.0 + 10.0) / 4)
    assert s.avg_ram == pytest.approx((60.0 + 20.0 + 40.0 + 0.0) / 4)


def test_summarize_empty_fleet():
    s = summarize_fleet([])
    assert s.total == 0
    assert s.avg_cpu == 0.0
