from __future__ import annotations

from dataclasses import dataclass
from typing import Iterable

from pulsemon.core.models import Device, DeviceStatus
from pulsemon.core.telemetry import RandomSource

# upper bands of a single roll in [0, 1)
OFFLINE_P = 0.001
ERROR_P = 0.004
WARNING_P = 0.015
RECOVER_P = 0.1

STATUS_PRIORITY: dict[DeviceStatus, int] = {
    "ERROR": 0,
    "WARNING": 1,
    "ONLINE": 2,
    "OFFLINE": 3,
}


def roll_status(current: DeviceStatus, rng: RandomSource) -> DeviceStatus:
    """
    Coarse health roll, independent of metric history and of alerting.
    A second, independent draw decides recovery of a non-ONLINE device.
    """
    roll = rng.random()
    if roll >= 1.0 - OFFLINE_P:
        return "OFFLINE"
    if roll >= 1.0 - OFFLINE_P - ERROR_P:
        return "ERROR"
    if roll >= 1.0 - OFFLINE_P - ERROR_P - WARNING_P:
        return "WARNING"

    recover = rng.random()
    if current != "ONLINE" and recover < RECOVER_P:
        return "ONLINE"
    return current


@dataclass(frozen=True)
class FleetSummary:
    total: int
    online: int
    warning: int
    error: int
    offline: int
    avg_cpu: float
    avg_ram: float


def summarize_fleet(devices: Iterable[Device]) -> FleetSummary:
    devs = list(devices)
    counts = {s: 0 for s in STATUS_PRIORITY}
    cpu_total = 0.0
    ram_total = 0.0
    for d in devs:
        counts[d.status] += 1
        last = d.latest
        if last is not None:
            cpu_total += last.cpu
            ram_total += last.ram

    n = len(devs) or 1
    return FleetSummary(
        total=len(devs),
        online=counts["ONLINE"],
        warning=counts["WARNING"],
        error=counts["ERROR"],
        offline=counts["OFFLINE"],
        avg_cpu=cpu_total / n,
        avg_ram=ram_total / n,
    )
