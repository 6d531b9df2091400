from __future__ import annotations

from datetime import datetime, timedelta, timezone

import pytest

from pulsemon.core.models import Device, MetricSample

BASE_TS = datetime(2024, 1, 1, 12, 0, 0, tzinfo=timezone.utc)


class FixedRandom:
    """Random source that returns the same value (or a repeating sequence)."""

    def __init__(self, *values: float) -> None:
        self._values = list(values) or [0.5]
        self._i = 0

    def random(self) -> float:
        v = self._values[self._i % len(self._values)]
        self._i += 1
        return v


def sample(i: int = 0, cpu: float = 50.0, ram: float = 50.0, disk: float = 65.0, network: float = 20.0) -> MetricSample:
    return MetricSample(
        timestamp=BASE_TS + timedelta(seconds=3 * i),
        cpu=cpu,
        ram=ram,
        disk=disk,
        network=network,
    )


def make_device(
    cpus: list[float],
    rams: list[float] | None = None,
    device_id: str = "dev-0",
    name: str = "US-WEST-SRV-01",
    status: str = "ONLINE",
) -> Device:
    rams = rams if rams is not None else [10.0] * len(cpus)
    history = tuple(sample(i, cpu=c, ram=r) for i, (c, r) in enumerate(zip(cpus, rams)))
    return Device(
        id=device_id,
        name=name,
        type="SERVER",
        status=status,
        location="Tokyo",
        address="192.168.1.10",
        history=history,
        last_update=history[-1].timestamp if history else BASE_TS,
    )


@pytest.fixture
def fixed_random():
    return FixedRandom
