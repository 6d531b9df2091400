from __future__ import annotations

import random
from dataclasses import replace
from datetime import datetime, timedelta, timezone
from typing import Iterable

from pulsemon.core.models import DEVICE_TYPES, HISTORY_CAPACITY, Device, DeviceStatus, MetricSample
from pulsemon.core.status import roll_status
from pulsemon.core.telemetry import RandomSource, next_sample

DEVICE_NAMES = (
    "US-WEST-SRV-01",
    "EU-CENTRAL-DB-02",
    "AS-SOUTH-IOT-09",
    "US-EAST-RTR-04",
    "CLOUD-API-GW",
    "CACHE-REDIS-01",
    "NODE-WORKER-05",
    "LEGACY-MAINFRAME",
    "PROD-ELK-STACK",
    "MESSAGING-RABBIT",
    "STORAGE-SAN-01",
    "FIREWALL-PFE",
)

LOCATIONS = ("San Francisco", "Frankfurt", "Mumbai", "New York", "Tokyo", "London")

INITIAL_WARNING_P = 0.2


def _pick(seq: tuple, rng: RandomSource):
    return seq[min(len(seq) - 1, int(rng.random() * len(seq)))]


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


def _backfill(rng: RandomSource, now: datetime, period_secs: float) -> tuple[MetricSample, ...]:
    samples: list[MetricSample] = []
    prev = None
    for i in range(HISTORY_CAPACITY):
        ts = now - timedelta(seconds=period_secs * (HISTORY_CAPACITY - 1 - i))
        prev = next_sample(prev, ts, rng)
        samples.append(prev)
    return tuple(samples)


def create_fleet(
    count: int,
    rng: RandomSource | None = None,
    now: datetime | None = None,
    period_secs: float = 3.0,
) -> list[Device]:
    if count < 0:
        raise ValueError(f"fleet size must be >= 0, got {count}")
    rng = rng or random
    now = now or _utc_now()

    devices: list[Device] = []
    for i in range(count):
        dtype = _pick(DEVICE_TYPES, rng)
        status: DeviceStatus = "WARNING" if rng.random() < INITIAL_WARNING_P else "ONLINE"
        address = f"192.168.{int(rng.random() * 254)}.{int(rng.random() * 254)}"
        devices.append(
            Device(
                id=f"dev-{i}",
                name=DEVICE_NAMES[i % len(DEVICE_NAMES)],
                type=dtype,
                status=status,
                location=_pick(LOCATIONS, rng),
                address=address,
                history=_backfill(rng, now, period_secs),
                last_update=now,
            )
        )
    return devices


def append_sample(device: Device, sample: MetricSample, now: datetime | None = None) -> Device:
    """FIFO insert; the oldest sample is evicted once the history is full."""
    last = device.latest
    if last is not None and sample.timestamp < last.timestamp:
        # wall clock stepped back; keep the history ordered
        sample = replace(sample, timestamp=last.timestamp)
    keep = device.history[-(HISTORY_CAPACITY - 1):] if HISTORY_CAPACITY > 1 else ()
    return replace(
        device,
        history=keep + (sample,),
        last_update=now or sample.timestamp,
    )


def advance(
    devices: Iterable[Device],
    rng: RandomSource | None = None,
    now: datetime | None = None,
) -> list[Device]:
    """Next generation of every device. The input devices are not modified."""
    rng = rng or random
    now = now or _utc_now()

    out: list[Device] = []
    for d in devices:
        sample = next_sample(d.latest, now, rng)
        moved = append_sample(d, sample, now)
        out.append(replace(moved, status=roll_status(d.status, rng)))
    return out
