from __future__ import annotations

import random
from datetime import datetime
from typing import Optional, Protocol

from pulsemon.core.models import MetricSample

# (low, width) of the uniform seed range per metric
SEED_RANGES = {
    "cpu": (20.0, 40.0),
    "ram": (30.0, 50.0),
    "disk": (60.0, 10.0),
    "network": (10.0, 20.0),
}
DRIFT_WIDTH = 10.0


class RandomSource(Protocol):
    def random(self) -> float: ...


def clamp(value: float, lo: float = 0.0, hi: float = 100.0) -> float:
    return min(hi, max(lo, value))


def _walk(prev: Optional[float], seed: tuple[float, float], rng: RandomSource) -> float:
    if prev is None:
        low, width = seed
        return clamp(low + rng.random() * width)
    drift = (rng.random() - 0.5) * DRIFT_WIDTH
    return clamp(prev + drift)


def next_sample(
    prev: Optional[MetricSample],
    now: datetime,
    rng: RandomSource | None = None,
) -> MetricSample:
    """
    Next point of a device's telemetry: each dimension is an independent
    bounded random walk from `prev`, or a fresh seed when there is no
    previous sample.
    """
    rng = rng or random
    return MetricSample(
        timestamp=now,
        cpu=_walk(prev.cpu if prev else None, SEED_RANGES["cpu"], rng),
        ram=_walk(prev.ram if prev else None, SEED_RANGES["ram"], rng),
        disk=_walk(prev.disk if prev else None, SEED_RANGES["disk"], rng),
        network=_walk(prev.network if prev else None, SEED_RANGES["network"], rng),
    )
