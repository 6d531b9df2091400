from __future__ import annotations

import random

import pytest

from pulsemon.core.models import InvariantError, MetricSample
from pulsemon.core.telemetry import clamp, next_sample

from conftest import BASE_TS, FixedRandom, sample


def test_samples_stay_within_bounds_over_long_walk():
    rng = random.Random(1234)
    prev = None
    for _ in range(2000):
        prev = next_sample(prev, BASE_TS, rng)
        for v in (prev.cpu, prev.ram, prev.disk, prev.network):
            assert 0.0 <= v <= 100.0


def test_seed_ranges_per_metric():
    low = next_sample(None, BASE_TS, FixedRandom(0.0))
    assert (low.cpu, low.ram, low.disk, low.network) == (20.0, 30.0, 60.0, 10.0)

    high = next_sample(None, BASE_TS, FixedRandom(0.999))
    assert 59.0 < high.cpu < 60.0
    assert 79.0 < high.ram < 80.0
    assert 69.0 < high.disk < 70.0
    assert 29.0 < high.network < 30.0


def test_drift_is_bounded_and_symmetric():
    prev = sample(cpu=50.0, ram=50.0, disk=50.0, network=50.0)

    down = next_sample(prev, BASE_TS, FixedRandom(0.0))
    assert down.cpu == pytest.approx(45.0)

    up = next_sample(prev, BASE_TS, FixedRandom(0.999))
    assert up.cpu == pytest.approx(54.99)

    still = next_sample(prev, BASE_TS, FixedRandom(0.5))
    assert still.ram == pytest.approx(50.0)


def test_walk_clamps_at_both_edges():
    top = next_sample(sample(cpu=99.0, ram=98.0, disk=100.0, network=97.0), BASE_TS, FixedRandom(0.99))
    assert top.cpu == 100.0
    assert top.disk == 100.0

    bottom = next_sample(sample(cpu=1.0, ram=0.0, disk=2.0, network=3.0), BASE_TS, FixedRandom(0.0))
    assert bottom.cpu == 0.0
    assert bottom.ram == 0.0


def test_timestamp_is_generation_time():
    assert next_sample(None, BASE_TS, FixedRandom(0.3)).timestamp == BASE_TS


def test_clamp():
    assert clamp(-3.0) == 0.0
    assert clamp(130.0) == 100.0
    assert clamp(42.5) == 42.5


def test_out_of_range_sample_is_an_invariant_violation():
    with pytest.raises(InvariantError):
        MetricSample(timestamp=BASE_TS, cpu=100.5, ram=1.0, disk=1.0, network=1.0)
    with pytest.raises(InvariantError):
        MetricSample(timestamp=BASE_TS, cpu=1.0, ram=1.0, disk=-0.1, network=1.0)
