from __future__ import annotations

import random
from dataclasses import replace
from datetime import timedelta

import pytest

from pulsemon.core.fleet import DEVICE_NAMES, advance, append_sample, create_fleet
from pulsemon.core.models import HISTORY_CAPACITY, DEVICE_STATUSES, DEVICE_TYPES, InvariantError

from conftest import BASE_TS, FixedRandom, make_device, sample


def test_create_fleet_backfills_full_histories():
    devices = create_fleet(5, rng=random.Random(7), now=BASE_TS)

    assert [d.id for d in devices] == ["dev-0", "dev-1", "dev-2", "dev-3", "dev-4"]
    for d in devices:
        assert len(d.history) == HISTORY_CAPACITY
        assert d.type in DEVICE_TYPES
        assert d.status in ("ONLINE", "WARNING")
        assert d.address.startswith("192.168.")
        assert d.history[-1].timestamp == BASE_TS
        assert d.history[0].timestamp == BASE_TS - timedelta(seconds=3 * (HISTORY_CAPACITY - 1))
        stamps = [s.timestamp for s in d.history]
        assert stamps == sorted(stamps)


def test_create_fleet_cycles_names():
    devices = create_fleet(len(DEVICE_NAMES) + 2, rng=random.Random(1), now=BASE_TS)
    assert devices[0].name == DEVICE_NAMES[0]
    assert devices[len(DEVICE_NAMES)].name == DEVICE_NAMES[0]
    assert len({d.id for d in devices}) == len(devices)


def test_create_fleet_edge_sizes():
    assert create_fleet(0) == []
    with pytest.raises(ValueError):
        create_fleet(-1)


def test_backfill_is_a_chained_walk():
    d = create_fleet(1, rng=FixedRandom(0.99), now=BASE_TS)[0]
    cpus = [s.cpu for s in d.history]
    # seed 59.6, then +4.9 per step until clamped
    assert cpus[0] == pytest.approx(59.6)
    assert cpus[1] == pytest.approx(64.5)
    assert cpus[-1] == 100.0


def test_advance_keeps_history_bounded():
    rng = random.Random(99)
    devices = create_fleet(4, rng=rng, now=BASE_TS)
    for i in range(1, 60):
        devices = advance(devices, rng=rng, now=BASE_TS + timedelta(seconds=3 * i))
        for d in devices:
            assert len(d.history) == HISTORY_CAPACITY
            assert d.last_update == BASE_TS + timedelta(seconds=3 * i)
            assert d.status in DEVICE_STATUSES


def test_history_grows_until_capacity():
    devices = [make_device([40.0, 41.0, 42.0])]
    rng = FixedRandom(0.5)
    for tick in range(1, 25):
        devices = advance(devices, rng=rng, now=BASE_TS + timedelta(seconds=100 + tick))
        assert len(devices[0].history) == min(3 + tick, HISTORY_CAPACITY)


def test_advance_does_not_touch_input():
    before = create_fleet(2, rng=random.Random(3), now=BASE_TS)
    snapshot = [d.history for d in before]
    after = advance(before, rng=random.Random(4), now=BASE_TS + timedelta(seconds=3))

    assert [d.history for d in before] == snapshot
    assert after[0].history[:-1] == before[0].history[1:]
    assert after[0].history[-1].timestamp == BASE_TS + timedelta(seconds=3)


def test_advance_never_leaves_empty_history():
    empty = replace(make_device([50.0]), history=())
    out = advance([empty], rng=FixedRandom(0.5), now=BASE_TS)
    assert len(out[0].history) == 1


def test_append_sample_evicts_oldest_when_full():
    d = make_device([float(i) for i in range(HISTORY_CAPACITY)])
    new = sample(HISTORY_CAPACITY, cpu=77.0)
    out = append_sample(d, new)

    assert len(out.history) == HISTORY_CAPACITY
    assert out.history[0].cpu == 1.0
    assert out.history[-1].cpu == 77.0
    assert out.last_update == new.timestamp


def test_append_sample_keeps_order_when_clock_steps_back():
    d = make_device([10.0, 20.0])
    late = d.history[-1].timestamp
    out = append_sample(d, sample(-5, cpu=30.0))
    assert out.history[-1].timestamp == late
    assert out.history[-1].cpu == 30.0


def test_device_rejects_oversized_or_unordered_history():
    with pytest.raises(InvariantError):
        make_device([10.0] * (HISTORY_CAPACITY + 1))

    d = make_device([10.0, 20.0])
    with pytest.raises(InvariantError):
        replace(d, history=tuple(reversed(d.history)))
