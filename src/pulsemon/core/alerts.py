from __future__ import annotations

import math
from datetime import datetime, timezone
from typing import AbstractSet, Iterable, Sequence

from pulsemon.core.models import Alert, AlertCondition, ConditionKey, Device, MetricKind
from pulsemon.core.thresholds import ThresholdConfig

SAMPLING_PERIOD_SECS = 3.0


def points_needed(sustain_seconds: float, period_secs: float = SAMPLING_PERIOD_SECS) -> int:
    return max(1, math.ceil(sustain_seconds / period_secs))


def condition_key(device_id: str, metric: MetricKind, config: ThresholdConfig) -> ConditionKey:
    threshold = config.cpu_threshold_pct if metric == "CPU" else config.ram_threshold_pct
    return ConditionKey(device_id, metric, threshold, config.sustain_seconds)


def evaluate(
    devices: Iterable[Device],
    config: ThresholdConfig,
    dismissed: AbstractSet[ConditionKey],
    period_secs: float = SAMPLING_PERIOD_SECS,
) -> list[AlertCondition]:
    """
    Conditions qualifying right now: every sample of the trailing window
    strictly above the metric's threshold. Devices with a shorter history
    than the window are skipped. Stateless.
    """
    needed = points_needed(config.sustain_seconds, period_secs)
    out: list[AlertCondition] = []

    for d in devices:
        if len(d.history) < needed:
            continue
        window = d.history[-needed:]
        latest = window[-1]

        for metric, threshold in (("CPU", config.cpu_threshold_pct), ("RAM", config.ram_threshold_pct)):
            if not all(s.value_of(metric) > threshold for s in window):
                continue
            key = condition_key(d.id, metric, config)
            if key in dismissed:
                continue
            out.append(
                AlertCondition(
                    key=key,
                    device_id=d.id,
                    device_name=d.name,
                    metric=metric,
                    observed_value=latest.value_of(metric),
                )
            )
    return out


def reconcile(
    active: Sequence[Alert],
    qualifying: Iterable[AlertCondition],
    now: datetime | None = None,
) -> list[Alert]:
    """
    Merge newly qualifying conditions into the active set. Existing alerts
    keep their snapshot; nothing is resolved automatically.
    """
    now = now or datetime.now(timezone.utc)
    seen = {a.key for a in active}
    merged = list(active)

    for c in qualifying:
        if c.key in seen:
            continue
        seen.add(c.key)
        merged.append(
            Alert(
                key=c.key,
                device_id=c.device_id,
                device_name=c.device_name,
                metric=c.metric,
                observed_value=c.observed_value,
                raised_at=now,
            )
        )
    return merged


def dismiss(
    active: Sequence[Alert],
    dismissed: AbstractSet[ConditionKey],
    key: ConditionKey,
) -> tuple[list[Alert], frozenset[ConditionKey]]:
    remaining = [a for a in active if a.key != key]
    return remaining, frozenset(dismissed) | {key}
