from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Literal, NamedTuple, Optional

DeviceType = Literal["SERVER", "ROUTER", "DATABASE", "IOT"]
DeviceStatus = Literal["ONLINE", "OFFLINE", "WARNING", "ERROR"]
MetricKind = Literal["CPU", "RAM"]

DEVICE_TYPES: tuple[DeviceType, ...] = ("SERVER", "ROUTER", "DATABASE", "IOT")
DEVICE_STATUSES: tuple[DeviceStatus, ...] = ("ONLINE", "OFFLINE", "WARNING", "ERROR")

HISTORY_CAPACITY = 20


class InvariantError(RuntimeError):
    """Broken engine invariant. Indicates a defect, never recovered from."""


@dataclass(frozen=True)
class MetricSample:
    timestamp: datetime
    cpu: float
    ram: float
    disk: float
    network: float

    def __post_init__(self) -> None:
        for name in ("cpu", "ram", "disk", "network"):
            value = getattr(self, name)
            if not 0.0 <= value <= 100.0:
                raise InvariantError(f"sample {name}={value!r} outside [0, 100]")

    def value_of(self, metric: MetricKind) -> float:
        return self.cpu if metric == "CPU" else self.ram


@dataclass(frozen=True)
class Device:
    id: str
    name: str
    type: DeviceType
    status: DeviceStatus
    location: str
    address: str
    history: tuple[MetricSample, ...]
    last_update: datetime

    def __post_init__(self) -> None:
        if len(self.history) > HISTORY_CAPACITY:
            raise InvariantError(
                f"device {self.id} history length {len(self.history)} exceeds {HISTORY_CAPACITY}"
            )
        for older, newer in zip(self.history, self.history[1:]):
            if newer.timestamp < older.timestamp:
                raise InvariantError(f"device {self.id} history out of order")

    @property
    def latest(self) -> Optional[MetricSample]:
        return self.history[-1] if self.history else None


class ConditionKey(NamedTuple):
    """Durable identity of one (device, metric, threshold, duration) condition."""

    device_id: str
    metric: MetricKind
    threshold: float
    sustain_seconds: float


@dataclass(frozen=True)
class AlertCondition:
    key: ConditionKey
    device_id: str
    device_name: str
    metric: MetricKind
    observed_value: float


@dataclass(frozen=True)
class Alert:
    key: ConditionKey
    device_id: str
    device_name: str
    metric: MetricKind
    observed_value: float
    raised_at: datetime
