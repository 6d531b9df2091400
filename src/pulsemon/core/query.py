from __future__ import annotations

from typing import Iterable, Literal, Optional

from pulsemon.core.models import Device, DeviceStatus
from pulsemon.core.status import STATUS_PRIORITY

SortKey = Literal["name", "status", "update"]
SortOrder = Literal["asc", "desc"]

SORT_KEYS: tuple[SortKey, ...] = ("name", "status", "update")


def filter_devices(
    devices: Iterable[Device],
    search: str = "",
    status: Optional[DeviceStatus] = None,
) -> list[Device]:
    needle = search.strip()
    folded = needle.casefold()
    out: list[Device] = []
    for d in devices:
        if needle and folded not in d.name.casefold() and needle not in d.address:
            continue
        if status is not None and d.status != status:
            continue
        out.append(d)
    return out


def sort_devices(devices: Iterable[Device], key: SortKey = "name", order: SortOrder = "asc") -> list[Device]:
    if order not in ("asc", "desc"):
        raise ValueError(f"unknown sort order: {order!r}")

    if key == "name":
        ordered = sorted(devices, key=lambda d: d.name.casefold())
    elif key == "status":
        ordered = sorted(devices, key=lambda d: STATUS_PRIORITY[d.status])
    elif key == "update":
        # most recently updated first
        ordered = sorted(devices, key=lambda d: d.last_update, reverse=True)
    else:
        raise ValueError(f"unknown sort key: {key!r}")

    if order == "desc":
        ordered.reverse()
    return ordered
