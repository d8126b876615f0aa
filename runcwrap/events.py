"""Events and statistics reported by ``runc events``."""

from __future__ import annotations

import enum
import json
from dataclasses import dataclass, field, fields, is_dataclass
from typing import Any, Callable, Optional

from .errors import JsonDeserializationError

_U64_MAX = 2**64 - 1


class EventType(enum.Enum):
    """Kind of event generated by runc."""

    STATS = "stats"
    OOM = "oom"


def _as_u64(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or not 0 <= value <= _U64_MAX:
        raise JsonDeserializationError(f"expected an unsigned 64-bit integer, got {value!r}")
    return value


def _as_str(value: Any) -> str:
    if not isinstance(value, str):
        raise JsonDeserializationError(f"expected a string, got {value!r}")
    return value


def _as_list(convert: Callable[[Any], Any]) -> Callable[[Any], list]:
    def load(value: Any) -> list:
        if not isinstance(value, list):
            raise JsonDeserializationError(f"expected an array, got {value!r}")
        return [convert(item) for item in value]

    return load


def _as_u64_map(value: Any) -> dict[str, int]:
    if not isinstance(value, dict):
        raise JsonDeserializationError(f"expected an object, got {value!r}")
    return {_as_str(k): _as_u64(v) for k, v in value.items()}


def _as_event_type(value: Any) -> EventType:
    try:
        return EventType(value)
    except ValueError:
        raise JsonDeserializationError(f"unknown event type {value!r}") from None


def _nested(cls: type) -> Callable[[Any], Any]:
    return lambda value: _load(cls, value)


def _json(
    load: Callable[[Any], Any] = _as_u64, key: Optional[str] = None, optional: bool = False
) -> Any:
    metadata = {"load": load, "key": key, "optional": optional}
    if optional:
        return field(default=None, metadata=metadata)
    return field(metadata=metadata)


def _load(cls: type, data: Any) -> Any:
    if not isinstance(data, dict):
        raise JsonDeserializationError(f"expected a JSON object for {cls.__name__}")
    kwargs = {}
    for f in fields(cls):
        key = f.metadata["key"] or f.name
        value = data.get(key)
        if value is None:
            if f.metadata["optional"]:
                kwargs[f.name] = None
                continue
            if key not in data:
                raise JsonDeserializationError(f"missing field `{key}`")
        kwargs[f.name] = f.metadata["load"](value)
    return cls(**kwargs)


def _dump(value: Any) -> Any:
    if is_dataclass(value):
        return {(f.metadata["key"] or f.name): _dump(getattr(value, f.name)) for f in fields(value)}
    if isinstance(value, enum.Enum):
        return value.value
    if isinstance(value, list):
        return [_dump(item) for item in value]
    if isinstance(value, dict):
        return {k: _dump(v) for k, v in value.items()}
    return value


@dataclass(kw_only=True)
class HugeTLB:
    usage: Optional[int] = _json(optional=True)
    max: Optional[int] = _json(optional=True)
    fail_count: int = _json(key="failcnt")


@dataclass(kw_only=True)
class BlkIOEntry:
    major: Optional[int] = _json(optional=True)
    minor: Optional[int] = _json(optional=True)
    op: Optional[str] = _json(_as_str, optional=True)
    value: Optional[int] = _json(optional=True)


_entries = _as_list(_nested(BlkIOEntry))


@dataclass(kw_only=True)
class BlkIO:
    """Block IO statistics, each a list of per-device entries."""

    io_service_bytes_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioServiceBytesRecursive", optional=True
    )
    io_serviced_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioServicedRecursive", optional=True
    )
    io_queued_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioQueueRecursive", optional=True
    )
    io_service_time_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioServiceTimeRecursive", optional=True
    )
    io_wait_time_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioWaitTimeRecursive", optional=True
    )
    io_merged_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioMergedRecursive", optional=True
    )
    io_time_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="ioTimeRecursive", optional=True
    )
    sectors_recursive: Optional[list[BlkIOEntry]] = _json(
        _entries, key="sectorsRecursive", optional=True
    )


@dataclass(kw_only=True)
class Pids:
    current: Optional[int] = _json(optional=True)
    limit: Optional[int] = _json(optional=True)


@dataclass(kw_only=True)
class Throttling:
    periods: Optional[int] = _json(optional=True)
    throtted_periods: Optional[int] = _json(key="throttledPeriods", optional=True)
    throtted_time: Optional[int] = _json(key="throttledTime", optional=True)


@dataclass(kw_only=True)
class CpuUsage:
    """CPU time in nanoseconds."""

    total: Optional[int] = _json(optional=True)
    per_cpu: Optional[list[int]] = _json(_as_list(_as_u64), optional=True)
    kernel: int = _json()
    user: int = _json()


@dataclass(kw_only=True)
class Cpu:
    usage: Optional[int] = _json(optional=True)
    throttling: Optional[Throttling] = _json(_nested(Throttling), optional=True)


@dataclass(kw_only=True)
class MemoryEntry:
    limit: int = _json()
    usage: Optional[int] = _json(optional=True)
    max: Optional[int] = _json(optional=True)
    fail_count: int = _json(key="failcnt")


@dataclass(kw_only=True)
class Memory:
    cache: Optional[int] = _json(optional=True)
    usage: Optional[MemoryEntry] = _json(_nested(MemoryEntry), optional=True)
    swap: Optional[MemoryEntry] = _json(_nested(MemoryEntry), optional=True)
    kernel: Optional[MemoryEntry] = _json(_nested(MemoryEntry), optional=True)
    kernel_tcp: Optional[MemoryEntry] = _json(
        _nested(MemoryEntry), key="kernelTCP", optional=True
    )
    raw: Optional[dict[str, int]] = _json(_as_u64_map, optional=True)


@dataclass(kw_only=True)
class Stats:
    """Resource statistics of one container."""

    cpu: Cpu = _json(_nested(Cpu))
    memory: Memory = _json(_nested(Memory))
    pids: Pids = _json(_nested(Pids))
    block_io: BlkIO = _json(_nested(BlkIO), key="blkio")
    huge_tlb: HugeTLB = _json(_nested(HugeTLB), key="hugetlb")

    @classmethod
    def from_dict(cls, data: Any) -> "Stats":
        return _load(cls, data)

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)


@dataclass(kw_only=True)
class Event:
    """A single event reported by runc."""

    event_type: EventType = _json(_as_event_type, key="type")
    id: str = _json(_as_str)
    stats: Optional[Stats] = _json(_nested(Stats), key="data", optional=True)

    @classmethod
    def from_dict(cls, data: Any) -> "Event":
        return _load(cls, data)

    @classmethod
    def from_json(cls, text: str) -> "Event":
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise JsonDeserializationError(exc) from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        return _dump(self)