import copy
import json

import pytest

from runcwrap.errors import JsonDeserializationError
from runcwrap.events import BlkIOEntry, Event, EventType, Stats

STATS = {
    "cpu": {
        "usage": 100,
        "throttling": {"periods": 1, "throttledPeriods": 2, "throttledTime": 3},
    },
    "memory": {
        "cache": 10,
        "usage": {"limit": 1000, "usage": 500, "max": 600, "failcnt": 0},
        "swap": None,
        "kernel": None,
        "kernelTCP": None,
        "raw": {"rss": 7},
    },
    "pids": {"current": 3, "limit": 100},
    "blkio": {
        "ioServiceBytesRecursive": [{"major": 8, "minor": 0, "op": "Read", "value": 4096}],
        "ioServicedRecursive": None,
        "ioQueueRecursive": None,
        "ioServiceTimeRecursive": None,
        "ioWaitTimeRecursive": None,
        "ioMergedRecursive": None,
        "ioTimeRecursive": None,
        "sectorsRecursive": None,
    },
    "hugetlb": {"usage": None, "max": None, "failcnt": 0},
}

EVENT = {"type": "stats", "id": "fake", "data": STATS}


def test_event_type_values():
    assert EventType("stats") is EventType.STATS
    assert EventType("oom") is EventType.OOM


def test_event_parses_renamed_fields():
    event = Event.from_dict(EVENT)
    assert event.event_type is EventType.STATS
    assert event.id == "fake"
    stats = event.stats
    assert stats.cpu.throttling.throtted_periods == 2
    assert stats.cpu.throttling.throtted_time == 3
    assert stats.memory.usage.fail_count == 0
    assert stats.memory.raw == {"rss": 7}
    assert stats.block_io.io_service_bytes_recursive == [
        BlkIOEntry(major=8, minor=0, op="Read", value=4096)
    ]
    assert stats.huge_tlb.usage is None


def test_event_round_trip():
    assert Event.from_json(json.dumps(EVENT)).to_dict() == EVENT


def test_stats_round_trip():
    assert Stats.from_dict(STATS).to_dict() == STATS


def test_missing_optional_keys_become_none():
    data = copy.deepcopy(STATS)
    del data["memory"]["swap"]
    del data["pids"]["limit"]
    stats = Stats.from_dict(data)
    assert stats.memory.swap is None
    assert stats.pids.limit is None


def test_oom_event_without_data():
    event = Event.from_dict({"type": "oom", "id": "fake"})
    assert event.event_type is EventType.OOM
    assert event.stats is None


def test_missing_required_field():
    data = copy.deepcopy(STATS)
    del data["hugetlb"]["failcnt"]
    with pytest.raises(JsonDeserializationError):
        Stats.from_dict(data)


def test_unknown_event_type():
    with pytest.raises(JsonDeserializationError):
        Event.from_dict({"type": "bogus", "id": "fake"})


def test_negative_counter_rejected():
    data = copy.deepcopy(STATS)
    data["pids"]["current"] = -1
    with pytest.raises(JsonDeserializationError):
        Stats.from_dict(data)


def test_invalid_json():
    with pytest.raises(JsonDeserializationError):
        Event.from_json("[")