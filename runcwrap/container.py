"""The container description that runc reports."""

from __future__ import annotations

import json
import math
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any

from .errors import JsonDeserializationError

_STRING_FIELDS = ("id", "status", "bundle", "rootfs")


def _require(data: dict, key: str) -> Any:
    try:
        return data[key]
    except KeyError:
        raise JsonDeserializationError(f"missing field `{key}`") from None


def _is_int(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


@dataclass
class Container:
    """Information runc reports about one container."""

    id: str
    pid: int
    status: str
    bundle: str
    rootfs: str
    created: datetime
    annotations: dict[str, str] = field(default_factory=dict)

    @classmethod
    def from_dict(cls, data: Any) -> "Container":
        """Build a container from decoded runc JSON."""
        if not isinstance(data, dict):
            raise JsonDeserializationError("expected a JSON object for Container")
        values: dict[str, Any] = {}
        for key in _STRING_FIELDS:
            value = _require(data, key)
            if not isinstance(value, str):
                raise JsonDeserializationError(f"field `{key}` must be a string")
            values[key] = value

        pid = _require(data, "pid")
        if not _is_int(pid) or pid < 0:
            raise JsonDeserializationError("field `pid` must be a non-negative integer")

        created = _require(data, "created")
        if not _is_int(created):
            raise JsonDeserializationError("field `created` must be an integer timestamp")
        try:
            created_at = datetime.fromtimestamp(created, tz=timezone.utc)
        except (OverflowError, OSError, ValueError) as exc:
            raise JsonDeserializationError(exc) from exc

        annotations = _require(data, "annotations")
        if not isinstance(annotations, dict) or not all(
            isinstance(k, str) and isinstance(v, str) for k, v in annotations.items()
        ):
            raise JsonDeserializationError("field `annotations` must map strings to strings")

        return cls(pid=pid, created=created_at, annotations=dict(annotations), **values)

    @classmethod
    def from_json(cls, text: str) -> "Container":
        """Parse a container from runc's JSON output."""
        try:
            data = json.loads(text)
        except json.JSONDecodeError as exc:
            raise JsonDeserializationError(exc) from exc
        return cls.from_dict(data)

    def to_dict(self) -> dict[str, Any]:
        """Return the JSON-ready form, with ``created`` as a Unix timestamp."""
        return {
            "id": self.id,
            "pid": self.pid,
            "status": self.status,
            "bundle": self.bundle,
            "rootfs": self.rootfs,
            "created": math.floor(self.created.timestamp()),
            "annotations": dict(self.annotations),
        }