# src/quantum/tasks/task_models.py

"""
Record types and their on-disk document form.

Documents keep the historical field names (Name, Hours, Ref, Uid, Date /
Name, Ref, StartTime) so an existing ~/.quantum directory stays readable. Two schema
generations exist: integer hours (older) and fractional hours; both load as float.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from ..errors import StorageError

DISPLAY_FORMAT = "%Y-%m-%d %H:%M:%S"

# RFC 3339 with up to nanosecond precision and an optional "Z".
_FRACTION_RE = re.compile(r"(\.\d{6})\d+")


def format_timestamp(dt: datetime) -> str:
    return dt.isoformat()


def parse_timestamp(raw: Any, *, field_name: str) -> datetime:
    if not isinstance(raw, str) or not raw.strip():
        raise StorageError(f"Missing or invalid {field_name}: {raw!r}")
    text = raw.strip()
    if text.endswith(("Z", "z")):
        text = text[:-1] + "+00:00"
    text = _FRACTION_RE.sub(r"\1", text)
    try:
        dt = datetime.fromisoformat(text)
    except ValueError as e:
        raise StorageError(f"Invalid {field_name}: {raw!r}") from e
    # Naive timestamps are taken as local time.
    return dt if dt.tzinfo is not None else dt.astimezone()


def _parse_hours(raw: Any) -> float:
    if isinstance(raw, bool) or not isinstance(raw, (int, float)):
        raise StorageError(f"Invalid Hours: {raw!r}")
    return float(raw)


def _parse_str(doc: dict[str, Any], key: str, *, required: bool) -> str:
    raw = doc.get(key)
    if raw is None:
        if required:
            raise StorageError(f"Record is missing {key}")
        return ""
    if not isinstance(raw, str):
        raise StorageError(f"Invalid {key}: {raw!r}")
    return raw


@dataclass(slots=True, frozen=True)
class Task:
    name: str
    hours: float
    ref: str
    uid: str
    date: datetime

    def to_doc(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "Hours": self.hours,
            "Ref": self.ref,
            "Uid": self.uid,
            "Date": format_timestamp(self.date),
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any], *, key: str = "") -> Task:
        uid = _parse_str(doc, "Uid", required=False) or key
        if not uid:
            raise StorageError("Record is missing Uid")
        return cls(
            name=_parse_str(doc, "Name", required=True),
            hours=_parse_hours(doc.get("Hours", 0)),
            ref=_parse_str(doc, "Ref", required=False),
            uid=uid,
            date=parse_timestamp(doc.get("Date"), field_name="Date"),
        )


@dataclass(slots=True, frozen=True)
class InProgress:
    name: str
    ref: str
    start_time: datetime

    def to_doc(self) -> dict[str, Any]:
        return {
            "Name": self.name,
            "Ref": self.ref,
            "StartTime": format_timestamp(self.start_time),
        }

    @classmethod
    def from_doc(cls, doc: dict[str, Any], *, key: str = "") -> InProgress:
        name = _parse_str(doc, "Name", required=not key) or key
        return cls(
            name=name,
            ref=_parse_str(doc, "Ref", required=False),
            start_time=parse_timestamp(doc.get("StartTime"), field_name="StartTime"),
        )


@dataclass(slots=True)
class TaskListing:
    """Rows matched by a filter, in uid order, plus their total hours."""

    tasks: list[Task] = field(default_factory=list)
    total_hours: float = 0.0

    def __len__(self) -> int:
        return len(self.tasks)
