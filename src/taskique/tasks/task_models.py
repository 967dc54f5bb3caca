# src/taskique/tasks/task_models.py

from __future__ import annotations

import logging
import secrets
import string
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import StrEnum
from typing import Any

logger = logging.getLogger(__name__)

_ID_ALPHABET = string.ascii_lowercase + string.digits


def generate_local_id(length: int = 7) -> str:
    """Short random id for locally owned objects (tags, id-less remote tasks)."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


class TaskStatus(StrEnum):
    """
    Task lifecycle status.

    `status` is the single authoritative field; the remote `completed`
    boolean is derived from it at the serialization boundary.
    """

    PENDING = "pending"
    COMPLETED = "completed"

    @classmethod
    def from_api(cls, status: Any, completed: Any = None) -> TaskStatus:
        if isinstance(status, str) and status:
            try:
                return cls(status)
            except ValueError:
                logger.debug("Unknown task status %r; falling back to completed flag.", status)
        return cls.from_completed(bool(completed))

    @classmethod
    def from_completed(cls, completed: bool) -> TaskStatus:
        return cls.COMPLETED if completed else cls.PENDING

    @property
    def completed(self) -> bool:
        return self is TaskStatus.COMPLETED

    def toggled(self) -> TaskStatus:
        return TaskStatus.PENDING if self.completed else TaskStatus.COMPLETED


class Priority(StrEnum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    @classmethod
    def from_api(cls, raw: Any) -> Priority:
        try:
            return cls(str(raw))
        except ValueError:
            return cls.MEDIUM


class EstimationUnit(StrEnum):
    MINUTES = "minutes"
    HOURS = "hours"
    DAYS = "days"

    @classmethod
    def from_api(cls, raw: Any) -> EstimationUnit:
        try:
            return cls(str(raw))
        except ValueError:
            return cls.HOURS


@dataclass(frozen=True, slots=True)
class Estimation:
    unit: EstimationUnit = EstimationUnit.HOURS
    value: float | None = None  # None means "not estimated"


@dataclass(frozen=True, slots=True)
class Tag:
    id: str
    name: str
    color: str

    def to_dict(self) -> dict[str, str]:
        return {"id": self.id, "name": self.name, "color": self.color}

    @classmethod
    def from_dict(cls, raw: dict[str, Any]) -> Tag | None:
        tag_id = raw.get("id")
        name = raw.get("name")
        if not isinstance(tag_id, str) or not tag_id or not isinstance(name, str):
            return None
        return cls(id=tag_id, name=name, color=str(raw.get("color") or ""))


@dataclass(frozen=True, slots=True)
class Task:
    id: str
    title: str
    description: str
    status: TaskStatus
    created_at: datetime
    due_date: datetime | None
    priority: Priority
    estimation: Estimation
    tags: tuple[str, ...] = ()
    updated_at: datetime | None = None

    @property
    def completed(self) -> bool:
        return self.status.completed


@dataclass(frozen=True, slots=True)
class TaskDraft:
    """Caller-supplied fields for a new task. Status is always forced to pending."""

    title: str
    description: str = ""
    due_date: datetime | None = None
    priority: Priority = Priority.MEDIUM
    estimation: Estimation = field(default_factory=Estimation)
    tags: tuple[str, ...] = ()


# ---- time helpers ----


def parse_timestamp(raw: Any) -> datetime | None:
    if raw is None or raw == "":
        return None
    if isinstance(raw, datetime):
        return raw
    try:
        return datetime.fromisoformat(str(raw).strip())
    except ValueError:
        logger.debug("Unparseable timestamp %r", raw)
        return None


def parse_estimation_value(raw: Any) -> float | None:
    if raw is None or raw == "" or isinstance(raw, bool):
        return None
    try:
        return float(raw)
    except (TypeError, ValueError):
        logger.debug("Unparseable estimation value %r; treating as not estimated", raw)
        return None


def format_timestamp(value: datetime | None) -> str | None:
    return value.isoformat() if value is not None else None


def local_date(value: datetime) -> date:
    """Calendar date of `value` in the local time zone (naive values are local already)."""
    if value.tzinfo is not None:
        return value.astimezone().date()
    return value.date()


# ---- remote JSON mapping ----


def task_from_api(raw: dict[str, Any], *, tags: tuple[str, ...] = ()) -> Task:
    task_id = raw.get("_id") or raw.get("id")
    if not task_id:
        task_id = generate_local_id()
        logger.debug("Remote task without _id; using placeholder id=%s", task_id)

    value = parse_estimation_value(raw.get("estimation_value"))
    remote_tags = raw.get("tags")
    if isinstance(remote_tags, list):
        tags = tuple(str(t) for t in remote_tags)

    return Task(
        id=str(task_id),
        title=str(raw.get("title") or ""),
        description=str(raw.get("description") or ""),
        status=TaskStatus.from_api(raw.get("status"), raw.get("completed")),
        created_at=parse_timestamp(raw.get("created_at")) or datetime.now().astimezone(),
        due_date=parse_timestamp(raw.get("due_date")),
        priority=Priority.from_api(raw.get("priority")),
        estimation=Estimation(
            unit=EstimationUnit.from_api(raw.get("estimation_type")),
            value=value,
        ),
        tags=tags,
        updated_at=parse_timestamp(raw.get("updated_at")),
    )


def draft_to_payload(draft: TaskDraft) -> dict[str, Any]:
    status = TaskStatus.PENDING
    return {
        "title": draft.title,
        "description": draft.description,
        "priority": draft.priority.value,
        "due_date": format_timestamp(draft.due_date),
        "estimation_type": draft.estimation.unit.value,
        "estimation_value": draft.estimation.value,
        "status": status.value,
        "completed": status.completed,
    }


# Local field name -> remote field name. Tags have no remote counterpart.
_REMOTE_FIELDS = {
    "title": "title",
    "description": "description",
    "priority": "priority",
    "due_date": "due_date",
}


def changes_to_payload(changes: dict[str, Any]) -> dict[str, Any]:
    """
    Map normalized partial changes to the remote payload.
    Only present keys are emitted; absent keys are omitted, never nulled.
    """
    payload: dict[str, Any] = {}
    for local_name, remote_name in _REMOTE_FIELDS.items():
        if local_name not in changes:
            continue
        value = changes[local_name]
        if isinstance(value, datetime) or local_name == "due_date":
            value = format_timestamp(value)
        elif isinstance(value, StrEnum):
            value = value.value
        payload[remote_name] = value

    if "estimation" in changes:
        est: Estimation = changes["estimation"]
        payload["estimation_type"] = est.unit.value
        payload["estimation_value"] = est.value

    if "status" in changes:
        status: TaskStatus = changes["status"]
        payload["status"] = status.value
        payload["completed"] = status.completed

    return payload
