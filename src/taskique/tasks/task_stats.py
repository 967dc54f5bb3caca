# src/taskique/tasks/task_stats.py

"""
Derived statistics over a task snapshot.

Pure functions: nothing here touches the store, the network or the clock
except through the optional `today` argument.
"""

from __future__ import annotations

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field, replace
from datetime import date
from typing import Any, Literal

from .task_models import EstimationUnit, Priority, Task, TaskStatus, local_date

logger = logging.getLogger(__name__)

HOURS_PER_WORKDAY = 8.0

_HOURS_PER_UNIT = {
    EstimationUnit.MINUTES: 1.0 / 60.0,
    EstimationUnit.HOURS: 1.0,
    EstimationUnit.DAYS: HOURS_PER_WORKDAY,
}


@dataclass(frozen=True, slots=True)
class TaskStats:
    total: int = 0
    by_priority: dict[Priority, int] = field(default_factory=lambda: {p: 0 for p in Priority})
    by_status: dict[TaskStatus, int] = field(default_factory=lambda: {s: 0 for s in TaskStatus})
    due_today: int = 0
    upcoming: int = 0
    overdue: int = 0
    total_estimated_hours: float = 0.0
    total_estimated_time: str = "0 hours"
    source: Literal["local", "server"] = "local"

    @property
    def completed(self) -> int:
        return self.by_status[TaskStatus.COMPLETED]

    @property
    def pending(self) -> int:
        return self.by_status[TaskStatus.PENDING]

    @property
    def completion_rate(self) -> int:
        """Completed share in whole percent (0 for an empty list)."""
        if self.total <= 0:
            return 0
        return round(self.completed / self.total * 100)


def estimated_hours(task: Task) -> float:
    value = task.estimation.value
    if value is None:
        return 0.0
    return float(value) * _HOURS_PER_UNIT[task.estimation.unit]


def format_hours(hours: float) -> str:
    rounded = round(hours, 2)
    unit = "hour" if rounded == 1 else "hours"
    return f"{rounded:g} {unit}"


def _due_date(task: Task) -> date | None:
    return local_date(task.due_date) if task.due_date is not None else None


def is_due_today(task: Task, today: date) -> bool:
    due = _due_date(task)
    return due is not None and not task.completed and due == today


def is_upcoming(task: Task, today: date) -> bool:
    due = _due_date(task)
    return due is not None and not task.completed and due > today


def is_overdue(task: Task, today: date) -> bool:
    due = _due_date(task)
    return due is not None and not task.completed and due < today


def compute_stats(tasks: Iterable[Task], *, today: date | None = None) -> TaskStats:
    if today is None:
        today = date.today()

    by_priority = {p: 0 for p in Priority}
    by_status = {s: 0 for s in TaskStatus}
    total = due_today = upcoming = overdue = 0
    hours = 0.0

    for task in tasks:
        total += 1
        by_priority[task.priority] += 1
        by_status[task.status] += 1
        if is_due_today(task, today):
            due_today += 1
        elif is_upcoming(task, today):
            upcoming += 1
        elif is_overdue(task, today):
            overdue += 1
        hours += estimated_hours(task)

    return TaskStats(
        total=total,
        by_priority=by_priority,
        by_status=by_status,
        due_today=due_today,
        upcoming=upcoming,
        overdue=overdue,
        total_estimated_hours=hours,
        total_estimated_time=format_hours(hours),
    )


def _int(raw: Any, default: int) -> int:
    try:
        return int(raw)
    except (TypeError, ValueError):
        return default


def stats_from_metadata(
    metadata: Mapping[str, Any] | None,
    tasks: Iterable[Task],
    *,
    today: date | None = None,
) -> TaskStats:
    """
    Server-provided aggregates win for the fields the payload carries.
    Everything else (status split, due today, upcoming, overdue) comes from
    the local list. Without metadata this is plain compute_stats.
    """
    local = compute_stats(tasks, today=today)
    if not metadata:
        return local

    by_priority = {
        Priority.HIGH: _int(metadata.get("high_priority_count"), local.by_priority[Priority.HIGH]),
        Priority.MEDIUM: _int(metadata.get("medium_priority_count"), local.by_priority[Priority.MEDIUM]),
        Priority.LOW: _int(metadata.get("low_priority_count"), local.by_priority[Priority.LOW]),
    }

    hours_raw = metadata.get("total_estimated_hours")
    try:
        hours = float(hours_raw) if hours_raw is not None else local.total_estimated_hours
    except (TypeError, ValueError):
        hours = local.total_estimated_hours

    time_str = metadata.get("total_estimated_time")
    if not isinstance(time_str, str) or not time_str.strip():
        time_str = format_hours(hours)

    logger.debug("Using server stats metadata: %s", dict(metadata))
    return replace(
        local,
        total=_int(metadata.get("total_tasks"), local.total),
        by_priority=by_priority,
        total_estimated_hours=hours,
        total_estimated_time=time_str,
        source="server",
    )
