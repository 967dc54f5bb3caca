# src/taskique/tasks/task_api.py

from __future__ import annotations

import re
from datetime import date, datetime, time, timedelta

from ..core.errors import ValidationSkipped
from .task_models import Estimation, EstimationUnit, Priority, TaskDraft

_ESTIMATE_RE = re.compile(r"^\s*(\d+(?:\.\d+)?)\s*(m|min|minutes?|h|hours?|d|days?)\s*$", re.IGNORECASE)


def parse_due_date(text: str | None, *, today: date | None = None) -> datetime | None:
    """
    Accepts "today", "tomorrow", "+N" (days from today), or an ISO date/datetime.
    Bare dates resolve to local midnight. Empty input means no deadline.
    """
    raw = (text or "").strip().lower()
    if not raw or raw in ("none", "-"):
        return None
    if today is None:
        today = date.today()

    if raw == "today":
        day = today
    elif raw == "tomorrow":
        day = today + timedelta(days=1)
    elif raw.startswith("+") and raw[1:].isdigit():
        day = today + timedelta(days=int(raw[1:]))
    else:
        try:
            parsed = datetime.fromisoformat((text or "").strip())
        except ValueError as e:
            raise ValueError(f"Invalid due date: {text!r}") from e
        return parsed

    return datetime.combine(day, time.min)


def parse_estimation(text: str | None) -> Estimation:
    """Parse "90m", "2h" or "1.5 days"; empty input means not estimated."""
    raw = (text or "").strip()
    if not raw:
        return Estimation()
    m = _ESTIMATE_RE.match(raw)
    if not m:
        raise ValueError(f"Invalid estimation: {text!r}")
    value = float(m.group(1))
    unit_char = m.group(2)[0].lower()
    unit = {"m": EstimationUnit.MINUTES, "h": EstimationUnit.HOURS, "d": EstimationUnit.DAYS}[unit_char]
    return Estimation(unit=unit, value=value)


def build_draft(
    title: str,
    *,
    description: str = "",
    due: str | None = None,
    priority: str | None = None,
    estimate: str | None = None,
    tags: tuple[str, ...] = (),
    today: date | None = None,
) -> TaskDraft:
    """
    Caller-side guard for create: a blank title never reaches the store.
    Raises ValidationSkipped for a blank title and ValueError for bad fields.
    """
    title = (title or "").strip()
    if not title:
        raise ValidationSkipped("Task title is required.")

    return TaskDraft(
        title=title,
        description=(description or "").strip(),
        due_date=parse_due_date(due, today=today),
        priority=Priority((priority or Priority.MEDIUM.value).strip().lower()),
        estimation=parse_estimation(estimate),
        tags=tags,
    )
