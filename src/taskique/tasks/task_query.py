# src/taskique/tasks/task_query.py

"""
Filter -> search -> sort pipeline for list views.

Every function takes a task snapshot and returns a new list; the input is
never mutated and nothing here depends on TaskStore.
"""

from __future__ import annotations

import locale
import unicodedata
from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from datetime import date, datetime, timedelta
from enum import StrEnum

from .task_models import Priority, Task, local_date


class TaskFilter(StrEnum):
    ALL = "all"
    COMPLETED = "completed"
    ACTIVE = "active"
    OVERDUE = "overdue"
    TODAY = "today"


class SortKey(StrEnum):
    DUE_DATE = "dueDate"
    PRIORITY = "priority"
    TITLE = "title"
    CREATED_AT = "createdAt"


class SortDirection(StrEnum):
    ASC = "asc"
    DESC = "desc"


# "ascending" means high first
PRIORITY_RANK = {Priority.HIGH: 0, Priority.MEDIUM: 1, Priority.LOW: 2}


@dataclass(frozen=True, slots=True)
class SortState:
    key: SortKey = SortKey.DUE_DATE
    direction: SortDirection = SortDirection.ASC

    def select(self, key: SortKey) -> SortState:
        """Same key flips the direction; a different key starts ascending."""
        if key == self.key:
            flipped = SortDirection.DESC if self.direction == SortDirection.ASC else SortDirection.ASC
            return SortState(key=key, direction=flipped)
        return SortState(key=key, direction=SortDirection.ASC)


def _matches(task: Task, mode: TaskFilter, today: date) -> bool:
    if mode == TaskFilter.ALL:
        return True
    if mode == TaskFilter.COMPLETED:
        return task.completed
    if mode == TaskFilter.ACTIVE:
        return not task.completed
    if task.due_date is None:
        return False
    due = local_date(task.due_date)
    if mode == TaskFilter.OVERDUE:
        return not task.completed and due < today
    # TODAY: completion is deliberately ignored for the list view.
    return due == today


def filter_tasks(tasks: Iterable[Task], mode: TaskFilter, *, today: date | None = None) -> list[Task]:
    if today is None:
        today = date.today()
    return [t for t in tasks if _matches(t, mode, today)]


def search_tasks(tasks: Iterable[Task], query: str | None) -> list[Task]:
    if not query:
        return list(tasks)
    needle = query.casefold()
    return [t for t in tasks if needle in t.title.casefold() or needle in t.description.casefold()]


def _timestamp(value: datetime) -> float:
    # naive values are local time; .timestamp() interprets them that way
    return value.timestamp()


def _fold(text: str) -> str:
    # Accent-insensitive, case-insensitive: "Éclair" -> "eclair"
    decomposed = unicodedata.normalize("NFKD", text.casefold())
    return "".join(ch for ch in decomposed if not unicodedata.combining(ch))


def _title_key(task: Task) -> tuple[str, str, str]:
    # strxfrm follows LC_COLLATE once the entrypoint has set it. Under the
    # C locale it is the identity, so accents are folded away first.
    folded = _fold(task.title)
    return (locale.strxfrm(folded), locale.strxfrm(task.title.casefold()), task.title)


def sort_tasks(tasks: Iterable[Task], sort: SortState | None = None) -> list[Task]:
    if sort is None:
        sort = SortState()
    reverse = sort.direction == SortDirection.DESC
    items = list(tasks)

    if sort.key == SortKey.DUE_DATE:
        # Tasks without a due date stay last whatever the direction.
        dated = [t for t in items if t.due_date is not None]
        undated = [t for t in items if t.due_date is None]
        dated.sort(key=lambda t: _timestamp(t.due_date), reverse=reverse)  # type: ignore[arg-type]
        return dated + undated

    if sort.key == SortKey.PRIORITY:
        return sorted(items, key=lambda t: PRIORITY_RANK[t.priority], reverse=reverse)

    if sort.key == SortKey.TITLE:
        return sorted(items, key=_title_key, reverse=reverse)

    return sorted(items, key=lambda t: _timestamp(t.created_at), reverse=reverse)


def query_tasks(
    tasks: Iterable[Task],
    *,
    mode: TaskFilter = TaskFilter.ALL,
    search: str | None = None,
    sort: SortState | None = None,
    today: date | None = None,
) -> list[Task]:
    """Full pipeline: filter, then search, then sort."""
    filtered = filter_tasks(tasks, mode, today=today)
    return sort_tasks(search_tasks(filtered, search), sort)


@dataclass(frozen=True, slots=True)
class UpcomingGroups:
    tomorrow: list[Task]
    next_week: list[Task]
    later: list[Task]


def group_upcoming(tasks: Iterable[Task], *, today: date | None = None) -> UpcomingGroups:
    """
    Split incomplete tasks due after today into:
    - tomorrow
    - the rest of the next seven days
    - everything beyond that
    """
    if today is None:
        today = date.today()
    tomorrow = today + timedelta(days=1)
    next_week = today + timedelta(days=7)

    groups = UpcomingGroups(tomorrow=[], next_week=[], later=[])
    for task in tasks:
        if task.completed or task.due_date is None:
            continue
        due = local_date(task.due_date)
        if due <= today:
            continue
        if due == tomorrow:
            groups.tomorrow.append(task)
        elif due < next_week:
            groups.next_week.append(task)
        else:
            groups.later.append(task)
    return groups


def recent_tasks(
    tasks: Sequence[Task],
    *,
    days: int = 7,
    limit: int = 5,
    now: datetime | None = None,
) -> list[Task]:
    """Tasks created within the last `days`, newest first."""
    if now is None:
        now = datetime.now().astimezone()
    cutoff = _timestamp(now) - days * 86400
    fresh = [t for t in tasks if _timestamp(t.created_at) >= cutoff]
    fresh.sort(key=lambda t: _timestamp(t.created_at), reverse=True)
    return fresh[:limit]
