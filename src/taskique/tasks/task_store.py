# src/taskique/tasks/task_store.py

from __future__ import annotations

import logging
from collections.abc import Awaitable, Callable, Mapping
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from ..core.errors import NetworkFailure, NotFound
from ..core.ports import JsonDict, NotificationKind, Notifier, TaskGateway
from .task_models import (
    Estimation,
    EstimationUnit,
    Priority,
    Task,
    TaskDraft,
    TaskStatus,
    changes_to_payload,
    draft_to_payload,
    parse_timestamp,
    task_from_api,
)
from .task_stats import TaskStats, stats_from_metadata

logger = logging.getLogger(__name__)

UPDATABLE_FIELDS = frozenset(
    {"title", "description", "priority", "due_date", "estimation", "tags", "status", "completed"}
)


def normalize_changes(changes: Mapping[str, Any]) -> dict[str, Any]:
    """
    Coerce caller-supplied partial fields into Task field values.

    `status` is authoritative when present; `completed` is only consulted
    when `status` is absent. The result never contains `completed`.
    Raises ValueError for unknown fields or unparseable values.
    """
    unknown = set(changes) - UPDATABLE_FIELDS
    if unknown:
        raise ValueError(f"Unknown task field(s): {', '.join(sorted(unknown))}")

    out: dict[str, Any] = {}
    if "title" in changes:
        out["title"] = str(changes["title"])
    if "description" in changes:
        out["description"] = str(changes["description"] or "")
    if "priority" in changes:
        out["priority"] = Priority(changes["priority"])
    if "due_date" in changes:
        raw = changes["due_date"]
        due = parse_timestamp(raw)
        if raw not in (None, "") and due is None:
            raise ValueError(f"Invalid due date: {raw!r}")
        out["due_date"] = due
    if "estimation" in changes:
        est = changes["estimation"]
        if isinstance(est, Mapping):
            value = est.get("value")
            est = Estimation(
                unit=EstimationUnit(est.get("unit", EstimationUnit.HOURS)),
                value=float(value) if value is not None else None,
            )
        if not isinstance(est, Estimation):
            raise ValueError(f"Invalid estimation: {est!r}")
        out["estimation"] = est
    if "tags" in changes:
        out["tags"] = tuple(str(t) for t in changes["tags"] or ())

    if "status" in changes:
        out["status"] = TaskStatus(changes["status"])
        if "completed" in changes:
            logger.debug("Both status and completed supplied; status wins.")
    elif "completed" in changes:
        out["status"] = TaskStatus.from_completed(bool(changes["completed"]))

    return out


class TaskStore:
    """
    Local mirror of the remote task collection.

    - Every mutation goes to the remote service first; the local list changes
      only after the call succeeds.
    - Reconciliation reads the list as it is when the call resolves, never a
      snapshot taken when the call started, so overlapping operations do not
      overwrite each other.
    - Remote failures are caught here: last_error is set, the notifier is
      told, and the method returns a neutral value (None / False / []).
    """

    def __init__(
        self,
        gateway: TaskGateway,
        notifier: Notifier,
        *,
        today: Callable[[], date] = date.today,
    ) -> None:
        self._gateway = gateway
        self._notifier = notifier
        self._today = today

        self._tasks: list[Task] = []
        self._stats = TaskStats()
        self._in_flight = 0
        self.last_error: str | None = None

    # ---- read side ----

    @property
    def tasks(self) -> list[Task]:
        return list(self._tasks)

    @property
    def stats(self) -> TaskStats:
        return self._stats

    @property
    def is_loading(self) -> bool:
        return self._in_flight > 0

    def get(self, task_id: str) -> Task | None:
        for task in self._tasks:
            if task.id == task_id:
                return task
        return None

    # ---- low-level helpers ----

    def _require(self, task_id: str) -> Task:
        task = self.get(task_id)
        if task is None:
            raise NotFound("task", task_id)
        return task

    def _notify(self, message: str, kind: NotificationKind) -> None:
        try:
            self._notifier.notify(message, kind)
        except Exception:
            logger.exception("Notifier failed (kind=%s).", kind)

    def _recompute_stats(self, metadata: Mapping[str, Any] | None = None) -> None:
        self._stats = stats_from_metadata(metadata, self._tasks, today=self._today())

    async def _remote(self, action: str, call: Awaitable[JsonDict]) -> JsonDict | None:
        self._in_flight += 1
        try:
            return await call
        except NetworkFailure as e:
            self._fail(action, e.message)
            return None
        finally:
            self._in_flight -= 1

    def _fail(self, action: str, message: str) -> None:
        logger.warning("Task %s failed: %s", action, message)
        self.last_error = message
        self._notify(message, "error")

    def _succeed(self, body: JsonDict, default_message: str) -> None:
        self.last_error = None
        message = body.get("message")
        self._notify(message if isinstance(message, str) and message else default_message, "success")

    def _replace_task(self, updated: Task) -> None:
        self._tasks = [updated if t.id == updated.id else t for t in self._tasks]

    def _tasks_from_body(self, body: JsonDict, key: str = "tasks") -> list[Task]:
        raw = body.get(key)
        if not isinstance(raw, list):
            return []
        known_tags = {t.id: t.tags for t in self._tasks}
        out: list[Task] = []
        for item in raw:
            if not isinstance(item, dict):
                logger.debug("Skipping non-object task entry: %r", item)
                continue
            task = task_from_api(item)
            if not task.tags and task.id in known_tags:
                task = replace(task, tags=known_tags[task.id])
            out.append(task)
        return out

    # ---- public API ----

    async def refresh(self) -> bool:
        """Replace the local list with the remote one. On failure the old list stays."""
        body = await self._remote("refresh", self._gateway.list_tasks())
        if body is None:
            return False

        self._tasks = self._tasks_from_body(body)
        self.last_error = None
        self._recompute_stats()
        logger.info("Tasks refreshed: %d tasks", len(self._tasks))
        return True

    async def create(self, draft: TaskDraft) -> Task | None:
        body = await self._remote("create", self._gateway.create_task(draft_to_payload(draft)))
        if body is None:
            return None

        raw = body.get("task")
        if not isinstance(raw, dict):
            self._fail("create", "Server response did not include the created task")
            return None

        task = task_from_api(raw, tags=draft.tags)
        self._tasks = [*self._tasks, task]
        self._recompute_stats()
        self._succeed(body, "Task created successfully")
        logger.info("Task created id=%s title=%r", task.id, task.title)
        return task

    async def update(self, task_id: str, changes: Mapping[str, Any]) -> Task | None:
        """
        Send only the supplied fields, then apply the same fields to the
        current local copy. Local-only fields (tags) skip the network.
        """
        self._require(task_id)
        normalized = normalize_changes(changes)
        payload = changes_to_payload(normalized)

        body: JsonDict = {}
        if payload:
            remote = await self._remote("update", self._gateway.update_task(task_id, payload))
            if remote is None:
                return None
            body = remote

        current = self.get(task_id)
        if current is None:
            logger.warning("Task id=%s disappeared before its update resolved.", task_id)
            return None

        updated = replace(current, **normalized)
        if payload:
            updated = replace(updated, updated_at=datetime.now().astimezone())
        self._replace_task(updated)
        self._recompute_stats()
        self._succeed(body, "Task updated successfully")
        logger.info("Task updated id=%s fields=%s", task_id, sorted(normalized))
        return updated

    async def delete(self, task_id: str) -> bool:
        self._require(task_id)
        body = await self._remote("delete", self._gateway.delete_task(task_id))
        if body is None:
            return False

        self._tasks = [t for t in self._tasks if t.id != task_id]
        self._recompute_stats()
        self._succeed(body, "Task deleted successfully")
        logger.info("Task deleted id=%s", task_id)
        return True

    async def toggle_completion(self, task_id: str) -> Task | None:
        task = self._require(task_id)
        new_status = task.status.toggled()

        body = await self._remote(
            "status update", self._gateway.update_task_status(task_id, new_status.value)
        )
        if body is None:
            return None

        current = self.get(task_id)
        if current is None:
            logger.warning("Task id=%s disappeared before its status update resolved.", task_id)
            return None

        updated = replace(current, status=new_status)
        self._replace_task(updated)
        self._recompute_stats()
        self._succeed(body, f"Task marked as {new_status.value}")
        return updated

    async def process_prompt(self, text: str) -> list[Task]:
        """Ask the AI endpoint for new tasks and append them (never replace)."""
        body = await self._remote("AI processing", self._gateway.process_prompt(text))
        if body is None:
            return []

        created = self._tasks_from_body(body)
        self._tasks = [*self._tasks, *created]

        metadata = body.get("metadata")
        self._recompute_stats(metadata if isinstance(metadata, Mapping) else None)
        self._succeed(body, "AI tasks processed successfully")
        logger.info("AI prompt produced %d tasks", len(created))
        return created

    def remove_tag_references(self, tag_id: str) -> int:
        """Strip `tag_id` from every task's tag set. Local only; returns tasks touched."""
        touched = 0
        out: list[Task] = []
        for task in self._tasks:
            if tag_id in task.tags:
                task = replace(task, tags=tuple(t for t in task.tags if t != tag_id))
                touched += 1
            out.append(task)
        self._tasks = out
        return touched

