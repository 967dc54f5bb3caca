# tests/fakes.py

from __future__ import annotations

import asyncio
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any

from taskique.core.errors import NetworkFailure
from taskique.tasks.task_models import Estimation, EstimationUnit, Priority, Task, TaskStatus


def api_task(
    task_id: str | None,
    title: str = "Task",
    *,
    description: str = "",
    status: str | None = "pending",
    completed: bool | None = None,
    priority: str = "medium",
    due_date: str | None = None,
    estimation_type: str = "hours",
    estimation_value: float | None = None,
    created_at: str = "2026-10-01T09:00:00",
) -> dict[str, Any]:
    """Remote task JSON as the service returns it."""
    raw: dict[str, Any] = {
        "title": title,
        "description": description,
        "priority": priority,
        "due_date": due_date,
        "estimation_type": estimation_type,
        "estimation_value": estimation_value,
        "created_at": created_at,
        "updated_at": created_at,
    }
    if task_id is not None:
        raw["_id"] = task_id
    if status is not None:
        raw["status"] = status
    if completed is not None:
        raw["completed"] = completed
    return raw


def make_task(
    task_id: str,
    title: str = "Task",
    *,
    description: str = "",
    status: TaskStatus = TaskStatus.PENDING,
    priority: Priority = Priority.MEDIUM,
    due_date: datetime | None = None,
    created_at: datetime | None = None,
    estimation: Estimation | None = None,
    tags: tuple[str, ...] = (),
) -> Task:
    return Task(
        id=task_id,
        title=title,
        description=description,
        status=status,
        created_at=created_at or datetime(2026, 10, 1, 9, 0),
        due_date=due_date,
        priority=priority,
        estimation=estimation or Estimation(EstimationUnit.HOURS, None),
        tags=tags,
    )


class FakeTaskGateway:
    """
    In-memory TaskGateway.

    - records every call for assertions
    - fail_next(message) makes the next call raise NetworkFailure
    - hold=True parks every call until the test releases it, so tests can
      resolve overlapping calls in any order
    """

    def __init__(self, tasks: list[dict[str, Any]] | None = None) -> None:
        self.remote: dict[str, dict[str, Any]] = {t["_id"]: dict(t) for t in tasks or []}
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.metadata: dict[str, Any] | None = None
        self.ai_tasks: list[dict[str, Any]] = []
        self.omit_ids = False
        self.hold = False
        self.parked: list[asyncio.Event] = []
        self._fail_message: str | None = None
        self._next_id = 100

    def fail_next(self, message: str = "Server exploded") -> None:
        self._fail_message = message

    async def _enter(self, name: str, *args: Any) -> None:
        self.calls.append((name, args))
        if self._fail_message is not None:
            message, self._fail_message = self._fail_message, None
            failure = NetworkFailure(message, status_code=500)
        else:
            failure = None
        if self.hold:
            gate = asyncio.Event()
            self.parked.append(gate)
            await gate.wait()
        if failure is not None:
            raise failure

    def _new_id(self) -> str:
        self._next_id += 1
        return f"r{self._next_id}"

    async def list_tasks(self) -> dict[str, Any]:
        await self._enter("list_tasks")
        body: dict[str, Any] = {"tasks": [dict(t) for t in self.remote.values()]}
        if self.metadata is not None:
            body["metadata"] = self.metadata
        return body

    async def create_task(self, payload: dict[str, Any]) -> dict[str, Any]:
        await self._enter("create_task", payload)
        task = dict(payload, created_at="2026-10-19T08:00:00", updated_at="2026-10-19T08:00:00")
        if not self.omit_ids:
            task["_id"] = self._new_id()
            self.remote[task["_id"]] = task
        return {"task": task, "message": "Task created"}

    async def update_task(self, task_id: str, payload: dict[str, Any]) -> dict[str, Any]:
        await self._enter("update_task", task_id, payload)
        task = self.remote.setdefault(task_id, {"_id": task_id})
        task.update(payload)
        return {"task": dict(task), "message": "Task updated"}

    async def update_task_status(self, task_id: str, status: str) -> dict[str, Any]:
        await self._enter("update_task_status", task_id, status)
        task = self.remote.setdefault(task_id, {"_id": task_id})
        task.update(status=status, completed=status == "completed")
        return {"task": dict(task), "message": f"Task marked as {status}"}

    async def delete_task(self, task_id: str) -> dict[str, Any]:
        await self._enter("delete_task", task_id)
        self.remote.pop(task_id, None)
        return {"message": "Task deleted"}

    async def process_prompt(self, input_text: str) -> dict[str, Any]:
        await self._enter("process_prompt", input_text)
        body: dict[str, Any] = {"tasks": [dict(t) for t in self.ai_tasks]}
        if self.metadata is not None:
            body["metadata"] = self.metadata
        return body

    def release(self, index: int) -> None:
        self.parked[index].set()


@dataclass(slots=True)
class Notification:
    message: str
    kind: str


@dataclass(slots=True)
class RecordingNotifier:
    sent: list[Notification] = field(default_factory=list)

    def notify(self, message: str, kind: str) -> None:
        self.sent.append(Notification(message=message, kind=kind))

    @property
    def kinds(self) -> list[str]:
        return [n.kind for n in self.sent]
