# src/taskique/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The stores depend on Protocols instead of concrete implementations.
This keeps the HTTP client, the notification channel and the persistence
slot swappable and makes testing easier.
"""

from typing import Any, Literal, Protocol

JsonDict = dict[str, Any]
NotificationKind = Literal["success", "error"]


class TaskGateway(Protocol):
    """
    Remote task service (HTTP/JSON).

    Every method returns the decoded JSON body and raises NetworkFailure
    when the call is rejected or answered with a non-success status.
    """

    async def list_tasks(self) -> JsonDict: ...

    async def create_task(self, payload: JsonDict) -> JsonDict: ...

    async def update_task(self, task_id: str, payload: JsonDict) -> JsonDict: ...

    async def update_task_status(self, task_id: str, status: str) -> JsonDict: ...

    async def delete_task(self, task_id: str) -> JsonDict: ...

    async def process_prompt(self, input_text: str) -> JsonDict: ...


class Notifier(Protocol):
    """Fire-and-forget user-visible notification (toast, console line, ...)."""

    def notify(self, message: str, kind: NotificationKind) -> None: ...


class KeyValueStorage(Protocol):
    """String key -> string value slot that survives restarts."""

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...
