# src/taskique/core/state.py

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from ..storage.preferences import ThemePreference
from ..tags.tag_store import TagStore
from ..tasks.task_query import SortState, TaskFilter
from ..tasks.task_store import TaskStore
from .ports import KeyValueStorage, Notifier, TaskGateway


@dataclass
class AppState:
    """
    Everything a connector needs, built once in the composition root and
    passed by reference. Nothing here is module-global.
    """

    settings: Any
    gateway: TaskGateway
    notifier: Notifier
    storage: KeyValueStorage
    task_store: TaskStore
    tag_store: TagStore
    theme: ThemePreference = ThemePreference.SYSTEM

    # List-view state (what /list shows by default)
    view_filter: TaskFilter = TaskFilter.ALL
    view_sort: SortState = field(default_factory=SortState)
