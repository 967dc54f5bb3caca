# src/taskique/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures local (gitignored) directories exist,
- wires concrete implementations (HTTP gateway, storage slot, notifier)
  into the stores and the AppState.
"""

from __future__ import annotations

import logging

from ..api.gateway import HttpTaskGateway
from ..config import get_settings
from ..core.ports import KeyValueStorage, Notifier, TaskGateway
from ..core.state import AppState
from ..notify import ConsoleNotifier
from ..storage.kv_store import JsonFileStorage
from ..storage.preferences import load_theme
from ..tags.tag_store import TagStore
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)


def _ensure_local_dirs(settings) -> None:
    settings.data_dir.mkdir(parents=True, exist_ok=True)
    settings.storage_path.parent.mkdir(parents=True, exist_ok=True)


def create_initial_state(
    *,
    settings=None,
    gateway: TaskGateway | None = None,
    notifier: Notifier | None = None,
    storage: KeyValueStorage | None = None,
) -> AppState:
    """
    Create AppState from the provided settings.

    Every collaborator is injectable so tests can swap in fakes; anything
    not given is built from settings (falls back to get_settings()).
    """
    if settings is None:
        settings = get_settings()

    if storage is None:
        _ensure_local_dirs(settings)
        storage = JsonFileStorage(settings.storage_path)
    if gateway is None:
        gateway = HttpTaskGateway(
            settings.api_base_url,
            timeout=getattr(settings, "request_timeout_seconds", None),
        )
    if notifier is None:
        notifier = ConsoleNotifier()

    task_store = TaskStore(gateway, notifier)
    tag_store = TagStore(storage, task_store)

    state = AppState(
        settings=settings,
        gateway=gateway,
        notifier=notifier,
        storage=storage,
        task_store=task_store,
        tag_store=tag_store,
        theme=load_theme(storage),
    )
    logger.info("State ready api=%s theme=%s", getattr(settings, "api_base_url", "?"), state.theme)
    return state


async def shutdown_state(state: AppState) -> None:
    """Best-effort shutdown (no exceptions should escape)."""
    aclose = getattr(state.gateway, "aclose", None)
    if aclose is None:
        return
    try:
        await aclose()
    except Exception:
        logger.debug("Gateway close failed.", exc_info=True)
