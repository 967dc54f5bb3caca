# tests/conftest.py

from __future__ import annotations

from datetime import date
from pathlib import Path
from types import SimpleNamespace

import pytest

from taskique.cli.bootstrap import create_initial_state
from taskique.core.state import AppState
from taskique.storage.kv_store import MemoryStorage
from taskique.tasks.task_store import TaskStore

from .fakes import FakeTaskGateway, RecordingNotifier

TODAY = date(2026, 10, 19)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with AppState and bootstrap.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated from the environment.
    """
    return SimpleNamespace(
        app_name="taskique-test",
        log_level="DEBUG",
        console_enabled=False,
        api_base_url="http://tasks.test",
        request_timeout_seconds=None,
        data_dir=tmp_path,
        storage_path=tmp_path / "storage.json",
        log_dir=tmp_path,
    )


@pytest.fixture()
def gateway() -> FakeTaskGateway:
    return FakeTaskGateway()


@pytest.fixture()
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture()
def storage() -> MemoryStorage:
    return MemoryStorage()


@pytest.fixture()
def task_store(gateway: FakeTaskGateway, notifier: RecordingNotifier) -> TaskStore:
    return TaskStore(gateway, notifier, today=lambda: TODAY)


@pytest.fixture()
def state(
    settings: SimpleNamespace,
    gateway: FakeTaskGateway,
    notifier: RecordingNotifier,
    storage: MemoryStorage,
) -> AppState:
    """AppState wired with deterministic fakes (no network, no disk)."""
    return create_initial_state(
        settings=settings,
        gateway=gateway,
        notifier=notifier,
        storage=storage,
    )
