# tests/test_tag_store.py

from __future__ import annotations

import json
from pathlib import Path

import pytest

from taskique.storage.kv_store import JsonFileStorage, MemoryStorage
from taskique.storage.preferences import THEME_KEY, ThemePreference, load_theme, save_theme
from taskique.tags.tag_store import DEFAULT_TAGS, TAGS_KEY, TagStore

from .fakes import api_task


async def tagged_store(gateway, task_store, assignments: dict[str, list[str]]):
    gateway.remote = {tid: api_task(tid, f"Task {tid}") for tid in assignments}
    assert await task_store.refresh()
    for tid, tags in assignments.items():
        if tags:
            await task_store.update(tid, {"tags": tags})
    gateway.calls.clear()
    return task_store


def test_defaults_when_storage_is_empty(task_store, storage) -> None:
    tags = TagStore(storage, task_store)
    assert tags.tags == list(DEFAULT_TAGS)
    assert [t.name for t in tags.tags] == ["Work", "Personal", "Study"]
    # nothing is written until the list changes
    assert storage.get(TAGS_KEY) is None


def test_invalid_stored_json_falls_back_to_defaults(task_store) -> None:
    storage = MemoryStorage({TAGS_KEY: "{not json"})
    assert TagStore(storage, task_store).tags == list(DEFAULT_TAGS)


def test_add_tag_persists(task_store, storage) -> None:
    tags = TagStore(storage, task_store)

    tag = tags.add_tag("  Errands ", "#22C55E")

    assert tag.name == "Errands"
    assert tag.id not in {t.id for t in DEFAULT_TAGS}
    assert tags.get(tag.id) == tag

    reloaded = TagStore(storage, task_store)
    assert [t.id for t in reloaded.tags] == [*(t.id for t in DEFAULT_TAGS), tag.id]


def test_add_tag_rejects_blank_name(task_store, storage) -> None:
    tags = TagStore(storage, task_store)
    with pytest.raises(ValueError):
        tags.add_tag("   ", "#000000")
    assert tags.tags == list(DEFAULT_TAGS)


@pytest.mark.asyncio
async def test_delete_tag_prunes_every_task(gateway, task_store, storage) -> None:
    await tagged_store(gateway, task_store, {"a": ["1", "2"], "b": ["1"], "c": [], "d": ["3"]})
    tags = TagStore(storage, task_store)

    assert tags.delete_tag("1") is True

    assert tags.get("1") is None
    assert task_store.get("a").tags == ("2",)
    assert task_store.get("b").tags == ()
    assert task_store.get("c").tags == ()
    assert task_store.get("d").tags == ("3",)
    assert all("1" not in t.tags for t in task_store.tasks)
    # local only
    assert gateway.calls == []

    stored = json.loads(storage.get(TAGS_KEY))
    assert [t["id"] for t in stored] == ["2", "3"]


@pytest.mark.asyncio
async def test_delete_unknown_tag_still_prunes_dangling_references(gateway, task_store, storage) -> None:
    await tagged_store(gateway, task_store, {"a": ["ghost", "2"]})
    tags = TagStore(storage, task_store)

    assert tags.delete_tag("ghost") is False

    assert task_store.get("a").tags == ("2",)
    assert tags.tags == list(DEFAULT_TAGS)
    assert storage.get(TAGS_KEY) is None


def test_json_file_storage_round_trip(tmp_path: Path) -> None:
    path = tmp_path / "nested" / "storage.json"
    first = JsonFileStorage(path)
    assert first.get("k") is None

    first.set("k", "v")

    assert path.exists()
    assert JsonFileStorage(path).get("k") == "v"


def test_json_file_storage_ignores_corrupt_file(tmp_path: Path) -> None:
    path = tmp_path / "storage.json"
    path.write_text("[1, 2, 3]", "utf-8")
    assert JsonFileStorage(path).get("anything") is None


def test_theme_defaults_to_system(storage) -> None:
    assert load_theme(storage) == ThemePreference.SYSTEM


def test_theme_save_and_load(storage) -> None:
    assert save_theme(storage, "dark") == ThemePreference.DARK
    assert storage.get(THEME_KEY) == "dark"
    assert load_theme(storage) == ThemePreference.DARK


def test_theme_invalid_values(storage) -> None:
    storage.set(THEME_KEY, "neon")
    assert load_theme(storage) == ThemePreference.SYSTEM

    with pytest.raises(ValueError):
        save_theme(storage, "neon")
    assert storage.get(THEME_KEY) == "neon"
