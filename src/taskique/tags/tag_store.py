# src/taskique/tags/tag_store.py

from __future__ import annotations

import json
import logging

from ..core.ports import KeyValueStorage
from ..tasks.task_models import Tag, generate_local_id
from ..tasks.task_store import TaskStore

logger = logging.getLogger(__name__)

TAGS_KEY = "tags"

DEFAULT_TAGS: tuple[Tag, ...] = (
    Tag(id="1", name="Work", color="#9b87f5"),
    Tag(id="2", name="Personal", color="#F97316"),
    Tag(id="3", name="Study", color="#0EA5E9"),
)


class TagStore:
    """
    Locally owned tags, persisted to a key-value slot.

    There is no remote counterpart. Deleting a tag also strips its id from
    every task held by the TaskStore, in the same synchronous step.
    """

    def __init__(self, storage: KeyValueStorage, task_store: TaskStore) -> None:
        self._storage = storage
        self._task_store = task_store
        self._tags: list[Tag] = self._load()
        logger.info("TagStore ready tags=%d", len(self._tags))

    def _load(self) -> list[Tag]:
        raw = self._storage.get(TAGS_KEY)
        if raw is None:
            return list(DEFAULT_TAGS)
        try:
            data = json.loads(raw)
        except ValueError:
            logger.exception("Stored tag list is not valid JSON; using defaults.")
            return list(DEFAULT_TAGS)
        if not isinstance(data, list):
            return list(DEFAULT_TAGS)
        tags = [Tag.from_dict(item) for item in data if isinstance(item, dict)]
        return [t for t in tags if t is not None]

    def _save(self) -> None:
        self._storage.set(TAGS_KEY, json.dumps([t.to_dict() for t in self._tags], ensure_ascii=False))

    @property
    def tags(self) -> list[Tag]:
        return list(self._tags)

    def get(self, tag_id: str) -> Tag | None:
        for tag in self._tags:
            if tag.id == tag_id:
                return tag
        return None

    def _new_id(self) -> str:
        existing = {t.id for t in self._tags}
        while True:
            tag_id = generate_local_id()
            if tag_id not in existing:
                return tag_id

    def add_tag(self, name: str, color: str) -> Tag:
        name = (name or "").strip()
        if not name:
            raise ValueError("tag name is required")

        tag = Tag(id=self._new_id(), name=name, color=color)
        self._tags = [*self._tags, tag]
        self._save()
        logger.info("Tag added id=%s name=%r", tag.id, tag.name)
        return tag

    def delete_tag(self, tag_id: str) -> bool:
        """
        Remove the tag and prune it from every task. Dangling references are
        pruned even when the tag itself is already gone; returns whether the
        tag existed.
        """
        existed = self.get(tag_id) is not None
        self._tags = [t for t in self._tags if t.id != tag_id]
        touched = self._task_store.remove_tag_references(tag_id)
        if existed:
            self._save()
        logger.info("Tag deleted id=%s existed=%s (removed from %d tasks)", tag_id, existed, touched)
        return existed
