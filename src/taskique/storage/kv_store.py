# src/taskique/storage/kv_store.py

from __future__ import annotations

import contextlib
import json
import logging
import os
from pathlib import Path

logger = logging.getLogger(__name__)


class JsonFileStorage:
    """
    Key-value string slot persisted as one JSON object on disk.

    - read once at construction (missing/corrupt file -> empty slot)
    - every set() rewrites the file atomically (tmp file + os.replace)
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._data: dict[str, str] = self._load()
        logger.info("Storage ready path=%s keys=%d", self._path, len(self._data))

    def _load(self) -> dict[str, str]:
        if not self._path.exists():
            return {}
        try:
            data = json.loads(self._path.read_text("utf-8"))
        except Exception:
            logger.exception("Failed to read storage from %s; starting empty.", self._path)
            return {}
        if not isinstance(data, dict):
            logger.warning("Storage file %s is not a JSON object; ignoring it.", self._path)
            return {}
        return {str(k): v for k, v in data.items() if isinstance(v, str)}

    def _flush(self) -> None:
        self._path.parent.mkdir(parents=True, exist_ok=True)
        tmp = self._path.with_suffix(".tmp")
        tmp.write_text(json.dumps(self._data, ensure_ascii=False, indent=2), "utf-8")
        os.replace(tmp, self._path)
        with contextlib.suppress(Exception):
            os.chmod(self._path, 0o600)

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
        self._flush()
        logger.debug("Storage key written: %s", key)


class MemoryStorage:
    """Process-local slot (tests, --no-persist runs)."""

    def __init__(self, initial: dict[str, str] | None = None) -> None:
        self._data: dict[str, str] = dict(initial or {})

    def get(self, key: str) -> str | None:
        return self._data.get(key)

    def set(self, key: str, value: str) -> None:
        self._data[key] = value
