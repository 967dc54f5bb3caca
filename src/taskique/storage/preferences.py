# src/taskique/storage/preferences.py

from __future__ import annotations

import logging
from enum import StrEnum

from ..core.ports import KeyValueStorage

logger = logging.getLogger(__name__)

THEME_KEY = "taskique-theme"


class ThemePreference(StrEnum):
    LIGHT = "light"
    DARK = "dark"
    SYSTEM = "system"


def load_theme(storage: KeyValueStorage) -> ThemePreference:
    raw = storage.get(THEME_KEY)
    if not raw:
        return ThemePreference.SYSTEM
    try:
        return ThemePreference(raw)
    except ValueError:
        logger.warning("Ignoring unknown stored theme %r", raw)
        return ThemePreference.SYSTEM


def save_theme(storage: KeyValueStorage, theme: ThemePreference | str) -> ThemePreference:
    value = ThemePreference(theme)
    storage.set(THEME_KEY, value.value)
    return value
