# src/taskique/config.py

"""Centralized settings loaded from environment variables (+ optional .env).

Design goals:
- One Settings object for the whole app.
- No secrets required at import time.
- Settings stay injectable: stores and the gateway receive values, they never read env.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

ENV_PREFIX = "TASKIQUE"

DEFAULT_API_BASE_URL = "https://techpix-hackathon-task-management.onrender.com"


def _k(suffix: str) -> str:
    """Build env var name with the project prefix."""
    return f"{ENV_PREFIX}_{suffix}"


def _load_dotenv_if_available() -> None:
    """Load .env locally if python-dotenv is installed. Safe no-op otherwise."""
    try:
        from dotenv import load_dotenv  # type: ignore
    except Exception:
        return
    load_dotenv(override=False)


_load_dotenv_if_available()


def _env(name: str, default: str = "") -> str:
    v = os.getenv(name)
    return default if v is None else v


def _env_bool(name: str, default: bool) -> bool:
    raw = os.getenv(name)
    if raw is None:
        return default
    return raw.strip().lower() in {"1", "true", "yes", "y", "on"}


def _env_float_or_none(name: str, default: float | None) -> float | None:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    # zero or negative means "wait forever"
    return value if value > 0 else None


def _env_path(name: str, default: Path) -> Path:
    raw = os.getenv(name)
    if raw is None or raw.strip() == "":
        return default
    return Path(raw).expanduser()


@dataclass(frozen=True, slots=True)
class Settings:
    # ---- App / logging ----
    app_name: str
    log_level: str

    # ---- Connector flags ----
    console_enabled: bool

    # ---- Remote task service ----
    api_base_url: str
    request_timeout_seconds: Optional[float]

    # ---- Local data paths (ignored by git) ----
    data_dir: Path
    storage_path: Path
    log_dir: Path

    @staticmethod
    def from_env() -> "Settings":
        app_name = _env(_k("APP_NAME"), "taskique") or "taskique"
        log_level = _env(_k("LOG_LEVEL"), "INFO")

        console_enabled = _env_bool(_k("CONSOLE_ENABLED"), True)

        api_base_url = (_env(_k("API_BASE_URL"), DEFAULT_API_BASE_URL) or DEFAULT_API_BASE_URL).strip()
        request_timeout_seconds = _env_float_or_none(_k("REQUEST_TIMEOUT_SECONDS"), None)

        data_dir = _env_path(_k("DATA_DIR"), Path(".local/taskique"))
        storage_path = _env_path(_k("STORAGE_PATH"), data_dir / "storage.json")
        log_dir = _env_path(_k("LOG_DIR"), data_dir)

        return Settings(
            app_name=app_name,
            log_level=log_level,
            console_enabled=console_enabled,
            api_base_url=api_base_url.rstrip("/"),
            request_timeout_seconds=request_timeout_seconds,
            data_dir=data_dir,
            storage_path=storage_path,
            log_dir=log_dir,
        )


_SETTINGS: Settings | None = None


def get_settings() -> Settings:
    global _SETTINGS
    if _SETTINGS is None:
        _SETTINGS = Settings.from_env()
    return _SETTINGS
