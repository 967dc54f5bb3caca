# src/taskique/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, then runs the console REPL on an
asyncio event loop.
"""

from __future__ import annotations

import asyncio
import locale
import logging

from ..cli.bootstrap import create_initial_state, shutdown_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging
from ..notify import LoggingNotifier

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    notifier = None if settings.console_enabled else LoggingNotifier()
    state = create_initial_state(settings=settings, notifier=notifier)
    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Refreshing once and exiting.")
            await state.task_store.refresh()
            logger.info("Stats: %s", state.task_store.stats)
    finally:
        await shutdown_state(state)


def _use_user_collation() -> None:
    """Title sorting goes through locale.strxfrm; pick up the user's LC_COLLATE."""
    try:
        locale.setlocale(locale.LC_COLLATE, "")
    except locale.Error:
        logger.warning("User collation locale unavailable; titles sort accent-folded only.")


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)
    log_file = setup_logging(log_dir=settings.log_dir, console_level=console_level)
    _use_user_collation()

    logger.info("Starting %s (log file %s)...", settings.app_name, log_file)

    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
