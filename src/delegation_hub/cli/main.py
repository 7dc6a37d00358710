# src/delegation_hub/cli/main.py

"""
CLI entrypoint.

Initializes logging, builds AppState, runs the console connector on the
event loop, and tears the controller down (timers, in-flight run, HTTP client).
"""

from __future__ import annotations

import asyncio
import logging

from ..cli.bootstrap import create_initial_state
from ..config import get_settings
from ..connectors.console_connector import run_console_loop
from ..logging_setup import setup_logging

logger = logging.getLogger(__name__)


async def _run(settings) -> None:
    state = create_initial_state(settings=settings)
    try:
        if settings.console_enabled:
            await run_console_loop(state)
        else:
            logger.info("Console disabled. Running a single delegation run.")
            outcome = await state.controller.start_run()
            if outcome is not None:
                logger.info("Run finished: %s %s", outcome.kind.value, outcome.error or outcome.summary)
    finally:
        await state.controller.aclose()


def main() -> None:
    settings = get_settings()

    level_name = str(getattr(settings, "log_level", "INFO")).upper()
    console_level = getattr(logging, level_name, logging.INFO)

    log_file = setup_logging(log_dir=settings.data_dir, app_name="hub", console_level=console_level)

    logger.info("Starting %s... (log file: %s)", settings.app_name, log_file)
    try:
        asyncio.run(_run(settings))
    except KeyboardInterrupt:
        logger.info("Interrupted.")
    logger.info("Bye.")


if __name__ == "__main__":
    main()
