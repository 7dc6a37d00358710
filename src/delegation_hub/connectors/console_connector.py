# src/delegation_hub/connectors/console_connector.py

from __future__ import annotations

import asyncio
import logging
from datetime import datetime

from ..cli.commands import registry as command_registry
from ..cli.render import render_dashboard
from ..core.models import ProcessingPhase
from ..core.state import AppState, DashboardSnapshot

logger = logging.getLogger(__name__)


def _ts_local() -> str:
    return datetime.now().astimezone().strftime("%Y-%m-%d %H:%M:%S")


def _print_ts(text: str) -> None:
    print(f"[{_ts_local()}] {text}", flush=True)


class _PhasePrinter:
    """Prints phase changes and the final dashboard as the controller reports them."""

    def __init__(self) -> None:
        self._last_phase = ProcessingPhase.IDLE

    def __call__(self, snap: DashboardSnapshot) -> None:
        if snap.phase is self._last_phase:
            return
        self._last_phase = snap.phase
        if snap.phase is ProcessingPhase.COMPLETE:
            _print_ts(render_dashboard(snap))
        elif snap.phase is not ProcessingPhase.IDLE:
            _print_ts(snap.phase.label)


async def run_console_loop(state: AppState) -> None:
    logger.info("Console connector started.")
    _print_ts("[CONSOLE] Type /run to process emails. Use /help for commands. Use /exit to quit.\n")

    printer = _PhasePrinter()
    state.controller.subscribe(printer)

    def emit(text: str) -> None:
        _print_ts(text)

    try:
        while True:
            try:
                user_input = (await asyncio.to_thread(input, ">>> ")).strip()
            except EOFError:
                logger.info("Console EOF received, exiting.")
                break
            except KeyboardInterrupt:
                logger.info("Console KeyboardInterrupt, exiting.")
                print()
                break

            if not user_input:
                continue

            if user_input.lower() in ("/exit", "/quit"):
                logger.info("Console exit command received.")
                break

            if not user_input.startswith("/"):
                _print_ts("Commands start with '/'. Use /help to list them.")
                continue

            try:
                reply = await command_registry.handle(state, user_input, emit=emit)
            except Exception:
                logger.exception("Command handler crashed.")
                reply = "Internal error while handling a command."

            if reply is not None:
                _print_ts(reply)
    finally:
        state.controller.unsubscribe(printer)
        logger.info("Console connector finished.")
