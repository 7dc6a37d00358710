# src/delegation_hub/cli/commands.py

from __future__ import annotations

import inspect
import logging
from collections.abc import Awaitable, Callable
from typing import Union, cast

from ..core.state import AppState
from .render import render_agents, render_dashboard, render_history, render_item_detail, render_items

CommandEmitter = Callable[[str], None]
CommandResult = Union[str, Awaitable[str]]
CommandHandler2 = Callable[[AppState, list[str]], CommandResult]
CommandHandler3 = Callable[[AppState, list[str], CommandEmitter | None], CommandResult]
CommandHandler = CommandHandler2 | CommandHandler3

logger = logging.getLogger(__name__)


class CommandRegistry:
    """Slash-command registry used by the console connector (/help, /run, ...)."""

    def __init__(self) -> None:
        self._handlers: dict[str, CommandHandler] = {}
        self._help: dict[str, str] = {}

    def register(
        self,
        name: str,
        handler: CommandHandler,
        help_text: str,
        aliases: list[str] | None = None,
    ) -> None:
        aliases = aliases or []
        key = name.lower()
        self._handlers[key] = handler
        self._help[key] = help_text
        for alias in aliases:
            self._handlers[alias.lower()] = handler

    async def handle(
        self,
        state: AppState,
        line: str,
        emit: CommandEmitter | None = None,
    ) -> str | None:
        """
        Handle a string like "/command args".
        Returns a reply string or None if not a command. Handlers may be sync or async.
        """
        if not line.startswith("/"):
            return None

        parts = line[1:].split()
        if not parts:
            return "Empty command. Use /help to list available commands."

        name = parts[0].lower()
        args = parts[1:]

        handler = self._handlers.get(name)
        if not handler:
            return f"Unknown command: /{name}. Use /help to list available commands."

        try:
            nparams = len(inspect.signature(handler).parameters)
        except (TypeError, ValueError):
            nparams = 3

        if nparams >= 3:
            result = cast(CommandHandler3, handler)(state, args, emit)
        else:
            result = cast(CommandHandler2, handler)(state, args)

        if inspect.isawaitable(result):
            return await result
        return result

    def build_help(self) -> str:
        lines = ["Available commands:"]
        for name, help_text in self._help.items():
            lines.append(f"  /{name} - {help_text}")
        return "\n".join(lines)


registry = CommandRegistry()


def _parse_index(args: list[str]) -> int | None:
    if not args:
        return None
    try:
        return int(args[0])
    except ValueError:
        return None


def cmd_help(state: AppState, args: list[str]) -> str:
    return registry.build_help()


def cmd_status(state: AppState, args: list[str]) -> str:
    return render_dashboard(state.controller.snapshot())


def cmd_run(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /run -> start a delegation run in the background.
    Progress is printed by the connector as phases change.
    """
    task = state.controller.trigger()
    if task is None:
        return "A run is already in progress."
    return "Run started. Scanning inbox..."


def cmd_items(state: AppState, args: list[str]) -> str:
    return render_items(state.controller.snapshot())


def cmd_expand(state: AppState, args: list[str]) -> str:
    """
    /expand N -> show details of delegation N
    """
    idx = _parse_index(args)
    snap = state.controller.snapshot()
    if idx is None or not 0 <= idx < len(snap.items):
        return f"Usage: /expand N (0..{max(0, len(snap.items) - 1)})."
    state.controller.expand(idx)
    return render_item_detail(idx, snap.items[idx])


def cmd_collapse(state: AppState, args: list[str]) -> str:
    state.controller.collapse()
    return "Collapsed."


async def cmd_retry(state: AppState, args: list[str], emit: CommandEmitter | None = None) -> str:
    """
    /retry N -> resend the Slack notification of delegation N.

    Failures are not reported as errors: the item simply stays 'failed'.
    """
    idx = _parse_index(args)
    if idx is None:
        return "Usage: /retry N."

    if emit:
        emit(f"Retrying notification for #{idx}...")

    outcome = await state.controller.retry(idx)
    if not outcome.attempted:
        logger.debug("Retry #%d not sent: %s", idx, outcome.error)
        return f"Retry not sent: {outcome.error}."

    snap = state.controller.snapshot()
    if not 0 <= idx < len(snap.items):
        return f"No delegation #{idx}."
    if not outcome.ok:
        logger.debug("Retry #%d failed: %s", idx, outcome.error)
    return f"#{idx}: notification {'' if outcome.ok else 'still '}{snap.items[idx].notification_status.value}."


def cmd_history(state: AppState, args: list[str]) -> str:
    return render_history(state.controller.history.entries())


def cmd_sample(state: AppState, args: list[str]) -> str:
    """
    /sample        -> show status
    /sample on     -> fill empty fields with the sample dataset
    /sample off    -> live data only
    """
    snap = state.controller.snapshot()
    if not args:
        return f"Sample data is {'ON' if snap.show_sample else 'OFF'}. Use /sample on or /sample off."

    arg = args[0].lower()
    if arg in ("on", "1", "true", "yes"):
        state.controller.set_show_sample(True)
        return "Sample data ON."
    if arg in ("off", "0", "false", "no"):
        state.controller.set_show_sample(False)
        return "Sample data OFF."
    return "Usage: /sample on or /sample off."


def cmd_agents(state: AppState, args: list[str]) -> str:
    return render_agents(state.controller.snapshot().active_agent_id)


registry.register("help", cmd_help, help_text="Show available commands.", aliases=["h", "?"])
registry.register("run", cmd_run, help_text="Process emails and delegate tasks.", aliases=["process"])
registry.register("status", cmd_status, help_text="Show the dashboard (phase, stats, summary).")
registry.register("items", cmd_items, help_text="List delegated tasks.", aliases=["ls"])
registry.register("expand", cmd_expand, help_text="Show task details: /expand N.")
registry.register("collapse", cmd_collapse, help_text="Hide task details.")
registry.register("retry", cmd_retry, help_text="Resend a failed notification: /retry N.")
registry.register("history", cmd_history, help_text="Show past runs (newest first).")
registry.register("sample", cmd_sample, help_text="Sample data: /sample on | /sample off.")
registry.register("agents", cmd_agents, help_text="List agents and the active one.")
