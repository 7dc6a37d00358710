# src/delegation_hub/cli/bootstrap.py

"""
CLI bootstrap helpers.

This module is the "composition root":
- loads settings once,
- ensures the local (gitignored) data directory exists,
- wires the agent client and the run controller into AppState.
"""

from __future__ import annotations

import logging

from ..agent.client import HttpAgentClient
from ..agent.offline import OfflineAgentClient
from ..config import get_settings
from ..core.controller import RunController, RunTimings
from ..core.errors import friendly_error_message
from ..core.ports import AgentClient
from ..core.state import AppState

logger = logging.getLogger(__name__)


def build_agent_client(settings) -> AgentClient:
    try:
        return HttpAgentClient(settings)
    except RuntimeError as e:
        # Fallback for demos / local runs without the agent platform.
        logger.warning("%s Using the offline demo agent.", friendly_error_message(e))
        return OfflineAgentClient(delay_seconds=getattr(settings, "offline_delay_seconds", 5.0))


def create_initial_state(*, settings=None, client: AgentClient | None = None) -> AppState:
    """
    Create AppState from the provided settings.

    Keeping settings (and the client) injectable makes the app easier to test.
    If settings is None, falls back to get_settings().
    """
    if settings is None:
        settings = get_settings()

    data_dir = getattr(settings, "data_dir", None)
    if data_dir is not None:
        data_dir.mkdir(parents=True, exist_ok=True)

    if client is None:
        client = build_agent_client(settings)

    controller = RunController(
        client,
        agent_id=settings.manager_agent_id,
        timings=RunTimings.from_settings(settings),
        keywords=list(getattr(settings, "keywords", []) or []),
        show_sample=bool(getattr(settings, "show_sample", False)),
    )
    return AppState(settings=settings, controller=controller)
