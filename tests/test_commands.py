# tests/test_commands.py

from __future__ import annotations

import asyncio

import pytest

from delegation_hub.cli.bootstrap import create_initial_state
from delegation_hub.cli.commands import CommandRegistry, registry
from delegation_hub.core.models import NotificationStatus, ProcessingPhase

from .fakes import FakeAgentClient, Step


@pytest.mark.asyncio
async def test_command_registry_routes_2_and_3_params(settings) -> None:
    state = create_initial_state(settings=settings, client=FakeAgentClient())
    reg = CommandRegistry()
    called = {"h2": 0, "h3": 0}
    notes: list[str] = []

    def h2(state, args):
        called["h2"] += 1
        return "h2:" + ",".join(args)

    async def h3(state, args, emit):
        called["h3"] += 1
        if emit is not None:
            emit("note")
        return "h3"

    reg.register("a", h2, "a", aliases=["alpha"])
    reg.register("b", h3, "b")

    assert await reg.handle(state, "/a x y") == "h2:x,y"
    assert await reg.handle(state, "/ALPHA") == "h2:"
    assert await reg.handle(state, "/b", emit=notes.append) == "h3"
    assert called == {"h2": 2, "h3": 1}
    assert notes == ["note"]
    assert "/a - a" in reg.build_help()
    await state.controller.aclose()


@pytest.mark.asyncio
async def test_non_commands_and_unknown_commands(settings) -> None:
    state = create_initial_state(settings=settings, client=FakeAgentClient())

    assert await registry.handle(state, "hello") is None
    assert "Empty command" in (await registry.handle(state, "/") or "")
    assert "Unknown command: /nope" in (await registry.handle(state, "/nope") or "")
    await state.controller.aclose()


@pytest.mark.asyncio
async def test_run_then_status_and_items(settings, delegation_envelope) -> None:
    client = FakeAgentClient(Step(delegation_envelope, delay=0.05))
    state = create_initial_state(settings=settings, client=client)

    assert await registry.handle(state, "/run") == "Run started. Scanning inbox..."
    assert await registry.handle(state, "/process") == "A run is already in progress."
    assert state.controller.snapshot().phase is ProcessingPhase.SCANNING

    while state.controller.is_running:
        await asyncio.sleep(0.01)

    status = await registry.handle(state, "/status") or ""
    assert "Success rate: 89%" in status
    assert "Summary: Delegation workflow completed." in status

    items = await registry.handle(state, "/ls") or ""
    assert items.startswith("Delegations (5):")
    assert "Review Partner Contracts" in items

    detail = await registry.handle(state, "/expand 4") or ""
    assert "Use /retry 4" in detail
    assert state.controller.snapshot().expanded_index == 4
    assert await registry.handle(state, "/collapse") == "Collapsed."
    assert state.controller.snapshot().expanded_index is None

    history = await registry.handle(state, "/history") or ""
    assert history.startswith("Run history (1):")
    await state.controller.aclose()


@pytest.mark.asyncio
async def test_retry_command(settings, delegation_envelope) -> None:
    client = FakeAgentClient(Step(delegation_envelope), Step({"success": True}))
    state = create_initial_state(settings=settings, client=client)
    await state.controller.start_run()
    notes: list[str] = []

    assert await registry.handle(state, "/retry") == "Usage: /retry N."
    assert await registry.handle(state, "/retry 4", emit=notes.append) == "#4: notification sent."
    assert notes == ["Retrying notification for #4..."]
    assert state.controller.snapshot().items[4].notification_status is NotificationStatus.SENT
    assert await registry.handle(state, "/retry 42") == "Retry not sent: no item at index 42."
    await state.controller.aclose()


@pytest.mark.asyncio
async def test_sample_toggle_and_agents(settings) -> None:
    state = create_initial_state(settings=settings, client=FakeAgentClient())

    assert (await registry.handle(state, "/sample") or "").startswith("Sample data is OFF")
    assert await registry.handle(state, "/sample on") == "Sample data ON."
    assert "Delegations (5):" in (await registry.handle(state, "/items") or "")
    assert await registry.handle(state, "/sample maybe") == "Usage: /sample on or /sample off."
    assert await registry.handle(state, "/sample off") == "Sample data OFF."
    assert await registry.handle(state, "/items") == "No delegations yet."

    agents = await registry.handle(state, "/agents") or ""
    assert "Task Delegation Manager" in agents
    await state.controller.aclose()


@pytest.mark.asyncio
async def test_retry_on_sample_rows_is_not_sent(settings) -> None:
    client = FakeAgentClient()
    state = create_initial_state(settings=settings, client=client)
    await registry.handle(state, "/sample on")

    reply = await registry.handle(state, "/retry 4")

    assert reply == "Retry not sent: no item at index 4."
    assert client.calls == []
    await state.controller.aclose()
