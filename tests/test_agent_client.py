# tests/test_agent_client.py

from __future__ import annotations

import json
from types import SimpleNamespace

import httpx
import pytest

from delegation_hub.agent.client import HttpAgentClient, build_envelope
from delegation_hub.agent.offline import OfflineAgentClient
from delegation_hub.core.classifier import IntegrationAuthError, StructuredSuccess, TextSuccess, classify_response
from delegation_hub.core.errors import AgentTransportError


def _settings(**overrides) -> SimpleNamespace:
    base = dict(
        agent_api_key="secret",
        agent_base_url="https://agents.example.test/",
        agent_user_id="tester@example.test",
        request_timeout_seconds=5.0,
    )
    base.update(overrides)
    return SimpleNamespace(**base)


@pytest.mark.asyncio
async def test_invoke_posts_message_and_parses_json_result() -> None:
    seen: dict = {}
    result = {"summary": "done", "data": {"tasks_extracted": 2, "notifications_sent": 1}, "items": []}

    def handler(request: httpx.Request) -> httpx.Response:
        seen["url"] = str(request.url)
        seen["key"] = request.headers.get("x-api-key")
        seen["body"] = json.loads(request.content)
        return httpx.Response(200, json={"response": json.dumps(result), "session_id": "s"})

    client = HttpAgentClient(_settings(), transport=httpx.MockTransport(handler))
    envelope = await client.invoke_agent("Process my emails", "agent-1")
    await client.aclose()

    assert seen["url"] == "https://agents.example.test/v3/inference/chat/"
    assert seen["key"] == "secret"
    assert seen["body"]["agent_id"] == "agent-1"
    assert seen["body"]["message"] == "Process my emails"
    assert seen["body"]["user_id"] == "tester@example.test"
    assert seen["body"]["session_id"].startswith("agent-1-")

    assert envelope["success"] is True
    assert envelope["response"]["status"] == "success"
    out = classify_response(envelope)
    assert isinstance(out, StructuredSuccess)
    assert out.summary == "done"
    assert out.stats is not None and out.stats.success_rate == 50


@pytest.mark.asyncio
async def test_plain_text_reply_becomes_text_result() -> None:
    transport = httpx.MockTransport(lambda request: httpx.Response(200, json={"response": "All teammates notified."}))
    client = HttpAgentClient(_settings(), transport=transport)

    envelope = await client.invoke_agent("hi", "agent-1")
    await client.aclose()

    assert classify_response(envelope) == TextSuccess("All teammates notified.")


@pytest.mark.asyncio
async def test_http_error_is_a_failure_envelope_not_an_exception() -> None:
    body = "Agent aborting: recursion limit reached"
    transport = httpx.MockTransport(lambda request: httpx.Response(500, text=body))
    client = HttpAgentClient(_settings(), transport=transport)

    envelope = await client.invoke_agent("hi", "agent-1")
    await client.aclose()

    assert envelope["success"] is False
    assert envelope["raw_response"] == body
    assert isinstance(classify_response(envelope), IntegrationAuthError)


@pytest.mark.asyncio
async def test_transport_failure_raises_agent_transport_error() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = HttpAgentClient(_settings(), transport=httpx.MockTransport(handler))
    with pytest.raises(AgentTransportError):
        await client.invoke_agent("hi", "agent-1")
    await client.aclose()


def test_missing_api_key_is_rejected() -> None:
    with pytest.raises(RuntimeError, match="API key"):
        HttpAgentClient(_settings(agent_api_key=None))
    with pytest.raises(RuntimeError, match="base URL"):
        HttpAgentClient(_settings(agent_base_url=" "))


def test_build_envelope_handles_fenced_json_and_odd_bodies() -> None:
    fenced = json.dumps({"response": '```json\n{"summary": "fenced"}\n```'})
    assert build_envelope(200, fenced)["response"]["result"] == {"summary": "fenced"}

    raw = build_envelope(200, "not json at all")
    assert raw["response"]["result"] == "not json at all"

    empty = build_envelope(200, "")
    assert empty["success"] is True
    assert empty["response"]["result"] is None


@pytest.mark.asyncio
async def test_offline_client_returns_sample_run() -> None:
    client = OfflineAgentClient(delay_seconds=0)

    out = classify_response(await client.invoke_agent("Process my emails", "agent-1"))
    retry = await client.invoke_agent('Retry sending Slack notification for the task "x"', "agent-1")

    assert isinstance(out, StructuredSuccess)
    assert out.stats is not None and out.stats.success_rate == 89
    assert len(out.items) == 5
    assert retry["success"] is True
