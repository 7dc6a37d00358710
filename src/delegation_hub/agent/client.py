# src/delegation_hub/agent/client.py

from __future__ import annotations

import json
import logging
import uuid
from typing import Any

import httpx

from ..core.errors import AgentTransportError
from ..core.ports import AgentEnvelope

logger = logging.getLogger(__name__)

INFERENCE_PATH = "/v3/inference/chat/"


def _make_timeout(read_s: float, connect_s: float = 10.0) -> httpx.Timeout:
    # The controller enforces the overall deadline; this only bounds a stalled socket.
    return httpx.Timeout(connect=connect_s, read=read_s, write=10.0, pool=connect_s)


def _parse_result(text: str) -> tuple[Any, str]:
    """
    The agent replies with a string that is usually JSON.

    Returns (result, message): a JSON object becomes the result and its
    "message" (if any) the message; anything else is returned as plain text.
    """
    stripped = text.strip()
    if stripped.startswith("```"):
        # Some models wrap JSON in a markdown fence.
        stripped = stripped.strip("`")
        if stripped.lower().startswith("json"):
            stripped = stripped[4:]
        stripped = stripped.strip()
    try:
        parsed = json.loads(stripped)
    except ValueError:
        return text, ""
    if isinstance(parsed, dict):
        msg = parsed.get("message")
        return parsed, msg if isinstance(msg, str) else ""
    if isinstance(parsed, str):
        return parsed, ""
    return text, ""


def build_envelope(status_code: int, body_text: str) -> dict[str, Any]:
    """Normalize one HTTP answer into the {success, response, raw_response, error} envelope."""
    if not 200 <= status_code < 300:
        return {
            "success": False,
            "response": {"status": "error", "message": "", "result": None},
            "error": f"HTTP {status_code}: {body_text[:500]}".strip(),
            "raw_response": body_text,
        }

    try:
        body = json.loads(body_text) if body_text else {}
    except ValueError:
        body = body_text

    if isinstance(body, dict):
        inner = body.get("response")
        if isinstance(inner, str):
            result, message = _parse_result(inner)
        elif inner is None:
            result, message = None, ""
        else:
            result, message = inner, ""
        if not message and isinstance(body.get("message"), str):
            message = body["message"]
    elif isinstance(body, str):
        result, message = _parse_result(body)
    else:
        result, message = None, ""

    return {
        "success": True,
        "response": {"status": "success", "message": message, "result": result},
        "raw_response": body_text,
    }


class HttpAgentClient:
    """
    Agent platform client over httpx.

    IMPORTANT:
    - No secrets required at import time; the key is checked on construction.
    - Non-2xx answers are returned as failure envelopes, only transport
      problems raise (AgentTransportError).
    """

    def __init__(self, settings, *, transport: httpx.AsyncBaseTransport | None = None) -> None:
        api_key = getattr(settings, "agent_api_key", None)
        base_url = (getattr(settings, "agent_base_url", "") or "").strip()

        if not api_key or not str(api_key).strip():
            raise RuntimeError("Agent API key is not set. Set HUB_AGENT_API_KEY in your .env.")
        if not base_url:
            raise RuntimeError("Agent base URL is not set. Set HUB_AGENT_BASE_URL in your .env.")

        self._user_id = str(getattr(settings, "agent_user_id", "") or "dashboard@delegation-hub")
        self._session_suffix = uuid.uuid4().hex[:12]
        read_timeout = float(getattr(settings, "request_timeout_seconds", 90.0))

        self._http = httpx.AsyncClient(
            base_url=base_url.rstrip("/"),
            headers={"x-api-key": str(api_key).strip(), "Content-Type": "application/json"},
            timeout=_make_timeout(read_timeout),
            transport=transport,
        )

    async def invoke_agent(self, message: str, agent_id: str) -> AgentEnvelope:
        payload = {
            "user_id": self._user_id,
            "agent_id": agent_id,
            "session_id": f"{agent_id}-{self._session_suffix}",
            "message": message,
        }
        logger.debug("Agent call agent_id=%s chars=%d", agent_id, len(message))
        try:
            resp = await self._http.post(INFERENCE_PATH, json=payload)
        except httpx.HTTPError as e:
            raise AgentTransportError(f"Agent endpoint unreachable: {e.__class__.__name__}") from e

        envelope = build_envelope(resp.status_code, resp.text)
        logger.debug("Agent answered status=%d success=%s", resp.status_code, envelope["success"])
        return envelope

    async def aclose(self) -> None:
        await self._http.aclose()
