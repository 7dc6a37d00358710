# src/delegation_hub/core/errors.py

from __future__ import annotations

import re

INTEGRATION_AUTH_MESSAGE = (
    "The manager agent encountered a recursion loop on the server. "
    "This typically happens when the Gmail or Slack integrations are not yet authorized "
    "via Composio OAuth. Please ensure both Gmail and Slack connections are configured, "
    "then try again."
)
NETWORK_ERROR_MESSAGE = "Network error. Please try again."
DEFAULT_FAILURE_MESSAGE = "An error occurred while processing emails."
DEFAULT_COMPLETE_MESSAGE = "Processing complete."

_AUTH_SIGNATURE = re.compile(r"recursion|aborting", re.IGNORECASE)


class AgentTransportError(RuntimeError):
    """The remote agent endpoint could not be reached (connection, protocol, read timeout)."""


def timeout_message(timeout_seconds: float) -> str:
    return (
        f"Request timed out after {timeout_seconds:g} seconds. "
        "The agent may be stuck. Please try again."
    )


def matches_auth_signature(text: str | None) -> bool:
    """True when text carries the 'integration not authorized' signature."""
    return bool(text) and _AUTH_SIGNATURE.search(text) is not None


def friendly_error_message(err: Exception) -> str:
    msg = str(err).strip() or "Agent error."
    if "Agent API key is not set" in msg:
        return "Agent endpoint is not configured (missing API key). Set HUB_AGENT_API_KEY in .env."
    if "Agent base URL is not set" in msg:
        return "Agent endpoint is not configured (missing base URL). Set HUB_AGENT_BASE_URL in .env."
    if isinstance(err, AgentTransportError):
        return NETWORK_ERROR_MESSAGE
    return msg
