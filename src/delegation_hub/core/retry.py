# src/delegation_hub/core/retry.py

from __future__ import annotations

import asyncio
import logging
from collections.abc import Mapping
from dataclasses import dataclass

from .errors import DEFAULT_FAILURE_MESSAGE, AgentTransportError, timeout_message
from .models import DelegationItem
from .ports import AgentClient

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class RetryOutcome:
    """
    Result of one notification retry.

    The dashboard does not surface failures (the row keeps its failed badge and
    retry action); the reason is kept here so callers can log or inspect it.
    """

    ok: bool
    error: str | None = None
    # False when the retry was refused before any remote call.
    attempted: bool = True

    @classmethod
    def rejected(cls, reason: str) -> RetryOutcome:
        return cls(ok=False, error=reason, attempted=False)


def build_retry_instruction(item: DelegationItem) -> str:
    return (
        f'Retry sending Slack notification for the task "{item.title}" '
        f"assigned to {item.assignee} in channel {item.channel}."
    )


async def request_retry(
    client: AgentClient,
    item: DelegationItem,
    *,
    agent_id: str,
    timeout_seconds: float,
) -> RetryOutcome:
    """
    Ask the orchestrator to resend one notification.

    Success is the envelope's top-level success flag, nothing else; the
    classifier is not involved. Never raises except on cancellation.
    """
    try:
        async with asyncio.timeout(timeout_seconds):
            envelope = await client.invoke_agent(build_retry_instruction(item), agent_id)
    except TimeoutError:
        return RetryOutcome(ok=False, error=timeout_message(timeout_seconds))
    except AgentTransportError as e:
        return RetryOutcome(ok=False, error=str(e) or "transport error")
    except Exception as e:
        logger.debug("Retry call raised unexpectedly", exc_info=True)
        return RetryOutcome(ok=False, error=f"{e.__class__.__name__}: {e}")

    if isinstance(envelope, Mapping) and envelope.get("success") is True:
        return RetryOutcome(ok=True)

    reason = DEFAULT_FAILURE_MESSAGE
    if isinstance(envelope, Mapping):
        err = envelope.get("error")
        response = envelope.get("response")
        if isinstance(response, Mapping) and isinstance(response.get("message"), str) and response["message"]:
            reason = response["message"]
        elif isinstance(err, str) and err:
            reason = err
    return RetryOutcome(ok=False, error=reason)
