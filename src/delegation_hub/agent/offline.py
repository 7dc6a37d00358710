# src/delegation_hub/agent/offline.py

from __future__ import annotations

import asyncio
import json

from ..core.ports import AgentEnvelope
from ..core.sample_data import SAMPLE_SUMMARY, sample_result_payload


class OfflineAgentClient:
    """
    Offline deterministic agent used for demos when no endpoint is configured.

    Behavior:
    - Retry instructions -> success after a short pause
    - Anything else -> the sample delegation run after `delay_seconds`
    """

    def __init__(self, delay_seconds: float = 5.0) -> None:
        self.delay_seconds = max(0.0, float(delay_seconds))

    async def invoke_agent(self, message: str, agent_id: str) -> AgentEnvelope:
        if message.lower().startswith("retry"):
            await asyncio.sleep(min(self.delay_seconds, 1.0))
            return {
                "success": True,
                "response": {"status": "success", "message": "Notification resent (offline demo).", "result": None},
            }

        await asyncio.sleep(self.delay_seconds)
        result = sample_result_payload()
        return {
            "success": True,
            "response": {"status": "success", "message": SAMPLE_SUMMARY, "result": result},
            "raw_response": json.dumps(result),
        }

    async def aclose(self) -> None:
        return
