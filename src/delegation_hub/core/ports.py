# src/delegation_hub/core/ports.py

from __future__ import annotations

"""
Ports (interfaces) used by the core.

The controller depends on Protocols instead of concrete implementations,
so the HTTP agent client, the offline demo client and test fakes are interchangeable.
"""

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING, Any, Awaitable, Protocol

if TYPE_CHECKING:
    from .state import DashboardSnapshot

AgentEnvelope = Mapping[str, Any]
# {"success": bool, "response": {"status", "message", "result"}, "raw_response": str, "error": str}


class AgentClient(Protocol):
    """
    Remote agent invocation (black-box RPC).

    Returns the response envelope for anything the endpoint answered,
    including non-success answers. Raises AgentTransportError when the
    endpoint could not be reached at all.
    """

    def invoke_agent(self, message: str, agent_id: str) -> Awaitable[AgentEnvelope]: ...

    async def aclose(self) -> None: ...


SnapshotListener = Callable[["DashboardSnapshot"], None]
