# src/delegation_hub/core/agents.py

from __future__ import annotations

from dataclasses import dataclass

from ..config import DEFAULT_MANAGER_AGENT_ID


@dataclass(frozen=True, slots=True)
class AgentInfo:
    id: str
    name: str
    role: str
    provider: str


AGENTS: tuple[AgentInfo, ...] = (
    AgentInfo(DEFAULT_MANAGER_AGENT_ID, "Task Delegation Manager", "Orchestrator", "OpenAI / gpt-4.1"),
    AgentInfo("698849080410624ae2d63834", "Email Scanner Agent", "Sub-agent", "OpenAI / gpt-4.1"),
    AgentInfo("6988491f4468b1346d15907c", "Slack Notifier Agent", "Sub-agent", "Anthropic / claude-sonnet-4-5"),
)


def find_agent(agent_id: str | None) -> AgentInfo | None:
    if not agent_id:
        return None
    for agent in AGENTS:
        if agent.id == agent_id:
            return agent
    return None


def build_run_instruction(keywords: list[str] | tuple[str, ...]) -> str:
    """Fixed natural-language instruction for the orchestrator, with the configured keywords."""
    words = [k.strip() for k in keywords if k and k.strip()]
    if not words:
        kw = "delegation"
    elif len(words) == 1:
        kw = words[0]
    else:
        sep = ", or " if len(words) > 2 else " or "
        kw = ", ".join(words[:-1]) + sep + words[-1]
    return (
        "Process my emails and delegate tasks to my teammates. "
        f"Look for emails with {kw} keywords and notify the assigned teammates on Slack."
    )
