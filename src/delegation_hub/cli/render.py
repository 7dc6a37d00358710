# src/delegation_hub/cli/render.py

"""Plain-text views of a DashboardSnapshot for the console."""

from __future__ import annotations

from datetime import datetime

from ..core.agents import AGENTS, find_agent
from ..core.models import PHASE_STEPS, DelegationItem, HistoryEntry, ProcessingPhase, RunStats
from ..core.state import DashboardSnapshot


def _parse_ts(ts: str) -> datetime | None:
    try:
        return datetime.fromisoformat(ts).astimezone()
    except (TypeError, ValueError):
        return None


def format_time(ts: str) -> str:
    dt = _parse_ts(ts)
    return dt.strftime("%H:%M") if dt else (ts or "")


def format_datetime(ts: str) -> str:
    dt = _parse_ts(ts)
    return dt.strftime("%b %d, %H:%M") if dt else (ts or "")


def render_progress(snap: DashboardSnapshot) -> str:
    if snap.phase is ProcessingPhase.IDLE:
        return "Idle."
    current = PHASE_STEPS.index(snap.phase)
    marks = []
    for i, step in enumerate(PHASE_STEPS):
        if i < current or snap.phase is ProcessingPhase.COMPLETE:
            marks.append(f"[x] {step.value}")
        elif i == current:
            marks.append(f"[>] {step.value}")
        else:
            marks.append(f"[ ] {step.value}")
    return f"{snap.phase.label}  " + "  ".join(marks)


def render_stats(stats: RunStats | None, rate: int) -> str:
    if stats is None:
        return "No stats yet. Use /run to process emails."
    return (
        f"Emails scanned: {stats.scanned}  |  Matching: {stats.matched}  |  "
        f"Tasks extracted: {stats.tasks_extracted}  |  "
        f"Sent: {stats.notifications_sent}  Failed: {stats.notifications_failed}  |  "
        f"Success rate: {rate}%"
    )


def render_item_row(index: int, item: DelegationItem) -> str:
    return (
        f"{index}. [{item.priority or '-'}] {item.title or '(untitled)'} -> {item.assignee or '?'} "
        f"{item.channel} {item.notification_status.value} {format_time(item.timestamp)}"
    )


def render_item_detail(index: int, item: DelegationItem) -> str:
    lines = [
        f"Task #{index}: {item.title or '(untitled)'}",
        f"  Assignee: {item.assignee}",
        f"  Priority: {item.priority}",
        f"  Channel: {item.channel}",
        f"  Notification: {item.notification_status.value}",
        f"  Time: {format_datetime(item.timestamp)}",
    ]
    if item.needs_retry:
        lines.append(f"  Use /retry {index} to resend the notification.")
    return "\n".join(lines)


def render_items(snap: DashboardSnapshot) -> str:
    if not snap.items:
        return "No delegations yet."
    lines = [f"Delegations ({len(snap.items)}):"]
    for i, item in enumerate(snap.items):
        lines.append("  " + render_item_row(i, item))
    expanded = snap.expanded_item
    if expanded is not None and snap.expanded_index is not None:
        lines.append(render_item_detail(snap.expanded_index, expanded))
    return "\n".join(lines)


def render_history(entries: tuple[HistoryEntry, ...]) -> str:
    if not entries:
        return "No runs yet."
    lines = [f"Run history ({len(entries)}):"]
    for i, entry in enumerate(entries, start=1):
        tasks = entry.stats.tasks_extracted if entry.stats else len(entry.items)
        summary = entry.summary if len(entry.summary) <= 120 else entry.summary[:117] + "..."
        lines.append(f"{i}. {format_datetime(entry.timestamp)} ({tasks} tasks) {summary}")
    return "\n".join(lines)


def render_agents(active_agent_id: str | None) -> str:
    lines = ["Agents:"]
    for agent in AGENTS:
        marker = "*" if agent.id == active_agent_id else " "
        lines.append(f" {marker} {agent.name} ({agent.role}, {agent.provider})")
    return "\n".join(lines)


def render_dashboard(snap: DashboardSnapshot) -> str:
    lines = [
        render_progress(snap),
        render_stats(snap.stats, snap.success_rate),
    ]
    active = find_agent(snap.active_agent_id)
    if active is not None:
        lines.append(f"Active agent: {active.name}")
    if snap.error:
        lines.append(f"Processing Error: {snap.error}")
    elif snap.summary:
        lines.append(f"Summary: {snap.summary}")
    if snap.keywords:
        lines.append("Keywords: " + ", ".join(snap.keywords))
    if snap.show_sample:
        lines.append("(sample data enabled)")
    return "\n".join(lines)
