# src/delegation_hub/core/state.py

"""
Run state and its transitions.

RunState is the single owned value behind the dashboard. It is changed only
through the transition functions below (called by RunController); the
rendering side reads immutable DashboardSnapshot values built by snapshot().
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import StrEnum
from typing import TYPE_CHECKING, Any

from .models import DelegationItem, HistoryEntry, ProcessingPhase, RunResult, RunStats, success_rate
from .sample_data import SAMPLE_ITEMS, SAMPLE_STATS, SAMPLE_SUMMARY

if TYPE_CHECKING:
    from .controller import RunController


class OutcomeKind(StrEnum):
    STRUCTURED = "structured"
    TEXT = "text"
    GENERIC = "generic"
    INTEGRATION_AUTH = "integration_auth"
    REMOTE_FAILURE = "remote_failure"
    TIMEOUT = "timeout"
    TRANSPORT = "transport"

    @property
    def is_success(self) -> bool:
        return self in (OutcomeKind.STRUCTURED, OutcomeKind.TEXT, OutcomeKind.GENERIC)


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Exactly one of these is applied per run."""

    kind: OutcomeKind
    result: RunResult | None = None
    error: str = ""

    @property
    def summary(self) -> str:
        return self.result.summary if self.result is not None else ""


@dataclass(slots=True)
class RunState:
    phase: ProcessingPhase = ProcessingPhase.IDLE
    processing: bool = False
    active_agent_id: str | None = None

    stats: RunStats | None = None
    items: list[DelegationItem] = field(default_factory=list)
    summary: str = ""
    error: str = ""

    # UI-only selection; not part of the run data.
    expanded_index: int | None = None
    show_sample: bool = False


def begin_run(state: RunState, agent_id: str) -> None:
    state.processing = True
    state.error = ""
    state.phase = ProcessingPhase.SCANNING
    state.active_agent_id = agent_id
    state.expanded_index = None


def advance_phase(state: RunState, phase: ProcessingPhase) -> bool:
    """Simulated step. Only moves forward while a run is still in flight."""
    if not state.processing:
        return False
    if state.phase not in (ProcessingPhase.SCANNING, ProcessingPhase.EXTRACTING):
        return False
    state.phase = phase
    return True


def apply_outcome(state: RunState, outcome: RunOutcome) -> None:
    if outcome.kind.is_success and outcome.result is not None:
        # Overwritten wholesale, never merged with the previous run.
        state.stats = outcome.result.stats
        state.items = list(outcome.result.items)
        state.summary = outcome.result.summary
        state.error = ""
        return
    state.error = outcome.error


def finish_run(state: RunState) -> None:
    state.active_agent_id = None
    state.processing = False
    state.phase = ProcessingPhase.COMPLETE


def reset_to_idle(state: RunState) -> bool:
    if state.phase is not ProcessingPhase.COMPLETE:
        return False
    state.phase = ProcessingPhase.IDLE
    return True


@dataclass(frozen=True, slots=True)
class DashboardSnapshot:
    phase: ProcessingPhase
    processing: bool
    active_agent_id: str | None
    stats: RunStats | None
    items: tuple[DelegationItem, ...]
    summary: str
    error: str
    success_rate: int
    history: tuple[HistoryEntry, ...]
    expanded_index: int | None
    show_sample: bool
    keywords: tuple[str, ...] = ()

    @property
    def expanded_item(self) -> DelegationItem | None:
        if self.expanded_index is None or not 0 <= self.expanded_index < len(self.items):
            return None
        return self.items[self.expanded_index]


def snapshot(
    state: RunState,
    history: tuple[HistoryEntry, ...] = (),
    *,
    keywords: tuple[str, ...] | list[str] = (),
) -> DashboardSnapshot:
    """
    Read-only view for the rendering layer.

    With show_sample on, the sample dataset fills in only the fields that are
    still empty/null; live data always wins.
    """
    stats = state.stats
    items: tuple[DelegationItem, ...] = tuple(state.items)
    summary = state.summary

    if state.show_sample:
        if stats is None:
            stats = SAMPLE_STATS
        if not items:
            items = SAMPLE_ITEMS
        if not summary:
            summary = SAMPLE_SUMMARY

    return DashboardSnapshot(
        phase=state.phase,
        processing=state.processing,
        active_agent_id=state.active_agent_id,
        stats=stats,
        items=items,
        summary=summary,
        error=state.error,
        success_rate=success_rate(stats),
        history=history,
        expanded_index=state.expanded_index,
        show_sample=state.show_sample,
        keywords=tuple(keywords),
    )


@dataclass
class AppState:
    # Settings object (real Settings or a SimpleNamespace in tests).
    settings: Any
    controller: RunController
