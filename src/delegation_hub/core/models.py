# src/delegation_hub/core/models.py

from __future__ import annotations

import math
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from enum import StrEnum
from typing import Any


class ProcessingPhase(StrEnum):
    """Display stage of a run. Exactly one is active at a time."""

    IDLE = "idle"
    SCANNING = "scanning"
    EXTRACTING = "extracting"
    NOTIFYING = "notifying"
    COMPLETE = "complete"

    @property
    def label(self) -> str:
        return _PHASE_LABELS[self]


_PHASE_LABELS: dict[ProcessingPhase, str] = {
    ProcessingPhase.IDLE: "",
    ProcessingPhase.SCANNING: "Scanning Gmail inbox...",
    ProcessingPhase.EXTRACTING: "Extracting task details...",
    ProcessingPhase.NOTIFYING: "Sending Slack notifications...",
    ProcessingPhase.COMPLETE: "Complete!",
}

# Order of the progress steps as shown to the user (idle is not a step).
PHASE_STEPS: tuple[ProcessingPhase, ...] = (
    ProcessingPhase.SCANNING,
    ProcessingPhase.EXTRACTING,
    ProcessingPhase.NOTIFYING,
    ProcessingPhase.COMPLETE,
)


class NotificationStatus(StrEnum):
    SENT = "sent"
    FAILED = "failed"

    @classmethod
    def from_raw(cls, raw: Any) -> NotificationStatus:
        if isinstance(raw, str) and raw.strip().lower() == cls.SENT.value:
            return cls.SENT
        return cls.FAILED


def _non_negative_int(value: Any) -> int:
    # bool is an int subclass; a flag is not a count.
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float) and math.isfinite(value):
        return max(0, int(value))
    if isinstance(value, str):
        try:
            return max(0, int(float(value.strip())))
        except (ValueError, OverflowError):
            return 0
    return 0


def _text(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


@dataclass(frozen=True, slots=True)
class RunStats:
    """
    Counters reported by the remote workflow.

    Remote data may be inconsistent (sent + failed != tasks_extracted);
    that is accepted as-is.
    """

    scanned: int = 0
    matched: int = 0
    tasks_extracted: int = 0
    notifications_sent: int = 0
    notifications_failed: int = 0

    @classmethod
    def from_payload(cls, data: Any) -> RunStats | None:
        if not isinstance(data, Mapping):
            return None
        return cls(
            scanned=_non_negative_int(data.get("total_emails_scanned")),
            matched=_non_negative_int(data.get("matching_emails_found")),
            tasks_extracted=_non_negative_int(data.get("tasks_extracted")),
            notifications_sent=_non_negative_int(data.get("notifications_sent")),
            notifications_failed=_non_negative_int(data.get("notifications_failed")),
        )

    @property
    def success_rate(self) -> int:
        if self.tasks_extracted <= 0:
            return 0
        # Half-up rounding, not round()'s half-to-even.
        return math.floor(self.notifications_sent / self.tasks_extracted * 100 + 0.5)


@dataclass(frozen=True, slots=True)
class DelegationItem:
    """One extracted task. Identity within a run is its position."""

    title: str
    assignee: str
    priority: str
    notification_status: NotificationStatus
    channel: str
    timestamp: str

    @classmethod
    def from_payload(cls, data: Mapping[str, Any]) -> DelegationItem:
        return cls(
            title=_text(data.get("task_title")),
            assignee=_text(data.get("assignee")),
            priority=_text(data.get("priority")),
            notification_status=NotificationStatus.from_raw(data.get("notification_status")),
            channel=_text(data.get("channel")),
            timestamp=_text(data.get("timestamp")),
        )

    @property
    def needs_retry(self) -> bool:
        return self.notification_status is not NotificationStatus.SENT


def normalize_items(value: Any) -> list[DelegationItem]:
    """Missing or non-sequence input yields no items; malformed entries are skipped."""
    if isinstance(value, (str, bytes)) or not isinstance(value, Sequence):
        return []
    return [DelegationItem.from_payload(entry) for entry in value if isinstance(entry, Mapping)]


def success_rate(stats: RunStats | None) -> int:
    return stats.success_rate if stats is not None else 0


@dataclass(frozen=True, slots=True)
class RunResult:
    stats: RunStats | None
    items: tuple[DelegationItem, ...]
    summary: str


@dataclass(frozen=True, slots=True)
class HistoryEntry:
    timestamp: str
    summary: str
    stats: RunStats | None
    items: tuple[DelegationItem, ...]
