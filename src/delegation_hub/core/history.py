# src/delegation_hub/core/history.py

from __future__ import annotations

import logging
from collections.abc import Iterator
from datetime import UTC, datetime

from .models import HistoryEntry, RunResult

logger = logging.getLogger(__name__)


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


class HistoryLedger:
    """
    Newest-first log of completed runs for the lifetime of the process.

    Entries are frozen and hold their own tuple of (frozen) items, so a retry
    that replaces a slot in the live item list never reaches back into history.
    There is no eviction.
    """

    def __init__(self) -> None:
        self._entries: list[HistoryEntry] = []

    def record(self, result: RunResult, *, timestamp: str | None = None) -> HistoryEntry:
        entry = HistoryEntry(
            timestamp=timestamp or _utc_now_iso(),
            summary=result.summary,
            stats=result.stats,
            items=tuple(result.items),
        )
        self._entries.insert(0, entry)
        logger.debug("History: recorded run items=%d total=%d", len(entry.items), len(self._entries))
        return entry

    def entries(self) -> tuple[HistoryEntry, ...]:
        return tuple(self._entries)

    def latest(self) -> HistoryEntry | None:
        return self._entries[0] if self._entries else None

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[HistoryEntry]:
        return iter(tuple(self._entries))
