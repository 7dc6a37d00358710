# tests/test_history.py

from __future__ import annotations

from dataclasses import FrozenInstanceError

import pytest

from delegation_hub.core.history import HistoryLedger
from delegation_hub.core.models import DelegationItem, NotificationStatus, RunResult, RunStats


def _item(title: str) -> DelegationItem:
    return DelegationItem(
        title=title,
        assignee="a",
        priority="Low",
        notification_status=NotificationStatus.FAILED,
        channel="#c",
        timestamp="2024-06-13T09:22:10Z",
    )


def test_record_prepends_newest_first() -> None:
    ledger = HistoryLedger()
    ledger.record(RunResult(stats=None, items=(), summary="first"))
    ledger.record(RunResult(stats=RunStats(tasks_extracted=1), items=(_item("t"),), summary="second"))

    entries = ledger.entries()
    assert [e.summary for e in entries] == ["second", "first"]
    assert ledger.latest() is entries[0]
    assert len(ledger) == 2
    assert entries[0].timestamp.endswith("Z")


def test_entry_is_independent_of_live_list() -> None:
    ledger = HistoryLedger()
    live = [_item("one"), _item("two")]

    entry = ledger.record(RunResult(stats=None, items=tuple(live), summary="s"))
    live[1] = _item("replaced")
    live.append(_item("three"))

    assert [i.title for i in entry.items] == ["one", "two"]
    with pytest.raises(FrozenInstanceError):
        entry.summary = "changed"  # type: ignore[misc]


def test_explicit_timestamp_and_empty_ledger() -> None:
    ledger = HistoryLedger()
    assert ledger.latest() is None
    assert list(ledger) == []

    entry = ledger.record(RunResult(None, (), "x"), timestamp="2024-06-13T10:00:00Z")
    assert entry.timestamp == "2024-06-13T10:00:00Z"
    assert list(ledger) == [entry]
