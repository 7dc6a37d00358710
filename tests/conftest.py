# tests/conftest.py

from __future__ import annotations

import copy
from pathlib import Path
from types import SimpleNamespace
from typing import Any

import pytest

from delegation_hub.core.controller import RunTimings

SUMMARY = (
    "Delegation workflow completed. 50 emails were scanned and 9 tasks were delegated to teammates."
)

ITEMS: list[dict[str, Any]] = [
    {
        "task_title": "Prepare Q2 Financial Summary",
        "assignee": "jane.smith",
        "priority": "High",
        "notification_status": "sent",
        "channel": "#finance-team",
        "timestamp": "2024-06-13T09:22:10Z",
    },
    {
        "task_title": "Update Product Roadmap",
        "assignee": "tom.lee",
        "priority": "Medium",
        "notification_status": "sent",
        "channel": "#product",
        "timestamp": "2024-06-13T09:23:05Z",
    },
    {
        "task_title": "Organize Marketing Meeting",
        "assignee": "emma.thompson",
        "priority": "High",
        "notification_status": "sent",
        "channel": "#marketing",
        "timestamp": "2024-06-13T09:24:18Z",
    },
    {
        "task_title": "Refresh Website Banner",
        "assignee": "sara.kim",
        "priority": "Low",
        "notification_status": "sent",
        "channel": "#web-team",
        "timestamp": "2024-06-13T09:25:02Z",
    },
    {
        "task_title": "Review Partner Contracts",
        "assignee": "linda.zhao",
        "priority": "Medium",
        "notification_status": "failed",
        "channel": "#legal",
        "timestamp": "2024-06-13T09:28:35Z",
    },
]


@pytest.fixture()
def delegation_envelope() -> dict[str, Any]:
    """A successful structured run: 9 tasks, 8 sent, 1 failed, 5 items listed."""
    return {
        "success": True,
        "response": {
            "status": "success",
            "message": "ok",
            "result": {
                "data": {
                    "total_emails_scanned": 50,
                    "matching_emails_found": 7,
                    "tasks_extracted": 9,
                    "notifications_sent": 8,
                    "notifications_failed": 1,
                },
                "items": copy.deepcopy(ITEMS),
                "summary": SUMMARY,
            },
        },
    }


@pytest.fixture()
def fast_timings() -> RunTimings:
    return RunTimings(request_timeout_seconds=1.0, phase_step_seconds=0.2, complete_reset_seconds=0.3)


@pytest.fixture()
def settings(tmp_path: Path) -> SimpleNamespace:
    """
    Minimal settings object compatible with bootstrap and the controller.

    We intentionally use a SimpleNamespace rather than importing real config,
    to keep unit tests isolated and deterministic.
    """
    return SimpleNamespace(
        app_name="delegation-hub-test",
        log_level="DEBUG",
        data_dir=tmp_path / "data",
        console_enabled=False,
        agent_api_key=None,
        agent_base_url="https://agents.example.test",
        agent_user_id="tester@example.test",
        manager_agent_id="manager-1",
        request_timeout_seconds=1.0,
        phase_step_seconds=0.2,
        complete_reset_seconds=0.3,
        offline_delay_seconds=0.0,
        keywords=["urgent", "team", "delegate"],
        show_sample=False,
    )
