# src/delegation_hub/core/sample_data.py

"""Fixed dataset shown when the sample toggle is on and live fields are still empty."""

from __future__ import annotations

from typing import Any

from .models import DelegationItem, RunStats, normalize_items

SAMPLE_STATS_PAYLOAD: dict[str, Any] = {
    "total_emails_scanned": 50,
    "matching_emails_found": 7,
    "tasks_extracted": 9,
    "notifications_sent": 8,
    "notifications_failed": 1,
}

SAMPLE_ITEMS_PAYLOAD: list[dict[str, Any]] = [
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

SAMPLE_SUMMARY = (
    "Delegation workflow completed. 50 emails were scanned. 7 matching delegation emails found. "
    "A total of 9 tasks were extracted and processed. 8 notifications were successfully sent "
    "via Slack, and 1 notification failed to send."
)

SAMPLE_STATS: RunStats = RunStats.from_payload(SAMPLE_STATS_PAYLOAD) or RunStats()
SAMPLE_ITEMS: tuple[DelegationItem, ...] = tuple(normalize_items(SAMPLE_ITEMS_PAYLOAD))


def sample_result_payload() -> dict[str, Any]:
    """The sample run as the remote agent would return it inside response.result."""
    return {
        "summary": SAMPLE_SUMMARY,
        "data": dict(SAMPLE_STATS_PAYLOAD),
        "items": [dict(item) for item in SAMPLE_ITEMS_PAYLOAD],
    }
