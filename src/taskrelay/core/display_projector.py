"""Derived statistics and display fields for the active result."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Iterable

from .agent_types import AgentResult, TaskItem

SENT_STATUS = "sent"

UNTITLED_TASK = "Untitled Task"
DEFAULT_PRIORITY = "normal"
UNKNOWN_STATUS = "unknown"
UNASSIGNED = "Unassigned"
NO_DESCRIPTION = "No description available."
NOT_AVAILABLE = "N/A"


@dataclass(frozen=True, slots=True)
class DisplayStats:
    tasks_processed: int = 0
    teammates_notified: int = 0
    pending_items: int = 0

    def to_dict(self) -> dict[str, int]:
        return {
            "tasks_processed": self.tasks_processed,
            "teammates_notified": self.teammates_notified,
            "pending_items": self.pending_items,
        }


def is_pending(task: TaskItem) -> bool:
    """Anything not exactly `sent` (case-insensitive) is pending, including a missing status."""
    status = task.slack_status
    return status is None or status.lower() != SENT_STATUS


def count_pending_items(items: Iterable[TaskItem]) -> int:
    return sum(1 for item in items if is_pending(item))


def project_stats(result: AgentResult | None) -> DisplayStats:
    if result is None:
        return DisplayStats()
    return DisplayStats(
        tasks_processed=result.stats.tasks_processed,
        teammates_notified=result.stats.teammates_notified,
        pending_items=count_pending_items(result.items),
    )


def format_timestamp(ts: str | None) -> str:
    """Render an ISO-8601 timestamp like `Jun 9, 2024, 02:55 PM`.

    Missing values render as `N/A`; unparseable ones are returned unchanged.
    """
    if not ts:
        return NOT_AVAILABLE
    try:
        moment = datetime.fromisoformat(ts.strip().replace("Z", "+00:00"))
    except ValueError:
        return ts
    return f"{moment.strftime('%b')} {moment.day}, {moment.year}, {moment.strftime('%I:%M %p')}"


def task_display_fields(task: TaskItem) -> dict[str, Any]:
    return {
        **task.to_dict(),
        "display": {
            "title": task.title or UNTITLED_TASK,
            "description": task.description or NO_DESCRIPTION,
            "priority": task.priority or DEFAULT_PRIORITY,
            "assignee": task.assignee or UNASSIGNED,
            "slack_status": task.slack_status or UNKNOWN_STATUS,
            "email_subject": task.email_subject or NOT_AVAILABLE,
            "email_from": task.email_from or NOT_AVAILABLE,
            "timestamp": format_timestamp(task.timestamp),
        },
        "pending": is_pending(task),
    }
