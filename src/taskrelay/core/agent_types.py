"""Canonical schemas for delegation results and history records."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Mapping

TASK_ITEM_FIELDS = (
    "title",
    "description",
    "priority",
    "assignee",
    "slack_status",
    "email_subject",
    "email_from",
    "timestamp",
)


def _utc_now_iso() -> str:
    return datetime.now(timezone.utc).isoformat()


def _optional_text(value: Any) -> str | None:
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)):
        return str(value)
    return None


def coerce_count(value: Any) -> int:
    """Coerce a loosely-typed count into an integer >= 0."""
    if isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return max(0, value)
    if isinstance(value, float):
        if value != value or value in (float("inf"), float("-inf")):
            return 0
        return max(0, int(value))
    if isinstance(value, str):
        try:
            return max(0, int(float(value.strip())))
        except (ValueError, OverflowError):
            return 0
    return 0


@dataclass(frozen=True, slots=True)
class TaskItem:
    """One delegated task extracted from an email."""

    title: str | None = None
    description: str | None = None
    priority: str | None = None
    assignee: str | None = None
    slack_status: str | None = None
    email_subject: str | None = None
    email_from: str | None = None
    timestamp: str | None = None

    @classmethod
    def from_dict(cls, payload: Any) -> "TaskItem":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(**{name: _optional_text(payload.get(name)) for name in TASK_ITEM_FIELDS})

    def to_dict(self) -> dict[str, Any]:
        return {name: getattr(self, name) for name in TASK_ITEM_FIELDS}


@dataclass(frozen=True, slots=True)
class DelegationStats:
    tasks_processed: int = 0
    teammates_notified: int = 0

    def __post_init__(self) -> None:
        if self.tasks_processed < 0 or self.teammates_notified < 0:
            raise ValueError("DelegationStats counts must be >= 0.")

    @classmethod
    def from_dict(cls, payload: Any) -> "DelegationStats":
        if not isinstance(payload, Mapping):
            return cls()
        return cls(
            tasks_processed=coerce_count(payload.get("tasks_processed")),
            teammates_notified=coerce_count(payload.get("teammates_notified")),
        )

    def to_dict(self) -> dict[str, int]:
        return {
            "tasks_processed": self.tasks_processed,
            "teammates_notified": self.teammates_notified,
        }


@dataclass(frozen=True, slots=True)
class AgentResult:
    """Normalized outcome of one agent invocation."""

    summary: str = ""
    stats: DelegationStats = field(default_factory=DelegationStats)
    items: tuple[TaskItem, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "summary": self.summary,
            "data": self.stats.to_dict(),
            "items": [item.to_dict() for item in self.items],
        }


@dataclass(frozen=True, slots=True)
class DelegationRecord:
    """Immutable history entry created for each successful invocation."""

    record_id: str
    tasks: tuple[TaskItem, ...] = ()
    summary: str = ""
    tasks_processed: int = 0
    teammates_notified: int = 0
    timestamp: str = field(default_factory=_utc_now_iso)

    def __post_init__(self) -> None:
        if not self.record_id.strip():
            raise ValueError("DelegationRecord.record_id must be non-empty.")
        if self.tasks_processed < 0 or self.teammates_notified < 0:
            raise ValueError("DelegationRecord counts must be >= 0.")

    def to_result(self) -> AgentResult:
        return AgentResult(
            summary=self.summary,
            stats=DelegationStats(
                tasks_processed=self.tasks_processed,
                teammates_notified=self.teammates_notified,
            ),
            items=self.tasks,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.record_id,
            "tasks": [task.to_dict() for task in self.tasks],
            "summary": self.summary,
            "tasks_processed": self.tasks_processed,
            "teammates_notified": self.teammates_notified,
            "timestamp": self.timestamp,
        }
