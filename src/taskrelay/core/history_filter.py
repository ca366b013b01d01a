"""Free-text filtering over delegation history."""

from __future__ import annotations

from typing import Iterable

from .agent_types import DelegationRecord


def _contains(haystack: str | None, needle: str) -> bool:
    return bool(haystack) and needle in haystack.lower()


def record_matches(record: DelegationRecord, needle: str) -> bool:
    """`needle` must already be lower-cased and non-empty."""
    if _contains(record.summary, needle):
        return True
    return any(_contains(task.title, needle) or _contains(task.assignee, needle) for task in record.tasks)


def filter_history(query: str | None, records: Iterable[DelegationRecord]) -> list[DelegationRecord]:
    """Keep records whose summary, task title or task assignee contains `query`.

    Case-insensitive, order-preserving. A blank query keeps everything.
    """
    if not (query or "").strip():
        return list(records)
    needle = query.lower()
    return [record for record in records if record_matches(record, needle)]
