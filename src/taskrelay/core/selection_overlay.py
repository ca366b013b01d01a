"""Pin the dashboard view to one history record."""

from __future__ import annotations

from threading import RLock

from .agent_types import AgentResult, DelegationRecord


class SelectionOverlay:
    """Tracks at most one selected history record id.

    Selecting returns the record's data projected as an `AgentResult`; callers
    decide where that projection is shown. Clearing forgets the id only.
    """

    def __init__(self) -> None:
        self._lock = RLock()
        self._selected_id: str | None = None

    @property
    def selected_id(self) -> str | None:
        return self._selected_id

    @property
    def is_active(self) -> bool:
        return self._selected_id is not None

    def select(self, record: DelegationRecord) -> AgentResult:
        with self._lock:
            self._selected_id = record.record_id
        return record.to_result()

    def clear(self) -> bool:
        """Return True when a selection was removed."""
        with self._lock:
            had_selection = self._selected_id is not None
            self._selected_id = None
        return had_selection
