"""In-memory, newest-first history of successful delegation runs."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from itertools import count
from threading import RLock

from .agent_types import AgentResult, DelegationRecord

logger = logging.getLogger("taskrelay.history")

DEFAULT_RECORD_SUMMARY = "Tasks processed"

_RECORD_SEQ = count(1)
_RECORD_SEQ_LOCK = RLock()


def new_record_id(now: datetime | None = None) -> str:
    """Return `rec_<epoch_ms>_<seq>`; the process-wide sequence keeps ids unique."""
    moment = now or datetime.now(timezone.utc)
    with _RECORD_SEQ_LOCK:
        seq = next(_RECORD_SEQ)
    return f"rec_{int(moment.timestamp() * 1000)}_{seq}"


def create_record(result: AgentResult, *, timestamp: datetime | None = None) -> DelegationRecord:
    """Snapshot an `AgentResult` into a new `DelegationRecord`."""
    moment = timestamp or datetime.now(timezone.utc)
    return DelegationRecord(
        record_id=new_record_id(moment),
        tasks=tuple(result.items),
        summary=result.summary or DEFAULT_RECORD_SUMMARY,
        tasks_processed=result.stats.tasks_processed,
        teammates_notified=result.stats.teammates_notified,
        timestamp=moment.isoformat(),
    )


class HistoryStore:
    """Append-only record list, newest first.

    `max_records` bounds growth by dropping the oldest entries; `None` keeps everything.
    """

    def __init__(self, records: list[DelegationRecord] | None = None, *, max_records: int | None = None) -> None:
        if max_records is not None and max_records <= 0:
            raise ValueError("max_records must be >= 1 when set")
        self._lock = RLock()
        self._max_records = max_records
        self._records: list[DelegationRecord] = []
        self._ids: set[str] = set()
        # Seed in display order: records[0] ends up newest.
        for record in reversed(records or []):
            self.append(record)

    @property
    def max_records(self) -> int | None:
        return self._max_records

    def append(self, record: DelegationRecord) -> DelegationRecord:
        with self._lock:
            if record.record_id in self._ids:
                raise ValueError(f"Duplicate history record id: {record.record_id}")
            self._records.insert(0, record)
            self._ids.add(record.record_id)
            if self._max_records is not None and len(self._records) > self._max_records:
                evicted = self._records[self._max_records :]
                del self._records[self._max_records :]
                for old in evicted:
                    self._ids.discard(old.record_id)
                logger.info("history: evicted %d oldest record(s) over capacity %d", len(evicted), self._max_records)
        return record

    def all(self) -> list[DelegationRecord]:
        with self._lock:
            return list(self._records)

    def get(self, record_id: str) -> DelegationRecord | None:
        with self._lock:
            for record in self._records:
                if record.record_id == record_id:
                    return record
        return None

    def __len__(self) -> int:
        with self._lock:
            return len(self._records)

    def __contains__(self, record_id: object) -> bool:
        with self._lock:
            return record_id in self._ids
