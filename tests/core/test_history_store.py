from datetime import datetime, timezone

import pytest

from src.taskrelay.core.agent_types import AgentResult, DelegationRecord, DelegationStats, TaskItem
from src.taskrelay.core.history_store import DEFAULT_RECORD_SUMMARY, HistoryStore, create_record, new_record_id


def _record(record_id: str, summary: str = "s") -> DelegationRecord:
    return DelegationRecord(record_id=record_id, summary=summary)


def test_append_prepends_newest_first():
    store = HistoryStore()
    store.append(_record("a"))
    store.append(_record("b"))
    store.append(_record("c"))
    assert [r.record_id for r in store.all()] == ["c", "b", "a"]
    assert len(store) == 3


def test_append_rejects_duplicate_ids():
    store = HistoryStore()
    store.append(_record("a"))
    with pytest.raises(ValueError, match="Duplicate"):
        store.append(_record("a"))
    assert len(store) == 1


def test_all_returns_a_copy():
    store = HistoryStore()
    store.append(_record("a"))
    snapshot = store.all()
    snapshot.clear()
    assert len(store) == 1


def test_seed_records_keep_display_order():
    store = HistoryStore([_record("newest"), _record("older")])
    assert [r.record_id for r in store.all()] == ["newest", "older"]


def test_capacity_drops_oldest_records():
    store = HistoryStore(max_records=2)
    for rid in ("a", "b", "c"):
        store.append(_record(rid))
    assert [r.record_id for r in store.all()] == ["c", "b"]
    assert "a" not in store
    assert store.get("a") is None


def test_invalid_capacity_raises():
    with pytest.raises(ValueError, match="max_records"):
        HistoryStore(max_records=0)


def test_new_record_ids_are_unique_for_same_instant():
    moment = datetime(2024, 6, 9, 12, 0, tzinfo=timezone.utc)
    ids = {new_record_id(moment) for _ in range(50)}
    assert len(ids) == 50
    assert all(rid.startswith(f"rec_{int(moment.timestamp() * 1000)}_") for rid in ids)


def test_create_record_copies_result_and_defaults_summary():
    result = AgentResult(
        summary="",
        stats=DelegationStats(tasks_processed=2, teammates_notified=1),
        items=(TaskItem(title="A"), TaskItem(title="B")),
    )
    moment = datetime(2024, 6, 9, 12, 0, tzinfo=timezone.utc)
    record = create_record(result, timestamp=moment)
    assert record.summary == DEFAULT_RECORD_SUMMARY
    assert record.tasks == result.items
    assert record.tasks_processed == 2
    assert record.teammates_notified == 1
    assert record.timestamp == moment.isoformat()


def test_n_appends_yield_n_distinct_records():
    store = HistoryStore()
    for _ in range(10):
        store.append(create_record(AgentResult(summary="x")))
    ids = [r.record_id for r in store.all()]
    assert len(ids) == 10
    assert len(set(ids)) == 10
