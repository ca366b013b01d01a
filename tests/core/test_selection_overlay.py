from src.taskrelay.core.agent_types import DelegationRecord, TaskItem
from src.taskrelay.core.selection_overlay import SelectionOverlay


def test_select_tracks_id_and_projects_record():
    overlay = SelectionOverlay()
    record = DelegationRecord(
        record_id="rec_1",
        tasks=(TaskItem(title="A"),),
        summary="one",
        tasks_processed=1,
        teammates_notified=1,
    )
    projected = overlay.select(record)
    assert overlay.selected_id == "rec_1"
    assert overlay.is_active
    assert projected.summary == "one"
    assert projected.items == record.tasks
    assert projected.stats.tasks_processed == 1


def test_clear_reports_whether_selection_existed():
    overlay = SelectionOverlay()
    assert overlay.clear() is False
    overlay.select(DelegationRecord(record_id="rec_1"))
    assert overlay.clear() is True
    assert overlay.selected_id is None
