import pytest

from src.taskrelay.core.agent_types import AgentResult, DelegationStats, TaskItem
from src.taskrelay.core.response_normalizer import normalize_agent_response, resolve_envelope


@pytest.mark.parametrize(
    "raw",
    [
        None,
        "not a dict",
        42,
        [],
        [{"summary": "x"}],
        {},
        {"response": None},
        {"response": "oops"},
        {"response": {"result": []}},
        {"response": {"items": "nope", "data": [1, 2], "summary": 7}},
        {"response": {"result": {"items": {"a": 1}, "data": "x"}}},
        {"success": True, "response": {"status": "success", "data": {"tasks_processed": None}}},
    ],
)
def test_normalize_never_raises_and_returns_canonical_shape(raw):
    out = normalize_agent_response(raw)
    assert isinstance(out, AgentResult)
    assert isinstance(out.summary, str)
    assert out.stats.tasks_processed >= 0
    assert out.stats.teammates_notified >= 0
    assert isinstance(out.items, tuple)


def test_normalize_reads_nested_result_envelope():
    raw = {
        "success": True,
        "response": {
            "status": "success",
            "result": {
                "summary": "Processed 1 task",
                "data": {"tasks_processed": 1, "teammates_notified": 1},
                "items": [{"title": "A", "slack_status": "sent"}],
            },
        },
    }
    out = normalize_agent_response(raw)
    assert out.summary == "Processed 1 task"
    assert out.stats == DelegationStats(tasks_processed=1, teammates_notified=1)
    assert out.items == (TaskItem(title="A", slack_status="sent"),)


def test_normalize_falls_back_to_response_when_result_is_empty():
    raw = {"response": {"status": "success", "result": {}, "message": "Done", "tasks": [{"title": "T"}]}}
    out = normalize_agent_response(raw)
    assert out.summary == "Done"
    assert [item.title for item in out.items] == ["T"]


def test_summary_probe_order():
    assert normalize_agent_response({"response": {"summary": "s", "text": "t", "message": "m"}}).summary == "s"
    assert normalize_agent_response({"response": {"text": "t", "message": "m"}}).summary == "t"
    assert normalize_agent_response({"response": {"message": "m"}}).summary == "m"
    assert normalize_agent_response({"response": {"summary": "", "message": "m"}}).summary == "m"


def test_summary_can_come_from_result_key_when_envelope_is_response():
    # `response.result` is not a mapping here, so the envelope is `response` itself.
    raw = {"response": {"result": "ignored", "text": "fallback"}}
    assert normalize_agent_response(raw).summary == "fallback"


def test_items_prefer_first_actual_list():
    raw = {"response": {"items": "bad", "tasks": [{"title": "from tasks"}]}}
    out = normalize_agent_response(raw)
    assert [item.title for item in out.items] == ["from tasks"]

    raw = {"response": {"items": [], "tasks": [{"title": "ignored"}]}}
    assert normalize_agent_response(raw).items == ()


def test_stats_default_and_coerce_missing_fields():
    out = normalize_agent_response({"response": {"data": {"tasks_processed": "3"}}})
    assert out.stats.tasks_processed == 3
    assert out.stats.teammates_notified == 0

    out = normalize_agent_response({"response": {"data": {"tasks_processed": -4, "teammates_notified": True}}})
    assert out.stats == DelegationStats()


def test_empty_data_falls_through_to_nested_result_data():
    raw = {"response": {"data": {}, "result": "x"}}
    assert normalize_agent_response(raw).stats == DelegationStats()

    raw = {"response": {"result": {"data": {"tasks_processed": 2, "teammates_notified": 5}}}}
    assert normalize_agent_response(raw).stats == DelegationStats(tasks_processed=2, teammates_notified=5)


def test_non_mapping_items_become_empty_task_items():
    out = normalize_agent_response({"response": {"items": ["junk", None, {"title": "ok"}]}})
    assert out.items == (TaskItem(), TaskItem(), TaskItem(title="ok"))


def test_top_level_payload_is_used_without_response_key():
    out = normalize_agent_response({"summary": "flat", "items": [{"title": "x"}]})
    assert out.summary == "flat"
    assert len(out.items) == 1


def test_resolve_envelope_ignores_top_level_when_response_key_present():
    assert resolve_envelope({"response": None, "summary": "x"}) == {}
