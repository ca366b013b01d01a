"""Single dashboard instance: live slot, history, selection, sample mode and search."""

from __future__ import annotations

import logging
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Sequence

from .agent_client import AgentCall, AgentClient
from .agent_types import AgentResult, DelegationRecord
from .config_loader import DashboardSettings
from .display_projector import format_timestamp, project_stats, task_display_fields
from .history_filter import filter_history
from .history_store import HistoryStore
from .invocation_controller import InvocationController
from .sample_data import SAMPLE_DATASET, SampleDataset
from .selection_overlay import SelectionOverlay

logger = logging.getLogger("taskrelay.dashboard")


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class DelegationDashboard:
    """Owns every piece of dashboard state and the operations that change it."""

    def __init__(
        self,
        settings: DashboardSettings | None = None,
        *,
        sample: SampleDataset = SAMPLE_DATASET,
        agent_call: AgentCall | None = None,
        clock: Callable[[], datetime] = _utc_now,
    ) -> None:
        self._settings = settings or DashboardSettings()
        self._sample = sample
        self._clock = clock
        self._lock = RLock()
        self._live_result: AgentResult | None = None
        self._pre_selection_result: AgentResult | None = None
        self._sample_mode = False
        self._search_query = ""
        self._history = HistoryStore(max_records=self._settings.max_history_records)
        self._selection = SelectionOverlay()
        self._controller = InvocationController(
            agent_call=agent_call or AgentClient(self._settings),
            agent_id=self._settings.agent_id,
            prompt=self._settings.prompt,
            history=self._history,
            selection=self._selection,
            publish_result=self._publish_live_result,
            sample_mode_active=lambda: self._sample_mode,
            clear_selection=self.clear_selection,
            clock=clock,
        )

    @property
    def settings(self) -> DashboardSettings:
        return self._settings

    @property
    def history(self) -> HistoryStore:
        return self._history

    @property
    def controller(self) -> InvocationController:
        return self._controller

    @property
    def live_result(self) -> AgentResult | None:
        return self._live_result

    @property
    def sample_mode(self) -> bool:
        return self._sample_mode

    @property
    def selected_id(self) -> str | None:
        return self._selection.selected_id

    def _publish_live_result(self, result: AgentResult) -> None:
        with self._lock:
            if not self._sample_mode:
                # A fresh result is never shown under a history selection.
                self._selection.clear()
            self._live_result = result
            self._pre_selection_result = None

    def active_history(self) -> Sequence[DelegationRecord]:
        if self._sample_mode:
            return self._sample.history
        return self._history.all()

    def selected_record(self) -> DelegationRecord | None:
        selected_id = self._selection.selected_id
        if selected_id is None:
            return None
        for record in self.active_history():
            if record.record_id == selected_id:
                return record
        return None

    def active_result(self) -> AgentResult | None:
        if self._sample_mode:
            record = self.selected_record()
            return record.to_result() if record is not None else self._sample.result
        return self._live_result

    def process(self) -> dict[str, Any]:
        return self._controller.process()

    def retry(self) -> dict[str, Any]:
        return self._controller.retry()

    def select_history(self, record_id: str) -> dict[str, Any]:
        with self._lock:
            record = next((r for r in self.active_history() if r.record_id == record_id), None)
            if record is None:
                return {"ok": False, "error": f"Unknown history record: {record_id}"}
            if self._sample_mode:
                self._selection.select(record)
            else:
                if not self._selection.is_active:
                    self._pre_selection_result = self._live_result
                self._live_result = self._selection.select(record)
        logger.info("dashboard: selected history record %s", record_id)
        return {"ok": True, "selected_id": record_id}

    def clear_selection(self) -> dict[str, Any]:
        with self._lock:
            cleared = self._selection.clear()
            restored = False
            if cleared and not self._sample_mode and self._settings.restore_live_on_clear:
                self._live_result = self._pre_selection_result
                restored = True
            self._pre_selection_result = None
        return {"ok": True, "cleared": cleared, "restored_live_result": restored}

    def set_sample_mode(self, enabled: bool) -> dict[str, Any]:
        with self._lock:
            changed = self._sample_mode != enabled
            if self._sample_mode and not enabled:
                # Sample record ids mean nothing against live history.
                self._selection.clear()
            self._sample_mode = enabled
            if enabled:
                self.clear_selection()
        if enabled:
            self._controller.reset()
        if changed:
            logger.info("dashboard: sample mode %s", "on" if enabled else "off")
        return {"ok": True, "sample_mode": enabled, "changed": changed}

    def set_search_query(self, query: str) -> dict[str, Any]:
        with self._lock:
            self._search_query = query or ""
        return {"ok": True, "query": self._search_query}

    def filtered_history(self, query: str | None = None) -> list[DelegationRecord]:
        return filter_history(self._search_query if query is None else query, self.active_history())

    def snapshot(self, *, query: str | None = None) -> dict[str, Any]:
        """JSON-ready view of everything the page renders."""
        with self._lock:
            active = self.active_result()
            history = self.active_history()
            selected = self.selected_record()
            effective_query = self._search_query if query is None else query
            filtered = filter_history(effective_query, history)
            items = list(active.items) if active is not None else []
            phase = self._controller.phase

            return {
                "ok": True,
                "sample_mode": self._sample_mode,
                "invocation": phase.to_dict(),
                "can_process": not phase.is_running and not self._sample_mode,
                "has_result": active is not None,
                "summary": active.summary if active is not None else "",
                "stats": project_stats(active).to_dict(),
                "items": [task_display_fields(item) for item in items],
                "selection": (
                    {
                        "record_id": selected.record_id,
                        "viewing_label": f"Viewing history from {format_timestamp(selected.timestamp)}",
                    }
                    if selected is not None
                    else None
                ),
                "search_query": effective_query,
                "history_total": len(history),
                "history": [
                    {
                        **record.to_dict(),
                        "display_timestamp": format_timestamp(record.timestamp),
                        "is_active": selected is not None and record.record_id == selected.record_id,
                    }
                    for record in filtered
                ],
                "last_sync": format_timestamp(self._clock().isoformat()) if active is not None else None,
                "agent": {
                    "agent_id": self._settings.agent_id,
                    "keywords": list(self._settings.keywords),
                    "channel": self._settings.channel,
                },
            }
