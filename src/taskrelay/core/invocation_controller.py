"""Lifecycle state machine for the single in-flight agent invocation."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import datetime, timezone
from threading import RLock
from typing import Any, Callable, Literal, Mapping

from .agent_client import AgentCall
from .agent_types import AgentResult, DelegationRecord
from .history_store import HistoryStore, create_record
from .response_normalizer import normalize_agent_response
from .selection_overlay import SelectionOverlay

logger = logging.getLogger("taskrelay.invocation")

InvocationState = Literal["idle", "running", "succeeded", "failed"]
FailureKind = Literal["invocation_failure", "agent_rejection"]

RUNNING_MESSAGE = "Processing emails for tasks..."
SUCCESS_MESSAGE = "Tasks processed successfully!"
REJECTION_FALLBACK = "Unknown error occurred"
FAILURE_FALLBACK = "Failed to process tasks"

ALLOWED_TRANSITIONS: dict[InvocationState, frozenset[InvocationState]] = {
    "idle": frozenset({"running"}),
    "running": frozenset({"succeeded", "failed"}),
    "succeeded": frozenset({"running", "idle"}),
    "failed": frozenset({"running", "idle"}),
}


@dataclass(frozen=True, slots=True)
class InvocationPhase:
    """Current lifecycle state plus the data that state is allowed to carry."""

    state: InvocationState = "idle"
    status_message: str | None = None
    error: str | None = None
    failure_kind: FailureKind | None = None
    active_agent_id: str | None = None

    def __post_init__(self) -> None:
        if self.state not in ALLOWED_TRANSITIONS:
            raise ValueError(f"InvocationPhase.state is invalid: {self.state!r}")
        if self.state == "failed":
            if not self.error or self.failure_kind is None:
                raise ValueError("InvocationPhase.error and failure_kind are required when state='failed'.")
        elif self.error is not None or self.failure_kind is not None:
            raise ValueError("InvocationPhase.error is only allowed when state='failed'.")
        if self.state in {"running", "succeeded"} and not self.status_message:
            raise ValueError(f"InvocationPhase.status_message is required when state='{self.state}'.")
        if self.state in {"idle", "failed"} and self.status_message is not None:
            raise ValueError(f"InvocationPhase.status_message is not allowed when state='{self.state}'.")
        if (self.state == "running") != (self.active_agent_id is not None):
            raise ValueError("InvocationPhase.active_agent_id is set only while running.")

    @property
    def is_running(self) -> bool:
        return self.state == "running"

    def to_dict(self) -> dict[str, Any]:
        return {
            "state": self.state,
            "loading": self.is_running,
            "status_message": self.status_message,
            "error": self.error,
            "failure_kind": self.failure_kind,
            "active_agent_id": self.active_agent_id,
        }


def _is_agent_success(raw: Any) -> bool:
    if not isinstance(raw, Mapping) or not raw.get("success"):
        return False
    response = raw.get("response")
    return isinstance(response, Mapping) and response.get("status") == "success"


def _rejection_message(raw: Any) -> str:
    if isinstance(raw, Mapping):
        response = raw.get("response")
        if isinstance(response, Mapping):
            message = response.get("message")
            if isinstance(message, str) and message:
                return message
        error = raw.get("error")
        if isinstance(error, str) and error:
            return error
    return REJECTION_FALLBACK


class InvocationController:
    """Run at most one agent call at a time and record its outcome.

    A success normalizes the response, publishes it to the live slot and
    prepends a history record before the success message becomes visible.
    A failure only updates the phase.
    """

    def __init__(
        self,
        *,
        agent_call: AgentCall,
        agent_id: str,
        prompt: str,
        history: HistoryStore,
        selection: SelectionOverlay,
        publish_result: Callable[[AgentResult], None],
        sample_mode_active: Callable[[], bool] = lambda: False,
        clear_selection: Callable[[], Any] | None = None,
        clock: Callable[[], datetime] = lambda: datetime.now(timezone.utc),
    ) -> None:
        self._agent_call = agent_call
        self._agent_id = agent_id
        self._prompt = prompt
        self._history = history
        self._selection = selection
        self._clear_selection = clear_selection or selection.clear
        self._publish_result = publish_result
        self._sample_mode_active = sample_mode_active
        self._clock = clock
        self._lock = RLock()
        self._phase = InvocationPhase()

    @property
    def phase(self) -> InvocationPhase:
        return self._phase

    def _transition(self, phase: InvocationPhase) -> None:
        with self._lock:
            current = self._phase.state
            if phase.state not in ALLOWED_TRANSITIONS[current]:
                raise ValueError(f"Illegal invocation transition: {current} -> {phase.state}")
            self._phase = phase
        logger.info("invocation: %s -> %s", current, phase.state)

    def _begin(self, *, trigger: str) -> dict[str, Any] | None:
        with self._lock:
            if self._phase.is_running:
                return {"ok": False, "started": False, "reason": "already_running", "trigger": trigger}
            if self._sample_mode_active():
                return {"ok": False, "started": False, "reason": "sample_mode", "trigger": trigger}
            self._clear_selection()
            self._transition(
                InvocationPhase(state="running", status_message=RUNNING_MESSAGE, active_agent_id=self._agent_id)
            )
        return None

    def process(self, *, trigger: str = "process") -> dict[str, Any]:
        """Start one invocation and block until it resolves."""
        skipped = self._begin(trigger=trigger)
        if skipped is not None:
            logger.info("invocation: %s ignored (%s)", trigger, skipped["reason"])
            return skipped

        try:
            raw = self._agent_call(prompt=self._prompt, agent_id=self._agent_id)
        except Exception as exc:
            message = str(exc) or FAILURE_FALLBACK
            logger.warning("invocation: agent call failed: %s", message)
            self._transition(InvocationPhase(state="failed", error=message, failure_kind="invocation_failure"))
            return {"ok": False, "started": True, "trigger": trigger, "phase": self._phase.to_dict()}

        if not _is_agent_success(raw):
            message = _rejection_message(raw)
            logger.warning("invocation: agent reported failure: %s", message)
            self._transition(InvocationPhase(state="failed", error=message, failure_kind="agent_rejection"))
            return {"ok": False, "started": True, "trigger": trigger, "phase": self._phase.to_dict()}

        result = normalize_agent_response(raw)
        record = self._complete(result)
        return {
            "ok": True,
            "started": True,
            "trigger": trigger,
            "record": record.to_dict(),
            "phase": self._phase.to_dict(),
        }

    def _complete(self, result: AgentResult) -> DelegationRecord:
        with self._lock:
            self._publish_result(result)
            record = self._history.append(create_record(result, timestamp=self._clock()))
            self._transition(InvocationPhase(state="succeeded", status_message=SUCCESS_MESSAGE))
        logger.info(
            "invocation: recorded %s (%d tasks, %d notified)",
            record.record_id,
            record.tasks_processed,
            record.teammates_notified,
        )
        return record

    def retry(self) -> dict[str, Any]:
        """Re-enter running after a failure; same guards and entry behavior as `process`."""
        return self.process(trigger="retry")

    def reset(self) -> bool:
        """Drop any status or error message. A running call is left alone."""
        with self._lock:
            if self._phase.state in {"idle", "running"}:
                return False
            self._transition(InvocationPhase())
        return True
