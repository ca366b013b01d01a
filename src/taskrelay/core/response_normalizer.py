"""Normalize loosely-structured agent responses into `AgentResult`.

The upstream agent does not guarantee a stable response schema. The payload
may sit under `response.result`, directly under `response`, or at the top
level, and each field has its own fallback keys. Every field is probed
independently over an ordered list of `(path, extractor)` pairs; the first
extractor that yields a value wins.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Mapping

from .agent_types import AgentResult, DelegationStats, TaskItem

logger = logging.getLogger("taskrelay.normalizer")

ProbePath = tuple[str, ...]
Extractor = Callable[[Any], Any]


def _dig(payload: Any, path: ProbePath) -> Any:
    current = payload
    for key in path:
        if not isinstance(current, Mapping):
            return None
        current = current.get(key)
    return current


def _as_summary(value: Any) -> str | None:
    if isinstance(value, str) and value:
        return value
    return None


def _as_items(value: Any) -> tuple[TaskItem, ...] | None:
    if not isinstance(value, list):
        return None
    return tuple(TaskItem.from_dict(entry) for entry in value)


def _as_stats(value: Any) -> DelegationStats | None:
    if not isinstance(value, Mapping) or not value:
        return None
    return DelegationStats.from_dict(value)


SUMMARY_PROBES: tuple[tuple[ProbePath, Extractor], ...] = (
    (("summary",), _as_summary),
    (("result", "summary"), _as_summary),
    (("text",), _as_summary),
    (("message",), _as_summary),
)

ITEMS_PROBES: tuple[tuple[ProbePath, Extractor], ...] = (
    (("items",), _as_items),
    (("result", "items"), _as_items),
    (("tasks",), _as_items),
)

STATS_PROBES: tuple[tuple[ProbePath, Extractor], ...] = (
    (("data",), _as_stats),
    (("result", "data"), _as_stats),
)


def _first_match(payload: Mapping[str, Any], probes: tuple[tuple[ProbePath, Extractor], ...], *, label: str) -> Any:
    for index, (path, extractor) in enumerate(probes):
        value = extractor(_dig(payload, path))
        if value is not None:
            if index > 0:
                logger.debug("normalizer: %s resolved via fallback path %s", label, ".".join(path))
            return value
    return None


def resolve_envelope(raw: Any) -> Mapping[str, Any]:
    """Pick the mapping that carries the agent payload."""
    response = _dig(raw, ("response",))
    nested = _dig(response, ("result",))
    if isinstance(nested, Mapping) and nested:
        return nested
    if isinstance(response, Mapping):
        return response
    if isinstance(raw, Mapping) and "response" not in raw:
        return raw
    return {}


def normalize_agent_response(raw: Any) -> AgentResult:
    """Convert any agent response into an `AgentResult`. Never raises."""
    try:
        envelope = resolve_envelope(raw)
        summary = _first_match(envelope, SUMMARY_PROBES, label="summary")
        items = _first_match(envelope, ITEMS_PROBES, label="items")
        stats = _first_match(envelope, STATS_PROBES, label="stats")
    except Exception:  # pragma: no cover - exotic Mapping implementations
        logger.warning("normalizer: response could not be inspected; using empty result", exc_info=True)
        return AgentResult()
    return AgentResult(
        summary=summary if summary is not None else "",
        stats=stats if stats is not None else DelegationStats(),
        items=items if items is not None else (),
    )
