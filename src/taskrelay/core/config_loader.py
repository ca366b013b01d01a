"""Load and query TaskRelay JSON config files."""

from __future__ import annotations

import json
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

DEFAULT_CONFIG_PATH = Path("config/config.json")
_CONFIG_CACHE: dict[Path, tuple[int, dict[str, Any]]] = {}

DEFAULT_AGENT_ID = "698901b47b0e3eacc4301937"
DEFAULT_AGENT_PROMPT = (
    "Process my recent emails for task delegation. Look for emails with keywords: urgent, team, delegate. "
    "Extract task details including title, description, priority, assignee mentions, and send Slack "
    "notifications to the #slack-test channel. Return the results as structured JSON."
)
DEFAULT_AGENT_TIMEOUT_SEC = 120
DEFAULT_KEYWORDS = ("urgent", "team", "delegate")
DEFAULT_CHANNEL = "slack-test"
DEFAULT_LOG_LEVEL = "INFO"


def _repo_root() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Resolve config path against repo root.

    Priority:
    1. explicit function argument
    2. `TASKRELAY_CONFIG_PATH` environment variable
    3. default `config/config.json`
    """
    raw_path: str | Path | None = config_path or os.getenv("TASKRELAY_CONFIG_PATH")
    candidate = Path(raw_path) if raw_path else DEFAULT_CONFIG_PATH
    if not candidate.is_absolute():
        candidate = _repo_root() / candidate
    return candidate.resolve()


def load_config(config_path: str | Path | None = None, *, use_cache: bool = True) -> dict[str, Any]:
    """Load config JSON as a dictionary."""
    resolved = resolve_config_path(config_path)
    if not resolved.exists():
        raise FileNotFoundError(f"Config file not found: {resolved}")

    mtime_ns = resolved.stat().st_mtime_ns
    if use_cache and resolved in _CONFIG_CACHE:
        cached_mtime_ns, cached_payload = _CONFIG_CACHE[resolved]
        if cached_mtime_ns == mtime_ns:
            return cached_payload

    try:
        payload = json.loads(resolved.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file: {resolved}") from exc

    if not isinstance(payload, dict):
        raise ValueError(f"Config root must be a JSON object: {resolved}")

    _CONFIG_CACHE[resolved] = (mtime_ns, payload)
    return payload


def clear_config_cache() -> None:
    """Clear in-memory config cache."""
    _CONFIG_CACHE.clear()


def _section(payload: dict[str, Any], name: str) -> dict[str, Any]:
    value = payload.get(name)
    return value if isinstance(value, dict) else {}


def get_agent_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    return _section(payload, "agent")


def get_history_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    return _section(payload, "history")


def get_selection_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    return _section(payload, "selection")


def get_logging_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    return _section(payload, "logging")


def _non_empty_str(value: Any) -> str | None:
    if isinstance(value, str) and value.strip():
        return value.strip()
    return None


@dataclass(frozen=True, slots=True)
class DashboardSettings:
    """Process-wide immutable settings resolved once at startup."""

    agent_id: str = DEFAULT_AGENT_ID
    prompt: str = DEFAULT_AGENT_PROMPT
    base_url: str | None = None
    apikey: str | None = None
    timeout_sec: int = DEFAULT_AGENT_TIMEOUT_SEC
    keywords: tuple[str, ...] = field(default=DEFAULT_KEYWORDS)
    channel: str = DEFAULT_CHANNEL
    max_history_records: int | None = None
    restore_live_on_clear: bool = False
    log_level: str = DEFAULT_LOG_LEVEL


def load_dashboard_settings(config: dict[str, Any] | None = None) -> DashboardSettings:
    """Build `DashboardSettings` from a config payload, falling back to defaults per field."""
    payload = config if config is not None else load_config()
    agent_cfg = get_agent_config(payload)
    history_cfg = get_history_config(payload)
    selection_cfg = get_selection_config(payload)
    logging_cfg = get_logging_config(payload)

    timeout_raw = agent_cfg.get("timeout_sec")
    timeout_sec = (
        int(timeout_raw)
        if isinstance(timeout_raw, (int, float)) and not isinstance(timeout_raw, bool) and timeout_raw > 0
        else DEFAULT_AGENT_TIMEOUT_SEC
    )

    keywords_raw = agent_cfg.get("keywords")
    keywords = DEFAULT_KEYWORDS
    if isinstance(keywords_raw, list):
        cleaned = tuple(kw.strip() for kw in keywords_raw if isinstance(kw, str) and kw.strip())
        if cleaned:
            keywords = cleaned

    max_raw = history_cfg.get("max_records")
    max_history_records = max_raw if isinstance(max_raw, int) and not isinstance(max_raw, bool) and max_raw > 0 else None

    restore_raw = selection_cfg.get("restore_live_on_clear")

    return DashboardSettings(
        agent_id=_non_empty_str(agent_cfg.get("agent_id")) or DEFAULT_AGENT_ID,
        prompt=_non_empty_str(agent_cfg.get("prompt")) or DEFAULT_AGENT_PROMPT,
        base_url=_non_empty_str(agent_cfg.get("base_url")),
        apikey=_non_empty_str(agent_cfg.get("apikey")),
        timeout_sec=timeout_sec,
        keywords=keywords,
        channel=_non_empty_str(agent_cfg.get("channel")) or DEFAULT_CHANNEL,
        max_history_records=max_history_records,
        restore_live_on_clear=restore_raw if isinstance(restore_raw, bool) else False,
        log_level=(_non_empty_str(logging_cfg.get("level")) or DEFAULT_LOG_LEVEL).upper(),
    )
