"""Shared runtime ownership facade for daemon/app entrypoints."""

from __future__ import annotations

import logging
from threading import RLock
from typing import Any

from src.taskrelay.core.config_loader import DashboardSettings, load_config, load_dashboard_settings, resolve_config_path
from src.taskrelay.core.dashboard_state import DelegationDashboard
from src.taskrelay.core.logging_setup import configure_logging

logger = logging.getLogger("taskrelay.runtime")


def _load_settings() -> DashboardSettings:
    try:
        cfg = load_config()
    except FileNotFoundError:
        logger.warning("runtime: no config at %s; using built-in defaults", resolve_config_path())
        return DashboardSettings()
    return load_dashboard_settings(cfg)


class RuntimeService:
    """Single authority for the dashboard instance + app-facing operations."""

    def __init__(self, dashboard: DelegationDashboard | None = None) -> None:
        self._lock = RLock()
        self._dashboard = dashboard
        self._started = False
        self._last_start_source: str | None = None
        self._last_stop_source: str | None = None

    def _get_dashboard(self) -> DelegationDashboard:
        with self._lock:
            if self._dashboard is None:
                settings = _load_settings()
                configure_logging(settings.log_level)
                self._dashboard = DelegationDashboard(settings)
            return self._dashboard

    def start(self, *, source: str = "runtime") -> dict[str, Any]:
        with self._lock:
            already_started = self._started
            self._started = True
            self._last_start_source = source
        dashboard = self._get_dashboard()
        logger.info("runtime: started from %s (agent %s)", source, dashboard.settings.agent_id)
        return {
            "ok": True,
            "source": "runtime_service",
            "already_started": already_started,
            "started": True,
            "start_source": source,
        }

    def stop(self, *, source: str = "runtime") -> dict[str, Any]:
        with self._lock:
            self._started = False
            self._last_stop_source = source
        logger.info("runtime: stopped from %s", source)
        return {
            "ok": True,
            "source": "runtime_service",
            "stopped": True,
            "stop_source": source,
        }

    def health(self) -> dict[str, Any]:
        dashboard = self._get_dashboard()
        return {
            "ok": True,
            "source": "runtime_service",
            "runtime": {
                "started": self._started,
                "last_start_source": self._last_start_source,
                "last_stop_source": self._last_stop_source,
            },
            "invocation": dashboard.controller.phase.to_dict(),
            "history_count": len(dashboard.history),
            "sample_mode": dashboard.sample_mode,
        }

    def dashboard_snapshot(self, *, query: str | None = None) -> dict[str, Any]:
        return self._get_dashboard().snapshot(query=query)

    def process_tasks(self) -> dict[str, Any]:
        return self._get_dashboard().process()

    def retry_tasks(self) -> dict[str, Any]:
        return self._get_dashboard().retry()

    def select_history(self, *, record_id: str) -> dict[str, Any]:
        return self._get_dashboard().select_history(record_id)

    def clear_selection(self) -> dict[str, Any]:
        return self._get_dashboard().clear_selection()

    def set_sample_mode(self, *, enabled: bool) -> dict[str, Any]:
        return self._get_dashboard().set_sample_mode(enabled)

    def set_search_query(self, *, query: str) -> dict[str, Any]:
        return self._get_dashboard().set_search_query(query)

    def list_history(self, *, query: str | None = None) -> dict[str, Any]:
        dashboard = self._get_dashboard()
        records = dashboard.filtered_history(query)
        return {
            "ok": True,
            "sample_mode": dashboard.sample_mode,
            "query": query,
            "records": [record.to_dict() for record in records],
            "total": len(dashboard.active_history()),
        }


_RUNTIME_SERVICE: RuntimeService | None = None


def get_runtime_service() -> RuntimeService:
    global _RUNTIME_SERVICE
    if _RUNTIME_SERVICE is None:
        _RUNTIME_SERVICE = RuntimeService()
    return _RUNTIME_SERVICE
