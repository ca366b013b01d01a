"""Core state and reconciliation logic for the TaskRelay dashboard."""

from .agent_client import AgentClient
from .agent_types import AgentResult, DelegationRecord, DelegationStats, TaskItem
from .config_loader import (
    DashboardSettings,
    clear_config_cache,
    get_agent_config,
    get_history_config,
    get_logging_config,
    get_selection_config,
    load_config,
    load_dashboard_settings,
    resolve_config_path,
)
from .dashboard_state import DelegationDashboard
from .display_projector import DisplayStats, count_pending_items, format_timestamp, project_stats
from .history_filter import filter_history
from .history_store import HistoryStore, create_record, new_record_id
from .invocation_controller import InvocationController, InvocationPhase
from .logging_setup import configure_logging
from .response_normalizer import normalize_agent_response
from .sample_data import SAMPLE_DATASET, SampleDataset, build_sample_dataset
from .selection_overlay import SelectionOverlay

__all__ = [
    "AgentClient",
    "AgentResult",
    "DashboardSettings",
    "DelegationDashboard",
    "DelegationRecord",
    "DelegationStats",
    "DisplayStats",
    "HistoryStore",
    "InvocationController",
    "InvocationPhase",
    "SAMPLE_DATASET",
    "SampleDataset",
    "SelectionOverlay",
    "TaskItem",
    "build_sample_dataset",
    "clear_config_cache",
    "configure_logging",
    "count_pending_items",
    "create_record",
    "filter_history",
    "format_timestamp",
    "get_agent_config",
    "get_history_config",
    "get_logging_config",
    "get_selection_config",
    "load_config",
    "load_dashboard_settings",
    "new_record_id",
    "normalize_agent_response",
    "project_stats",
    "resolve_config_path",
]
