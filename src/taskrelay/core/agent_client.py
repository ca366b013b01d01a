"""Agent invocation entrypoint bound to dashboard settings."""

from __future__ import annotations

import logging
from typing import Any, Protocol

from .config_loader import DashboardSettings
from .providers import call_agent_http

logger = logging.getLogger("taskrelay.agent_client")


class AgentCall(Protocol):
    def __call__(self, *, prompt: str, agent_id: str) -> dict[str, Any]: ...


class AgentClient:
    """Callable `(prompt, agent_id) -> result envelope` for the configured endpoint.

    Transport problems raise; the caller turns them into invocation failures.
    """

    def __init__(self, settings: DashboardSettings) -> None:
        self._settings = settings

    def __call__(self, *, prompt: str, agent_id: str) -> dict[str, Any]:
        base_url = self._settings.base_url
        if not base_url:
            raise RuntimeError("Agent endpoint is not configured.")
        logger.info("agent_client: invoking agent %s (timeout=%ss)", agent_id, self._settings.timeout_sec)
        return call_agent_http(
            base_url=base_url,
            prompt=prompt,
            agent_id=agent_id,
            apikey=self._settings.apikey,
            timeout_sec=self._settings.timeout_sec,
        )
