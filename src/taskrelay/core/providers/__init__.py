from .agent_http import call_agent_http

__all__ = ["call_agent_http"]
