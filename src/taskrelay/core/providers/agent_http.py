"""HTTP adapter for the remote task-delegation agent."""

from __future__ import annotations

import json
from typing import Any
from urllib.error import HTTPError
from urllib.request import Request, urlopen


def _post_json(url: str, headers: dict[str, str], payload: dict[str, Any], timeout_sec: int) -> dict[str, Any]:
    req = Request(
        url,
        data=json.dumps(payload).encode("utf-8"),
        headers=headers,
        method="POST",
    )
    try:
        with urlopen(req, timeout=timeout_sec) as response:
            body = response.read().decode("utf-8")
    except HTTPError as exc:
        body = exc.read().decode("utf-8", errors="replace")
        detail = body.strip() or str(exc)
        try:
            parsed = json.loads(body)
            if isinstance(parsed, dict):
                err = parsed.get("error")
                if isinstance(err, dict):
                    detail = str(err.get("message") or err.get("code") or detail)
                elif isinstance(err, str):
                    detail = err
                elif isinstance(parsed.get("message"), str):
                    detail = parsed["message"]
        except json.JSONDecodeError:
            pass
        raise RuntimeError(f"HTTP {exc.code}: {detail}") from exc
    parsed = json.loads(body)
    if not isinstance(parsed, dict):
        raise ValueError("Agent response must be a JSON object.")
    return parsed


def call_agent_http(
    *,
    base_url: str,
    prompt: str,
    agent_id: str,
    apikey: str | None = None,
    timeout_sec: int = 120,
) -> dict[str, Any]:
    """POST one prompt to the agent endpoint and return its result envelope.

    Endpoints that answer with a bare `{status, result}` body are wrapped into
    `{success, response}` so callers always see the same outer shape.
    """
    headers = {"Content-Type": "application/json"}
    if apikey:
        headers["x-api-key"] = apikey

    raw = _post_json(
        base_url,
        headers=headers,
        payload={"message": prompt, "agent_id": agent_id},
        timeout_sec=timeout_sec,
    )
    if "success" in raw:
        return raw
    status = raw.get("status")
    return {"success": status == "success", "response": raw}
