"""Agent service adapter: send one instruction, return the raw envelope."""

from __future__ import annotations

import logging
from typing import Any

from .config_loader import get_agent_service_config, load_config
from .http_json import bearer_headers, request_json

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 60


def _failure(error: str) -> dict[str, Any]:
    return {"ok": False, "response": None, "raw": None, "error": error}


def call_agent(message: str, agent_id: str, *, timeout_sec: int | None = None) -> dict[str, Any]:
    """Send `message` to `agent_id` and return the envelope in a result dict.

    On success ``response`` holds the envelope's ``response`` field untouched
    (JSON text or object); callers unwrap it with `extract_payload`.
    """
    clean_message = str(message or "").strip()
    clean_agent_id = str(agent_id or "").strip()
    if not clean_message:
        return _failure("message is required")
    if not clean_agent_id:
        return _failure("agent_id is required")

    try:
        service_cfg = get_agent_service_config(load_config())
    except (FileNotFoundError, ValueError) as exc:
        return _failure(f"Agent service not configured: {exc}")

    base_url = service_cfg.get("base_url")
    if not isinstance(base_url, str) or not base_url:
        return _failure("Agent service base_url missing.")

    if timeout_sec is None:
        configured = service_cfg.get("timeout_sec")
        timeout_sec = int(configured) if isinstance(configured, (int, float)) else DEFAULT_TIMEOUT_SEC

    log.info("calling agent %s", clean_agent_id)
    try:
        body = request_json(
            "POST",
            base_url,
            headers=bearer_headers(service_cfg.get("apikey")),
            payload={"message": clean_message, "agent_id": clean_agent_id},
            timeout_sec=timeout_sec,
        )
    except (RuntimeError, OSError, ValueError) as exc:
        log.warning("agent %s call failed: %s", clean_agent_id, exc)
        return _failure(str(exc))

    if not isinstance(body, dict):
        return _failure("Agent response must be a JSON object.")
    if body.get("success") is False:
        err = body.get("error")
        return _failure(str(err) if err else "Agent reported failure.")
    return {"ok": True, "response": body.get("response"), "raw": body, "error": None}
