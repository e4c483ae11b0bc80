"""Scheduler service adapter for the alert-check schedule."""

from __future__ import annotations

import logging
from typing import Any
from urllib.parse import quote

from .config_loader import get_scheduler_config, load_config
from .http_json import bearer_headers, request_json

log = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SEC = 15
MAX_LOGS_LIMIT = 100


def _dict_rows(value: Any) -> list[dict[str, Any]]:
    if not isinstance(value, list):
        return []
    return [dict(item) for item in value if isinstance(item, dict)]


def _call(method: str, path: str, *, query: dict[str, Any] | None = None) -> dict[str, Any]:
    try:
        cfg = get_scheduler_config(load_config())
    except (FileNotFoundError, ValueError) as exc:
        return {"ok": False, "body": None, "error": f"Scheduler not configured: {exc}"}

    base_url = cfg.get("base_url")
    if not isinstance(base_url, str) or not base_url:
        return {"ok": False, "body": None, "error": "Scheduler base_url missing."}
    timeout = cfg.get("timeout_sec")
    timeout_sec = float(timeout) if isinstance(timeout, (int, float)) else DEFAULT_TIMEOUT_SEC

    url = base_url.rstrip("/") + path
    log.info("scheduler %s %s", method, path)
    try:
        body = request_json(
            method,
            url,
            headers=bearer_headers(cfg.get("apikey")),
            query=query,
            timeout_sec=timeout_sec,
        )
    except (RuntimeError, OSError, ValueError) as exc:
        log.warning("scheduler %s %s failed: %s", method, path, exc)
        return {"ok": False, "body": None, "error": str(exc)}

    if not isinstance(body, dict):
        return {"ok": False, "body": None, "error": "Scheduler response must be a JSON object."}
    if body.get("success") is False:
        err = body.get("error")
        return {"ok": False, "body": body, "error": str(err) if err else "Scheduler reported failure."}
    return {"ok": True, "body": body, "error": None}


def _schedule_path(schedule_id: str, suffix: str = "") -> str:
    return f"/schedules/{quote(schedule_id, safe='')}{suffix}"


def list_schedules(agent_id: str | None = None) -> dict[str, Any]:
    out = _call("GET", "/schedules", query={"agent_id": agent_id} if agent_id else None)
    if not out["ok"]:
        return {"ok": False, "schedules": [], "error": out["error"]}
    return {"ok": True, "schedules": _dict_rows(out["body"].get("schedules")), "error": None}


def get_schedule_logs(schedule_id: str, *, limit: int = 5) -> dict[str, Any]:
    clean_id = str(schedule_id or "").strip()
    if not clean_id:
        return {"ok": False, "executions": [], "error": "schedule_id is required"}
    safe_limit = max(1, min(MAX_LOGS_LIMIT, int(limit)))
    out = _call("GET", _schedule_path(clean_id, "/logs"), query={"limit": safe_limit})
    if not out["ok"]:
        return {"ok": False, "executions": [], "error": out["error"]}
    executions = _dict_rows(out["body"].get("executions"))[:safe_limit]
    return {"ok": True, "executions": executions, "error": None}


def _set_state(schedule_id: str, verb: str) -> dict[str, Any]:
    clean_id = str(schedule_id or "").strip()
    if not clean_id:
        return {"ok": False, "schedule": None, "error": "schedule_id is required"}
    out = _call("POST", _schedule_path(clean_id, f"/{verb}"))
    if not out["ok"]:
        return {"ok": False, "schedule": None, "error": out["error"]}
    schedule = out["body"].get("schedule")
    return {"ok": True, "schedule": schedule if isinstance(schedule, dict) else None, "error": None}


def pause_schedule(schedule_id: str) -> dict[str, Any]:
    return _set_state(schedule_id, "pause")


def resume_schedule(schedule_id: str) -> dict[str, Any]:
    return _set_state(schedule_id, "resume")
