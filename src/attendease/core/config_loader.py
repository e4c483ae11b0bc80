"""Read the AttendEase JSON config and expose typed accessors over it.

The file holds agent ids per role, the agent service and scheduler
endpoints, the alert threshold and the subject list. Accessors take an
already loaded mapping so callers can test them without touching disk.
"""

from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any

CONFIG_ENV_VAR = "ATTENDEASE_CONFIG_PATH"
DEFAULT_CONFIG_PATH = Path("config/config.json")
DEFAULT_ALERT_THRESHOLD = 75.0
DEFAULT_LOGS_LIMIT = 5
DEFAULT_SUBJECTS = ("MEFA", "DBMS", "OS", "JAVA", "PYTHON")
AGENT_ROLES = ("attendance_report", "student_profile", "attendance_alert")
# resolved path -> (st_mtime_ns, parsed mapping)
_LOADED: dict[Path, tuple[int, dict[str, Any]]] = {}


def _project_dir() -> Path:
    return Path(__file__).resolve().parents[3]


def resolve_config_path(config_path: str | Path | None = None) -> Path:
    """Pick the config file: explicit path, then `ATTENDEASE_CONFIG_PATH`, then
    `config/config.json`. Relative paths are taken from the project directory,
    not the working directory.
    """
    chosen = config_path or os.getenv(CONFIG_ENV_VAR) or DEFAULT_CONFIG_PATH
    path = Path(chosen).expanduser()
    if not path.is_absolute():
        path = _project_dir() / path
    return path.resolve()


def _parse_config_file(path: Path) -> dict[str, Any]:
    try:
        parsed = json.loads(path.read_text(encoding="utf-8"))
    except json.JSONDecodeError as exc:
        raise ValueError(f"Invalid JSON in config file: {path}") from exc
    if not isinstance(parsed, dict):
        raise ValueError(f"Config root must be a JSON object: {path}")
    return parsed


def load_config(config_path: str | Path | None = None, *, use_cache: bool = True) -> dict[str, Any]:
    """Return the parsed config, re-reading the file only when its mtime moves.

    Raises `FileNotFoundError` for a missing file and `ValueError` for a file
    that is not a JSON object.
    """
    path = resolve_config_path(config_path)
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    stamp = path.stat().st_mtime_ns
    if use_cache:
        hit = _LOADED.get(path)
        if hit is not None and hit[0] == stamp:
            return hit[1]

    parsed = _parse_config_file(path)
    _LOADED[path] = (stamp, parsed)
    return parsed


def clear_config_cache() -> None:
    _LOADED.clear()


def get_agent_id(role: str, config: dict[str, Any] | None = None) -> str:
    """Return the configured agent id for one of `AGENT_ROLES`."""
    if role not in AGENT_ROLES:
        raise ValueError(f"Unknown agent role '{role}'.")
    payload = config if config is not None else load_config()
    agents = payload.get("agents")
    if not isinstance(agents, dict):
        raise ValueError("Config agents must be a JSON object keyed by role.")

    agent_id = agents.get(role)
    if not isinstance(agent_id, str) or not agent_id.strip():
        raise ValueError(f"Agent role '{role}' is not defined.")
    return agent_id.strip()


def get_agent_service_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    """Return the `agent_service` block (base_url, apikey, timeout_sec)."""
    payload = config if config is not None else load_config()
    service = payload.get("agent_service")
    if not isinstance(service, dict):
        raise ValueError("Config agent_service must be a JSON object.")
    return service


def get_scheduler_config(config: dict[str, Any] | None = None) -> dict[str, Any]:
    payload = config if config is not None else load_config()
    scheduler = payload.get("scheduler")
    if not isinstance(scheduler, dict):
        raise ValueError("Config scheduler must be a JSON object.")

    out = dict(scheduler)
    limit = out.get("logs_limit")
    if not isinstance(limit, int) or isinstance(limit, bool) or limit <= 0:
        out["logs_limit"] = DEFAULT_LOGS_LIMIT
    return out


def get_alert_threshold(config: dict[str, Any] | None = None) -> float:
    payload = config if config is not None else load_config()
    alerts = payload.get("alerts")
    if isinstance(alerts, dict):
        value = alerts.get("threshold_percentage")
        if isinstance(value, (int, float)) and not isinstance(value, bool) and 0 < value <= 100:
            return float(value)
    return DEFAULT_ALERT_THRESHOLD


def get_subjects(config: dict[str, Any] | None = None) -> list[str]:
    payload = config if config is not None else load_config()
    subjects = payload.get("subjects")
    if isinstance(subjects, list):
        cleaned = [str(item).strip() for item in subjects if isinstance(item, str) and item.strip()]
        if cleaned:
            return cleaned
    return list(DEFAULT_SUBJECTS)
