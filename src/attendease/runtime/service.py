"""App-facing facade over the agent and scheduler boundaries."""

from __future__ import annotations

import logging
from collections.abc import Callable
from datetime import UTC, datetime
from threading import RLock
from typing import Any

from src.attendease.core import scheduler_client
from src.attendease.core.agent_client import call_agent
from src.attendease.core.classification import (
    severity_badge_style,
    severity_row_style,
    severity_tier,
    status_style,
    status_tier,
)
from src.attendease.core.config_loader import (
    AGENT_ROLES,
    DEFAULT_LOGS_LIMIT,
    get_agent_id,
    get_alert_threshold,
    get_scheduler_config,
    get_subjects,
    load_config,
)
from src.attendease.core.cron_text import cron_to_human
from src.attendease.core.envelope import extract_record
from src.attendease.core.markdown_blocks import blocks_to_html, render_markdown
from src.attendease.core.records import AlertCollection, AttendanceReport, StudentProfile
from src.attendease.core.request_guard import RequestSequencer

log = logging.getLogger(__name__)

ALL_SUBJECTS = "All Subjects"
MAX_PROFILE_HISTORY = 50
UNEXPECTED_ERROR = "An unexpected error occurred. Please try again."
STALE_ERROR = "superseded by a newer request"
HISTORY_ACTION = "profile_history"

AgentCaller = Callable[[str, str], dict[str, Any]]


def _utc_now_iso() -> str:
    return datetime.now(tz=UTC).isoformat()


def _text_blocks(text: str | None) -> dict[str, Any]:
    blocks = render_markdown(text)
    return {"blocks": blocks.to_dicts(), "html": blocks_to_html(blocks)}


def _format_threshold(value: float) -> str:
    return f"{value:g}"


class AttendanceService:
    """Report, profile, alert and schedule operations for the app surface."""

    def __init__(
        self,
        *,
        agent_caller: AgentCaller | None = None,
        scheduler: Any | None = None,
        agent_ids: dict[str, str] | None = None,
        schedule_id: str | None = None,
    ) -> None:
        self._agent_caller = agent_caller or call_agent
        self._scheduler = scheduler or scheduler_client
        self._agent_ids = dict(agent_ids or {})
        self._schedule_id = schedule_id
        self._lock = RLock()
        self._requests = RequestSequencer()
        self._current: dict[str, dict[str, Any]] = {}
        self._profile_history: list[dict[str, Any]] = []

    @staticmethod
    def _config() -> dict[str, Any]:
        try:
            return load_config()
        except (FileNotFoundError, ValueError):
            return {}

    def _agent_id(self, role: str) -> str | None:
        if role in self._agent_ids:
            return self._agent_ids[role]
        try:
            return get_agent_id(role, self._config())
        except ValueError:
            return None

    def _configured_schedule_id(self) -> str | None:
        if self._schedule_id:
            return self._schedule_id
        try:
            raw = get_scheduler_config(self._config()).get("schedule_id")
        except ValueError:
            return None
        return raw.strip() if isinstance(raw, str) and raw.strip() else None

    def _logs_limit(self) -> int:
        try:
            return int(get_scheduler_config(self._config())["logs_limit"])
        except ValueError:
            return DEFAULT_LOGS_LIMIT

    def _alert_threshold(self) -> float:
        return get_alert_threshold(self._config())

    def _invoke(self, role: str, message: str, record_type: type) -> tuple[Any, str | None]:
        """Call the agent for `role` and extract a record. Returns `(record, error)`."""
        agent_id = self._agent_id(role)
        if not agent_id:
            return None, f"Agent '{role}' is not configured."
        try:
            result = self._agent_caller(message, agent_id)
        except Exception:
            log.exception("agent call for %s raised", role)
            return None, UNEXPECTED_ERROR
        if not isinstance(result, dict) or not result.get("ok"):
            error = result.get("error") if isinstance(result, dict) else None
            return None, str(error) if error else ""
        return extract_record({"response": result.get("response")}, record_type), None

    def _apply(self, action: str, ticket: int, out: dict[str, Any]) -> dict[str, Any]:
        def _store() -> None:
            with self._lock:
                self._current[action] = out

        if self._requests.commit(action, ticket, _store):
            return out
        return {"ok": False, "stale": True, "error": STALE_ERROR}

    def health(self) -> dict[str, Any]:
        cfg = self._config()
        return {
            "ok": True,
            "source": "attendease_service",
            "config_loaded": bool(cfg),
            "agents": {role: self._agent_id(role) is not None for role in AGENT_ROLES},
            "schedule_configured": self._configured_schedule_id() is not None,
        }

    def subjects(self) -> dict[str, Any]:
        return {"ok": True, "subjects": get_subjects(self._config())}

    def generate_report(self, *, subject: str | None = None) -> dict[str, Any]:
        ticket = self._requests.begin("report")
        clean_subject = str(subject or "").strip()
        if not clean_subject or clean_subject == ALL_SUBJECTS:
            message = "Generate attendance report for all subjects"
        else:
            message = f"Generate attendance report for {clean_subject}"

        report, error = self._invoke("attendance_report", message, AttendanceReport)
        if error is not None:
            out = {"ok": False, "report": None, "error": error or "Failed to generate report. Please try again."}
        elif report is None:
            out = {"ok": False, "report": None, "error": "Could not parse the report response. Please try again."}
        else:
            out = {
                "ok": True,
                "report": report.display(),
                "record": report.to_dict(),
                "text": {
                    "trend_summary": _text_blocks(report.trend_summary),
                    "report_summary": _text_blocks(report.report_summary),
                },
                "error": None,
            }
        return self._apply("report", ticket, out)

    def current_report(self) -> dict[str, Any]:
        with self._lock:
            return self._current.get("report") or {"ok": True, "report": None, "error": None}

    def query_profile(self, *, query: str) -> dict[str, Any]:
        clean_query = str(query or "").strip()
        if not clean_query:
            return {"ok": False, "entry": None, "error": "query is required"}

        # Concurrent queries share one epoch; only a clear advances it.
        epoch = self._requests.latest(HISTORY_ACTION)
        profile, error = self._invoke("student_profile", clean_query, StudentProfile)
        entry: dict[str, Any] = {
            "query": clean_query,
            "result": None,
            "error": None,
            "timestamp": _utc_now_iso(),
        }
        if error is not None:
            entry["error"] = error or "Failed to fetch profile"
        elif profile is not None:
            display = profile.display()
            entry["result"] = display
            entry["status_tier"] = status_tier(profile.status)
            entry["status_style"] = status_style(profile.status)
            entry["remarks"] = _text_blocks(profile.remarks)

        def _record() -> None:
            with self._lock:
                self._profile_history.insert(0, entry)
                del self._profile_history[MAX_PROFILE_HISTORY:]

        if not self._requests.commit(HISTORY_ACTION, epoch, _record):
            return {"ok": False, "stale": True, "entry": None, "error": STALE_ERROR}
        return {"ok": entry["error"] is None, "entry": entry, "error": entry["error"]}

    def profile_history(self) -> dict[str, Any]:
        with self._lock:
            history = list(self._profile_history)
        return {"ok": True, "history": history, "count": len(history)}

    def clear_profile_history(self) -> dict[str, Any]:
        self._requests.begin(HISTORY_ACTION)
        with self._lock:
            cleared = len(self._profile_history)
            self._profile_history.clear()
        return {"ok": True, "cleared": cleared}

    def check_alerts(self, *, threshold: float | None = None) -> dict[str, Any]:
        ticket = self._requests.begin("alerts")
        limit = float(threshold) if threshold is not None else self._alert_threshold()
        message = (
            f"Check all student attendance records against the {_format_threshold(limit)}% threshold. "
            "Identify students below the threshold in each subject."
        )

        alerts, error = self._invoke("attendance_alert", message, AlertCollection)
        if error is not None:
            out = {"ok": False, "alerts": None, "rows": [], "error": error or "Failed to check alerts."}
        elif alerts is None:
            out = {"ok": False, "alerts": None, "rows": [], "error": "Could not parse alert response."}
        else:
            rows = []
            for item in alerts.alerts or []:
                rows.append(
                    {
                        **item.display(),
                        "severity_tier": severity_tier(item.severity),
                        "row_style": severity_row_style(item.severity),
                        "badge_style": severity_badge_style(item.severity),
                    }
                )
            out = {
                "ok": True,
                "alerts": alerts.display(),
                "rows": rows,
                "summary": _text_blocks(alerts.summary),
                "error": None,
            }
        return self._apply("alerts", ticket, out)

    def current_alerts(self) -> dict[str, Any]:
        with self._lock:
            return self._current.get("alerts") or {"ok": True, "alerts": None, "rows": [], "error": None}

    def clear(self) -> dict[str, Any]:
        # Invalidate in-flight tickets before wiping state.
        self._requests.reset()
        self._requests.begin(HISTORY_ACTION)
        with self._lock:
            self._current.clear()
            self._profile_history.clear()
        return {"ok": True, "cleared": True}

    def schedule_status(self) -> dict[str, Any]:
        res = self._scheduler.list_schedules(self._agent_id("attendance_alert"))
        schedules = res.get("schedules") if isinstance(res, dict) else None
        if not (isinstance(res, dict) and res.get("ok")) or not schedules:
            error = res.get("error") if isinstance(res, dict) else None
            return {"ok": False, "schedule": None, "error": error or "No schedules found"}

        wanted = self._configured_schedule_id()
        found = next((row for row in schedules if wanted and row.get("id") == wanted), schedules[0])
        cron = found.get("cron_expression")
        schedule = {
            **found,
            "state": "Active" if found.get("is_active") else "Paused",
            "cron_text": cron_to_human(cron) if isinstance(cron, str) and cron.strip() else "--",
        }
        return {"ok": True, "schedule": schedule, "error": None}

    def toggle_schedule(self) -> dict[str, Any]:
        status = self.schedule_status()
        if not status["ok"]:
            return status
        schedule = status["schedule"]
        schedule_id = str(schedule.get("id") or "")
        if schedule.get("is_active"):
            res, toggled = self._scheduler.pause_schedule(schedule_id), "paused"
        else:
            res, toggled = self._scheduler.resume_schedule(schedule_id), "resumed"
        if not (isinstance(res, dict) and res.get("ok")):
            log.warning("toggle of schedule %s failed: %s", schedule_id, res)
            return {"ok": False, "schedule": schedule, "error": "Failed to toggle schedule"}

        refreshed = self.schedule_status()
        refreshed["toggled"] = toggled
        return refreshed

    def schedule_logs(self, *, limit: int | None = None) -> dict[str, Any]:
        schedule_id = self._configured_schedule_id()
        if not schedule_id:
            status = self.schedule_status()
            schedule_id = status["schedule"]["id"] if status["ok"] and status["schedule"].get("id") else None
        if not schedule_id:
            return {"ok": False, "executions": [], "error": "No schedules found"}

        res = self._scheduler.get_schedule_logs(schedule_id, limit=limit or self._logs_limit())
        if not (isinstance(res, dict) and res.get("ok")):
            return {"ok": False, "executions": [], "error": res.get("error") if isinstance(res, dict) else None}
        rows = [
            {**row, "label": "Completed" if row.get("success") else "Failed"}
            for row in res.get("executions") or []
        ]
        return {"ok": True, "executions": rows, "count": len(rows), "error": None}

    def render_text(self, *, text: str | None) -> dict[str, Any]:
        return {"ok": True, "count": len(render_markdown(text)), **_text_blocks(text)}

    def classify(self, *, severity: str | None = None, status: str | None = None) -> dict[str, Any]:
        return {
            "ok": True,
            "severity_tier": severity_tier(severity),
            "severity_row_style": severity_row_style(severity),
            "severity_badge_style": severity_badge_style(severity),
            "status_tier": status_tier(status),
            "status_style": status_style(status),
        }


_ATTENDANCE_SERVICE: AttendanceService | None = None


def get_attendance_service() -> AttendanceService:
    global _ATTENDANCE_SERVICE
    if _ATTENDANCE_SERVICE is None:
        _ATTENDANCE_SERVICE = AttendanceService()
    return _ATTENDANCE_SERVICE
