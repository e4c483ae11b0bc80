"""Core transforms and service boundaries for AttendEase."""

from .agent_client import call_agent
from .classification import (
    SeverityTier,
    StatusTier,
    severity_badge_style,
    severity_row_style,
    severity_tier,
    status_style,
    status_tier,
)
from .config_loader import (
    clear_config_cache,
    get_agent_id,
    get_agent_service_config,
    get_alert_threshold,
    get_scheduler_config,
    get_subjects,
    load_config,
    resolve_config_path,
)
from .cron_text import cron_to_human
from .envelope import EnvelopeShape, classify_envelope, extract_payload, extract_record
from .markdown_blocks import Block, RenderedBlocks, Span, blocks_to_html, render_markdown, split_inline
from .records import AlertCollection, AlertItem, AttendanceReport, StudentProfile, SubjectAttendance
from .request_guard import RequestSequencer
from .scheduler_client import get_schedule_logs, list_schedules, pause_schedule, resume_schedule

__all__ = [
    "AlertCollection",
    "AlertItem",
    "AttendanceReport",
    "Block",
    "EnvelopeShape",
    "RenderedBlocks",
    "RequestSequencer",
    "SeverityTier",
    "Span",
    "StatusTier",
    "StudentProfile",
    "SubjectAttendance",
    "blocks_to_html",
    "call_agent",
    "classify_envelope",
    "clear_config_cache",
    "cron_to_human",
    "extract_payload",
    "extract_record",
    "get_agent_id",
    "get_agent_service_config",
    "get_alert_threshold",
    "get_schedule_logs",
    "get_scheduler_config",
    "get_subjects",
    "list_schedules",
    "load_config",
    "pause_schedule",
    "render_markdown",
    "resolve_config_path",
    "resume_schedule",
    "severity_badge_style",
    "severity_row_style",
    "severity_tier",
    "split_inline",
    "status_style",
    "status_tier",
]
