"""Typed domain records built from agent payloads.

Every field is optional. `from_payload` coerces what it can and leaves the
rest as ``None``; `display()` is the single place where absent fields get
their on-screen defaults.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from dataclasses import asdict, dataclass
from typing import Any

TEXT_PLACEHOLDER = "--"
UNKNOWN_LABEL = "Unknown"


def _number(value: Any) -> float | int | None:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return value if math.isfinite(value) else None
    if isinstance(value, str) and value.strip():
        raw = value.strip().rstrip("%").strip()
        try:
            parsed = float(raw)
        except ValueError:
            return None
        if not math.isfinite(parsed):
            return None
        return int(parsed) if parsed.is_integer() and "." not in raw else parsed
    return None


def _text(value: Any) -> str | None:
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return str(value)
    return None


def _text_list(value: Any) -> list[str] | None:
    if not isinstance(value, list):
        return None
    out: list[str] = []
    for item in value:
        text = _text(item)
        if text is not None:
            out.append(text)
    return out


def _records(value: Any, record_type: Any) -> list[Any] | None:
    if not isinstance(value, list):
        return None
    return [record_type.from_payload(item) for item in value if isinstance(item, Mapping)]


def _or(value: Any, default: Any) -> Any:
    return default if value is None else value


@dataclass(slots=True)
class AttendanceReport:
    """Subject-level attendance report."""

    subject: str | None = None
    total_students: float | int | None = None
    present_count: float | int | None = None
    absent_count: float | int | None = None
    attendance_percentage: float | int | None = None
    trend_summary: str | None = None
    absentee_list: list[str] | None = None
    report_summary: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AttendanceReport":
        return cls(
            subject=_text(payload.get("subject")),
            total_students=_number(payload.get("total_students")),
            present_count=_number(payload.get("present_count")),
            absent_count=_number(payload.get("absent_count")),
            attendance_percentage=_number(payload.get("attendance_percentage")),
            trend_summary=_text(payload.get("trend_summary")),
            absentee_list=_text_list(payload.get("absentee_list")),
            report_summary=_text(payload.get("report_summary")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def display(self) -> dict[str, Any]:
        return {
            "subject": _or(self.subject, TEXT_PLACEHOLDER),
            "total_students": _or(self.total_students, 0),
            "present_count": _or(self.present_count, 0),
            "absent_count": _or(self.absent_count, 0),
            "attendance_percentage": _or(self.attendance_percentage, 0),
            "trend_summary": _or(self.trend_summary, ""),
            "absentee_list": list(self.absentee_list or []),
            "report_summary": _or(self.report_summary, ""),
        }


@dataclass(slots=True)
class SubjectAttendance:
    subject: str | None = None
    classes_attended: float | int | None = None
    total_classes: float | int | None = None
    percentage: float | int | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "SubjectAttendance":
        return cls(
            subject=_text(payload.get("subject")),
            classes_attended=_number(payload.get("classes_attended")),
            total_classes=_number(payload.get("total_classes")),
            percentage=_number(payload.get("percentage")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def display(self) -> dict[str, Any]:
        return {
            "subject": _or(self.subject, TEXT_PLACEHOLDER),
            "classes_attended": _or(self.classes_attended, 0),
            "total_classes": _or(self.total_classes, 0),
            "percentage": _or(self.percentage, 0),
        }


@dataclass(slots=True)
class StudentProfile:
    """One student's attendance profile across subjects."""

    student_name: str | None = None
    roll_number: str | None = None
    overall_attendance_percentage: float | int | None = None
    subject_wise_attendance: list[SubjectAttendance] | None = None
    status: str | None = None
    remarks: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "StudentProfile":
        return cls(
            student_name=_text(payload.get("student_name")),
            roll_number=_text(payload.get("roll_number")),
            overall_attendance_percentage=_number(payload.get("overall_attendance_percentage")),
            subject_wise_attendance=_records(payload.get("subject_wise_attendance"), SubjectAttendance),
            status=_text(payload.get("status")),
            remarks=_text(payload.get("remarks")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def display(self) -> dict[str, Any]:
        return {
            "student_name": _or(self.student_name, TEXT_PLACEHOLDER),
            "roll_number": _or(self.roll_number, TEXT_PLACEHOLDER),
            "overall_attendance_percentage": _or(self.overall_attendance_percentage, 0),
            "subject_wise_attendance": [item.display() for item in self.subject_wise_attendance or []],
            "status": _or(self.status, UNKNOWN_LABEL),
            "remarks": _or(self.remarks, ""),
        }


@dataclass(slots=True)
class AlertItem:
    student_name: str | None = None
    roll_number: str | None = None
    subject: str | None = None
    attendance_percentage: float | int | None = None
    classes_missed: float | int | None = None
    severity: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AlertItem":
        return cls(
            student_name=_text(payload.get("student_name")),
            roll_number=_text(payload.get("roll_number")),
            subject=_text(payload.get("subject")),
            attendance_percentage=_number(payload.get("attendance_percentage")),
            classes_missed=_number(payload.get("classes_missed")),
            severity=_text(payload.get("severity")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def display(self) -> dict[str, Any]:
        return {
            "student_name": _or(self.student_name, TEXT_PLACEHOLDER),
            "roll_number": _or(self.roll_number, TEXT_PLACEHOLDER),
            "subject": _or(self.subject, TEXT_PLACEHOLDER),
            "attendance_percentage": _or(self.attendance_percentage, 0),
            "classes_missed": _or(self.classes_missed, 0),
            "severity": _or(self.severity, UNKNOWN_LABEL),
        }


@dataclass(slots=True)
class AlertCollection:
    """Low-attendance alerts produced by one threshold check."""

    alert_date: str | None = None
    threshold_percentage: float | int | None = None
    alerts: list[AlertItem] | None = None
    total_alerts: float | int | None = None
    summary: str | None = None

    @classmethod
    def from_payload(cls, payload: Mapping[str, Any]) -> "AlertCollection":
        return cls(
            alert_date=_text(payload.get("alert_date")),
            threshold_percentage=_number(payload.get("threshold_percentage")),
            alerts=_records(payload.get("alerts"), AlertItem),
            total_alerts=_number(payload.get("total_alerts")),
            summary=_text(payload.get("summary")),
        )

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    def display(self) -> dict[str, Any]:
        alerts = self.alerts or []
        return {
            "alert_date": _or(self.alert_date, TEXT_PLACEHOLDER),
            "threshold_percentage": _or(self.threshold_percentage, 0),
            "alerts": [item.display() for item in alerts],
            "total_alerts": _or(self.total_alerts, len(alerts)),
            "summary": _or(self.summary, ""),
        }
