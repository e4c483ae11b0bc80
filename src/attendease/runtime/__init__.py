"""Service facade for app integration."""

from .service import AttendanceService, get_attendance_service

__all__ = [
    "AttendanceService",
    "get_attendance_service",
]
