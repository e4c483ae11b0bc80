"""Map free-text severity/status labels to presentation tiers."""

from __future__ import annotations

from typing import Any, Literal

SeverityTier = Literal["severe", "critical", "warning", "default"]
StatusTier = Literal["good", "at_risk", "critical", "default"]

# Exact labels, checked in order.
_SEVERITY_LADDER: tuple[tuple[str, SeverityTier], ...] = (
    ("severe", "severe"),
    ("critical", "critical"),
    ("warning", "warning"),
)
# Substrings, checked in order. First match wins.
_STATUS_LADDER: tuple[tuple[str, StatusTier], ...] = (
    ("good", "good"),
    ("risk", "at_risk"),
    ("critical", "critical"),
)

SEVERITY_ROW_STYLES: dict[SeverityTier, str] = {
    "severe": "bg-red-100 text-red-800 border-red-200",
    "critical": "bg-orange-100 text-orange-800 border-orange-200",
    "warning": "bg-yellow-100 text-yellow-800 border-yellow-200",
    "default": "bg-gray-100 text-gray-800 border-gray-200",
}
SEVERITY_BADGE_STYLES: dict[SeverityTier, str] = {
    "severe": "bg-red-500 text-white",
    "critical": "bg-orange-500 text-white",
    "warning": "bg-amber-400 text-amber-900",
    "default": "bg-gray-400 text-white",
}
STATUS_STYLES: dict[StatusTier, str] = {
    "good": "bg-emerald-100 text-emerald-800 border-emerald-300",
    "at_risk": "bg-yellow-100 text-yellow-800 border-yellow-300",
    "critical": "bg-red-100 text-red-800 border-red-300",
    "default": "bg-gray-100 text-gray-800 border-gray-300",
}


def _normalize_label(label: Any) -> str:
    if label is None:
        return ""
    return str(label).casefold()


def severity_tier(label: Any = None) -> SeverityTier:
    normalized = _normalize_label(label)
    for keyword, tier in _SEVERITY_LADDER:
        if normalized == keyword:
            return tier
    return "default"


def status_tier(label: Any = None) -> StatusTier:
    normalized = _normalize_label(label)
    for keyword, tier in _STATUS_LADDER:
        if keyword in normalized:
            return tier
    return "default"


def severity_row_style(label: Any = None) -> str:
    return SEVERITY_ROW_STYLES[severity_tier(label)]


def severity_badge_style(label: Any = None) -> str:
    return SEVERITY_BADGE_STYLES[severity_tier(label)]


def status_style(label: Any = None) -> str:
    return STATUS_STYLES[status_tier(label)]
