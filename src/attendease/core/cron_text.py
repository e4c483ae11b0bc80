"""Describe common five-field cron expressions in plain English."""

from __future__ import annotations

import re

_DAY_NAMES = ["Sunday", "Monday", "Tuesday", "Wednesday", "Thursday", "Friday", "Saturday"]
_DAY_ALIASES = {name[:3].lower(): idx for idx, name in enumerate(_DAY_NAMES)}
_STEP = re.compile(r"^\*/([0-9]+)$")
_NUMBER = re.compile(r"^[0-9]+$")


def _int_in(value: str, low: int, high: int) -> int | None:
    if not _NUMBER.match(value):
        return None
    parsed = int(value)
    return parsed if low <= parsed <= high else None


def _day_index(token: str, *, fold_sunday: bool = True) -> int | None:
    """Day number 0-6 with Sunday as 0. With `fold_sunday` off a numeric 7 stays 7."""
    token = token.strip().lower()
    parsed = _DAY_ALIASES[token] if token in _DAY_ALIASES else _int_in(token, 0, 7)
    if parsed is None:
        return None
    return 0 if parsed == 7 and fold_sunday else parsed


def _weekdays(field: str) -> list[int] | None:
    days: list[int] = []
    for part in field.split(","):
        if "-" in part:
            start_raw, _, end_raw = part.partition("-")
            start = _day_index(start_raw, fold_sunday=False)
            end = _day_index(end_raw, fold_sunday=False)
            if start is not None and end == 0 and start > 0:
                # "mon-sun" ends on Sunday.
                end = 7
            if start is None or end is None or start > end:
                return None
            days.extend(day % 7 for day in range(start, end + 1))
        else:
            day = _day_index(part)
            if day is None:
                return None
            days.append(day)
    return sorted(set(days))


def _describe_days(days: list[int]) -> str:
    if days == [1, 2, 3, 4, 5]:
        return "Weekdays"
    if days == [0, 6]:
        return "Weekends"
    if len(days) == 7:
        return "Every day"
    return "Every " + ", ".join(_DAY_NAMES[day] for day in days)


def cron_to_human(expression: str | None) -> str:
    """Return a readable description, or the expression itself when unsupported."""
    raw = str(expression or "").strip()
    fields = raw.split()
    if len(fields) != 5:
        return raw
    minute, hour, dom, month, dow = fields

    if month != "*":
        return raw

    if hour == "*" and dom == "*" and dow == "*":
        if minute == "*":
            return "Every minute"
        step = _STEP.match(minute)
        if step and int(step.group(1)) > 0:
            return f"Every {int(step.group(1))} minutes"
        at_minute = _int_in(minute, 0, 59)
        if at_minute is not None:
            return f"Every hour at minute {at_minute}"
        return raw

    at_minute = _int_in(minute, 0, 59)
    if at_minute is None:
        return raw

    hour_step = _STEP.match(hour)
    if hour_step and dom == "*" and dow == "*" and int(hour_step.group(1)) > 0:
        return f"Every {int(hour_step.group(1))} hours at minute {at_minute}"

    at_hour = _int_in(hour, 0, 23)
    if at_hour is None:
        return raw
    clock = f"{at_hour:02d}:{at_minute:02d}"

    if dom == "*" and dow == "*":
        return f"Every day at {clock}"
    if dom == "*":
        days = _weekdays(dow)
        if days is None:
            return raw
        return f"{_describe_days(days)} at {clock}"
    if dow == "*":
        day_of_month = _int_in(dom, 1, 31)
        if day_of_month is None:
            return raw
        return f"Monthly on day {day_of_month} at {clock}"
    return raw
