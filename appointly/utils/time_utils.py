# appointly/utils/time_utils.py
"""Helpers for minutes-since-midnight arithmetic and HH:MM strings"""
from datetime import date, time

MINUTES_PER_DAY = 24 * 60


def parse_hhmm(value: str) -> int:
    """Parse 'HH:MM' into minutes since midnight. '24:00' is accepted as end of day."""
    if not isinstance(value, str):
        raise ValueError(f"Expected HH:MM string, got {value!r}")

    parts = value.strip().split(":")
    if len(parts) != 2 or not all(p.isdigit() for p in parts):
        raise ValueError(f"Invalid time format {value!r}, expected HH:MM")

    hours, minutes = int(parts[0]), int(parts[1])
    if minutes > 59 or hours > 24 or (hours == 24 and minutes != 0):
        raise ValueError(f"Time out of range: {value!r}")

    return hours * 60 + minutes


def format_hhmm(minutes: int) -> str:
    """Format minutes since midnight as 'HH:MM'"""
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def time_to_minutes(value: time) -> int:
    return value.hour * 60 + value.minute


def minutes_to_time(minutes: int) -> time:
    if not 0 <= minutes < MINUTES_PER_DAY:
        raise ValueError(f"Minutes out of range for a time of day: {minutes}")
    return time(hour=minutes // 60, minute=minutes % 60)


def day_of_week(value: date) -> int:
    """Weekday index with 0 = Sunday ... 6 = Saturday"""
    return value.isoweekday() % 7
