"""Datetime helpers."""

from __future__ import annotations

import os

import pendulum

DEFAULT_TZ = "Europe/Moscow"
DISPLAY_LOCALE = "ru"


def timezone_name() -> str:
    return os.environ.get("TIMEZONE", DEFAULT_TZ)


def parse_timestamp(value: str) -> pendulum.DateTime:
    """Parse an ISO 8601 timestamp and move it to the display timezone."""
    parsed = pendulum.parse(value)
    if not isinstance(parsed, pendulum.DateTime):
        raise ValueError(f"Not a timestamp: {value!r}")
    return parsed.in_timezone(pendulum.timezone(timezone_name()))


def format_date(value: str) -> str:
    try:
        return parse_timestamp(value).format("DD.MM.YYYY")
    except (ValueError, TypeError):
        return value


def format_datetime(value: str) -> str:
    try:
        return parse_timestamp(value).format("DD.MM.YYYY, HH:mm:ss")
    except (ValueError, TypeError):
        return value


def format_day_short(value: str) -> str:
    """``5 янв.`` style label for chart axes."""
    try:
        return parse_timestamp(value).format("D MMM", locale=DISPLAY_LOCALE)
    except (ValueError, TypeError):
        return value
