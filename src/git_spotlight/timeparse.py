"""Duration strings and timestamp formatting for age mode and statistics."""

from __future__ import annotations

import re
import time
from datetime import datetime, timezone

from git_spotlight.errors import InvalidDurationError
from git_spotlight.models import ParsedDuration

DAY_MS = 24 * 60 * 60 * 1000

DURATION_UNITS = {
    "d": (DAY_MS, "day"),
    "w": (7 * DAY_MS, "week"),
    "m": (30 * DAY_MS, "month"),
    "y": (365 * DAY_MS, "year"),
}

RELATIVE_RE = re.compile(r"^(\d+)([dwmy])$")
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}")
EPOCH_RE = re.compile(r"^\d{10,13}$")

RELATIVE_STEPS = (
    (365 * 24 * 60 * 60, "year"),
    (30 * 24 * 60 * 60, "month"),
    (7 * 24 * 60 * 60, "week"),
    (24 * 60 * 60, "day"),
    (60 * 60, "hour"),
    (60, "minute"),
)


def _now_ms() -> int:
    return int(time.time() * 1000)


def _plural(amount: int, unit: str) -> str:
    return f"{amount} {unit}" if amount == 1 else f"{amount} {unit}s"


def _parse_iso(text: str) -> datetime | None:
    candidate = text[:-1] + "+00:00" if text[-1] in "Zz" else text
    try:
        parsed = datetime.fromisoformat(candidate)
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def parse_duration(text: str, now_ms: int | None = None) -> ParsedDuration:
    """Turn a duration into the cutoff used by age mode.

    Supported formats:
    - ``7d``, ``2w``, ``3m`` (30-day months), ``1y`` (365-day years)
    - ISO date or datetime (``2024-01-15``, ``2024-01-15T10:30:00Z``); naive
      values are read as UTC
    - Unix timestamp with 10 digits (seconds) or 11-13 digits (milliseconds)

    Args:
        text: Duration text; surrounding whitespace and case are ignored.
        now_ms: Reference time in epoch milliseconds (defaults to now).

    Returns:
        The cutoff in epoch milliseconds and a short description.

    Raises:
        InvalidDurationError: For empty, malformed, zero or future values.
    """
    now_ms = _now_ms() if now_ms is None else now_ms
    trimmed = text.strip()
    lowered = trimmed.lower()

    if not trimmed:
        raise InvalidDurationError(text, "Duration string is empty")

    relative = RELATIVE_RE.match(lowered)
    if relative:
        amount = int(relative.group(1))
        if amount <= 0:
            raise InvalidDurationError(text, "Duration amount must be positive")
        unit_ms, unit_name = DURATION_UNITS[relative.group(2)]
        return ParsedDuration(cutoff_ms=now_ms - amount * unit_ms, description=_plural(amount, unit_name))

    if ISO_DATE_RE.match(trimmed):
        parsed = _parse_iso(trimmed)
        if parsed is not None:
            cutoff_ms = int(parsed.timestamp() * 1000)
            if cutoff_ms > now_ms:
                raise InvalidDurationError(text, "Date cannot be in the future")
            return ParsedDuration(cutoff_ms=cutoff_ms, description=f"since {parsed.date().isoformat()}")

    if EPOCH_RE.match(trimmed):
        cutoff_ms = int(trimmed)
        if len(trimmed) == 10:
            cutoff_ms *= 1000
        if cutoff_ms > now_ms:
            raise InvalidDurationError(text, "Timestamp cannot be in the future")
        day = datetime.fromtimestamp(cutoff_ms / 1000, tz=timezone.utc).date()
        return ParsedDuration(cutoff_ms=cutoff_ms, description=f"since {day.isoformat()}")

    raise InvalidDurationError(
        text,
        f'Invalid duration format: "{text}". Use formats like "7d", "3m", "1y", or an ISO date.',
    )


def is_valid_duration(text: str, now_ms: int | None = None) -> bool:
    try:
        parse_duration(text, now_ms)
    except InvalidDurationError:
        return False
    return True


def relative_time(unix_seconds: int, now_ms: int | None = None) -> str:
    """Describe ``unix_seconds`` relative to now, e.g. ``"3 days ago"``."""
    now_ms = _now_ms() if now_ms is None else now_ms
    elapsed = (now_ms - unix_seconds * 1000) // 1000
    for step, unit in RELATIVE_STEPS:
        amount = elapsed // step
        if amount > 0:
            return f"{_plural(amount, unit)} ago"
    return "just now"


def format_timestamp(unix_seconds: int) -> str:
    return datetime.fromtimestamp(unix_seconds, tz=timezone.utc).strftime("%b %d, %Y, %H:%M")
