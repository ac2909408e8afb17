# utils/formatting.py
import math
import re
from datetime import date, datetime, timezone
from typing import Any, Optional

_INT_PREFIX_RE = re.compile(r"^\s*([+-]?\d+)")


def parse_int(value: Any) -> int:
    """
    Lenient integer parse: leading integer of a string, 0 for anything
    that has none ("12abc" -> 12, "abc" -> 0, None -> 0).
    """
    if value is None or isinstance(value, bool):
        return 0
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return 0 if math.isnan(value) or math.isinf(value) else int(value)
    match = _INT_PREFIX_RE.match(str(value))
    return int(match.group(1)) if match else 0


def format_quantity(n: int) -> str:
    """
    Thousands-separated quantity for stat cards.
    Example: 1234567 -> "1,234,567"
    """
    return f"{n:,}"


def date_stamp(day: date) -> str:
    """2026-10-19 -> "20261019" (used in export file names)."""
    return day.strftime("%Y%m%d")


def utc_today(now: Optional[datetime] = None) -> date:
    """
    Calendar date in UTC, used for export file names so the stamp doesn't
    depend on the server's local timezone.
    """
    now = now or datetime.now(timezone.utc)
    return now.astimezone(timezone.utc).date()
