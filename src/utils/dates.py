"""Month and date helpers. Months are 'YYYY-MM' strings throughout."""

import calendar
from datetime import date, datetime
from typing import Optional

MONTH_FORMAT = "%Y-%m"


def current_month_str(today: Optional[date] = None) -> str:
    return (today or date.today()).strftime(MONTH_FORMAT)


def parse_date(value) -> Optional[date]:
    """Parse a date, datetime or YYYY-MM-DD string. None on failure."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def parse_month(value: Optional[str]) -> Optional[date]:
    """First day of a YYYY-MM month, None if it isn't one."""
    if not value:
        return None
    try:
        return datetime.strptime(value.strip(), MONTH_FORMAT).date()
    except ValueError:
        return None


def month_bounds(month: str) -> tuple[date, date]:
    """First and last day of a YYYY-MM month."""
    first = parse_month(month)
    if first is None:
        raise ValueError(f"Invalid month: {month!r}")
    last_day = calendar.monthrange(first.year, first.month)[1]
    return first, first.replace(day=last_day)


def shift_month(month: str, delta: int) -> str:
    """Move a YYYY-MM month forward (or back, for negative delta)."""
    first = parse_month(month)
    if first is None:
        raise ValueError(f"Invalid month: {month!r}")
    index = first.year * 12 + (first.month - 1) + delta
    return f"{index // 12:04d}-{index % 12 + 1:02d}"


def recent_months(count: int, today: Optional[date] = None) -> list[str]:
    """The last ``count`` months ending with the current one, oldest first."""
    current = current_month_str(today)
    return [shift_month(current, -offset) for offset in range(count - 1, -1, -1)]
