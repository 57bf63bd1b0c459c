"""Date manipulation utilities"""

from datetime import date, datetime
from typing import Any, Optional

from finance_tracker.domain.models import Period


def current_period(today: date | None = None) -> Period:
    """Period for the current calendar month"""
    return Period.of(today or date.today())


def parse_service_date(value: Any) -> Optional[date]:
    """
    Parse a date as sent by the finance service.

    Accepts dates, datetimes and ISO strings with or without a time part
    (e.g. "2025-01-15" or "2025-01-15T10:00:00.000Z"). Returns None for
    anything else.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str) or not value.strip():
        return None

    text = value.strip()
    if text.endswith("Z"):
        text = text[:-1] + "+00:00"
    try:
        return datetime.fromisoformat(text).date()
    except ValueError:
        pass
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None
