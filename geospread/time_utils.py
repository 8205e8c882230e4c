from __future__ import annotations

import logging
import numbers
import re
from datetime import datetime, timedelta, timezone
from typing import Any, List, Optional

from .constants import LOCAL_TZ

logger = logging.getLogger(__name__)

DATE_ONLY = re.compile(r"\d{4}-\d{2}-\d{2}")


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(raw: Any) -> datetime:
    """Parse an ISO-8601 string or an epoch-millisecond number.

    Date-only strings are UTC midnight, other naive values are read as
    local time. Raises ValueError when ``raw`` is neither.
    """
    if isinstance(raw, datetime):
        return raw.astimezone()
    if isinstance(raw, numbers.Real) and not isinstance(raw, bool):
        return datetime.fromtimestamp(float(raw) / 1000, tz=timezone.utc)
    text = str(raw).strip()
    if DATE_ONLY.fullmatch(text):
        return datetime.strptime(text, "%Y-%m-%d").replace(tzinfo=timezone.utc)
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).astimezone()
    except ValueError:
        return datetime.fromtimestamp(int(text) / 1000, tz=timezone.utc)


def parse_timestamp_or_default(raw: Any, default: datetime, record: Optional[str] = None) -> datetime:
    try:
        return parse_timestamp(raw)
    except (ValueError, OverflowError, OSError):
        logger.warning("%s: unparseable timestamp %r, using ingestion time", record or "record", raw)
        return default


def parse_date_string(date_str: str) -> str:
    cleaned = date_str.strip()
    for fmt in ("%Y-%m-%d", "%Y%m%d"):
        try:
            return datetime.strptime(cleaned, fmt).strftime("%Y-%m-%d")
        except ValueError:
            continue
    raise ValueError(f"Invalid date format '{date_str}'. Use YYYYMMDD or YYYY-MM-DD.")


def format_timespan(span: timedelta) -> str:
    """Render a marker time span as e.g. ``2 days, 3 hours`` or ``45 minutes``."""
    total_minutes = int(span.total_seconds() // 60)
    if total_minutes <= 0:
        return "under a minute"
    days, rem_minutes = divmod(total_minutes, 24 * 60)
    hours, minutes = divmod(rem_minutes, 60)
    units = [(days, "day"), (hours, "hour")] if days else [(hours, "hour"), (minutes, "minute")]
    parts: List[str] = [f"{value} {unit}{'s' if value != 1 else ''}" for value, unit in units if value]
    return ", ".join(parts)


def isoformat_local(dt: datetime) -> str:
    return dt.astimezone(LOCAL_TZ).strftime("%Y-%m-%d %H:%M")
