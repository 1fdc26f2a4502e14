# utils/time_utils.py
import logging
import numbers
import re
from datetime import date, datetime, time, timedelta, timezone
from typing import Any, Optional

import pandas as pd

from models.attendance_model import ParsedTime

logger = logging.getLogger(__name__)

# Spreadsheet serial 25569 is 1970-01-01 (serials count days from 1899-12-30)
EXCEL_EPOCH_OFFSET = 25569
SECONDS_PER_DAY = 86400
UNIX_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)

_LEADING_INT = re.compile(r"^\s*(\d+)")
_SERIAL_TEXT = re.compile(r"\d+(\.\d+)?")


def is_blank(value: Any) -> bool:
    """True for None, NaN, NaT and other pandas missing markers."""
    if value is None:
        return True
    try:
        return bool(pd.isna(value))
    except (TypeError, ValueError):
        return False


def _leading_int(text: str) -> Optional[int]:
    match = _LEADING_INT.match(text)
    if not match:
        return None
    return int(match.group(1), 10)


def parse_time(value: Any) -> Optional[ParsedTime]:
    """
    Parse a punch cell such as "9:05", "09.30" or 17.5 into a ParsedTime.

    Colon is used as separator when present, otherwise the period. Hours and
    minutes are taken as written, out-of-range values are not rejected.
    Returns None for empty or unreadable cells.
    """
    if is_blank(value) or not value:
        return None

    if isinstance(value, (datetime, time)):
        text = value.strftime("%H:%M")
    else:
        text = str(value).strip()
    if not text:
        return None

    separator = ":" if ":" in text else "."
    parts = text.split(separator)
    if len(parts) < 2:
        return None

    hours = _leading_int(parts[0])
    minutes = _leading_int(parts[1])
    if hours is None or minutes is None:
        return None

    return ParsedTime(
        display=f"{hours:02d}:{minutes:02d}",
        minutes_since_midnight=hours * 60 + minutes,
    )


def serial_to_date(serial: float) -> date:
    seconds = round((float(serial) - EXCEL_EPOCH_OFFSET) * SECONDS_PER_DAY)
    return (UNIX_EPOCH + timedelta(seconds=seconds)).date()


def parse_date_strict(value: Any) -> Optional[date]:
    """Parse a Date cell, returning None when it cannot be read."""
    if is_blank(value):
        return None

    # pandas.Timestamp is a datetime subclass
    if isinstance(value, datetime):
        if value.tzinfo is not None:
            value = value.astimezone(timezone.utc)
        return value.date()
    if isinstance(value, date):
        return value

    if isinstance(value, numbers.Number) and not isinstance(value, bool):
        try:
            return serial_to_date(value)
        except (OverflowError, ValueError):
            return None

    text = str(value).strip()
    if not text:
        return None
    # CSV cells arrive as text, so a bare number is still a spreadsheet serial
    if _SERIAL_TEXT.fullmatch(text):
        try:
            return serial_to_date(float(text))
        except (OverflowError, ValueError):
            return None
    try:
        parsed = pd.to_datetime(text, errors="coerce")
    except (TypeError, ValueError, OverflowError):
        return None
    if is_blank(parsed):
        return None
    if parsed.tzinfo is not None:
        parsed = parsed.tz_convert("UTC")
    return parsed.date()


def parse_date(value: Any, today: Optional[date] = None) -> date:
    parsed = parse_date_strict(value)
    if parsed is not None:
        return parsed
    fallback = today or date.today()
    logger.warning("Unreadable date cell %r, using %s", value, fallback.isoformat())
    return fallback


def weekday_index(day: date) -> int:
    # 0 = Sunday ... 6 = Saturday
    return (day.weekday() + 1) % 7
