import dateparser
from datetime import date, datetime, time, timedelta
from typing import Any, Optional, Tuple
import pytz
import re

DEPARTURE_FALLBACK_DAYS = 7
RETURN_FALLBACK_DAYS = 14
MIN_TRIP_DAYS = 7

_ISO_DATE = re.compile(r'^\d{4}-\d{2}-\d{2}')
_EMPTY_MARKERS = {"", "null", "none", "undefined"}
# a bare weekday phrase only; full dates that mention a weekday go to dateparser
_WEEKDAY_PHRASE = re.compile(
    r'^\s*(next|this)?\s*(monday|tuesday|wednesday|thursday|friday|saturday|sunday)\s*$',
    re.IGNORECASE,
)


def get_current_datetime(tz: str = "UTC") -> datetime:
    """Get current datetime with timezone"""
    return datetime.now(pytz.timezone(tz))


def today_in(tz: str = "UTC") -> date:
    return get_current_datetime(tz).date()


def _parse_next_weekday(text: str, base_date: datetime) -> Optional[datetime]:
    """Parse 'next Monday', 'this Friday', 'Friday' relative to base_date"""
    weekdays = {
        'monday': 0, 'tuesday': 1, 'wednesday': 2, 'thursday': 3,
        'friday': 4, 'saturday': 5, 'sunday': 6
    }

    text_lower = text.lower().strip()
    for day_name, day_num in weekdays.items():
        if day_name in text_lower:
            days_until = (day_num - base_date.weekday()) % 7

            if 'this' in text_lower:
                # "this Friday" on a Friday means today
                pass
            elif days_until == 0:
                # "next Friday" / bare "Friday" on a Friday means next week
                days_until = 7

            return base_date + timedelta(days=days_until)
    return None


def to_iso_date(text: str, tz: str = "UTC", base: Optional[date] = None) -> str:
    """Convert free text ('tomorrow', 'next Friday', '19 November') to YYYY-MM-DD.

    Returns "" when the text cannot be read as a date.
    """
    if base is not None:
        base_date = datetime.combine(base, time())
    else:
        base_date = get_current_datetime(tz).replace(tzinfo=None)

    if _WEEKDAY_PHRASE.match(text):
        dt = _parse_next_weekday(text, base_date)
        if dt:
            return dt.date().isoformat()

    text_lower = text.lower().strip()
    if text_lower == 'today':
        return base_date.date().isoformat()
    elif text_lower == 'tomorrow':
        return (base_date + timedelta(days=1)).date().isoformat()
    elif text_lower == 'yesterday':
        return (base_date - timedelta(days=1)).date().isoformat()

    try:
        dt = dateparser.parse(text, settings={"RELATIVE_BASE": base_date, "PREFER_DATES_FROM": "future"})
    except Exception:
        # dateparser raises assorted errors on garbage input; treat as unparsable
        dt = None
    if dt:
        return dt.date().isoformat()

    return ""


def parse_travel_date(value: Any, today: date) -> Optional[date]:
    """Read a model-supplied date; None for missing, 'null' or unparsable input."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None

    text = value.strip()
    if text.lower() in _EMPTY_MARKERS:
        return None

    # ISO dates (optionally with a time part) are taken literally
    if _ISO_DATE.match(text):
        try:
            return date.fromisoformat(text[:10])
        except ValueError:
            return None

    iso = to_iso_date(text, base=today)
    return date.fromisoformat(iso) if iso else None


def normalize_travel_dates(departure: Any, return_: Any, today: date) -> Tuple[date, date]:
    """Resolve a (departure, return) pair that always satisfies today <= dep <= ret.

    1. departure missing/invalid/past -> today + 7 days
    2. return missing/invalid/past -> today + 14 days
    3. return still before departure -> departure + 7 days
    Never raises.
    """
    dep = parse_travel_date(departure, today)
    if dep is None or dep < today:
        dep = today + timedelta(days=DEPARTURE_FALLBACK_DAYS)

    ret = parse_travel_date(return_, today)
    if ret is None or ret < today:
        ret = today + timedelta(days=RETURN_FALLBACK_DAYS)

    if ret < dep:
        ret = dep + timedelta(days=MIN_TRIP_DAYS)

    return dep, ret
