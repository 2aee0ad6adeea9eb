from datetime import date, datetime

from backend.errors import InvalidTimeFormat

WEEKDAY_NAMES = (
    'Monday',
    'Tuesday',
    'Wednesday',
    'Thursday',
    'Friday',
    'Saturday',
    'Sunday',
)

MINUTES_PER_DAY = 24 * 60


def _as_date(value):
    if isinstance(value, datetime):
        return value.date()
    return value


def same_calendar_day(a, b):
    """True when both values fall on the same local year/month/day."""
    if a is None or b is None:
        return False
    return (a.year, a.month, a.day) == (b.year, b.month, b.day)


def minutes_since_midnight(value):
    """Convert an HH:MM wall-clock string into minutes in [0, 1439]."""
    if not isinstance(value, str):
        raise InvalidTimeFormat(value)
    parts = value.strip().split(':')
    if len(parts) != 2:
        raise InvalidTimeFormat(value)
    try:
        hour = int(parts[0])
        minute = int(parts[1])
    except ValueError:
        raise InvalidTimeFormat(value) from None
    if not (0 <= hour <= 23 and 0 <= minute <= 59):
        raise InvalidTimeFormat(value)
    return hour * 60 + minute


def day_delta(start, end):
    """Signed number of whole days from ``start`` to ``end``."""
    return (_as_date(end) - _as_date(start)).days


def weekday_name(value):
    # strftime('%A') follows the process locale; stored names are English.
    return WEEKDAY_NAMES[value.weekday()]


def _local_date(value, tz):
    if tz is not None and value.tzinfo is not None:
        value = value.astimezone(tz)
    return value.date()


def parse_day_value(raw, tz=None):
    """Parse a date, datetime, YYYY-MM-DD or ISO timestamp; None on failure.

    Offset-aware timestamps (the browser writes local midnight as UTC, e.g.
    ``2024-06-02T22:00:00.000Z`` east of Greenwich) are converted to ``tz``
    before the calendar day is taken.
    """
    if raw is None:
        return None
    if isinstance(raw, datetime):
        return _local_date(raw, tz)
    if isinstance(raw, date):
        return raw
    text = str(raw).strip()
    if not text:
        return None
    try:
        return datetime.strptime(text, '%Y-%m-%d').date()
    except ValueError:
        pass
    try:
        return _local_date(datetime.fromisoformat(text.replace('Z', '+00:00')), tz)
    except ValueError:
        return None
