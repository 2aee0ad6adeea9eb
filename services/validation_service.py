from backend.errors import InvalidTimeFormat, ValidationError
from backend.events import Event, normalize_color
from backend.recurrence import (
    NO_RECURRENCE,
    RECURRENCE_TYPES,
    CustomRecurrence,
    DailyRecurrence,
    MonthlyRecurrence,
    WeeklyRecurrence,
)
from backend.time_utils import WEEKDAY_NAMES, minutes_since_midnight, parse_day_value

_WEEKDAY_LOOKUP = {}
for _name in WEEKDAY_NAMES:
    _WEEKDAY_LOOKUP[_name.lower()] = _name
    _WEEKDAY_LOOKUP[_name[:3].lower()] = _name


def parse_bool(value, default=False):
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in ["1", "true", "yes", "on"]


def parse_days_of_week(raw):
    """Normalize weekday names ("monday", "Mon", ...) to canonical names.

    Unknown tokens are dropped; order of first appearance is kept.
    """
    if raw is None:
        return ()
    if isinstance(raw, (list, tuple)):
        values = raw
    else:
        values = str(raw).split(",")
    days = []
    for val in values:
        name = _WEEKDAY_LOOKUP.get(str(val).strip().lower())
        if name and name not in days:
            days.append(name)
    return tuple(days)


def _parse_time(value):
    if value is None or (isinstance(value, str) and not value.strip()):
        return None
    try:
        minutes = minutes_since_midnight(value)
    except InvalidTimeFormat:
        return None
    return f"{minutes // 60:02d}:{minutes % 60:02d}"


def _parse_interval(value):
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _parse_recurrence(raw):
    if not raw:
        return NO_RECURRENCE
    if not isinstance(raw, dict):
        raise ValidationError("Unknown recurrence type", field='recurrence')
    rec_type = raw.get('type') or 'none'
    if rec_type not in RECURRENCE_TYPES:
        raise ValidationError("Unknown recurrence type", field='recurrence.type')
    if rec_type == 'none':
        return NO_RECURRENCE

    days = ()
    interval = None
    if rec_type == 'weekly':
        days = parse_days_of_week(raw.get('days'))
        if not days:
            raise ValidationError(
                "Please select at least one day for weekly recurrence", field='recurrence.days'
            )
    if rec_type == 'custom':
        interval = _parse_interval(raw.get('interval'))
        if interval is None or interval < 1:
            raise ValidationError(
                "Custom recurrence interval must be at least 1", field='recurrence.interval'
            )

    end_date = None
    if raw.get('endDate'):
        end_date = parse_day_value(raw.get('endDate'))
        if end_date is None:
            raise ValidationError("Invalid recurrence end date", field='recurrence.endDate')

    if rec_type == 'daily':
        return DailyRecurrence(end_date=end_date)
    if rec_type == 'weekly':
        return WeeklyRecurrence(days=days, end_date=end_date)
    if rec_type == 'monthly':
        return MonthlyRecurrence(end_date=end_date)
    return CustomRecurrence(interval=interval, end_date=end_date)


def validate_event_payload(data, event_id=''):
    """Turn a submitted event form into an Event.

    Rules run in a fixed order and the first failure raises ValidationError,
    so the same bad input always yields the same message.
    """
    data = data or {}
    title = data.get('title')
    title = title.strip() if isinstance(title, str) else ''
    if not title:
        raise ValidationError("Event title is required", field='title')

    day = parse_day_value(data.get('date'))
    if day is None:
        raise ValidationError("Event date is required", field='date')

    start_time = _parse_time(data.get('startTime'))
    if start_time is None:
        raise ValidationError("Start time is required", field='startTime')
    end_time = _parse_time(data.get('endTime'))
    if end_time is None:
        raise ValidationError("End time is required", field='endTime')
    if minutes_since_midnight(start_time) >= minutes_since_midnight(end_time):
        raise ValidationError("End time must be after start time", field='endTime')

    recurrence = _parse_recurrence(data.get('recurrence'))

    description = data.get('description')
    description = description.strip() if isinstance(description, str) else ''
    return Event(
        id=str(event_id or ''),
        title=title,
        date=day,
        start_time=start_time,
        end_time=end_time,
        description=description or None,
        color=normalize_color(data.get('color')),
        recurrence=recurrence,
    )
