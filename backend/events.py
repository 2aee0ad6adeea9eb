"""Event value type and its persisted JSON shape."""
import uuid
from dataclasses import dataclass, field, replace
from datetime import date, timedelta
from typing import Optional

from backend.recurrence import NO_RECURRENCE, WeeklyRecurrence, rule_from_dict, rule_to_dict
from backend.time_utils import minutes_since_midnight, parse_day_value

ALLOWED_COLORS = ('blue', 'green', 'red', 'purple', 'yellow')
DEFAULT_COLOR = 'blue'
DEFAULT_START_TIME = '09:00'
DEFAULT_END_TIME = '10:00'


@dataclass(frozen=True)
class Event:
    """A scheduled item anchored on ``date``.

    Treated as an immutable value: edits and moves build a new Event with
    ``with_changes`` and the store replaces the old one by id.
    """
    id: str
    title: str
    date: date
    start_time: str = DEFAULT_START_TIME
    end_time: str = DEFAULT_END_TIME
    description: Optional[str] = None
    color: str = DEFAULT_COLOR
    recurrence: object = field(default=NO_RECURRENCE)

    def with_changes(self, **changes):
        return replace(self, **changes)


def normalize_color(value):
    color = (value or '').strip().lower() if isinstance(value, str) else ''
    return color if color in ALLOWED_COLORS else DEFAULT_COLOR


def mint_event_id():
    return uuid.uuid4().hex


def event_to_dict(event):
    return {
        'id': event.id,
        'title': event.title,
        'date': event.date.isoformat(),
        'startTime': event.start_time,
        'endTime': event.end_time,
        'description': event.description,
        'color': event.color,
        'recurrence': rule_to_dict(event.recurrence),
    }


def event_from_dict(data, tz=None):
    """Rebuild an Event from its persisted shape; raises ValueError on bad data."""
    if not isinstance(data, dict):
        raise ValueError(f"Event must be an object, got {type(data).__name__}")
    event_id = data.get('id')
    if event_id is None or str(event_id) == '':
        raise ValueError("Event is missing an id")
    day = parse_day_value(data.get('date'), tz)
    if day is None:
        raise ValueError(f"Event {event_id} has an invalid date {data.get('date')!r}")
    start_time = data.get('startTime') or DEFAULT_START_TIME
    end_time = data.get('endTime') or DEFAULT_END_TIME
    # Raises InvalidTimeFormat (a ValueError) for malformed stored times.
    minutes_since_midnight(start_time)
    minutes_since_midnight(end_time)
    return Event(
        id=str(event_id),
        title=str(data.get('title') or ''),
        date=day,
        start_time=start_time,
        end_time=end_time,
        description=data.get('description') or None,
        color=normalize_color(data.get('color')),
        recurrence=rule_from_dict(data.get('recurrence'), tz),
    )


def new_event_draft(day):
    """Blank form values offered when a day cell is selected."""
    return {
        'id': '',
        'title': '',
        'date': day.isoformat(),
        'startTime': DEFAULT_START_TIME,
        'endTime': DEFAULT_END_TIME,
        'description': '',
        'color': DEFAULT_COLOR,
        'recurrence': {'type': 'none'},
    }


def default_events(today):
    """Starter events shown when nothing usable has been saved yet."""
    return (
        Event(
            id='1',
            title='Team Meeting',
            date=today,
            start_time='10:00',
            end_time='11:30',
            description='Weekly team sync',
            color='green',
            recurrence=WeeklyRecurrence(days=('Monday',)),
        ),
        Event(
            id='2',
            title='Dentist Appointment',
            date=today + timedelta(days=2),
            start_time='14:00',
            end_time='15:00',
            description='Regular checkup',
            color='blue',
        ),
    )
