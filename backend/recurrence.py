"""Recurrence rules and the occurrence matcher used by the month grid.

A rule is one of a small set of immutable variants, each carrying only the
fields that matter for its type. Rules are always evaluated against the
owning event's anchor ``date``.
"""
import calendar
from dataclasses import dataclass
from datetime import date, timedelta
from typing import ClassVar, Optional, Tuple

from backend.time_utils import day_delta, parse_day_value, same_calendar_day, weekday_name

RECURRENCE_TYPES = ('none', 'daily', 'weekly', 'monthly', 'custom')


@dataclass(frozen=True)
class NoRecurrence:
    type: ClassVar[str] = 'none'


@dataclass(frozen=True)
class DailyRecurrence:
    end_date: Optional[date] = None
    type: ClassVar[str] = 'daily'


@dataclass(frozen=True)
class WeeklyRecurrence:
    days: Tuple[str, ...] = ()
    end_date: Optional[date] = None
    type: ClassVar[str] = 'weekly'


@dataclass(frozen=True)
class MonthlyRecurrence:
    end_date: Optional[date] = None
    type: ClassVar[str] = 'monthly'


@dataclass(frozen=True)
class CustomRecurrence:
    """Every ``interval`` weeks, counted in whole weeks from the anchor."""
    interval: Optional[int] = 1
    end_date: Optional[date] = None
    type: ClassVar[str] = 'custom'


@dataclass(frozen=True)
class UnrecognizedRecurrence:
    """A stored rule whose type this version does not know.

    Kept so the raw type survives a load/save cycle; it matches like a
    single occurrence.
    """
    type_name: str = ''
    type: ClassVar[str] = 'unrecognized'


NO_RECURRENCE = NoRecurrence()

_RULE_CLASSES = {
    'none': NoRecurrence,
    'daily': DailyRecurrence,
    'weekly': WeeklyRecurrence,
    'monthly': MonthlyRecurrence,
    'custom': CustomRecurrence,
}


def is_recurring(rule):
    return isinstance(rule, (DailyRecurrence, WeeklyRecurrence, MonthlyRecurrence, CustomRecurrence))


def _past_end(rule, day):
    end_date = getattr(rule, 'end_date', None)
    return end_date is not None and day_delta(end_date, day) > 0


def occurs_on(event, day):
    """Return True when ``event`` is active on calendar ``day``.

    Called once per (event, visible day) pair on every render, so it stays
    constant-time and never mutates anything.
    """
    rule = event.recurrence or NO_RECURRENCE
    anchor = event.date

    if isinstance(rule, NoRecurrence):
        return same_calendar_day(anchor, day)
    if is_recurring(rule) and _past_end(rule, day):
        return False

    if isinstance(rule, DailyRecurrence):
        # No lower bound: days before the anchor match too.
        return True
    if isinstance(rule, WeeklyRecurrence):
        if rule.days:
            return weekday_name(day) in rule.days
        return same_calendar_day(anchor, day)
    if isinstance(rule, MonthlyRecurrence):
        # No clamping, a 31st anchor skips shorter months.
        return day.day == anchor.day
    if isinstance(rule, CustomRecurrence):
        interval = rule.interval
        if not isinstance(interval, int) or interval < 1:
            return False
        weeks = day_delta(anchor, day) // 7
        return weeks % interval == 0
    # Unrecognized types degrade to a single occurrence.
    return same_calendar_day(anchor, day)


def events_for_day(events, day):
    """Events active on ``day``, in store order."""
    return [ev for ev in events if occurs_on(ev, day)]


def events_by_day(events, start_day, end_day):
    """Map each ISO day in the inclusive range to the events active on it."""
    by_day = {}
    current = start_day
    while current <= end_day:
        by_day[current.isoformat()] = events_for_day(events, current)
        current += timedelta(days=1)
    return by_day


def month_bounds(year, month):
    _, last_dom = calendar.monthrange(year, month)
    return date(year, month, 1), date(year, month, last_dom)


def rule_to_dict(rule):
    rule = rule or NO_RECURRENCE
    if isinstance(rule, UnrecognizedRecurrence):
        return {'type': rule.type_name}
    data = {'type': rule.type}
    if isinstance(rule, WeeklyRecurrence):
        data['days'] = list(rule.days)
    if isinstance(rule, CustomRecurrence):
        data['interval'] = rule.interval
    end_date = getattr(rule, 'end_date', None)
    if end_date is not None:
        data['endDate'] = end_date.isoformat()
    return data


def rule_from_dict(raw, tz=None):
    """Build a rule from its stored shape.

    A missing rule is ``none`` and an unknown type becomes
    UnrecognizedRecurrence. A present but unparseable endDate raises
    ValueError.
    """
    if not raw:
        return NO_RECURRENCE
    if not isinstance(raw, dict):
        raise ValueError(f"Recurrence must be an object, got {type(raw).__name__}")
    type_name = raw.get('type') or 'none'
    rule_cls = _RULE_CLASSES.get(type_name) if isinstance(type_name, str) else None
    if rule_cls is None:
        return UnrecognizedRecurrence(type_name=str(type_name))
    if rule_cls is NoRecurrence:
        return NO_RECURRENCE

    end_date = None
    if raw.get('endDate'):
        end_date = parse_day_value(raw.get('endDate'), tz)
        if end_date is None:
            raise ValueError(f"Invalid recurrence endDate {raw.get('endDate')!r}")

    if rule_cls is WeeklyRecurrence:
        days = tuple(str(d) for d in (raw.get('days') or []))
        return WeeklyRecurrence(days=days, end_date=end_date)
    if rule_cls is CustomRecurrence:
        interval = raw.get('interval')
        try:
            interval = int(interval) if interval is not None else None
        except (TypeError, ValueError):
            interval = None
        return CustomRecurrence(interval=interval, end_date=end_date)
    return rule_cls(end_date=end_date)


def describe_rule(rule, anchor):
    """Short human-readable summary, e.g. "Weekly on Monday, Wednesday"."""
    rule = rule or NO_RECURRENCE
    if isinstance(rule, DailyRecurrence):
        text = 'Daily'
    elif isinstance(rule, WeeklyRecurrence):
        days = rule.days or (weekday_name(anchor),)
        text = 'Weekly on ' + ', '.join(days)
    elif isinstance(rule, MonthlyRecurrence):
        text = f'Monthly on day {anchor.day}'
    elif isinstance(rule, CustomRecurrence):
        if rule.interval == 1:
            text = 'Every week'
        else:
            text = f'Every {rule.interval} weeks'
    else:
        return 'Once'
    end_date = getattr(rule, 'end_date', None)
    if end_date is not None:
        text += f' until {end_date.isoformat()}'
    return text
