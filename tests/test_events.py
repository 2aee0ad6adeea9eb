from datetime import date

import pytest
import pytz

from backend.events import (
    DEFAULT_COLOR,
    Event,
    default_events,
    event_from_dict,
    event_to_dict,
    mint_event_id,
    new_event_draft,
    normalize_color,
)
from backend.recurrence import NO_RECURRENCE, WeeklyRecurrence


def test_event_to_dict_uses_stored_key_names():
    ev = Event(
        id='x1',
        title='Review',
        date=date(2024, 6, 3),
        start_time='13:00',
        end_time='14:00',
        color='purple',
        recurrence=WeeklyRecurrence(days=('Monday',)),
    )
    assert event_to_dict(ev) == {
        'id': 'x1',
        'title': 'Review',
        'date': '2024-06-03',
        'startTime': '13:00',
        'endTime': '14:00',
        'description': None,
        'color': 'purple',
        'recurrence': {'type': 'weekly', 'days': ['Monday']},
    }


def test_event_from_dict_reads_browser_timestamps_and_defaults():
    ev = event_from_dict({'id': 7, 'title': 'Lunch', 'date': '2024-06-03T00:00:00.000Z', 'color': 'orange'})
    assert ev.id == '7'
    assert ev.date == date(2024, 6, 3)
    assert (ev.start_time, ev.end_time) == ('09:00', '10:00')
    assert ev.color == DEFAULT_COLOR
    assert ev.recurrence is NO_RECURRENCE


@pytest.mark.parametrize("data", [
    {'title': 'No id', 'date': '2024-06-03'},
    {'id': '1', 'title': 'Bad date', 'date': 'tomorrow'},
    {'id': '1', 'title': 'Bad time', 'date': '2024-06-03', 'startTime': '9am'},
    ['not', 'an', 'object'],
])
def test_event_from_dict_rejects_malformed_records(data):
    with pytest.raises(ValueError):
        event_from_dict(data)


def test_with_changes_returns_a_new_value():
    ev = Event(id='1', title='A', date=date(2024, 6, 3))
    moved = ev.with_changes(date=date(2024, 6, 4))
    assert moved is not ev
    assert ev.date == date(2024, 6, 3)
    assert moved == Event(id='1', title='A', date=date(2024, 6, 4))


def test_normalize_color():
    assert normalize_color('Green ') == 'green'
    assert normalize_color('orange') == DEFAULT_COLOR
    assert normalize_color(None) == DEFAULT_COLOR


def test_minted_ids_are_unique():
    assert len({mint_event_id() for _ in range(50)}) == 50


def test_new_event_draft():
    draft = new_event_draft(date(2024, 6, 5))
    assert draft['date'] == '2024-06-05'
    assert draft['startTime'] == '09:00'
    assert draft['endTime'] == '10:00'
    assert draft['recurrence'] == {'type': 'none'}


def test_default_events():
    today = date(2024, 6, 1)
    meeting, dentist = default_events(today)
    assert meeting.title == 'Team Meeting'
    assert meeting.date == today
    assert meeting.recurrence == WeeklyRecurrence(days=('Monday',))
    assert dentist.date == date(2024, 6, 3)
    assert (dentist.start_time, dentist.end_time) == ('14:00', '15:00')


def test_event_from_dict_reads_timestamps_in_the_given_zone():
    berlin = pytz.timezone('Europe/Berlin')
    ev = event_from_dict({
        'id': '1',
        'title': 'Team Meeting',
        'date': '2024-06-02T22:00:00.000Z',
        'recurrence': {'type': 'daily', 'endDate': '2024-06-30T22:00:00.000Z'},
    }, berlin)
    assert ev.date == date(2024, 6, 3)
    assert ev.recurrence.end_date == date(2024, 7, 1)
