from datetime import date

from backend.conflicts import conflict_message, find_conflict, has_conflict
from backend.events import Event
from backend.recurrence import WeeklyRecurrence

DAY = date(2024, 6, 5)


def _event(event_id, start, end, day=DAY, title='Dentist'):
    return Event(id=event_id, title=title, date=day, start_time=start, end_time=end)


def test_overlapping_ranges_conflict_in_both_directions():
    a = _event('a', '09:00', '10:00')
    b = _event('b', '09:30', '10:30')
    assert has_conflict(a, [b])
    assert has_conflict(b, [a])


def test_touching_boundaries_do_not_conflict():
    a = _event('a', '09:00', '10:00')
    b = _event('b', '10:00', '11:00')
    assert not has_conflict(a, [b])
    assert not has_conflict(b, [a])


def test_shifting_start_to_the_end_clears_the_conflict():
    existing = _event('b', '14:00', '15:00')
    candidate = _event('', '14:30', '15:30')
    assert has_conflict(candidate, [existing])
    assert not has_conflict(candidate.with_changes(start_time='15:00'), [existing])


def test_other_days_and_recurring_occurrences_are_ignored():
    # A weekly event anchored a week earlier occurs on DAY but is not checked.
    recurring = Event(
        id='r',
        title='Sync',
        date=date(2024, 5, 29),
        start_time='09:00',
        end_time='10:00',
        recurrence=WeeklyRecurrence(days=('Wednesday',)),
    )
    candidate = _event('', '09:00', '10:00')
    assert not has_conflict(candidate, [recurring, _event('x', '09:00', '10:00', day=date(2024, 6, 6))])


def test_excluded_id_is_skipped():
    own = _event('a', '09:00', '10:00')
    assert not has_conflict(own, [own], exclude_id='a')
    assert has_conflict(own, [own])


def test_first_conflict_wins():
    first = _event('1', '09:00', '09:45', title='First')
    second = _event('2', '09:15', '10:00', title='Second')
    candidate = _event('', '09:30', '09:40')
    assert find_conflict(candidate, [first, second]) is first


def test_inputs_are_not_mutated():
    existing = [_event('b', '14:00', '15:00')]
    snapshot = list(existing)
    find_conflict(_event('', '14:30', '15:30'), existing)
    assert existing == snapshot


def test_conflict_message_names_the_event():
    conflict = _event('b', '14:00', '15:00', title='Dentist')
    assert conflict_message(conflict) == '"Dentist" is scheduled during this time. Save event anyway?'
    assert conflict_message(conflict, 'move').endswith('Move event anyway?')
