import json
from datetime import date

import pytest
import pytz

from backend.event_store import EventStore
from backend.events import Event, event_to_dict
from backend.storage import MemoryStorage
from scripts import transfer_events
from scripts.transfer_events import export_events, load_events_file, merge_events


def _event(event_id, title='Lunch'):
    return Event(id=event_id, title=title, date=date(2024, 6, 3))


def test_merge_events_adds_only_new_ids():
    existing = (_event('a'), _event('b'))
    incoming = [_event('b', title='Changed'), _event('c'), _event('c')]
    events, count = merge_events(existing, incoming)
    assert [ev.id for ev in events] == ['a', 'b', 'c']
    assert events[1].title == 'Lunch'
    assert count == 1


def test_merge_events_replace():
    events, count = merge_events((_event('a'),), [_event('z')], replace=True)
    assert [ev.id for ev in events] == ['z']
    assert count == 1


def test_load_events_file_reads_browser_export(tmp_path):
    path = tmp_path / 'events.json'
    path.write_text(json.dumps([
        {'id': '1', 'title': 'Team Meeting', 'date': '2024-06-03T00:00:00.000Z',
         'startTime': '10:00', 'endTime': '11:30', 'recurrence': {'type': 'weekly', 'days': ['Monday']}},
    ]), encoding='utf-8')
    events = load_events_file(path)
    assert events[0].date == date(2024, 6, 3)
    assert events[0].recurrence.days == ('Monday',)


@pytest.mark.parametrize("content", ['{"id": "1"}', '[{"title": "no id"}]', 'nope'])
def test_load_events_file_rejects_bad_input(tmp_path, content):
    path = tmp_path / 'events.json'
    path.write_text(content, encoding='utf-8')
    with pytest.raises(SystemExit):
        load_events_file(path)


def test_export_events(tmp_path):
    store = EventStore(MemoryStorage(), seed_defaults=False)
    store.create(_event('a'))
    output = tmp_path / 'out' / 'events.json'
    assert export_events(store, output) == 1
    assert json.loads(output.read_text(encoding='utf-8')) == [event_to_dict(_event('a'))]


def test_load_events_file_uses_the_local_day_east_of_utc(tmp_path):
    path = tmp_path / 'events.json'
    path.write_text(json.dumps([
        {'id': '1', 'title': 'Dentist', 'date': '2024-06-02T22:00:00.000Z',
         'startTime': '14:00', 'endTime': '15:00'},
    ]), encoding='utf-8')
    events = load_events_file(path, pytz.timezone('Europe/Berlin'))
    assert events[0].date == date(2024, 6, 3)


def test_export_and_import_resolve_relative_paths_the_same_way(app, store, tmp_path, monkeypatch):
    monkeypatch.setattr(transfer_events, 'BASE_DIR', tmp_path)
    store.create(_event('a'))

    assert transfer_events.main(['export', '--output', 'backup/events.json']) == 0
    assert (tmp_path / 'backup' / 'events.json').exists()

    store.replace_all(())
    assert transfer_events.main(['import', 'backup/events.json']) == 0
    assert [ev.id for ev in store.list()] == ['a']
