"""Ordered event collection persisted through an injected key-value backend."""
import json
from datetime import date

from backend.errors import NotFound
from backend.events import default_events, event_from_dict, event_to_dict, mint_event_id

DEFAULT_STORAGE_KEY = 'calendarEvents'


class EventStore:
    """Owns the canonical event list.

    The list is an immutable tuple replaced wholesale on every mutation and
    written through to ``backend`` as one JSON array. Subscribers get the new
    tuple after each change so the grid can re-render.

    The backend value is read again on every access and only re-parsed when
    it changed, so writes made by another process (a second worker, or the
    transfer script) are picked up before the next mutation builds on them.
    """

    def __init__(self, backend, key=DEFAULT_STORAGE_KEY, seed_defaults=True, logger=None, today=None,
                 id_factory=None, tz=None):
        self.backend = backend
        self.key = key
        self.seed_defaults = seed_defaults
        self.logger = logger
        self.tz = tz
        self._today = today or date.today
        self._id_factory = id_factory or mint_event_id
        self._events = None
        self._raw = None
        self._listeners = []

    # --- Loading ---

    def _fallback(self):
        return default_events(self._today()) if self.seed_defaults else ()

    def _parse(self, raw):
        if raw is None:
            return self._fallback()
        try:
            data = json.loads(raw)
            if not isinstance(data, list):
                raise ValueError(f"expected a JSON array, got {type(data).__name__}")
            return tuple(event_from_dict(item, self.tz) for item in data)
        except (TypeError, ValueError) as exc:
            if self.logger:
                self.logger.warning("Failed to load saved events from %r: %s", self.key, exc)
            return self._fallback()

    def _current(self):
        raw = self.backend.get(self.key)
        if self._events is None or raw != self._raw:
            self._events = self._parse(raw)
            self._raw = raw
        return self._events

    def reload(self):
        self._events = None
        return self.list()

    # --- Queries ---

    def today(self):
        return self._today()

    def list(self):
        return self._current()

    def get(self, event_id):
        for ev in self._current():
            if ev.id == event_id:
                return ev
        raise NotFound(event_id)

    def __contains__(self, event_id):
        return any(ev.id == event_id for ev in self._current())

    def __len__(self):
        return len(self._current())

    # --- Mutations ---

    def _commit(self, events):
        events = tuple(events)
        raw = json.dumps([event_to_dict(ev) for ev in events])
        self.backend.set(self.key, raw)
        self._events = events
        self._raw = raw
        for listener in list(self._listeners):
            listener(events)
        return events

    def create(self, event):
        if not event.id:
            event = event.with_changes(id=self._id_factory())
        elif event.id in self:
            raise ValueError(f"Event id {event.id} already exists")
        self._commit(self._current() + (event,))
        return event

    def update(self, event):
        current = self._current()
        if not any(ev.id == event.id for ev in current):
            raise NotFound(event.id)
        self._commit(event if ev.id == event.id else ev for ev in current)
        return event

    def delete(self, event_id):
        """Remove an event; returns False (and changes nothing) when absent."""
        current = self._current()
        if not any(ev.id == event_id for ev in current):
            return False
        self._commit(ev for ev in current if ev.id != event_id)
        return True

    def replace_all(self, events):
        return self._commit(events)

    # --- Change notification ---

    def subscribe(self, listener):
        self._listeners.append(listener)

        def unsubscribe():
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
