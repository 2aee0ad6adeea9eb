from dataclasses import dataclass
from datetime import timedelta
from typing import Optional

from backend.conflicts import find_conflict
from backend.events import Event
from backend.time_utils import day_delta


@dataclass(frozen=True)
class Relocation:
    updated_event: Event
    conflict: bool
    conflicting_event: Optional[Event] = None


def relocate(event, new_day, existing_events):
    """Shift ``event`` so its anchor lands on ``new_day``.

    The recurrence rule is carried over untouched, so moving a recurring
    event moves its whole pattern. The move is only proposed here; the
    caller decides whether to commit it, typically after confirming a
    conflict with the user.
    """
    delta = day_delta(event.date, new_day)
    updated = event.with_changes(date=event.date + timedelta(days=delta))
    clash = find_conflict(updated, existing_events, exclude_id=event.id)
    return Relocation(updated_event=updated, conflict=clash is not None, conflicting_event=clash)
