from backend.time_utils import minutes_since_midnight, same_calendar_day


def _time_range(event):
    return minutes_since_midnight(event.start_time), minutes_since_midnight(event.end_time)


def find_conflict(candidate, existing_events, exclude_id=None):
    """Return the first existing event whose time range overlaps ``candidate``.

    Only events anchored on the candidate's own date are compared; recurring
    occurrences are not expanded. Ranges are half-open, so an event ending at
    10:00 does not clash with one starting at 10:00.
    """
    cand_start, cand_end = _time_range(candidate)
    for ev in existing_events:
        if exclude_id is not None and ev.id == exclude_id:
            continue
        if not same_calendar_day(ev.date, candidate.date):
            continue
        ev_start, ev_end = _time_range(ev)
        if cand_start < ev_end and cand_end > ev_start:
            return ev
    return None


def has_conflict(candidate, existing_events, exclude_id=None):
    return find_conflict(candidate, existing_events, exclude_id=exclude_id) is not None


def conflict_message(conflict, action='save'):
    return f'"{conflict.title}" is scheduled during this time. {action.capitalize()} event anyway?'
