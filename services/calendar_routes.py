"""Calendar route handlers: grid queries, save, delete and drag-move."""
from flask import current_app, jsonify, request

from backend.conflicts import conflict_message, find_conflict
from backend.errors import NotFound, ValidationError
from backend.events import event_to_dict, new_event_draft
from backend.recurrence import events_by_day, events_for_day, month_bounds
from backend.relocation import relocate
from backend.time_utils import parse_day_value
from services.validation_service import parse_bool, validate_event_payload


def _store():
    return current_app.extensions['event_store']


def _conflict_payload(conflict, action):
    return {
        'conflict_warning': True,
        'message': conflict_message(conflict, action),
        'conflict_event_id': conflict.id,
        'conflict_event_title': conflict.title
    }


def _serialize_by_day(by_day):
    return {day_key: [event_to_dict(ev) for ev in evs] for day_key, evs in by_day.items()}


def calendar_events():
    store = _store()

    # Range fetch for the month grid (start & end inclusive)
    if request.method == 'GET' and (request.args.get('start') or request.args.get('end')):
        start_raw = request.args.get('start')
        end_raw = request.args.get('end')
        start_day = parse_day_value(start_raw) if start_raw else store.today().replace(day=1)
        if not start_day:
            return jsonify({'error': 'Invalid start date'}), 400
        if end_raw:
            end_day = parse_day_value(end_raw)
            if not end_day:
                return jsonify({'error': 'Invalid end date'}), 400
        else:
            _, end_day = month_bounds(start_day.year, start_day.month)
        if end_day < start_day:
            return jsonify({'error': 'end must be on/after start'}), 400
        max_days = current_app.config.get('CALENDAR_MAX_RANGE_DAYS', 62)
        if (end_day - start_day).days + 1 > max_days:
            return jsonify({'error': f'Range is limited to {max_days} days'}), 400

        by_day = events_by_day(store.list(), start_day, end_day)
        return jsonify({
            'start': start_day.isoformat(),
            'end': end_day.isoformat(),
            'events': _serialize_by_day(by_day)
        })

    if request.method == 'GET' and request.args.get('day'):
        day_obj = parse_day_value(request.args.get('day'))
        if not day_obj:
            return jsonify({'error': 'Invalid day'}), 400
        return jsonify([event_to_dict(ev) for ev in events_for_day(store.list(), day_obj)])

    if request.method == 'GET':
        # Default view is the current month
        today = store.today()
        start_day, end_day = month_bounds(today.year, today.month)
        by_day = events_by_day(store.list(), start_day, end_day)
        return jsonify({
            'start': start_day.isoformat(),
            'end': end_day.isoformat(),
            'events': _serialize_by_day(by_day)
        })

    data = request.get_json(silent=True) or {}
    try:
        candidate = validate_event_payload(data)
    except ValidationError as exc:
        return jsonify(exc.to_dict()), 400

    force_overlap = parse_bool(data.get('force_overlap'))
    conflict = find_conflict(candidate, store.list())
    if conflict and not force_overlap:
        return jsonify(_conflict_payload(conflict, 'add')), 409
    if conflict:
        current_app.logger.info("Saving event over conflict with %s", conflict.id)

    new_event = store.create(candidate)
    current_app.logger.info("Created event %s on %s", new_event.id, new_event.date.isoformat())
    return jsonify(event_to_dict(new_event)), 201


def calendar_event_detail(event_id):
    store = _store()
    try:
        event = store.get(event_id)
    except NotFound as exc:
        return jsonify({'error': exc.message}), 404

    if request.method == 'GET':
        return jsonify(event_to_dict(event))

    if request.method == 'DELETE':
        store.delete(event.id)
        current_app.logger.info("Deleted event %s", event.id)
        return '', 204

    data = request.get_json(silent=True) or {}
    try:
        updated = validate_event_payload(data, event_id=event.id)
    except ValidationError as exc:
        return jsonify(exc.to_dict()), 400

    force_overlap = parse_bool(data.get('force_overlap'))
    conflict = find_conflict(updated, store.list(), exclude_id=event.id)
    if conflict and not force_overlap:
        return jsonify(_conflict_payload(conflict, 'update')), 409
    if conflict:
        current_app.logger.info("Updating event %s over conflict with %s", event.id, conflict.id)

    store.update(updated)
    current_app.logger.info("Updated event %s", event.id)
    return jsonify(event_to_dict(updated))


def move_calendar_event(event_id):
    """Drop handler: move an event (and its whole recurrence pattern) to a new day."""
    store = _store()
    try:
        event = store.get(event_id)
    except NotFound as exc:
        return jsonify({'error': exc.message}), 404

    data = request.get_json(silent=True) or {}
    new_day = parse_day_value(data.get('day'))
    if not new_day:
        return jsonify({'error': 'Invalid day'}), 400

    relocation = relocate(event, new_day, store.list())
    force_overlap = parse_bool(data.get('force_overlap'))
    if relocation.conflict and not force_overlap:
        payload = _conflict_payload(relocation.conflicting_event, 'move')
        payload['proposed_event'] = event_to_dict(relocation.updated_event)
        return jsonify(payload), 409
    if relocation.conflict:
        current_app.logger.info(
            "Moving event %s over conflict with %s", event.id, relocation.conflicting_event.id
        )

    store.update(relocation.updated_event)
    current_app.logger.info(
        "Moved event %s from %s to %s",
        event.id,
        event.date.isoformat(),
        relocation.updated_event.date.isoformat()
    )
    return jsonify(event_to_dict(relocation.updated_event))


def calendar_draft():
    """Blank form values for a newly selected day."""
    day_raw = request.args.get('day')
    day_obj = parse_day_value(day_raw) if day_raw else _store().today()
    if not day_obj:
        return jsonify({'error': 'Invalid day'}), 400
    return jsonify(new_event_draft(day_obj))
