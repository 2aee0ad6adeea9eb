"""Supporting calendar endpoints: conflict preview and recurring templates."""
from flask import current_app, jsonify, request

from backend.conflicts import conflict_message, find_conflict
from backend.errors import ValidationError
from backend.events import event_to_dict
from backend.recurrence import describe_rule, is_recurring
from services.validation_service import validate_event_payload


def check_conflicts():
    """Dry-run the form save path: validate and report any conflict, saving nothing."""
    store = current_app.extensions['event_store']
    data = request.get_json(silent=True) or {}
    exclude_id = data.get('id') or None
    try:
        candidate = validate_event_payload(data, event_id=exclude_id or '')
    except ValidationError as exc:
        return jsonify(exc.to_dict()), 400

    conflict = find_conflict(candidate, store.list(), exclude_id=exclude_id)
    if not conflict:
        return jsonify({'conflict': False})
    return jsonify({
        'conflict': True,
        'message': conflict_message(conflict, 'save'),
        'conflict_event_id': conflict.id,
        'conflict_event_title': conflict.title
    })


def list_recurring_events():
    """List every recurring event with its rule, ordered by title."""
    store = current_app.extensions['event_store']
    rules = sorted((ev for ev in store.list() if is_recurring(ev.recurrence)), key=lambda ev: ev.title.lower())
    result = []
    for ev in rules:
        data = event_to_dict(ev)
        data['summary'] = describe_rule(ev.recurrence, ev.date)
        result.append(data)
    return jsonify(result)
