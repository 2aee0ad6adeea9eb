import os
from datetime import datetime

import pytz
from dotenv import load_dotenv
from flask import Flask, jsonify

load_dotenv()

from backend.event_store import DEFAULT_STORAGE_KEY, EventStore
from backend.storage import SqlStorage
from models import db, StoredValue
from services.validation_service import parse_bool

app = Flask(__name__)
app.config['SQLALCHEMY_DATABASE_URI'] = os.environ.get('CALENDAR_DATABASE_URI', 'sqlite:///calendar.db')
app.config['SQLALCHEMY_TRACK_MODIFICATIONS'] = False
app.config['SECRET_KEY'] = os.environ.get('SECRET_KEY', 'dev-secret-key-change-in-production')
app.config['DEFAULT_TIMEZONE'] = os.environ.get('DEFAULT_TIMEZONE', 'America/New_York')
app.config['CALENDAR_STORAGE_KEY'] = os.environ.get('CALENDAR_STORAGE_KEY', DEFAULT_STORAGE_KEY)
app.config['CALENDAR_SEED_DEFAULTS'] = parse_bool(os.environ.get('CALENDAR_SEED_DEFAULTS'), default=True)
app.config['CALENDAR_MAX_RANGE_DAYS'] = 62  # a month grid plus leading/trailing weeks
app.logger.setLevel(os.environ.get('LOG_LEVEL', 'INFO').upper())

db.init_app(app)


def _now_local():
    tz = pytz.timezone(app.config.get('DEFAULT_TIMEZONE', 'America/New_York'))
    return datetime.now(tz).replace(tzinfo=None)


def _today_local():
    return _now_local().date()


def build_event_store(backend=None, seed_defaults=None):
    """Create the event store over ``backend`` (the SQL key-value table by default)."""
    if backend is None:
        backend = SqlStorage(db, StoredValue)
    if seed_defaults is None:
        seed_defaults = app.config['CALENDAR_SEED_DEFAULTS']
    return EventStore(
        backend,
        key=app.config['CALENDAR_STORAGE_KEY'],
        seed_defaults=seed_defaults,
        logger=app.logger,
        today=_today_local,
        tz=pytz.timezone(app.config['DEFAULT_TIMEZONE']),
    )


app.extensions['event_store'] = build_event_store()

with app.app_context():
    db.create_all()


@app.route('/api/health')
def health():
    return jsonify({'status': 'ok', 'today': _today_local().isoformat()})


from services import calendar_extra_routes, calendar_routes  # noqa: E402

app.add_url_rule('/api/calendar/events', view_func=calendar_routes.calendar_events,
                 methods=['GET', 'POST'])
app.add_url_rule('/api/calendar/events/<event_id>', view_func=calendar_routes.calendar_event_detail,
                 methods=['GET', 'PUT', 'DELETE'])
app.add_url_rule('/api/calendar/events/<event_id>/move', view_func=calendar_routes.move_calendar_event,
                 methods=['POST'])
app.add_url_rule('/api/calendar/draft', view_func=calendar_routes.calendar_draft, methods=['GET'])
app.add_url_rule('/api/calendar/conflicts', view_func=calendar_extra_routes.check_conflicts,
                 methods=['POST'])
app.add_url_rule('/api/calendar/recurring', view_func=calendar_extra_routes.list_recurring_events,
                 methods=['GET'])

if __name__ == '__main__':
    app.run(host='0.0.0.0', debug=True)
