import os
from datetime import date

import pytest

os.environ.setdefault('CALENDAR_DATABASE_URI', 'sqlite://')
os.environ.setdefault('CALENDAR_SEED_DEFAULTS', '0')

from app import app as flask_app  # noqa: E402
from backend.event_store import EventStore  # noqa: E402
from backend.storage import MemoryStorage  # noqa: E402

TODAY = date(2024, 6, 1)


@pytest.fixture
def store():
    return EventStore(MemoryStorage(), seed_defaults=False, today=lambda: TODAY)


@pytest.fixture
def app(store):
    previous = flask_app.extensions['event_store']
    flask_app.config['TESTING'] = True
    flask_app.extensions['event_store'] = store
    yield flask_app
    flask_app.extensions['event_store'] = previous


@pytest.fixture
def client(app):
    return app.test_client()
