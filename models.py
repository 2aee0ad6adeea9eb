from datetime import datetime

import pytz
from flask_sqlalchemy import SQLAlchemy

db = SQLAlchemy()


def _utcnow():
    return datetime.now(pytz.UTC).replace(tzinfo=None)


class StoredValue(db.Model):
    """
    Key-value row backing the event store. The whole event collection lives
    under a single key as a JSON array, replaced on every save.
    """
    key = db.Column(db.String(100), primary_key=True)
    value = db.Column(db.Text, nullable=True)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)

    def to_dict(self):
        return {
            'key': self.key,
            'size': len(self.value or ''),
            'created_at': self.created_at.isoformat() if self.created_at else None,
            'updated_at': self.updated_at.isoformat() if self.updated_at else None,
        }
