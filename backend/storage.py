"""Key-value backends for the event store.

Both expose ``get(key) -> str | None`` and ``set(key, value)``; the store
never touches anything else.
"""


class MemoryStorage:
    def __init__(self, initial=None):
        self._values = dict(initial or {})

    def get(self, key):
        return self._values.get(key)

    def set(self, key, value):
        self._values[key] = value


class SqlStorage:
    """Stores values in the ``stored_value`` table through Flask-SQLAlchemy.

    Needs an application context; each ``set`` commits on its own.
    """

    def __init__(self, db, model):
        self.db = db
        self.model = model

    def get(self, key):
        # Refresh from the database so commits from other processes are seen.
        row = self.db.session.get(self.model, key, populate_existing=True)
        return row.value if row else None

    def set(self, key, value):
        row = self.db.session.get(self.model, key)
        if row is None:
            row = self.model(key=key, value=value)
            self.db.session.add(row)
        else:
            row.value = value
        self.db.session.commit()
