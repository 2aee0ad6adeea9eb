"""Error types raised by the calendar core and its input boundary."""


class CalendarError(Exception):
    """Base class for calendar errors that carry a user-facing message."""

    def __init__(self, message):
        super().__init__(message)
        self.message = message


class ValidationError(CalendarError):
    """A submitted event failed one of the form rules.

    Only the first failing rule is reported so messages stay deterministic.
    """

    def __init__(self, message, field=None):
        super().__init__(message)
        self.field = field

    def to_dict(self):
        payload = {'error': self.message}
        if self.field:
            payload['field'] = self.field
        return payload


class InvalidTimeFormat(CalendarError, ValueError):
    """A clock time was not a valid 24-hour HH:MM string."""

    def __init__(self, value):
        super().__init__(f"Invalid time {value!r}; expected HH:MM")
        self.value = value


class NotFound(CalendarError, LookupError):
    """An event id is not present in the store."""

    def __init__(self, event_id):
        super().__init__(f"Event {event_id} not found")
        self.event_id = event_id
