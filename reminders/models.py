"""Event record and request validation."""

import math
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from numbers import Real
from zoneinfo import ZoneInfo

DEFAULT_REMINDER_HOURS = 24
DEFAULT_COLOR = '#c17f3e'


class InvalidEventError(ValueError):
    pass


@dataclass(frozen=True)
class Event:
    id: int
    title: str
    occurs_at: datetime
    reminder_hours: float = DEFAULT_REMINDER_HOURS
    notes: str = ''
    color: str = DEFAULT_COLOR
    reminded: bool = False

    @property
    def send_at(self):
        """The instant the reminder should go out: ``reminder_hours`` before the event."""
        return self.occurs_at - timedelta(hours=self.reminder_hours)

    def mark_reminded(self):
        return replace(self, reminded=True)

    def to_dict(self):
        return {
            'id': self.id,
            'title': self.title,
            'datetime': self.occurs_at.isoformat().replace('+00:00', 'Z'),
            'reminderHours': self.reminder_hours,
            'notes': self.notes,
            'color': self.color,
            'reminded': self.reminded,
        }

    @classmethod
    def from_dict(cls, data):
        occurs_at = parse_datetime(data['datetime'])
        reminder_hours = clean_reminder_hours(data.get('reminderHours'))
        check_send_at(occurs_at, reminder_hours)
        return cls(
            id=int(data['id']),
            title=data['title'],
            occurs_at=occurs_at,
            reminder_hours=reminder_hours,
            notes=data.get('notes') or '',
            color=data.get('color') or DEFAULT_COLOR,
            reminded=bool(data.get('reminded', False)),
        )


def parse_datetime(value, default_tz='UTC'):
    """Parse an ISO-8601 timestamp into an aware UTC datetime.

    A trailing ``Z`` means UTC. Naive values are taken to be in ``default_tz``.
    """
    if isinstance(value, datetime):
        parsed = value
    elif isinstance(value, str) and value.strip():
        try:
            parsed = datetime.fromisoformat(value.strip().replace('Z', '+00:00'))
        except ValueError:
            raise InvalidEventError(f'Invalid datetime: {value!r}') from None
    else:
        raise InvalidEventError('datetime is required')

    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=ZoneInfo(default_tz))
    try:
        return parsed.astimezone(timezone.utc)
    except OverflowError:
        raise InvalidEventError(f'datetime out of range: {value!r}') from None


def clean_reminder_hours(value, default=DEFAULT_REMINDER_HOURS):
    if value is None:
        return default
    # bool is a Real subclass; reject it explicitly
    if isinstance(value, bool) or not isinstance(value, Real):
        raise InvalidEventError('reminderHours must be a number')
    if not math.isfinite(value):
        raise InvalidEventError('reminderHours must be finite')
    if value < 0:
        raise InvalidEventError('reminderHours must not be negative')
    return value


def check_send_at(occurs_at, reminder_hours):
    """Raise InvalidEventError unless the reminder instant is a representable datetime."""
    try:
        return occurs_at - timedelta(hours=reminder_hours)
    except (OverflowError, ValueError):
        raise InvalidEventError('reminderHours puts the reminder out of range') from None


def validate_event_fields(data, default_tz='UTC', default_reminder_hours=DEFAULT_REMINDER_HOURS,
                          default_color=DEFAULT_COLOR):
    """Validate a creation request body and return keyword arguments for the store."""
    if not isinstance(data, dict):
        raise InvalidEventError('Request body must be a JSON object')

    title = data.get('title')
    if not isinstance(title, str) or not title.strip():
        raise InvalidEventError('title is required')

    notes = data.get('notes')
    if notes is not None and not isinstance(notes, str):
        raise InvalidEventError('notes must be a string')

    color = data.get('color')
    if color is not None and not isinstance(color, str):
        raise InvalidEventError('color must be a string')

    occurs_at = parse_datetime(data.get('datetime'), default_tz)
    reminder_hours = clean_reminder_hours(data.get('reminderHours'), default_reminder_hours)
    check_send_at(occurs_at, reminder_hours)

    return {
        'title': title.strip(),
        'occurs_at': occurs_at,
        'reminder_hours': reminder_hours,
        'notes': notes or '',
        'color': color or default_color,
    }
