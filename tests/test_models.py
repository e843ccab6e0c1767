from datetime import datetime, timedelta, timezone

import pytest

from reminders.models import Event, InvalidEventError, parse_datetime, validate_event_fields


def test_parse_datetime_handles_z_suffix():
    assert parse_datetime('2026-03-02T09:00:00Z') == datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


def test_parse_datetime_localizes_naive_values():
    parsed = parse_datetime('2026-07-01T12:00', default_tz='Europe/Berlin')
    assert parsed == datetime(2026, 7, 1, 10, 0, tzinfo=timezone.utc)


@pytest.mark.parametrize('value', ['', 'tomorrow', None, 42])
def test_parse_datetime_rejects_garbage(value):
    with pytest.raises(InvalidEventError):
        parse_datetime(value)


def test_send_at_is_reminder_hours_before_event():
    ev = Event(id=1, title='Dentist', occurs_at=datetime(2026, 3, 4, 9, 0, tzinfo=timezone.utc), reminder_hours=1.5)
    assert ev.send_at == datetime(2026, 3, 4, 7, 30, tzinfo=timezone.utc)


def test_validate_applies_defaults():
    fields = validate_event_fields({'title': '  Standup ', 'datetime': '2026-03-02T11:00:00Z'})
    assert fields['title'] == 'Standup'
    assert fields['reminder_hours'] == 24
    assert fields['notes'] == ''
    assert fields['color'] == '#c17f3e'


def test_validate_keeps_zero_reminder_hours():
    fields = validate_event_fields({'title': 'Launch', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': 0})
    assert fields['reminder_hours'] == 0


@pytest.mark.parametrize('body', [
    {'datetime': '2026-03-02T11:00:00Z'},
    {'title': '   ', 'datetime': '2026-03-02T11:00:00Z'},
    {'title': 'x'},
    {'title': 'x', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': -1},
    {'title': 'x', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': '3'},
    {'title': 'x', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': True},
    {'title': 'x', 'datetime': '2026-03-02T11:00:00Z', 'notes': 5},
    ['not', 'a', 'dict'],
])
def test_validate_rejects_bad_requests(body):
    with pytest.raises(InvalidEventError):
        validate_event_fields(body)


def test_dict_form_uses_api_keys():
    ev = Event(id=7, title='Review', occurs_at=datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc) + timedelta(days=1))
    data = ev.to_dict()
    assert data == {
        'id': 7,
        'title': 'Review',
        'datetime': '2026-03-03T09:00:00Z',
        'reminderHours': 24,
        'notes': '',
        'color': '#c17f3e',
        'reminded': False,
    }
    assert Event.from_dict(data) == ev


@pytest.mark.parametrize('hours', [float('nan'), float('inf'), 20000000])
def test_validate_rejects_reminder_hours_without_a_real_send_time(hours):
    with pytest.raises(InvalidEventError):
        validate_event_fields({'title': 'Far', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': hours})


def test_parse_datetime_rejects_values_outside_the_calendar():
    with pytest.raises(InvalidEventError):
        parse_datetime('0001-01-01T00:30:00+01:00')


@pytest.mark.parametrize('hours', [float('nan'), 20000000, -1])
def test_stored_rows_with_unusable_reminder_hours_do_not_load(hours):
    row = {'id': 1, 'title': 'Far', 'datetime': '2026-03-02T11:00:00Z', 'reminderHours': hours}
    with pytest.raises(InvalidEventError):
        Event.from_dict(row)
