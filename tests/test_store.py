from datetime import datetime, timezone

import pytest

from reminders.store import JsonEventStore, StoreError


def _dt(day, hour=9):
    return datetime(2026, 3, day, hour, 0, tzinfo=timezone.utc)


def test_events_survive_a_new_store_instance(tmp_path):
    path = tmp_path / 'events.json'
    created = JsonEventStore(path).create_event('Dentist', _dt(5), reminder_hours=2, notes='bring card')

    reopened = JsonEventStore(path)
    assert reopened.get_event(created.id) == created
    assert reopened.list_unreminded() == [created]


def test_list_all_is_ordered_by_datetime(tmp_path):
    store = JsonEventStore(tmp_path / 'events.json')
    late = store.create_event('Late', _dt(9))
    early = store.create_event('Early', _dt(3))
    middle = store.create_event('Middle', _dt(5))
    assert [ev.id for ev in store.list_all()] == [early.id, middle.id, late.id]


def test_ids_are_unique_within_one_millisecond(tmp_path, monkeypatch):
    monkeypatch.setattr('reminders.store._now_ms', lambda: 1767225600000)
    store = JsonEventStore(tmp_path / 'events.json')
    ids = [store.create_event(f'e{i}', _dt(4)).id for i in range(3)]
    assert len(set(ids)) == 3
    assert ids == sorted(ids)


def test_store_defaults(tmp_path):
    store = JsonEventStore(tmp_path / 'events.json', default_reminder_hours=6, default_color='#000000')
    ev = store.create_event('Call', _dt(4))
    assert ev.reminder_hours == 6
    assert ev.color == '#000000'
    assert ev.notes == ''
    assert ev.reminded is False


def test_mark_reminded_is_one_way(tmp_path):
    store = JsonEventStore(tmp_path / 'events.json')
    ev = store.create_event('Call', _dt(4))

    assert store.mark_reminded(ev.id) is True
    assert store.mark_reminded(ev.id) is True
    assert store.get_event(ev.id).reminded is True
    assert store.list_unreminded() == []


def test_missing_rows_report_not_found(tmp_path):
    store = JsonEventStore(tmp_path / 'events.json')
    assert store.mark_reminded(123) is False
    assert store.delete_event(123) is False
    assert store.get_event(123) is None


def test_delete_removes_row(tmp_path):
    store = JsonEventStore(tmp_path / 'events.json')
    keep = store.create_event('Keep', _dt(4))
    drop = store.create_event('Drop', _dt(5))

    assert store.delete_event(drop.id) is True
    assert store.list_all() == [keep]


def test_unreadable_file_raises_store_error(tmp_path):
    path = tmp_path / 'events.json'
    path.write_text('{not json')
    with pytest.raises(StoreError):
        JsonEventStore(path).list_unreminded()
