"""Durable event storage.

Events live in a single JSON file, rewritten whole on every change.
"""

import json
import logging
import os
import tempfile
import threading
import time
from abc import ABC, abstractmethod

from .models import DEFAULT_COLOR, DEFAULT_REMINDER_HOURS, Event

logger = logging.getLogger(__name__)


def _now_ms():
    return int(time.time() * 1000)


class StoreError(Exception):
    """The event store could not be read or written."""


class EventStore(ABC):

    @abstractmethod
    def create_event(self, title, occurs_at, reminder_hours=None, notes=None, color=None):
        ...

    @abstractmethod
    def get_event(self, event_id):
        ...

    @abstractmethod
    def list_unreminded(self):
        ...

    @abstractmethod
    def list_all(self):
        ...

    @abstractmethod
    def mark_reminded(self, event_id):
        ...

    @abstractmethod
    def delete_event(self, event_id):
        ...


class JsonEventStore(EventStore):

    def __init__(self, path, default_reminder_hours=DEFAULT_REMINDER_HOURS, default_color=DEFAULT_COLOR):
        self.path = os.fspath(path)
        self.default_reminder_hours = default_reminder_hours
        self.default_color = default_color
        self._lock = threading.Lock()
        self._last_id = 0

    def _load(self):
        if not os.path.exists(self.path):
            return []
        try:
            with open(self.path, 'r') as f:
                rows = json.load(f)
            return [Event.from_dict(row) for row in rows]
        except (OSError, ValueError, KeyError, TypeError) as e:
            raise StoreError(f'Could not read {self.path}: {e}') from e

    def _save(self, events):
        directory = os.path.dirname(os.path.abspath(self.path))
        try:
            os.makedirs(directory, exist_ok=True)
            # Readers only ever see a complete file
            fd, tmp_path = tempfile.mkstemp(dir=directory, prefix='.events-', suffix='.json')
            try:
                with os.fdopen(fd, 'w') as f:
                    json.dump([ev.to_dict() for ev in events], f, indent=2)
                os.replace(tmp_path, self.path)
            except BaseException:
                if os.path.exists(tmp_path):
                    os.remove(tmp_path)
                raise
        except OSError as e:
            raise StoreError(f'Could not write {self.path}: {e}') from e

    def _next_id(self, events):
        candidate = _now_ms()
        highest = max([self._last_id] + [ev.id for ev in events])
        if candidate <= highest:
            candidate = highest + 1
        self._last_id = candidate
        return candidate

    def create_event(self, title, occurs_at, reminder_hours=None, notes=None, color=None):
        with self._lock:
            events = self._load()
            event = Event(
                id=self._next_id(events),
                title=title,
                occurs_at=occurs_at,
                reminder_hours=self.default_reminder_hours if reminder_hours is None else reminder_hours,
                notes=notes or '',
                color=color or self.default_color,
            )
            events.append(event)
            self._save(events)
        logger.debug('Stored event %s (%r)', event.id, event.title)
        return event

    def get_event(self, event_id):
        with self._lock:
            for event in self._load():
                if event.id == event_id:
                    return event
        return None

    def list_unreminded(self):
        with self._lock:
            return [ev for ev in self._load() if not ev.reminded]

    def list_all(self):
        with self._lock:
            return sorted(self._load(), key=lambda ev: ev.occurs_at)

    def mark_reminded(self, event_id):
        with self._lock:
            events = self._load()
            for index, event in enumerate(events):
                if event.id == event_id:
                    if not event.reminded:
                        events[index] = event.mark_reminded()
                        self._save(events)
                    return True
        return False

    def delete_event(self, event_id):
        with self._lock:
            events = self._load()
            remaining = [ev for ev in events if ev.id != event_id]
            if len(remaining) == len(events):
                return False
            self._save(remaining)
        return True
