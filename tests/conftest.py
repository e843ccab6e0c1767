from datetime import datetime, timedelta, timezone

import pytest
from apscheduler.schedulers.background import BackgroundScheduler

from reminders.config import ChronoSettings
from reminders.emailer import SendResult
from reminders.service import build_service

NOW = datetime(2026, 3, 2, 9, 0, tzinfo=timezone.utc)


class FakeClock:

    def __init__(self, now=NOW):
        self.now = now

    def __call__(self):
        return self.now

    def advance(self, **kwargs):
        self.now += timedelta(**kwargs)


class RecordingSender:
    """Records every send; returns scripted results, then ``default``."""

    def __init__(self, clock, outcomes=(), default=None):
        self.clock = clock
        self.outcomes = list(outcomes)
        self.default = default or SendResult.success()
        self.calls = []

    def send(self, recipient, subject, html_body, text_body=None):
        self.calls.append({'recipient': recipient, 'subject': subject, 'html': html_body, 'text': text_body,
                           'at': self.clock()})
        if self.outcomes:
            return self.outcomes.pop(0)
        return self.default


def run_due(registry, now):
    """Run every timer due at ``now``, including ones registered while running."""
    fired = 0
    while True:
        due = [job for job in registry.scheduler.get_jobs() if job.next_run_time <= now]
        if not due:
            return fired
        job = min(due, key=lambda j: j.next_run_time)
        # Date jobs are removed once they fire
        registry.scheduler.remove_job(job.id)
        job.func(*job.args, **job.kwargs)
        fired += 1


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def settings(tmp_path):
    return ChronoSettings(
        _env_file=None,
        EVENTS_FILE=str(tmp_path / 'events.json'),
        FROM_EMAIL='chrono@example.com',
        TO_EMAIL='me@example.com',
    )


@pytest.fixture
def sender(clock):
    return RecordingSender(clock)


@pytest.fixture
def service(settings, sender, clock):
    svc = build_service(settings, scheduler=BackgroundScheduler(timezone=timezone.utc), sender=sender, clock=clock)
    # Paused: timers only fire through run_due
    svc.registry.start(paused=True)
    yield svc
    svc.shutdown(wait=False)


@pytest.fixture
def advance(clock, service):
    def _advance(**kwargs):
        clock.advance(**kwargs)
        return run_due(service.registry, clock.now)
    return _advance
