"""In-memory timers keyed by event id, backed by APScheduler date jobs."""

import logging
import threading
from collections import namedtuple
from datetime import timezone

from apscheduler.jobstores.base import JobLookupError
from apscheduler.schedulers.background import BackgroundScheduler
from apscheduler.triggers.date import DateTrigger

logger = logging.getLogger(__name__)

JOB_PREFIX = 'reminder_'

PendingTimer = namedtuple('PendingTimer', ['fire_at', 'action', 'args'])


def job_id_for(event_id):
    return f'{JOB_PREFIX}{event_id}'


class TimerRegistry:
    """At most one pending action per event id.

    The registry is volatile: nothing survives a restart, Recovery rebuilds it
    from the event store.
    """

    def __init__(self, scheduler=None):
        self.scheduler = scheduler if scheduler is not None else BackgroundScheduler(timezone=timezone.utc)
        self._lock = threading.RLock()

    def start(self, paused=False):
        self.scheduler.start(paused=paused)

    def shutdown(self, wait=True):
        if self.scheduler.running:
            self.scheduler.shutdown(wait=wait)

    def register(self, event_id, fire_at, action, *args):
        """Run ``action(*args)`` at or after ``fire_at``, replacing any pending timer for the id.

        A ``fire_at`` in the past is due immediately.
        """
        with self._lock:
            # A stopped scheduler queues jobs without honouring replace_existing
            try:
                self.scheduler.remove_job(job_id_for(event_id))
            except JobLookupError:
                pass
            job = self.scheduler.add_job(
                action,
                trigger=DateTrigger(run_date=fire_at, timezone=timezone.utc),
                args=list(args),
                id=job_id_for(event_id),
                name=f'reminder for event {event_id}',
                replace_existing=True,
                misfire_grace_time=None,
                coalesce=True,
            )
        logger.debug('Timer for event %s set at %s', event_id, fire_at.isoformat())
        return job

    def cancel(self, event_id):
        with self._lock:
            try:
                self.scheduler.remove_job(job_id_for(event_id))
            except JobLookupError:
                return False
        logger.debug('Timer for event %s cancelled', event_id)
        return True

    def pending(self, event_id):
        """The timer waiting for ``event_id`` as a PendingTimer, or None."""
        with self._lock:
            job = self.scheduler.get_job(job_id_for(event_id))
        if job is None:
            return None
        # Jobs added before the scheduler starts have no next_run_time yet
        fire_at = getattr(job, 'next_run_time', None) or job.trigger.run_date
        return PendingTimer(fire_at, job.func, tuple(job.args))

    def pop(self, event_id):
        """Cancel the pending timer for ``event_id`` and return it, or None if nothing was pending."""
        with self._lock:
            timer = self.pending(event_id)
            if timer is not None:
                self.cancel(event_id)
        return timer

    def fire_time(self, event_id):
        timer = self.pending(event_id)
        return timer.fire_at if timer is not None else None

    def pending_ids(self):
        with self._lock:
            jobs = self.scheduler.get_jobs()
        return [int(job.id[len(JOB_PREFIX):]) for job in jobs if job.id.startswith(JOB_PREFIX)]

    def __contains__(self, event_id):
        with self._lock:
            return self.scheduler.get_job(job_id_for(event_id)) is not None

    def __len__(self):
        return len(self.pending_ids())
