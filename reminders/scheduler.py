import logging
from datetime import datetime, timedelta, timezone

logger = logging.getLogger(__name__)


def utcnow():
    return datetime.now(timezone.utc)


class ReminderScheduler:
    """Turns events into timers that hand off to the delivery engine."""

    def __init__(self, registry, delivery, clock=utcnow):
        self.registry = registry
        self.delivery = delivery
        self.clock = clock

    def schedule(self, event):
        """Register the first delivery attempt for ``event`` and return its fire time.

        Reminders whose window already opened fire right away; nothing past due is dropped.
        """
        if event.reminded:
            logger.debug('Event %s already reminded, not scheduling', event.id)
            return None

        now = self.clock()
        delay = max(timedelta(0), event.send_at - now)
        fire_at = now + delay

        if delay == timedelta(0):
            logger.info('⚡ Reminder for "%s" is overdue, sending now', event.title)
        else:
            mins = round(delay.total_seconds() / 60)
            logger.info('⏰ Reminder for "%s" fires in %d minute(s)', event.title, mins)

        self.registry.register(event.id, fire_at, self.delivery.attempt, event.id, 1)
        return fire_at

    def reschedule(self, event):
        self.cancel(event.id)
        return self.schedule(event)

    def cancel(self, event_id):
        return self.registry.cancel(event_id)
