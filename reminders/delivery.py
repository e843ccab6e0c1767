"""Delivery attempts and the retry policy.

Each retry is its own timer in the registry, so a failing send never blocks
the process and the attempt number travels with the timer.
"""

import enum
import logging
from dataclasses import dataclass
from datetime import timedelta

from .emailer import SendResult, build_email, build_subject, build_text
from .scheduler import utcnow
from .store import StoreError

logger = logging.getLogger(__name__)


class DeliveryError(Exception):
    """A send succeeded but the event could not be marked as reminded."""


class DeliveryOutcome(enum.Enum):
    SENT = 'sent'
    RETRY_SCHEDULED = 'retry_scheduled'
    ABANDONED = 'abandoned'
    SKIPPED = 'skipped'


@dataclass(frozen=True)
class RetryPolicy:
    interval: timedelta = timedelta(seconds=60)
    max_attempts: int = 10

    @classmethod
    def from_settings(cls, settings):
        return cls(interval=timedelta(seconds=settings.RETRY_INTERVAL_SECONDS),
                   max_attempts=settings.MAX_ATTEMPTS)


class DeliveryEngine:

    def __init__(self, store, sender, registry, recipient, policy=None, clock=utcnow, tz_name='UTC'):
        self.store = store
        self.sender = sender
        self.registry = registry
        self.recipient = recipient
        self.policy = policy or RetryPolicy()
        self.clock = clock
        self.tz_name = tz_name

    def attempt(self, event_id, attempt=1):
        try:
            event = self.store.get_event(event_id)
        except StoreError as e:
            logger.error('❌ Attempt %d/%d for event %s could not load it: %s',
                         attempt, self.policy.max_attempts, event_id, e)
            return self._retry_or_abandon(event_id, f'event {event_id}', attempt)

        if event is None:
            logger.info('Event %s was deleted, skipping reminder', event_id)
            return DeliveryOutcome.SKIPPED
        if event.reminded:
            logger.info('Event %s already reminded, skipping', event_id)
            return DeliveryOutcome.SKIPPED

        result = self._send(event)
        if result.ok:
            try:
                found = self.store.mark_reminded(event.id)
            except StoreError as e:
                raise DeliveryError(
                    f'Reminder for "{event.title}" was sent but could not be marked as reminded: {e}'
                ) from e
            if not found:
                logger.info('Event %s was deleted while its reminder was in flight', event.id)
            logger.info('✅ Reminder sent for "%s"', event.title)
            return DeliveryOutcome.SENT

        logger.error('❌ Attempt %d/%d failed for "%s": %s',
                     attempt, self.policy.max_attempts, event.title, result.reason)
        return self._retry_or_abandon(event.id, f'"{event.title}"', attempt)

    def _send(self, event):
        try:
            return self.sender.send(self.recipient, build_subject(event), build_email(event, self.tz_name),
                                    text_body=build_text(event, self.tz_name))
        except Exception as e:
            # Senders are supposed to report failures, but one that raises is still just a failed attempt
            logger.exception('Sender raised while delivering event %s', event.id)
            return SendResult.failure(str(e) or e.__class__.__name__)

    def _retry_or_abandon(self, event_id, label, attempt):
        if attempt < self.policy.max_attempts:
            retry_at = self.clock() + self.policy.interval
            logger.info('🔁 Retrying %s in %ds...', label, self.policy.interval.total_seconds())
            self.registry.register(event_id, retry_at, self.attempt, event_id, attempt + 1)
            return DeliveryOutcome.RETRY_SCHEDULED

        logger.error('🚫 Gave up sending reminder for %s after %d attempts', label, self.policy.max_attempts)
        return DeliveryOutcome.ABANDONED
