"""One-shot event reminders: scheduling, delivery with retries, and startup recovery."""

from .delivery import DeliveryEngine, DeliveryError, DeliveryOutcome, RetryPolicy
from .models import Event, InvalidEventError
from .recovery import RecoveryError, recover
from .scheduler import ReminderScheduler
from .service import ReminderService, build_service
from .store import EventStore, JsonEventStore, StoreError
from .timers import TimerRegistry

__all__ = [
    'DeliveryEngine',
    'DeliveryError',
    'DeliveryOutcome',
    'RetryPolicy',
    'Event',
    'InvalidEventError',
    'RecoveryError',
    'recover',
    'ReminderScheduler',
    'ReminderService',
    'build_service',
    'EventStore',
    'JsonEventStore',
    'StoreError',
    'TimerRegistry',
]
