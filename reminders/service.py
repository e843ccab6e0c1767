import logging

from .config import get_settings
from .delivery import DeliveryEngine, RetryPolicy
from .emailer import SmtpSender
from .models import validate_event_fields
from .recovery import recover
from .scheduler import ReminderScheduler, utcnow
from .store import JsonEventStore, StoreError
from .timers import TimerRegistry

logger = logging.getLogger(__name__)


class ReminderService:
    """What the request surface calls into."""

    def __init__(self, store, registry, scheduler, settings):
        self.store = store
        self.registry = registry
        self.scheduler = scheduler
        self.settings = settings

    def on_startup(self):
        return recover(self.store, self.scheduler)

    def on_event_created(self, event):
        return self.scheduler.reschedule(event)

    def on_event_deleted(self, event_id):
        return self.scheduler.cancel(event_id)

    def start(self, paused=False):
        """Run Recovery, then start the timers. Raises RecoveryError if the store is unreadable."""
        count = self.on_startup()
        self.registry.start(paused=paused)
        return count

    def shutdown(self, wait=True):
        self.registry.shutdown(wait=wait)

    def list_events(self):
        return self.store.list_all()

    def create_event(self, data):
        fields = validate_event_fields(
            data,
            default_tz=self.settings.TIMEZONE,
            default_reminder_hours=self.settings.DEFAULT_REMINDER_HOURS,
            default_color=self.settings.DEFAULT_COLOR,
        )
        # Store first: a failed write must leave no timer behind
        event = self.store.create_event(**fields)
        self.on_event_created(event)
        return event

    def delete_event(self, event_id):
        event = self.store.get_event(event_id)
        if event is None:
            return False

        timer = self.registry.pop(event_id)
        try:
            deleted = self.store.delete_event(event_id)
        except StoreError:
            # The row is still there, so its timer goes back unchanged, retry count included
            if timer is not None:
                self.registry.register(event_id, timer.fire_at, timer.action, *timer.args)
            raise
        if deleted:
            logger.info('🗑️ Deleted event "%s"', event.title)
        return deleted


def build_service(settings=None, scheduler=None, sender=None, clock=utcnow):
    """Wire the JSON store, SMTP sender and APScheduler-backed timers from settings."""
    settings = settings or get_settings()
    store = JsonEventStore(
        settings.EVENTS_FILE,
        default_reminder_hours=settings.DEFAULT_REMINDER_HOURS,
        default_color=settings.DEFAULT_COLOR,
    )
    registry = TimerRegistry(scheduler)
    delivery = DeliveryEngine(
        store=store,
        sender=sender or SmtpSender.from_settings(settings),
        registry=registry,
        recipient=settings.TO_EMAIL,
        policy=RetryPolicy.from_settings(settings),
        clock=clock,
        tz_name=settings.TIMEZONE,
    )
    return ReminderService(
        store=store,
        registry=registry,
        scheduler=ReminderScheduler(registry, delivery, clock=clock),
        settings=settings,
    )
