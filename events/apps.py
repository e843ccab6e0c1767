import atexit
import logging

from django.apps import AppConfig

from reminders import build_service

logger = logging.getLogger(__name__)


class EventsConfig(AppConfig):
    name = 'events'
    service = None

    def get_service(self):
        if self.service is None:
            self.service = build_service()
        return self.service

    def start_service(self):
        """Recover pending reminders and start the timer thread.

        A RecoveryError propagates so the server never comes up with an empty schedule.
        """
        service = self.get_service()
        count = service.start()
        atexit.register(service.shutdown, wait=False)
        logger.info('🟢 Chrono reminders running, %d pending', count)
        return service
