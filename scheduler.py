# scheduler.py

import logging
from datetime import timezone

from apscheduler.schedulers.blocking import BlockingScheduler
from reminders import build_service

logging.basicConfig(level=logging.INFO, format='%(asctime)s %(levelname)s %(name)s: %(message)s')

# Runs only the reminder engine, without the HTTP API
service = build_service(scheduler=BlockingScheduler(timezone=timezone.utc))
service.on_startup()

print("📅 APScheduler started. Waiting for due reminders.")
service.registry.start()
