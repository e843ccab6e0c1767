import os

from django.apps import apps
from django.core.wsgi import get_wsgi_application

os.environ.setdefault('DJANGO_SETTINGS_MODULE', 'chrono_app.settings')

application = get_wsgi_application()

# Pending reminders are rebuilt before the first request is served
apps.get_app_config('events').start_service()
