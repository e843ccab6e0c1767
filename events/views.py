import json
import logging

from django.apps import apps
from django.http import JsonResponse

from reminders import InvalidEventError, StoreError

logger = logging.getLogger(__name__)


def _service():
    return apps.get_app_config('events').get_service()


def events_collection(request):
    if request.method == 'GET':
        try:
            events = _service().list_events()
        except StoreError as e:
            logger.error('Listing events failed: %s', e)
            return JsonResponse({'error': str(e)}, status=500)
        return JsonResponse([ev.to_dict() for ev in events], safe=False)

    elif request.method == 'POST':
        try:
            data = json.loads(request.body)
        except ValueError:
            return JsonResponse({'error': 'Invalid JSON'}, status=400)

        try:
            event = _service().create_event(data)
        except InvalidEventError as e:
            return JsonResponse({'error': str(e)}, status=400)
        except StoreError as e:
            logger.error('Creating event failed: %s', e)
            return JsonResponse({'error': str(e)}, status=500)

        return JsonResponse(event.to_dict())

    else:
        return JsonResponse({'error': 'Invalid request'}, status=405)


def event_detail(request, event_id):
    if request.method == 'DELETE':
        try:
            deleted = _service().delete_event(event_id)
        except StoreError as e:
            logger.error('Deleting event %s failed: %s', event_id, e)
            return JsonResponse({'error': str(e)}, status=500)

        if not deleted:
            return JsonResponse({'error': 'Event not found'}, status=404)
        return JsonResponse({'ok': True})
    else:
        return JsonResponse({'error': 'Invalid request'}, status=405)
