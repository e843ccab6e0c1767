from django.urls import path
from events import views

urlpatterns = [
    path('events', views.events_collection, name='events'),
    path('events/<int:event_id>', views.event_detail, name='event_detail'),
]
