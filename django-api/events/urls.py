from django.urls import path

from events.handlers import EventAvailabilityView

urlpatterns = [
    path(
        "events/<str:event_id>/availability",
        EventAvailabilityView.as_view(),
        name="event-availability",
    ),
]
