"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from events.handlers.serializers import AvailabilityQuerySerializer, AvailabilitySerializer
from events.services import EventService
from events.stores import DjangoEventStore


class EventAvailabilityView(APIView):
    """Handler for GET /api/events/{event_id}/availability"""

    def get(self, request: Request, event_id: str) -> Response:
        query = AvailabilityQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        service = EventService(DjangoEventStore())
        availability = service.check_capacity(event_id, query.validated_data["seats"])
        return Response(AvailabilitySerializer(availability).data)
