"""HTTP handlers (views) for bookings - HTTP concerns only."""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from bookings.domain import BookingStatus
from bookings.handlers.serializers import BookingCreateSerializer, BookingSerializer
from bookings.services import build_booking_service
from core.domain.errors import ValidationError
from core.handlers import require_user_id


class BookingListView(APIView):
    """Handler for GET/POST /api/bookings"""

    def get(self, request: Request) -> Response:
        user_id = require_user_id(request)
        raw_status = request.query_params.get("status")
        try:
            status_filter = BookingStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError(message="Invalid booking status") from None
        bookings = build_booking_service().list_user_bookings(user_id, status_filter)
        return Response(BookingSerializer(bookings, many=True).data)

    def post(self, request: Request) -> Response:
        user_id = require_user_id(request)
        serializer = BookingCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        booking = build_booking_service().reserve(
            user_id,
            serializer.validated_data["event_id"],
            serializer.validated_data["seats"],
        )
        return Response(BookingSerializer(booking).data, status=status.HTTP_201_CREATED)


class BookingDetailView(APIView):
    """Handler for GET /api/bookings/{booking_id}"""

    def get(self, request: Request, booking_id: str) -> Response:
        user_id = require_user_id(request)
        booking = build_booking_service().get_booking(booking_id, user_id)
        return Response(BookingSerializer(booking).data)


class BookingCancelView(APIView):
    """Handler for POST /api/bookings/{booking_id}/cancel"""

    def post(self, request: Request, booking_id: str) -> Response:
        user_id = require_user_id(request)
        booking = build_booking_service().cancel(booking_id, user_id)
        return Response(BookingSerializer(booking).data)
