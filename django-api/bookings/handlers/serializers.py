"""Serializers for booking requests and responses."""

from rest_framework import serializers


class BookingCreateSerializer(serializers.Serializer):
    event_id = serializers.UUIDField()
    seats = serializers.IntegerField(min_value=1, default=1)


class BookingSerializer(serializers.Serializer):
    """Serializer for the Booking domain model."""

    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    event_id = serializers.UUIDField()
    order_id = serializers.UUIDField(allow_null=True)
    seats = serializers.IntegerField()
    unit_price = serializers.DecimalField(
        source="unit_price.amount", max_digits=10, decimal_places=2
    )
    total_price = serializers.DecimalField(
        source="total_price.amount", max_digits=10, decimal_places=2
    )
    status = serializers.CharField(source="status.value")
    created_at = serializers.DateTimeField()
    status_changed_at = serializers.DateTimeField()
