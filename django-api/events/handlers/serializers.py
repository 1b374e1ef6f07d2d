"""Serializers for transforming domain models to API responses."""

from rest_framework import serializers


class AvailabilitySerializer(serializers.Serializer):
    """Serializer for the Availability domain model."""

    event_id = serializers.UUIDField()
    total_capacity = serializers.IntegerField()
    remaining_capacity = serializers.IntegerField()
    requested_seats = serializers.IntegerField()
    is_bookable = serializers.BooleanField()
    available = serializers.BooleanField()


class AvailabilityQuerySerializer(serializers.Serializer):
    seats = serializers.IntegerField(min_value=1, default=1)
