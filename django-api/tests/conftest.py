"""Pytest configuration and shared fixtures."""

from datetime import timedelta
from decimal import Decimal
from uuid import uuid4

import pytest
from django.utils import timezone
from rest_framework.test import APIClient

from access.stores import default_grantors
from bookings.services import BookingService
from bookings.stores import DjangoBookingStore
from catalog.models import Course, DigitalProduct
from catalog.stores import DjangoCatalogLookup
from core.notifications import Notifier
from events.models import Event
from events.stores import DjangoEventStore, DjangoInventoryLedger
from orders.services import OrderService
from orders.stores import DjangoOrderStore


class RecordingNotifier(Notifier):
    """Keeps every notification in memory."""

    def __init__(self):
        self.sent = []

    def notify(self, user_id, event, payload):
        self.sent.append((user_id, event, payload))


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture
def user_id():
    return uuid4()


@pytest.fixture
def other_user_id():
    return uuid4()


@pytest.fixture
def make_event():
    def factory(**overrides):
        defaults = {
            "title": "Breathwork Retreat",
            "slug": f"event-{uuid4().hex[:12]}",
            "price": Decimal("25.00"),
            "starts_at": timezone.now() + timedelta(days=7),
            "total_capacity": 10,
            "is_published": True,
        }
        defaults.update(overrides)
        return Event.objects.create(**defaults)

    return factory


@pytest.fixture
def make_course():
    def factory(**overrides):
        defaults = {
            "title": "Intro to Meditation",
            "slug": f"course-{uuid4().hex[:12]}",
            "price": Decimal("49.99"),
            "is_published": True,
        }
        defaults.update(overrides)
        return Course.objects.create(**defaults)

    return factory


@pytest.fixture
def make_product():
    def factory(**overrides):
        defaults = {
            "title": "Sleep Sounds",
            "slug": f"product-{uuid4().hex[:12]}",
            "price": Decimal("9.99"),
            "product_type": DigitalProduct.ProductType.AUDIO,
            "file_url": "https://cdn.example.com/sleep.mp3",
            "is_published": True,
        }
        defaults.update(overrides)
        return DigitalProduct.objects.create(**defaults)

    return factory


@pytest.fixture
def notifier() -> RecordingNotifier:
    return RecordingNotifier()


@pytest.fixture
def booking_service(notifier) -> BookingService:
    return BookingService(
        DjangoBookingStore(),
        DjangoEventStore(),
        DjangoInventoryLedger(),
        notifier=notifier,
        max_seats=10,
    )


@pytest.fixture
def order_service(booking_service, notifier) -> OrderService:
    return OrderService(
        DjangoOrderStore(),
        DjangoCatalogLookup(),
        booking_service,
        default_grantors(booking_service),
        notifier=notifier,
        tax_rate=Decimal("0.08"),
        currency="usd",
    )
