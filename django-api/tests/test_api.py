"""HTTP contract tests: status codes, error bodies and caller identity.

Run with: pytest tests/test_api.py -v
"""

import json
from unittest.mock import patch
from uuid import uuid4

import pytest
from rest_framework.test import APIClient

from orders.models import Order as OrderRow
from payments.gateways import ChargeIntent


@pytest.fixture
def client_for(user_id):
    def factory(uid=None) -> APIClient:
        client = APIClient()
        client.credentials(HTTP_X_USER_ID=str(uid or user_id))
        return client

    return factory


@pytest.fixture
def client(client_for) -> APIClient:
    return client_for()


INTERNAL_TOKEN = "internal-test-token"


@pytest.fixture
def operator(settings, user_id) -> APIClient:
    """A client for internal services, carrying the shared token."""
    settings.COMMERCE = {**settings.COMMERCE, "INTERNAL_TOKEN": INTERNAL_TOKEN}
    client = APIClient()
    client.credentials(HTTP_X_USER_ID=str(user_id), HTTP_X_INTERNAL_TOKEN=INTERNAL_TOKEN)
    return client


@pytest.mark.django_db
class TestIdentity:
    """Tests for the X-User-ID header."""

    def test_missing_user_header_rejected(self, api_client, make_event):
        response = api_client.post(
            "/api/bookings", {"event_id": str(make_event().id)}, format="json"
        )
        assert response.status_code == 403

    def test_malformed_user_header(self):
        client = APIClient()
        client.credentials(HTTP_X_USER_ID="not-a-uuid")
        response = client.get("/api/bookings")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"


@pytest.mark.django_db
class TestEventAvailability:
    """Tests for GET /api/events/{id}/availability"""

    def test_availability(self, api_client, make_event):
        event = make_event(total_capacity=4)
        response = api_client.get(f"/api/events/{event.id}/availability?seats=2")
        assert response.status_code == 200
        body = response.json()
        assert body["remaining_capacity"] == 4
        assert body["available"] is True

    def test_unknown_event(self, api_client):
        response = api_client.get(f"/api/events/{uuid4()}/availability")
        assert response.status_code == 404
        assert response.json() == {
            "error": {"code": "EVENT_NOT_FOUND", "message": "Event not found"}
        }

    def test_invalid_event_id(self, api_client):
        response = api_client.get("/api/events/abc/availability")
        assert response.status_code == 400
        assert response.json()["error"]["code"] == "INVALID_ID"


@pytest.mark.django_db
class TestBookingEndpoints:
    """Tests for /api/bookings"""

    def test_create_booking(self, client, make_event, user_id):
        event = make_event()
        response = client.post(
            "/api/bookings", {"event_id": str(event.id), "seats": 2}, format="json"
        )
        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["user_id"] == str(user_id)
        assert body["total_price"] == "50.00"

    def test_duplicate_booking_conflict(self, client, make_event):
        event = make_event()
        client.post("/api/bookings", {"event_id": str(event.id)}, format="json")
        response = client.post("/api/bookings", {"event_id": str(event.id)}, format="json")
        assert response.status_code == 409
        assert response.json()["error"]["code"] == "DUPLICATE_BOOKING"

    def test_capacity_conflict(self, client, make_event):
        event = make_event(total_capacity=1)
        response = client.post(
            "/api/bookings", {"event_id": str(event.id), "seats": 2}, format="json"
        )
        assert response.status_code == 409
        assert response.json()["error"] == {
            "code": "CAPACITY_EXCEEDED",
            "message": "Insufficient capacity. Only 1 spot(s) available",
        }

    def test_cancel_booking(self, client, make_event):
        event = make_event()
        booking = client.post(
            "/api/bookings", {"event_id": str(event.id)}, format="json"
        ).json()
        response = client.post(f"/api/bookings/{booking['id']}/cancel")
        assert response.status_code == 200
        assert response.json()["status"] == "cancelled"

    def test_other_users_booking_not_visible(self, client, client_for, make_event):
        event = make_event()
        booking = client.post(
            "/api/bookings", {"event_id": str(event.id)}, format="json"
        ).json()
        response = client_for(uuid4()).get(f"/api/bookings/{booking['id']}")
        assert response.status_code == 404

    def test_invalid_status_filter(self, client):
        response = client.get("/api/bookings?status=lost")
        assert response.status_code == 400


@pytest.mark.django_db
class TestOrderEndpoints:
    """Tests for /api/orders"""

    def test_create_order(self, client, make_course, make_event):
        payload = {
            "lines": [
                {"item_type": "course", "item_id": str(make_course().id), "price": "0.01"},
                {"item_type": "event", "item_id": str(make_event().id), "quantity": 2},
            ]
        }
        response = client.post("/api/orders", payload, format="json")

        assert response.status_code == 201
        body = response.json()
        assert body["status"] == "pending"
        assert body["subtotal"] == "99.99"
        assert body["tax"] == "8.00"
        assert body["total"] == "107.99"
        assert len(body["lines"]) == 2

    def test_invalid_lines_listed(self, client, make_course):
        payload = {
            "lines": [
                {"item_type": "course", "item_id": str(make_course(is_published=False).id)},
                {"item_type": "digital_product", "item_id": str(uuid4())},
            ]
        }
        response = client.post("/api/orders", payload, format="json")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert [line["message"] for line in error["errors"]] == [
            "Course is not available",
            "Item not found",
        ]
        assert not OrderRow.objects.exists()

    def test_empty_cart_rejected(self, client):
        response = client.post("/api/orders", {"lines": []}, format="json")
        assert response.status_code == 400

    def test_order_detail_includes_history(self, client, make_course):
        order = client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()

        response = client.get(f"/api/orders/{order['id']}")

        assert response.status_code == 200
        assert response.json()["history"][0]["from_status"] is None
        assert response.json()["history"][0]["to_status"] == "pending"

    def test_invalid_transition_conflict(self, client, operator, make_course):
        order = client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()

        response = operator.post(f"/api/orders/{order['id']}/refund", {}, format="json")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "INVALID_STATE_TRANSITION"

    def test_cancel_other_users_order(self, client, client_for, make_course):
        order = client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()
        response = client_for(uuid4()).post(f"/api/orders/{order['id']}/cancel")
        assert response.status_code == 404

    def test_payment_reference_conflict(self, client, operator, make_course):
        order = client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()
        url = f"/api/orders/{order['id']}/payment-reference"
        operator.post(url, {"reference": "pi_1"}, format="json")

        response = operator.post(url, {"reference": "pi_2"}, format="json")

        assert response.status_code == 409
        assert response.json()["error"]["code"] == "PAYMENT_REFERENCE_EXISTS"

    def test_same_course_in_two_open_orders_rejected(self, client, make_course):
        lines = {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]}
        assert client.post("/api/orders", lines, format="json").status_code == 201

        response = client.post("/api/orders", lines, format="json")

        assert response.status_code == 400
        error = response.json()["error"]
        assert error["errors"][0]["message"] == "Item is already in another open order"
        assert OrderRow.objects.count() == 1


@pytest.mark.django_db
class TestOperatorEndpoints:
    """Payment, fulfillment, refund and reporting endpoints need the internal token."""

    @pytest.fixture
    def order(self, client, make_course):
        return client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()

    @pytest.mark.parametrize(
        "action,payload",
        [
            ("payment-reference", {"reference": "pi_forged"}),
            ("mark-paid", {}),
            ("fulfill", {}),
            ("refund", {}),
        ],
    )
    def test_rejected_without_token(self, client, settings, order, action, payload):
        settings.COMMERCE = {**settings.COMMERCE, "INTERNAL_TOKEN": INTERNAL_TOKEN}

        response = client.post(f"/api/orders/{order['id']}/{action}", payload, format="json")

        assert response.status_code == 403
        row = OrderRow.objects.get(pk=order["id"])
        assert row.status == "pending"
        assert row.payment_reference is None

    @pytest.mark.parametrize("action", ["payment-reference", "mark-paid", "fulfill", "refund"])
    def test_rejected_with_wrong_token(self, settings, user_id, order, action):
        settings.COMMERCE = {**settings.COMMERCE, "INTERNAL_TOKEN": INTERNAL_TOKEN}
        caller = APIClient()
        caller.credentials(HTTP_X_USER_ID=str(user_id), HTTP_X_INTERNAL_TOKEN="guess")

        response = caller.post(
            f"/api/orders/{order['id']}/{action}", {"reference": "pi_forged"}, format="json"
        )

        assert response.status_code == 403
        assert OrderRow.objects.get(pk=order["id"]).status == "pending"

    def test_rejected_when_no_token_configured(self, client, settings, order):
        """An empty configured token must not match an empty header."""
        settings.COMMERCE = {**settings.COMMERCE, "INTERNAL_TOKEN": ""}
        caller = APIClient()
        caller.credentials(HTTP_X_INTERNAL_TOKEN="")

        response = caller.post(f"/api/orders/{order['id']}/mark-paid")

        assert response.status_code == 403

    def test_payment_flow_with_token(self, operator, order):
        base = f"/api/orders/{order['id']}"

        attached = operator.post(f"{base}/payment-reference", {"reference": "pi_ops_1"})
        assert attached.status_code == 200
        assert attached.json()["status"] == "payment_pending"
        assert operator.post(f"{base}/mark-paid").json()["status"] == "paid"

        response = operator.post(f"{base}/fulfill")

        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    def test_stats_requires_token(self, client, settings):
        settings.COMMERCE = {**settings.COMMERCE, "INTERNAL_TOKEN": INTERNAL_TOKEN}
        assert client.get("/api/orders/stats").status_code == 403

    def test_stats(self, operator, order):
        base = f"/api/orders/{order['id']}"
        operator.post(f"{base}/payment-reference", {"reference": "pi_ops_2"})
        operator.post(f"{base}/mark-paid")
        operator.post(f"{base}/fulfill")

        response = operator.get("/api/orders/stats")

        assert response.status_code == 200
        body = response.json()
        assert body["total_revenue"] == "53.99"
        assert body["order_count"] == 1
        assert body["average_order_value"] == "53.99"
        assert body["orders_by_status"] == {"completed": 1}
        assert body["top_items"][0]["item_type"] == "course"
        assert body["top_items"][0]["revenue"] == "49.99"

    def test_stats_rejects_reversed_range(self, operator):
        response = operator.get(
            "/api/orders/stats",
            {"start": "2026-02-01T00:00:00Z", "end": "2026-01-01T00:00:00Z"},
        )
        assert response.status_code == 400


class StubGateway:
    def create_charge_intent(self, amount, currency, metadata):
        return ChargeIntent(reference="pi_api_1", client_secret="pi_api_1_secret")

    def parse_event(self, payload, signature):
        raise AssertionError("not used")


@pytest.mark.django_db
class TestPaymentEndpoints:
    """Tests for checkout and the Stripe webhook."""

    def test_checkout_and_webhook(self, client, api_client, make_course):
        order = client.post(
            "/api/orders",
            {"lines": [{"item_type": "course", "item_id": str(make_course().id)}]},
            format="json",
        ).json()

        with patch(
            "payments.services.payment_service.get_payment_gateway",
            return_value=StubGateway(),
        ):
            checkout = client.post(f"/api/orders/{order['id']}/checkout")
        assert checkout.status_code == 201
        assert checkout.json()["client_secret"] == "pi_api_1_secret"
        assert checkout.json()["order"]["status"] == "payment_pending"

        event = {"type": "payment_intent.succeeded", "data": {"object": {"id": "pi_api_1"}}}
        with patch("stripe.Webhook.construct_event", return_value=event):
            response = api_client.post(
                "/api/payments/webhook",
                data=json.dumps(event),
                content_type="application/json",
                HTTP_STRIPE_SIGNATURE="t=1,v1=abc",
            )

        assert response.status_code == 200
        assert response.json()["status"] == "completed"

    def test_webhook_without_signature(self, api_client):
        response = api_client.post(
            "/api/payments/webhook", data="{}", content_type="application/json"
        )
        assert response.status_code == 400


@pytest.mark.django_db
class TestRequestValidation:
    def test_malformed_body_uses_error_envelope(self, client):
        response = client.post("/api/bookings", {"seats": 0}, format="json")
        assert response.status_code == 400
        error = response.json()["error"]
        assert error["code"] == "VALIDATION_ERROR"
        assert set(error["fields"]) == {"event_id", "seats"}
