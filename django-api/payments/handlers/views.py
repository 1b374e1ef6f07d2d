"""HTTP handlers (views) for checkout and provider webhooks."""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.errors import ValidationError
from core.handlers import require_user_id
from orders.handlers.serializers import OrderSerializer
from payments.services import build_payment_service

SIGNATURE_HEADER = "Stripe-Signature"


class CheckoutView(APIView):
    """Handler for POST /api/orders/{order_id}/checkout"""

    def post(self, request: Request, order_id: str) -> Response:
        user_id = require_user_id(request)
        order, intent = build_payment_service().start_checkout(order_id, user_id)
        return Response(
            {
                "order": OrderSerializer(order).data,
                "payment_reference": intent.reference,
                "client_secret": intent.client_secret,
            },
            status=status.HTTP_201_CREATED,
        )


class PaymentWebhookView(APIView):
    """Handler for POST /api/payments/webhook

    Reads the raw body; the signature covers the exact bytes sent.
    """

    def post(self, request: Request) -> Response:
        signature = request.headers.get(SIGNATURE_HEADER)
        if not signature:
            raise ValidationError(message="Missing signature")
        order = build_payment_service().handle_webhook(request.body, signature)
        if order is None:
            return Response({"received": True})
        return Response({"received": True, "order_id": str(order.id), "status": order.status.value})
