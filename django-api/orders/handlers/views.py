"""HTTP handlers (views) for orders - HTTP concerns only.

Payment confirmation, fulfillment, refund and reporting endpoints are for
internal services only and require the shared internal token.
"""

from rest_framework import status
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from core.domain.errors import ValidationError
from core.handlers import HasInternalToken, require_user_id
from orders.domain import OrderStatus
from orders.handlers.serializers import (
    OrderCreateSerializer,
    OrderSerializer,
    OrderStatsQuerySerializer,
    OrderStatsSerializer,
    OrderStatusChangeSerializer,
    PaymentReferenceSerializer,
    ReasonSerializer,
)
from orders.services import build_order_service


class OrderListView(APIView):
    """Handler for GET/POST /api/orders"""

    def get(self, request: Request) -> Response:
        user_id = require_user_id(request)
        raw_status = request.query_params.get("status")
        try:
            status_filter = OrderStatus(raw_status) if raw_status else None
        except ValueError:
            raise ValidationError(message="Invalid order status") from None
        orders = build_order_service().list_user_orders(user_id, status_filter)
        return Response(OrderSerializer(orders, many=True).data)

    def post(self, request: Request) -> Response:
        user_id = require_user_id(request)
        serializer = OrderCreateSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = build_order_service().create(user_id, serializer.cart_lines())
        return Response(OrderSerializer(order).data, status=status.HTTP_201_CREATED)


class OrderDetailView(APIView):
    """Handler for GET /api/orders/{order_id}"""

    def get(self, request: Request, order_id: str) -> Response:
        user_id = require_user_id(request)
        service = build_order_service()
        order = service.get_order(order_id, user_id)
        data = OrderSerializer(order).data
        data["history"] = OrderStatusChangeSerializer(service.history(order.id), many=True).data
        return Response(data)


class OrderPaymentReferenceView(APIView):
    """Handler for POST /api/orders/{order_id}/payment-reference"""

    permission_classes = [HasInternalToken]

    def post(self, request: Request, order_id: str) -> Response:
        serializer = PaymentReferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = build_order_service().attach_payment_reference(
            order_id, serializer.validated_data["reference"]
        )
        return Response(OrderSerializer(order).data)


class OrderMarkPaidView(APIView):
    """Handler for POST /api/orders/{order_id}/mark-paid"""

    permission_classes = [HasInternalToken]

    def post(self, request: Request, order_id: str) -> Response:
        order = build_order_service().mark_paid(order_id)
        return Response(OrderSerializer(order).data)


class OrderFulfillView(APIView):
    """Handler for POST /api/orders/{order_id}/fulfill"""

    permission_classes = [HasInternalToken]

    def post(self, request: Request, order_id: str) -> Response:
        order = build_order_service().fulfill(order_id)
        return Response(OrderSerializer(order).data)


class OrderCancelView(APIView):
    """Handler for POST /api/orders/{order_id}/cancel"""

    def post(self, request: Request, order_id: str) -> Response:
        user_id = require_user_id(request)
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        service = build_order_service()
        service.get_order(order_id, user_id)
        order = service.cancel(order_id, serializer.validated_data["reason"])
        return Response(OrderSerializer(order).data)


class OrderRefundView(APIView):
    """Handler for POST /api/orders/{order_id}/refund"""

    permission_classes = [HasInternalToken]

    def post(self, request: Request, order_id: str) -> Response:
        serializer = ReasonSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        order = build_order_service().refund(order_id, serializer.validated_data["reason"])
        return Response(OrderSerializer(order).data)


class OrderStatsView(APIView):
    """Handler for GET /api/orders/stats"""

    permission_classes = [HasInternalToken]

    def get(self, request: Request) -> Response:
        query = OrderStatsQuerySerializer(data=request.query_params)
        query.is_valid(raise_exception=True)
        stats = build_order_service().get_order_stats(
            query.validated_data.get("start"), query.validated_data.get("end")
        )
        return Response(OrderStatsSerializer(stats).data)
