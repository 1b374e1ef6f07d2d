from django.urls import path

from orders.handlers import (
    OrderCancelView,
    OrderDetailView,
    OrderFulfillView,
    OrderListView,
    OrderMarkPaidView,
    OrderPaymentReferenceView,
    OrderRefundView,
    OrderStatsView,
)

urlpatterns = [
    path("orders", OrderListView.as_view(), name="order-list"),
    path("orders/stats", OrderStatsView.as_view(), name="order-stats"),
    path("orders/<str:order_id>", OrderDetailView.as_view(), name="order-detail"),
    path(
        "orders/<str:order_id>/payment-reference",
        OrderPaymentReferenceView.as_view(),
        name="order-payment-reference",
    ),
    path("orders/<str:order_id>/mark-paid", OrderMarkPaidView.as_view(), name="order-mark-paid"),
    path("orders/<str:order_id>/fulfill", OrderFulfillView.as_view(), name="order-fulfill"),
    path("orders/<str:order_id>/cancel", OrderCancelView.as_view(), name="order-cancel"),
    path("orders/<str:order_id>/refund", OrderRefundView.as_view(), name="order-refund"),
]
