from orders.handlers.views import (
    OrderCancelView,
    OrderDetailView,
    OrderFulfillView,
    OrderListView,
    OrderMarkPaidView,
    OrderPaymentReferenceView,
    OrderRefundView,
    OrderStatsView,
)

__all__ = [
    "OrderListView",
    "OrderDetailView",
    "OrderPaymentReferenceView",
    "OrderMarkPaidView",
    "OrderFulfillView",
    "OrderCancelView",
    "OrderRefundView",
    "OrderStatsView",
]
