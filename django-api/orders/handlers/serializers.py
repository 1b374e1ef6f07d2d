"""Serializers for order requests and responses."""

from rest_framework import serializers

from catalog.domain import ItemType
from orders.domain import CartLine


class CartLineSerializer(serializers.Serializer):
    """One cart line. Any client-side price is ignored."""

    item_type = serializers.ChoiceField(choices=[item.value for item in ItemType])
    item_id = serializers.UUIDField()
    quantity = serializers.IntegerField(min_value=1, default=1)
    booking_id = serializers.UUIDField(required=False, allow_null=True, default=None)


def to_cart_line(data: dict) -> CartLine:
    return CartLine(
        item_type=ItemType(data["item_type"]),
        item_id=data["item_id"],
        quantity=data["quantity"],
        booking_id=data["booking_id"],
    )


class OrderCreateSerializer(serializers.Serializer):
    lines = CartLineSerializer(many=True, allow_empty=False)

    def cart_lines(self) -> list[CartLine]:
        return [to_cart_line(line) for line in self.validated_data["lines"]]


class PaymentReferenceSerializer(serializers.Serializer):
    reference = serializers.CharField(max_length=255)


class ReasonSerializer(serializers.Serializer):
    reason = serializers.CharField(required=False, allow_blank=True, default="")


class MoneyField(serializers.DecimalField):
    def __init__(self, **kwargs):
        super().__init__(max_digits=10, decimal_places=2, **kwargs)


class OrderLineSerializer(serializers.Serializer):
    """Serializer for the OrderLine domain model."""

    id = serializers.UUIDField()
    item_type = serializers.CharField(source="item_type.value")
    item_id = serializers.UUIDField()
    title = serializers.CharField()
    unit_price = MoneyField(source="unit_price.amount")
    quantity = serializers.IntegerField()
    line_total = MoneyField(source="line_total.amount")
    booking_id = serializers.UUIDField(allow_null=True)


class OrderSerializer(serializers.Serializer):
    """Serializer for the Order domain model."""

    id = serializers.UUIDField()
    user_id = serializers.UUIDField()
    status = serializers.CharField(source="status.value")
    subtotal = MoneyField(source="subtotal.amount")
    tax = MoneyField(source="tax.amount")
    total = MoneyField(source="total.amount")
    currency = serializers.CharField()
    payment_reference = serializers.CharField(allow_null=True)
    created_at = serializers.DateTimeField()
    completed_at = serializers.DateTimeField(allow_null=True)
    lines = OrderLineSerializer(many=True)


class OrderStatusChangeSerializer(serializers.Serializer):
    from_status = serializers.CharField(source="from_status.value", allow_null=True)
    to_status = serializers.CharField(source="to_status.value")
    reason = serializers.CharField()
    created_at = serializers.DateTimeField()


class OrderStatsQuerySerializer(serializers.Serializer):
    start = serializers.DateTimeField(required=False)
    end = serializers.DateTimeField(required=False)


class TopItemSerializer(serializers.Serializer):
    item_type = serializers.CharField(source="item_type.value")
    item_id = serializers.UUIDField()
    title = serializers.CharField()
    quantity = serializers.IntegerField()
    revenue = MoneyField(source="revenue.amount")


class OrderStatsSerializer(serializers.Serializer):
    """Serializer for the OrderStats report."""

    total_revenue = MoneyField(source="total_revenue.amount")
    order_count = serializers.IntegerField()
    average_order_value = MoneyField(source="average_order_value.amount")
    orders_by_status = serializers.SerializerMethodField()
    top_items = TopItemSerializer(many=True)

    def get_orders_by_status(self, stats) -> dict:
        return {status.value: count for status, count in stats.orders_by_status.items()}
