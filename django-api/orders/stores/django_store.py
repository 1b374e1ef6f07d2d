"""Django ORM implementation of the OrderStore."""

from collections.abc import Sequence
from datetime import datetime
from uuid import UUID

from django.db.models import Count, DecimalField, F, Prefetch, Sum

from catalog.domain import ItemType
from core.domain.value_objects import Money
from orders import models
from orders.domain import (
    OPEN_STATUSES,
    Order,
    OrderLine,
    OrderStats,
    OrderStatus,
    OrderStatusChange,
    OrderTotals,
    TopItem,
)
from orders.stores.interfaces import OrderStore


def line_to_domain(row: models.OrderLine) -> OrderLine:
    return OrderLine(
        id=row.id,
        item_type=ItemType(row.item_type),
        item_id=row.item_id,
        title=row.title,
        unit_price=Money(row.unit_price),
        quantity=row.quantity,
        booking_id=row.booking_id,
    )


def to_domain(row: models.Order) -> Order:
    return Order(
        id=row.id,
        user_id=row.user_id,
        status=OrderStatus(row.status),
        subtotal=Money(row.subtotal),
        tax=Money(row.tax),
        total=Money(row.total),
        currency=row.currency,
        payment_reference=row.payment_reference,
        created_at=row.created_at,
        updated_at=row.updated_at,
        completed_at=row.completed_at,
        lines=tuple(line_to_domain(line) for line in row.lines.all()),
    )


def _with_lines():
    return models.Order.objects.prefetch_related(
        Prefetch("lines", queryset=models.OrderLine.objects.order_by("position"))
    )


class DjangoOrderStore(OrderStore):
    """Order store using Django ORM."""

    def get(self, order_id: UUID) -> Order | None:
        row = _with_lines().filter(pk=order_id).first()
        return to_domain(row) if row else None

    def lock(self, order_id: UUID) -> Order | None:
        row = _with_lines().select_for_update().filter(pk=order_id).first()
        return to_domain(row) if row else None

    def get_by_payment_reference(self, reference: str) -> Order | None:
        row = _with_lines().filter(payment_reference=reference).first()
        return to_domain(row) if row else None

    def create(
        self,
        user_id: UUID,
        lines: Sequence[OrderLine],
        totals: OrderTotals,
        currency: str,
    ) -> Order:
        order = models.Order.objects.create(
            user_id=user_id,
            status=models.Order.Status.PENDING,
            subtotal=totals.subtotal.amount,
            tax=totals.tax.amount,
            total=totals.total.amount,
            currency=currency,
        )
        models.OrderLine.objects.bulk_create(
            models.OrderLine(
                id=line.id,
                order=order,
                position=position,
                item_type=line.item_type.value,
                item_id=line.item_id,
                title=line.title,
                unit_price=line.unit_price.amount,
                quantity=line.quantity,
                booking_id=line.booking_id,
            )
            for position, line in enumerate(lines)
        )
        return self.get(order.id)

    def update(
        self,
        order_id: UUID,
        status: OrderStatus,
        payment_reference: str | None = None,
        completed_at: datetime | None = None,
    ) -> Order:
        row = models.Order.objects.get(pk=order_id)
        row.status = status.value
        update_fields = ["status", "updated_at"]
        if payment_reference is not None:
            row.payment_reference = payment_reference
            update_fields.append("payment_reference")
        if completed_at is not None:
            row.completed_at = completed_at
            update_fields.append("completed_at")
        row.save(update_fields=update_fields)
        return self.get(order_id)

    def record_transition(
        self,
        order_id: UUID,
        from_status: OrderStatus | None,
        to_status: OrderStatus,
        reason: str = "",
    ) -> None:
        models.OrderStatusChange.objects.create(
            order_id=order_id,
            from_status=from_status.value if from_status else None,
            to_status=to_status.value,
            reason=reason,
        )

    def history(self, order_id: UUID) -> list[OrderStatusChange]:
        return [
            OrderStatusChange(
                order_id=row.order_id,
                from_status=OrderStatus(row.from_status) if row.from_status else None,
                to_status=OrderStatus(row.to_status),
                reason=row.reason,
                created_at=row.created_at,
            )
            for row in models.OrderStatusChange.objects.filter(order_id=order_id)
        ]

    def list_for_user(
        self, user_id: UUID, status: OrderStatus | None = None
    ) -> list[Order]:
        rows = _with_lines().filter(user_id=user_id)
        if status is not None:
            rows = rows.filter(status=status.value)
        return [to_domain(row) for row in rows.order_by("-created_at")]

    def has_open_line(self, user_id: UUID, item_type: ItemType, item_id: UUID) -> bool:
        return models.OrderLine.objects.filter(
            order__user_id=user_id,
            order__status__in=[status.value for status in OPEN_STATUSES],
            item_type=item_type.value,
            item_id=item_id,
        ).exists()

    def stats(
        self,
        start: datetime | None = None,
        end: datetime | None = None,
        top: int = 10,
    ) -> OrderStats:
        orders = models.Order.objects.all()
        if start is not None:
            orders = orders.filter(created_at__gte=start)
        if end is not None:
            orders = orders.filter(created_at__lte=end)
        completed = orders.filter(status=OrderStatus.COMPLETED.value)

        totals = completed.aggregate(revenue=Sum("total"), count=Count("id"))
        revenue = Money(totals["revenue"] or 0)
        count = totals["count"]
        by_status = {
            OrderStatus(row["status"]): row["count"]
            for row in orders.order_by().values("status").annotate(count=Count("id"))
        }
        top_rows = (
            models.OrderLine.objects.filter(order__in=completed)
            .values("item_type", "item_id", "title")
            .annotate(
                quantity=Sum("quantity"),
                revenue=Sum(
                    F("unit_price") * F("quantity"),
                    output_field=DecimalField(max_digits=12, decimal_places=2),
                ),
            )
            .order_by("-revenue", "title")[:top]
        )
        return OrderStats(
            total_revenue=revenue,
            order_count=count,
            average_order_value=Money(revenue.amount / count) if count else Money.zero(),
            orders_by_status=by_status,
            top_items=tuple(
                TopItem(
                    item_type=ItemType(row["item_type"]),
                    item_id=row["item_id"],
                    title=row["title"],
                    quantity=row["quantity"],
                    revenue=Money(row["revenue"]),
                )
                for row in top_rows
            ),
        )
