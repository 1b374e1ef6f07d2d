"""Django ORM grantors for courses, digital products and events."""

from uuid import UUID

from django.utils import timezone

from access import models
from access.domain import AccessGrant, AccessStatus
from access.stores.interfaces import AccessGrantor
from bookings.domain import BookingStatus
from bookings.services import BookingService
from catalog import models as catalog_models
from catalog.domain import ItemType
from core.domain.errors import ValidationError
from orders.domain import Order, OrderLine


def _grant(row, item_type: ItemType, item_id: UUID, changed_at) -> AccessGrant:
    return AccessGrant(
        grant_id=row.id,
        item_type=item_type,
        item_id=item_id,
        user_id=row.user_id,
        order_line_id=row.order_line_id,
        status=AccessStatus(row.status),
        changed_at=changed_at,
    )


class CourseAccessGrantor(AccessGrantor):
    """Course purchases become enrollments."""

    item_type = ItemType.COURSE

    def grant(self, order: Order, line: OrderLine) -> AccessGrant:
        row = models.CourseEnrollment.objects.filter(
            user_id=order.user_id,
            course_id=line.item_id,
            status=models.GrantStatus.ACTIVE,
        ).first()
        if row is None:
            row = models.CourseEnrollment.objects.create(
                user_id=order.user_id, course_id=line.item_id, order_line_id=line.id
            )
        return _grant(row, self.item_type, line.item_id, row.granted_at)

    def revoke(self, order: Order, line: OrderLine) -> AccessGrant | None:
        row = models.CourseEnrollment.objects.filter(
            order_line_id=line.id, status=models.GrantStatus.ACTIVE
        ).first()
        if row is None:
            return None
        row.status = models.GrantStatus.REVOKED
        row.revoked_at = timezone.now()
        row.save(update_fields=["status", "revoked_at"])
        return _grant(row, self.item_type, line.item_id, row.revoked_at)

    def has_active_grant(self, user_id: UUID, item_id: UUID) -> bool:
        return models.CourseEnrollment.objects.filter(
            user_id=user_id, course_id=item_id, status=models.GrantStatus.ACTIVE
        ).exists()


class DownloadAccessGrantor(AccessGrantor):
    """Digital product purchases become download entitlements."""

    item_type = ItemType.DIGITAL_PRODUCT

    def grant(self, order: Order, line: OrderLine) -> AccessGrant:
        row = models.DownloadEntitlement.objects.filter(
            user_id=order.user_id,
            product_id=line.item_id,
            status=models.GrantStatus.ACTIVE,
        ).first()
        if row is None:
            product = catalog_models.DigitalProduct.objects.get(pk=line.item_id)
            row = models.DownloadEntitlement.objects.create(
                user_id=order.user_id,
                product=product,
                order_line_id=line.id,
                download_limit=product.download_limit,
            )
        return _grant(row, self.item_type, line.item_id, row.granted_at)

    def revoke(self, order: Order, line: OrderLine) -> AccessGrant | None:
        row = models.DownloadEntitlement.objects.filter(
            order_line_id=line.id, status=models.GrantStatus.ACTIVE
        ).first()
        if row is None:
            return None
        row.status = models.GrantStatus.REVOKED
        row.revoked_at = timezone.now()
        row.save(update_fields=["status", "revoked_at"])
        return _grant(row, self.item_type, line.item_id, row.revoked_at)

    def has_active_grant(self, user_id: UUID, item_id: UUID) -> bool:
        return models.DownloadEntitlement.objects.filter(
            user_id=user_id, product_id=item_id, status=models.GrantStatus.ACTIVE
        ).exists()


class EventAccessGrantor(AccessGrantor):
    """Event purchases confirm the booking that already holds the seats."""

    item_type = ItemType.EVENT

    def __init__(self, bookings: BookingService) -> None:
        self._bookings = bookings

    def grant(self, order: Order, line: OrderLine) -> AccessGrant:
        if line.booking_id is None:
            raise ValidationError(message=f"Event line {line.id} has no booking")
        booking = self._bookings.confirm(line.booking_id)
        return AccessGrant(
            grant_id=booking.id,
            item_type=self.item_type,
            item_id=line.item_id,
            user_id=booking.user_id,
            order_line_id=line.id,
            status=AccessStatus.ACTIVE,
            changed_at=booking.status_changed_at,
        )

    def revoke(self, order: Order, line: OrderLine) -> AccessGrant | None:
        if line.booking_id is None:
            return None
        booking = self._bookings.get_booking(line.booking_id)
        if booking.status is BookingStatus.CANCELLED:
            return None
        cancelled = self._bookings.cancel(booking.id, order.user_id, order_id=order.id)
        return AccessGrant(
            grant_id=cancelled.id,
            item_type=self.item_type,
            item_id=line.item_id,
            user_id=cancelled.user_id,
            order_line_id=line.id,
            status=AccessStatus.REVOKED,
            changed_at=cancelled.status_changed_at,
        )

    def has_active_grant(self, user_id: UUID, item_id: UUID) -> bool:
        return any(
            booking.event_id == item_id and booking.is_active
            for booking in self._bookings.list_user_bookings(user_id)
        )


def default_grantors(bookings: BookingService) -> dict[ItemType, AccessGrantor]:
    """Registry of the grantors for every inventory kind."""
    grantors: list[AccessGrantor] = [
        CourseAccessGrantor(),
        DownloadAccessGrantor(),
        EventAccessGrantor(bookings),
    ]
    return {grantor.item_type: grantor for grantor in grantors}
