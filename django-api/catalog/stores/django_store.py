"""Django ORM implementation of the catalog lookup."""

from uuid import UUID

from django.utils import timezone

from catalog import models
from catalog.domain import CatalogItem, ItemType
from catalog.stores.interfaces import CatalogLookup
from core.domain.value_objects import Money
from events import models as event_models


class DjangoCatalogLookup(CatalogLookup):
    """Reads courses, digital products and events straight from the database."""

    def get_price_and_availability(
        self, item_type: ItemType, item_id: UUID, quantity: int = 1
    ) -> CatalogItem | None:
        if item_type is ItemType.COURSE:
            return self._course(item_id)
        if item_type is ItemType.DIGITAL_PRODUCT:
            return self._product(item_id)
        if item_type is ItemType.EVENT:
            return self._event(item_id, quantity)
        return None

    def _course(self, item_id: UUID) -> CatalogItem | None:
        row = models.Course.objects.filter(pk=item_id, deleted_at__isnull=True).first()
        if row is None:
            return None
        return CatalogItem(
            item_type=ItemType.COURSE,
            item_id=row.id,
            title=row.title,
            price=Money(row.price),
            available=row.is_published,
            reason="" if row.is_published else "Course is not available",
        )

    def _product(self, item_id: UUID) -> CatalogItem | None:
        row = models.DigitalProduct.objects.filter(
            pk=item_id, deleted_at__isnull=True
        ).first()
        if row is None:
            return None
        return CatalogItem(
            item_type=ItemType.DIGITAL_PRODUCT,
            item_id=row.id,
            title=row.title,
            price=Money(row.price),
            available=row.is_published,
            reason="" if row.is_published else "Digital product is not available",
        )

    def _event(self, item_id: UUID, quantity: int) -> CatalogItem | None:
        row = event_models.Event.objects.filter(pk=item_id).first()
        if row is None:
            return None
        reason = ""
        if not row.is_published:
            reason = "Event is not available"
        elif row.starts_at <= timezone.now():
            reason = "Event has already started"
        elif row.remaining_capacity < quantity:
            reason = "Event is fully booked"
        return CatalogItem(
            item_type=ItemType.EVENT,
            item_id=row.id,
            title=row.title,
            price=Money(row.price),
            available=not reason,
            reason=reason,
            remaining=row.remaining_capacity,
        )
