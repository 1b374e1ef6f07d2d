"""Catalog domain models shared by ordering and access grants."""

from dataclasses import dataclass
from enum import Enum
from uuid import UUID

from core.domain.value_objects import Money


class ItemType(str, Enum):
    """Inventory kinds the platform sells."""

    COURSE = "course"
    EVENT = "event"
    DIGITAL_PRODUCT = "digital_product"


@dataclass(frozen=True)
class CatalogItem:
    """Current price and availability of a purchasable item."""

    item_type: ItemType
    item_id: UUID
    title: str
    price: Money
    available: bool
    reason: str = ""
    remaining: int | None = None
