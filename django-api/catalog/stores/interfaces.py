"""Store interfaces (repository pattern)."""

from abc import ABC, abstractmethod
from uuid import UUID

from catalog.domain import CatalogItem, ItemType


class CatalogLookup(ABC):
    """Current catalog state, used to revalidate cart lines."""

    @abstractmethod
    def get_price_and_availability(
        self, item_type: ItemType, item_id: UUID, quantity: int = 1
    ) -> CatalogItem | None:
        """Return the item's live price and availability, or None if unknown."""
        ...
