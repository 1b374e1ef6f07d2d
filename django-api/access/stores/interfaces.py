"""Grant/revoke interface, one implementation per inventory kind."""

from abc import ABC, abstractmethod
from uuid import UUID

from access.domain import AccessGrant
from catalog.domain import ItemType
from orders.domain import Order, OrderLine


class AccessGrantor(ABC):
    """Creates and destroys the access rights an order line pays for.

    Grantors are only driven by order fulfillment and refund, inside the
    order's transaction.
    """

    item_type: ItemType

    @abstractmethod
    def grant(self, order: Order, line: OrderLine) -> AccessGrant:
        """Give the order's user access to the line's item.

        Returns the existing grant when the user already holds one.
        """
        ...

    @abstractmethod
    def revoke(self, order: Order, line: OrderLine) -> AccessGrant | None:
        """Take the line's access away. Returns None if nothing was held."""
        ...

    @abstractmethod
    def has_active_grant(self, user_id: UUID, item_id: UUID) -> bool:
        """Check whether the user already holds access to the item."""
        ...
