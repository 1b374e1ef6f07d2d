"""Domain representation of access grants."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from uuid import UUID

from catalog.domain import ItemType


class AccessStatus(str, Enum):
    ACTIVE = "active"
    REVOKED = "revoked"


@dataclass(frozen=True)
class AccessGrant:
    """A user's right to consume one purchased order line.

    ``grant_id`` is the enrollment, entitlement or booking id depending on
    ``item_type``.
    """

    grant_id: UUID
    item_type: ItemType
    item_id: UUID
    user_id: UUID
    order_line_id: UUID
    status: AccessStatus
    changed_at: datetime | None = None
