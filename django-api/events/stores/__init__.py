from events.stores.django_store import DjangoEventStore, DjangoInventoryLedger
from events.stores.interfaces import EventStore, InventoryLedger

__all__ = ["EventStore", "InventoryLedger", "DjangoEventStore", "DjangoInventoryLedger"]
