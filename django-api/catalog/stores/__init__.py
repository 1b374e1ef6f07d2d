from catalog.stores.django_store import DjangoCatalogLookup
from catalog.stores.interfaces import CatalogLookup

__all__ = ["CatalogLookup", "DjangoCatalogLookup"]
