from catalog.domain.models import CatalogItem, ItemType

__all__ = ["CatalogItem", "ItemType"]
