"""
Aggregate export for the in-memory warehouse entities.

These are SQLModel models without ``table=True``: the field sets double as
the serialization schema should the store ever be persisted.
"""

from .location import Slot, build_slot, format_slot_id, natural_key, slot_sort_key  # noqa: F401
from .sku import CatalogEntry, Category  # noqa: F401
from .inventory import ReceiptLine, StockRecord  # noqa: F401

__all__ = [
    "Slot",
    "build_slot",
    "format_slot_id",
    "natural_key",
    "slot_sort_key",
    "CatalogEntry",
    "Category",
    "ReceiptLine",
    "StockRecord",
]
