from __future__ import annotations

import logging
from typing import Iterator, Optional

from palletwms.core.errors import DuplicateSkuError
from palletwms.models import CatalogEntry

logger = logging.getLogger(__name__)


class CatalogMatches:
    """Case-insensitive SKU / name substring matches, re-evaluated per iteration."""

    def __init__(self, entries: list[CatalogEntry], query: str):
        self._entries = entries
        self.query = query

    def __iter__(self) -> Iterator[CatalogEntry]:
        needle = (self.query or "").strip().lower()
        for entry in list(self._entries):
            if needle in entry.sku.lower() or needle in entry.name.lower():
                yield entry


class CatalogRegistry:
    def __init__(self) -> None:
        self._entries: list[CatalogEntry] = []

    def register(self, entry: CatalogEntry) -> CatalogEntry:
        if self.get_by_sku(entry.sku) is not None:
            raise DuplicateSkuError(entry.sku)
        self._entries.append(entry)
        logger.info("catalog entry registered: sku=%s category=%s", entry.sku, entry.category.value)
        return entry

    def search(self, query: str) -> CatalogMatches:
        return CatalogMatches(self._entries, query)

    def get_by_sku(self, sku: str) -> Optional[CatalogEntry]:
        return next((e for e in self._entries if e.sku == sku), None)

    def __iter__(self) -> Iterator[CatalogEntry]:
        return iter(list(self._entries))

    def __len__(self) -> int:
        return len(self._entries)
