from __future__ import annotations

import logging
from typing import Iterator, Optional, Tuple

from palletwms.core.errors import DuplicateSlotError, SlotOccupiedError, UnknownSlotError
from palletwms.models import Slot, build_slot, slot_sort_key

logger = logging.getLogger(__name__)


class SlotRegistry:
    """Owns the storage positions, kept sorted by :func:`slot_sort_key`."""

    def __init__(self) -> None:
        self._slots: list[Slot] = []
        self._index: dict[str, Slot] = {}

    # ------------------------------------------------------------------ #
    # mutation                                                           #
    # ------------------------------------------------------------------ #
    def add(self, slot: Slot) -> Slot:
        if slot.id in self._index:
            raise DuplicateSlotError(slot.id)
        self._insert([slot])
        logger.info("slot added: %s", slot.id)
        return slot

    def add_range(
        self,
        prefix: str,
        aisle: str,
        slot_range: Tuple[int, int],
        level_range: Tuple[int, int],
    ) -> int:
        """Create every slot x level address in the inclusive ranges.

        Addresses that already exist are skipped; returns the number created.
        """
        start_slot, end_slot = int(slot_range[0]), int(slot_range[1])
        start_level, end_level = int(level_range[0]), int(level_range[1])

        batch: list[Slot] = []
        seen: set[str] = set()
        for s in range(start_slot, end_slot + 1):
            for lv in range(start_level, end_level + 1):
                slot = build_slot(prefix, aisle, s, lv)
                if slot.id in self._index or slot.id in seen:
                    continue
                seen.add(slot.id)
                batch.append(slot)

        self._insert(batch)
        logger.info(
            "slot range %s%s slots=%s-%s levels=%s-%s: created=%d",
            prefix, aisle, start_slot, end_slot, start_level, end_level, len(batch),
        )
        return len(batch)

    def delete(self, slot_id: str) -> Slot:
        slot = self.require(slot_id)
        if slot.is_occupied:
            raise SlotOccupiedError(slot_id)
        self._slots.remove(slot)
        del self._index[slot_id]
        logger.info("slot deleted: %s", slot_id)
        return slot

    def set_occupancy(self, slot_id: str, occupied: bool, record_id: Optional[str] = None) -> None:
        """Ledger-only mutator for the occupancy flag and back-reference."""
        slot = self.require(slot_id)
        slot.is_occupied = bool(occupied)
        slot.product_id = record_id if occupied else None

    def _insert(self, slots: list[Slot]) -> None:
        if not slots:
            return
        for slot in slots:
            self._index[slot.id] = slot
        self._slots.extend(slots)
        self._slots.sort(key=slot_sort_key)

    # ------------------------------------------------------------------ #
    # queries                                                            #
    # ------------------------------------------------------------------ #
    def get(self, slot_id: str) -> Optional[Slot]:
        return self._index.get(slot_id)

    def require(self, slot_id: str) -> Slot:
        slot = self._index.get(slot_id)
        if slot is None:
            raise UnknownSlotError(slot_id)
        return slot

    def free_slots(self) -> list[Slot]:
        return [s for s in self._slots if not s.is_occupied]

    def occupied_count(self) -> int:
        return sum(1 for s in self._slots if s.is_occupied)

    def ids(self) -> list[str]:
        return [s.id for s in self._slots]

    def __iter__(self) -> Iterator[Slot]:
        return iter(list(self._slots))

    def __len__(self) -> int:
        return len(self._slots)

    def __contains__(self, slot_id: object) -> bool:
        return slot_id in self._index
