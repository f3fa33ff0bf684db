"""
Inventory ledger: the stock records (SKU + lot + slot + quantity).

Each record goes absent -> present (quantity > 0) -> absent.  ``receive``
and ``dispatch`` / ``remove_record`` are the only mutators, and each one
validates everything before touching state, so a raised error always leaves
the ledger and the slot registry unchanged.

Slot occupancy is maintained here: a slot is flagged occupied iff at least
one record references it.  ``Slot.product_id`` is a cache; conflict checks
scan the records instead of trusting the flag.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Iterator, Optional

from palletwms.core.errors import (
    InsufficientQuantityError,
    InvalidQuantityError,
    RecordNotFoundError,
    SlotConflictError,
    SlotOccupiedError,
)
from palletwms.models import ReceiptLine, Slot, StockRecord
from palletwms.services.slots import SlotRegistry

logger = logging.getLogger(__name__)


def _require_positive(quantity: object) -> int:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)
    return quantity


@dataclass(frozen=True)
class DispatchableItem:
    """One (SKU, lot) pair on hand, as offered by the dispatch search."""

    sku: str
    name: str
    lot_number: str
    total_quantity: int
    slot_count: int


class InventoryLedger:
    def __init__(self, slots: SlotRegistry) -> None:
        self.slots = slots
        self._records: list[StockRecord] = []

    # ------------------------------------------------------------------ #
    # mutation                                                           #
    # ------------------------------------------------------------------ #
    def receive(self, line: ReceiptLine) -> StockRecord:
        """Apply a goods receipt; merges into an existing (SKU, slot, lot) record."""
        quantity = _require_positive(line.quantity)
        slot = self.slots.require(line.slot_id)

        incumbents = self.records_at(slot.id)
        if slot.is_occupied or incumbents:
            held = incumbents[0] if incumbents else None
            if held is None:
                raise SlotConflictError(slot.id, line.sku, line.lot_number)
            if held.sku != line.sku or held.lot_number != line.lot_number:
                raise SlotConflictError(
                    slot.id, line.sku, line.lot_number, held.sku, held.lot_number
                )

        existing = self.find(line.sku, slot.id, line.lot_number)
        if existing is not None:
            existing.quantity += quantity
            if not slot.is_occupied:
                self.slots.set_occupancy(slot.id, True, existing.id)
            logger.info(
                "receive merged: sku=%s lot=%s slot=%s +%d -> %d",
                line.sku, line.lot_number, slot.id, quantity, existing.quantity,
            )
            return existing

        record = StockRecord(
            sku=line.sku,
            name=line.name,
            category=line.category,
            quantity=quantity,
            lot_number=line.lot_number,
            entry_date=line.entry_date or date.today(),
            slot_id=slot.id,
            image_url=line.image_url,
        )
        self._records.append(record)
        self.slots.set_occupancy(slot.id, True, record.id)
        logger.info(
            "receive created: sku=%s lot=%s slot=%s qty=%d record=%s",
            record.sku, record.lot_number, slot.id, quantity, record.id,
        )
        return record

    def dispatch(
        self,
        sku: str,
        slot_id: str,
        quantity: int,
        lot_number: Optional[str] = None,
    ) -> int:
        """Take ``quantity`` of ``sku`` out of ``slot_id``; returns the remaining balance."""
        quantity = _require_positive(quantity)
        record = self.find(sku, slot_id, lot_number)
        if record is None:
            raise RecordNotFoundError(sku=sku, slot_id=slot_id)
        if quantity > record.quantity:
            raise InsufficientQuantityError(sku, slot_id, quantity, record.quantity)

        if quantity == record.quantity:
            self._drop(record)
            logger.info(
                "dispatch cleared: sku=%s lot=%s slot=%s qty=%d",
                sku, record.lot_number, slot_id, quantity,
            )
            return 0

        record.quantity -= quantity
        logger.info(
            "dispatch partial: sku=%s lot=%s slot=%s -%d -> %d",
            sku, record.lot_number, slot_id, quantity, record.quantity,
        )
        return record.quantity

    def remove_record(self, record_id: str) -> StockRecord:
        """Zero out a lot/position unconditionally."""
        record = self.get(record_id)
        if record is None:
            raise RecordNotFoundError(record_id=record_id)
        self._drop(record)
        logger.info("record removed: %s (sku=%s slot=%s)", record_id, record.sku, record.slot_id)
        return record

    def delete_slot(self, slot_id: str) -> Slot:
        """Delete a slot unless a record still references it, whatever its flag says."""
        slot = self.slots.require(slot_id)
        if self.records_at(slot.id):
            raise SlotOccupiedError(slot.id)
        return self.slots.delete(slot.id)

    def _drop(self, record: StockRecord) -> None:
        self._records.remove(record)
        slot = self.slots.get(record.slot_id)
        if slot is None:
            return
        if not self.records_at(slot.id):
            self.slots.set_occupancy(slot.id, False)

    # ------------------------------------------------------------------ #
    # queries                                                            #
    # ------------------------------------------------------------------ #
    def get(self, record_id: str) -> Optional[StockRecord]:
        return next((r for r in self._records if r.id == record_id), None)

    def find(self, sku: str, slot_id: str, lot_number: Optional[str] = None) -> Optional[StockRecord]:
        for r in self._records:
            if r.sku == sku and r.slot_id == slot_id:
                if lot_number is None or r.lot_number == lot_number:
                    return r
        return None

    def records_at(self, slot_id: str) -> list[StockRecord]:
        return [r for r in self._records if r.slot_id == slot_id]

    def records_for(self, sku: str, lot_number: str) -> list[StockRecord]:
        return [r for r in self._records if r.sku == sku and r.lot_number == lot_number]

    def search(self, query: str) -> list[StockRecord]:
        """Case-insensitive match on SKU, name, slot id and lot number."""
        needle = (query or "").strip().lower()
        return [
            r for r in self._records
            if needle in r.sku.lower()
            or needle in r.name.lower()
            or needle in r.slot_id.lower()
            or needle in r.lot_number.lower()
        ]

    def dispatchable_items(self, query: str = "") -> list[DispatchableItem]:
        """One entry per (SKU, lot) matching ``query`` on SKU, name or lot."""
        needle = (query or "").strip().lower()
        grouped: dict[tuple[str, str], list[StockRecord]] = {}
        for r in self._records:
            grouped.setdefault((r.sku, r.lot_number), []).append(r)

        items = []
        for (sku, lot), recs in grouped.items():
            first = recs[0]
            if needle and not (
                needle in sku.lower() or needle in first.name.lower() or needle in lot.lower()
            ):
                continue
            items.append(
                DispatchableItem(
                    sku=sku,
                    name=first.name,
                    lot_number=lot,
                    total_quantity=sum(r.quantity for r in recs),
                    slot_count=len(recs),
                )
            )
        return items

    def total_units(self) -> int:
        return sum(r.quantity for r in self._records)

    def occupancy_mismatches(self) -> list[str]:
        """Slot ids whose occupancy flag disagrees with the record scan."""
        held = {r.slot_id for r in self._records}
        return [s.id for s in self.slots if s.is_occupied != (s.id in held)]

    def __iter__(self) -> Iterator[StockRecord]:
        return iter(list(self._records))

    def __len__(self) -> int:
        return len(self._records)
