"""
Dispatch planning: smallest balance first, oldest entry on ties.

Taking from the smallest balances first clears as many slots as possible
per dispatch instead of leaving many half-empty pallets behind; among equal
balances the oldest entry goes first (FIFO rotation).

The planner never mutates.  ``execute_picks`` applies lines one by one
through :meth:`InventoryLedger.dispatch` and keeps going when a line fails;
there is no rollback across the batch, the result lists what failed.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional

from palletwms.core.errors import InvalidQuantityError, WarehouseError
from palletwms.services.ledger import InventoryLedger

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PickLine:
    sku: str
    lot_number: str
    slot_id: str
    quantity: int
    # balance at planning time; None for operator-entered lines
    available: Optional[int] = None
    record_id: Optional[str] = None

    @property
    def clears_slot(self) -> bool:
        return self.available is not None and self.quantity == self.available


@dataclass
class PickPlan:
    sku: str
    lot_number: str
    requested: int
    lines: List[PickLine] = field(default_factory=list)

    @property
    def planned(self) -> int:
        return sum(line.quantity for line in self.lines)

    @property
    def shortfall(self) -> int:
        return max(0, self.requested - self.planned)

    @property
    def allocations(self) -> Dict[str, int]:
        return {line.slot_id: line.quantity for line in self.lines}


@dataclass
class FailedPick:
    line: PickLine
    code: str
    detail: str


@dataclass
class BatchDispatchResult:
    succeeded: List[PickLine] = field(default_factory=list)
    failed: List[FailedPick] = field(default_factory=list)

    @property
    def success_count(self) -> int:
        return len(self.succeeded)

    @property
    def failure_count(self) -> int:
        return len(self.failed)

    @property
    def dispatched(self) -> int:
        return sum(line.quantity for line in self.succeeded)


def plan_dispatch(ledger: InventoryLedger, sku: str, lot_number: str, quantity: int) -> PickPlan:
    if isinstance(quantity, bool) or not isinstance(quantity, int) or quantity <= 0:
        raise InvalidQuantityError(quantity)

    # stable sort: insertion order decides when quantity and date both tie
    candidates = sorted(
        ledger.records_for(sku, lot_number),
        key=lambda r: (r.quantity, r.entry_date),
    )

    plan = PickPlan(sku=sku, lot_number=lot_number, requested=quantity)
    remaining = quantity
    for rec in candidates:
        if remaining <= 0:
            break
        take = min(remaining, rec.quantity)
        plan.lines.append(
            PickLine(
                sku=sku,
                lot_number=lot_number,
                slot_id=rec.slot_id,
                quantity=take,
                available=rec.quantity,
                record_id=rec.id,
            )
        )
        remaining -= take

    if plan.shortfall:
        logger.warning(
            "pick plan short: sku=%s lot=%s requested=%d available=%d shortfall=%d",
            sku, lot_number, quantity, plan.planned, plan.shortfall,
        )
    return plan


def execute_picks(ledger: InventoryLedger, lines: Iterable[PickLine]) -> BatchDispatchResult:
    result = BatchDispatchResult()
    for line in lines:
        if line.quantity <= 0:
            continue
        try:
            ledger.dispatch(line.sku, line.slot_id, line.quantity, lot_number=line.lot_number)
        except WarehouseError as exc:
            result.failed.append(FailedPick(line=line, code=exc.code, detail=exc.message))
            continue
        result.succeeded.append(line)

    if result.failed:
        logger.warning(
            "batch dispatch: %d succeeded, %d failed (%s)",
            result.success_count,
            result.failure_count,
            ", ".join(f"{f.line.slot_id}:{f.code}" for f in result.failed),
        )
    else:
        logger.info("batch dispatch: %d lines, %d units", result.success_count, result.dispatched)
    return result
