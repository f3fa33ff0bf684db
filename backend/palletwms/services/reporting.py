"""
Read-only projections over the ledger: per-SKU/lot summary, per-position
contents, dashboard figures and the warehouse map.  Recomputed on every call.
"""

from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import Dict, List, Optional

import pandas as pd
from sqlmodel import Field, SQLModel

from palletwms.models import StockRecord, natural_key
from palletwms.services.ledger import InventoryLedger
from palletwms.services.slots import SlotRegistry

RECENT_ENTRIES = 5

_COLUMNS = ["id", "sku", "name", "category", "quantity", "lot_number", "entry_date", "slot_id"]


class LotSummary(SQLModel):
    lot_number: str
    quantity: int
    positions: List[str] = Field(default_factory=list)


class SkuSummary(SQLModel):
    sku: str
    name: str
    total_quantity: int
    lots: List[LotSummary] = Field(default_factory=list)


class PositionContents(SQLModel):
    slot_id: str
    aisle: str
    level: int
    slot: int
    total_quantity: int
    records: List[StockRecord] = Field(default_factory=list)


class DashboardStats(SQLModel):
    total_positions: int
    occupied_positions: int
    free_positions: int
    occupancy_pct: int
    total_units: int
    recent_entries: List[StockRecord] = Field(default_factory=list)
    categories: Dict[str, int] = Field(default_factory=dict)


class MapCell(SQLModel):
    slot_id: str
    slot: int
    is_occupied: bool
    record: Optional[StockRecord] = None


class MapLevel(SQLModel):
    level: int
    cells: List[MapCell] = Field(default_factory=list)


class MapAisle(SQLModel):
    aisle: str
    levels: List[MapLevel] = Field(default_factory=list)


def _records_frame(ledger: InventoryLedger) -> pd.DataFrame:
    rows = [r.model_dump(include=set(_COLUMNS)) for r in ledger]
    return pd.DataFrame(rows, columns=_COLUMNS)


def summarize_by_sku(ledger: InventoryLedger) -> list[SkuSummary]:
    """Group by SKU, then by lot (first-seen order), SKUs ascending."""
    df = _records_frame(ledger)
    if df.empty:
        return []

    out: list[SkuSummary] = []
    for sku in sorted(df["sku"].unique()):
        g = df[df["sku"] == sku]
        lots = [
            LotSummary(
                lot_number=str(lot),
                quantity=int(lg["quantity"].sum()),
                positions=list(dict.fromkeys(lg["slot_id"].tolist())),
            )
            for lot, lg in g.groupby("lot_number", sort=False)
        ]
        out.append(
            SkuSummary(
                sku=str(sku),
                name=str(g["name"].iloc[0]),
                total_quantity=int(g["quantity"].sum()),
                lots=lots,
            )
        )
    return out


def inventory_by_position(slots: SlotRegistry, ledger: InventoryLedger) -> list[PositionContents]:
    out = []
    for slot in slots:
        recs = ledger.records_at(slot.id)
        if not recs:
            continue
        out.append(
            PositionContents(
                slot_id=slot.id,
                aisle=slot.aisle,
                level=slot.level,
                slot=slot.slot,
                total_quantity=sum(r.quantity for r in recs),
                records=recs,
            )
        )
    return out


def _percent(part: int, whole: int) -> int:
    if whole <= 0:
        return 0
    pct = Decimal(part) * Decimal(100) / Decimal(whole)
    return int(pct.quantize(Decimal("1"), rounding=ROUND_HALF_UP))


def dashboard_stats(slots: SlotRegistry, ledger: InventoryLedger) -> DashboardStats:
    total = len(slots)
    occupied = slots.occupied_count()
    records = list(ledger)

    df = _records_frame(ledger)
    categories: Dict[str, int] = {}
    if not df.empty:
        counts = df.groupby("category", sort=False).size()
        categories = {str(k): int(v) for k, v in counts.items()}

    return DashboardStats(
        total_positions=total,
        occupied_positions=occupied,
        free_positions=total - occupied,
        occupancy_pct=_percent(occupied, total),
        total_units=ledger.total_units(),
        recent_entries=list(reversed(records[-RECENT_ENTRIES:])),
        categories=categories,
    )


def warehouse_map(slots: SlotRegistry, ledger: InventoryLedger) -> list[MapAisle]:
    """Aisles in natural order, levels top-down, slots left to right."""
    by_aisle: Dict[str, Dict[int, list[MapCell]]] = {}
    for slot in slots:
        recs = ledger.records_at(slot.id)
        cell = MapCell(
            slot_id=slot.id,
            slot=slot.slot,
            is_occupied=slot.is_occupied,
            record=recs[0] if recs else None,
        )
        by_aisle.setdefault(slot.aisle, {}).setdefault(slot.level, []).append(cell)

    out = []
    for aisle in sorted(by_aisle, key=natural_key):
        levels = by_aisle[aisle]
        out.append(
            MapAisle(
                aisle=aisle,
                levels=[
                    MapLevel(level=lv, cells=sorted(levels[lv], key=lambda c: (c.slot, c.slot_id)))
                    for lv in sorted(levels, reverse=True)
                ],
            )
        )
    return out
