from __future__ import annotations

import re
from typing import Optional

from sqlmodel import Field, SQLModel

_DIGITS_RE = re.compile(r"(\d+)")


class Slot(SQLModel):
    """Storage position (pallet slot).

    ``is_occupied`` / ``product_id`` are maintained by the ledger; the
    authoritative answer to "what is in this slot" is a scan of the stock
    records by ``slot_id``.
    """

    id: str = Field(description="Slot address, e.g. R1.07.012")
    prefix: str = Field(default="", description="Street / rack prefix")
    aisle: str = Field(description="Aisle label")
    slot: int = Field(ge=0, description="Slot number within the row")
    level: int = Field(ge=0, description="Level (1 = floor)")
    is_occupied: bool = Field(default=False)
    product_id: Optional[str] = Field(
        default=None, description="Back-reference to an occupying stock record"
    )


def format_slot_id(prefix: str, aisle: str, slot: int, level: int) -> str:
    """``{prefix}{aisle}.{slot:02d}.{level:03d}`` – e.g. R1.07.012."""
    return f"{prefix}{aisle}.{int(slot):02d}.{int(level):03d}"


def build_slot(prefix: str, aisle: str, slot: int, level: int) -> Slot:
    return Slot(
        id=format_slot_id(prefix, aisle, slot, level),
        prefix=prefix,
        aisle=str(aisle),
        slot=int(slot),
        level=int(level),
    )


def natural_key(text: str) -> tuple:
    """Split digits from text so that "A2" < "A10"."""
    parts = _DIGITS_RE.split(str(text).upper())
    return tuple((0, int(p), "") if p.isdigit() else (1, 0, p) for p in parts if p != "")


def slot_sort_key(slot: Slot) -> tuple:
    return (slot.prefix.upper(), natural_key(slot.aisle), slot.slot, slot.level, slot.id)
