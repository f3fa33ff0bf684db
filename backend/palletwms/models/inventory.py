from __future__ import annotations

from datetime import date
from typing import Optional

from sqlmodel import Field, SQLModel

from .sku import new_id


class StockRecord(SQLModel):
    """A quantity of one SKU / lot stored at one slot."""

    id: str = Field(default_factory=new_id)
    sku: str
    name: str = Field(default="")
    category: str = Field(default="")
    quantity: int = Field(gt=0)
    lot_number: str = Field(description="Batch identifier")
    entry_date: date = Field(default_factory=date.today)
    slot_id: str = Field(description="Slot holding the stock")
    image_url: Optional[str] = Field(default=None)


class ReceiptLine(SQLModel):
    """Goods-receipt input for :meth:`InventoryLedger.receive`."""

    sku: str = Field(min_length=1)
    name: str = Field(default="")
    category: str = Field(default="")
    quantity: int
    lot_number: str = Field(min_length=1)
    slot_id: str = Field(min_length=1)
    image_url: Optional[str] = Field(default=None)
    entry_date: Optional[date] = Field(default=None)
