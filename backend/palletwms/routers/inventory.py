"""Goods receipt, single-slot dispatch and record removal."""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from palletwms.deps import StoreDep
from palletwms.models import ReceiptLine, StockRecord

router = APIRouter(prefix="/v1/inventory", tags=["inventory"])


class ReceiveRequest(BaseModel):
    sku: str = Field(min_length=1)
    name: str = ""
    category: str = ""
    quantity: int = Field(gt=0)
    lot_number: str = Field(min_length=1)
    slot_id: str = Field(min_length=1)
    image_url: Optional[str] = None
    entry_date: Optional[date] = None


class DispatchRequest(BaseModel):
    sku: str = Field(min_length=1)
    slot_id: str = Field(min_length=1)
    quantity: int = Field(gt=0)
    lot_number: Optional[str] = None


class DispatchResponse(BaseModel):
    sku: str
    slot_id: str
    dispatched: int
    remaining: int
    slot_cleared: bool


@router.get("", response_model=list[StockRecord])
def list_inventory(store: StoreDep, q: str = Query("", description="SKU / name / slot / lot fragment")) -> list[StockRecord]:
    with store.lock:
        return store.ledger.search(q)


@router.post("/receive", response_model=StockRecord, status_code=status.HTTP_201_CREATED)
def receive_goods(req: ReceiveRequest, store: StoreDep) -> StockRecord:
    with store.lock:
        name, category, image_url = req.name, req.category, req.image_url
        # blank descriptive fields are filled from the catalog entry
        entry = store.catalog.get_by_sku(req.sku)
        if entry is not None:
            name = name or entry.name
            category = category or entry.category.value
            image_url = image_url or entry.image_url
        line = ReceiptLine(
            sku=req.sku,
            name=name,
            category=category,
            quantity=req.quantity,
            lot_number=req.lot_number,
            slot_id=req.slot_id,
            image_url=image_url,
            entry_date=req.entry_date,
        )
        return store.ledger.receive(line)


@router.post("/dispatch", response_model=DispatchResponse)
def dispatch_goods(req: DispatchRequest, store: StoreDep) -> DispatchResponse:
    with store.lock:
        remaining = store.ledger.dispatch(req.sku, req.slot_id, req.quantity, lot_number=req.lot_number)
        slot = store.slots.get(req.slot_id)
        return DispatchResponse(
            sku=req.sku,
            slot_id=req.slot_id,
            dispatched=req.quantity,
            remaining=remaining,
            slot_cleared=slot is not None and not slot.is_occupied,
        )


@router.delete("/records/{record_id}", response_model=StockRecord)
def remove_record(record_id: str, store: StoreDep) -> StockRecord:
    with store.lock:
        return store.ledger.remove_record(record_id)
