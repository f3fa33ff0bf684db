"""Slot configuration: single / bulk creation, deletion, storage suggestions."""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from palletwms.deps import StoreDep
from palletwms.models import Slot, build_slot
from palletwms.services.ai_planner import StorageSuggestion, suggest_storage_slot

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/v1/locations", tags=["locations"])


class SlotCreateRequest(BaseModel):
    prefix: str = Field(default="R", max_length=8)
    aisle: str = Field(min_length=1, max_length=16)
    slot: int = Field(ge=1)
    level: int = Field(ge=1)


class SlotRangeRequest(BaseModel):
    prefix: str = Field(min_length=1, max_length=8)
    aisle: str = Field(min_length=1, max_length=16)
    start_slot: int = Field(ge=1)
    end_slot: int = Field(ge=1)
    start_level: int = Field(ge=1)
    end_level: int = Field(ge=1)


class SlotRangeResponse(BaseModel):
    created: int
    total_positions: int


class SuggestionRequest(BaseModel):
    sku: str = Field(min_length=1)
    name: str = ""
    category: str = ""


class SuggestionResponse(BaseModel):
    suggestion: Optional[StorageSuggestion] = None
    free_slots: int


@router.get("", response_model=list[Slot])
def list_slots(store: StoreDep, free_only: bool = Query(False)) -> list[Slot]:
    with store.lock:
        return store.slots.free_slots() if free_only else list(store.slots)


@router.post("", response_model=Slot, status_code=status.HTTP_201_CREATED)
def create_slot(req: SlotCreateRequest, store: StoreDep) -> Slot:
    slot = build_slot(req.prefix.strip().upper(), req.aisle.strip(), req.slot, req.level)
    with store.lock:
        return store.slots.add(slot)


@router.post("/bulk", response_model=SlotRangeResponse, status_code=status.HTTP_201_CREATED)
def create_slot_range(req: SlotRangeRequest, store: StoreDep) -> SlotRangeResponse:
    with store.lock:
        created = store.slots.add_range(
            req.prefix.strip().upper(),
            req.aisle.strip(),
            (req.start_slot, req.end_slot),
            (req.start_level, req.end_level),
        )
        return SlotRangeResponse(created=created, total_positions=len(store.slots))


@router.delete("/{slot_id}", response_model=Slot)
def delete_slot(slot_id: str, store: StoreDep) -> Slot:
    with store.lock:
        return store.ledger.delete_slot(slot_id)


@router.post("/suggest", response_model=SuggestionResponse)
def suggest_slot(req: SuggestionRequest, store: StoreDep) -> SuggestionResponse:
    with store.lock:
        free_ids = [s.id for s in store.slots.free_slots()]
    # the model call runs outside the lock; ledger mutations are never blocked by it
    suggestion = suggest_storage_slot(req.name or req.sku, req.category, free_ids)
    return SuggestionResponse(suggestion=suggestion, free_slots=len(free_ids))
