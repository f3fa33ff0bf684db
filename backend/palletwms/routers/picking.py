"""Optimised multi-slot picking: plan a target quantity, then confirm lines."""

from __future__ import annotations

from dataclasses import asdict
from typing import Optional

from fastapi import APIRouter, Query
from pydantic import BaseModel, Field

from palletwms.deps import StoreDep
from palletwms.services.picking import PickLine, execute_picks, plan_dispatch

router = APIRouter(prefix="/v1/picking", tags=["picking"])


class PickItem(BaseModel):
    sku: str
    name: str
    lot_number: str
    total_quantity: int
    slot_count: int


class PlanRequest(BaseModel):
    sku: str = Field(min_length=1)
    lot_number: str = Field(min_length=1)
    quantity: int = Field(gt=0)


class PlanLineOut(BaseModel):
    slot_id: str
    record_id: Optional[str] = None
    quantity: int
    available: Optional[int] = None
    clears_slot: bool


class PlanResponse(BaseModel):
    sku: str
    lot_number: str
    requested: int
    planned: int
    shortfall: int
    lines: list[PlanLineOut]


class ExecuteLine(BaseModel):
    slot_id: str = Field(min_length=1)
    quantity: int = Field(ge=0)


class ExecuteRequest(BaseModel):
    sku: str = Field(min_length=1)
    lot_number: str = Field(min_length=1)
    lines: list[ExecuteLine] = Field(min_length=1)


class FailedLineOut(BaseModel):
    slot_id: str
    quantity: int
    code: str
    detail: str


class ExecuteResponse(BaseModel):
    success_count: int
    failure_count: int
    dispatched: int
    succeeded: list[PlanLineOut]
    failed: list[FailedLineOut]


def _line_out(line: PickLine) -> PlanLineOut:
    return PlanLineOut(
        slot_id=line.slot_id,
        record_id=line.record_id,
        quantity=line.quantity,
        available=line.available,
        clears_slot=line.clears_slot,
    )


@router.get("/items", response_model=list[PickItem])
def list_pick_items(store: StoreDep, q: str = Query("", description="SKU / name / lot fragment")) -> list[PickItem]:
    with store.lock:
        return [PickItem(**asdict(item)) for item in store.ledger.dispatchable_items(q)]


@router.post("/plan", response_model=PlanResponse)
def plan_picking(req: PlanRequest, store: StoreDep) -> PlanResponse:
    with store.lock:
        plan = plan_dispatch(store.ledger, req.sku, req.lot_number, req.quantity)
    return PlanResponse(
        sku=plan.sku,
        lot_number=plan.lot_number,
        requested=plan.requested,
        planned=plan.planned,
        shortfall=plan.shortfall,
        lines=[_line_out(line) for line in plan.lines],
    )


@router.post("/execute", response_model=ExecuteResponse)
def execute_picking(req: ExecuteRequest, store: StoreDep) -> ExecuteResponse:
    """Apply confirmed lines; failed lines are reported, the rest still run."""
    lines = [
        PickLine(sku=req.sku, lot_number=req.lot_number, slot_id=ln.slot_id, quantity=ln.quantity)
        for ln in req.lines
    ]
    with store.lock:
        result = execute_picks(store.ledger, lines)
    return ExecuteResponse(
        success_count=result.success_count,
        failure_count=result.failure_count,
        dispatched=result.dispatched,
        succeeded=[_line_out(line) for line in result.succeeded],
        failed=[
            FailedLineOut(slot_id=f.line.slot_id, quantity=f.line.quantity, code=f.code, detail=f.detail)
            for f in result.failed
        ],
    )
