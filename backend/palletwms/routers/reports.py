from __future__ import annotations

from fastapi import APIRouter

from palletwms.deps import StoreDep
from palletwms.services.reporting import (
    DashboardStats,
    MapAisle,
    PositionContents,
    SkuSummary,
    dashboard_stats,
    inventory_by_position,
    summarize_by_sku,
    warehouse_map,
)

router = APIRouter(prefix="/v1/reports", tags=["reports"])


@router.get("/summary", response_model=list[SkuSummary])
def sku_summary(store: StoreDep) -> list[SkuSummary]:
    with store.lock:
        return summarize_by_sku(store.ledger)


@router.get("/positions", response_model=list[PositionContents])
def positions(store: StoreDep) -> list[PositionContents]:
    with store.lock:
        return inventory_by_position(store.slots, store.ledger)


@router.get("/dashboard", response_model=DashboardStats)
def dashboard(store: StoreDep) -> DashboardStats:
    with store.lock:
        return dashboard_stats(store.slots, store.ledger)


@router.get("/map", response_model=list[MapAisle])
def map_view(store: StoreDep) -> list[MapAisle]:
    with store.lock:
        return warehouse_map(store.slots, store.ledger)
