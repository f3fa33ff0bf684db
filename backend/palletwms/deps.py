from __future__ import annotations

from typing import Annotated

from fastapi import Depends, Request

from palletwms.services.store import WarehouseStore


def get_store(request: Request) -> WarehouseStore:  # dependency
    return request.app.state.store


StoreDep = Annotated[WarehouseStore, Depends(get_store)]
