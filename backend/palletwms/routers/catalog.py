from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Query, status
from pydantic import BaseModel, Field

from palletwms.deps import StoreDep
from palletwms.models import CatalogEntry, Category

router = APIRouter(prefix="/v1/catalog", tags=["catalog"])


class CatalogCreateRequest(BaseModel):
    sku: str = Field(min_length=1, max_length=64)
    name: str = Field(min_length=1)
    category: Category = Category.SACARIA
    image_url: Optional[str] = None


@router.get("", response_model=list[CatalogEntry])
def list_catalog(store: StoreDep, q: str = Query("", description="SKU / name fragment")) -> list[CatalogEntry]:
    with store.lock:
        return list(store.catalog.search(q))


@router.post("", response_model=CatalogEntry, status_code=status.HTTP_201_CREATED)
def register_catalog_entry(req: CatalogCreateRequest, store: StoreDep) -> CatalogEntry:
    entry = CatalogEntry(
        sku=req.sku.strip(),
        name=req.name.strip(),
        category=req.category,
        image_url=req.image_url,
    )
    with store.lock:
        return store.catalog.register(entry)
