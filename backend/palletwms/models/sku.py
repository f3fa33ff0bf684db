from __future__ import annotations

from enum import Enum
from typing import Optional
from uuid import uuid4

from sqlmodel import Field, SQLModel


class Category(str, Enum):
    SACARIA = "Sacaria"
    OLEO = "Óleo"
    LEITE = "Leite"


def new_id() -> str:
    return uuid4().hex[:9]


class CatalogEntry(SQLModel):
    id: str = Field(default_factory=new_id)
    sku: str = Field(min_length=1, description="Unique product code")
    name: str = Field(description="Product description")
    category: Category = Field(default=Category.SACARIA)
    image_url: Optional[str] = Field(default=None)
