"""
Inventory Schemas.
"""
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, Field


class InventoryItemCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=120)
    description: Optional[str] = None
    quantity: int = Field(0, ge=0)
    unit_price: Decimal = Field(Decimal("0.00"), ge=0, max_digits=10, decimal_places=2)


class InventoryItemResponse(InventoryItemCreate):
    id: int

    class Config:
        from_attributes = True
