from datetime import datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class InventoryItemRequest(BaseModel):
    """Schema for creating or editing an inventory item."""
    product_name: str = Field(..., min_length=1, description="Product name; orders refer to items by it.")
    stock_quantity: int = Field(..., ge=0, description="Units currently in stock.")
    reorder_threshold: int = Field(0, ge=0, description="Stock level at or below which the item needs reordering.")
    price: Decimal = Field(..., ge=0, max_digits=12, decimal_places=2, description="Unit selling price.")


class InventoryItemResponse(BaseModel):
    """Schema for an inventory row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    product_name: str
    stock_quantity: int
    reorder_threshold: int
    price: Decimal
    updated_at: Optional[datetime] = None


class StockUpdateRequest(BaseModel):
    """Schema for deducting stock outside of order placement."""
    product_name: str
    quantity: int
