from datetime import date, datetime
from decimal import Decimal
from typing import Annotated, Optional

from pydantic import BaseModel, ConfigDict, Field, PlainSerializer

# Stored and computed as Decimal; order responses carry it as a JSON number
JsonAmount = Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]


class OrderRequest(BaseModel):
    """Schema for the order placement request body."""
    client_name: str = Field(..., min_length=1)
    product_name: str = Field(..., min_length=1)
    # Checked by the service so non-positive values become InvalidArgument (400)
    quantity: int
    order_date: date = Field(default_factory=date.today)
    status: str = "Pending"


class OrderPlacement(BaseModel):
    """Result of a committed order placement."""
    order_id: int
    invoice_id: int
    amount: JsonAmount


class OrderPlacementResponse(OrderPlacement):
    message: str = "Order & Invoice created"


class OrderResponse(BaseModel):
    """Schema for an order row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    client_name: str
    product_name: str
    quantity: int
    order_date: date
    status: str
    created_at: Optional[datetime] = None
