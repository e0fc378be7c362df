from datetime import date, datetime
from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class InvoiceResponse(BaseModel):
    """Schema for an invoice row."""
    model_config = ConfigDict(from_attributes=True)

    id: int
    order_id: int
    amount: Decimal
    due_date: date
    status: str
    created_at: Optional[datetime] = None


class SalesReport(BaseModel):
    total_sales: Decimal
