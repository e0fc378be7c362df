from typing import List

from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.inventory import InventoryItemResponse
from bizops.schemas.invoice import InvoiceResponse, SalesReport
from bizops.services import billing_service, inventory_service

router = APIRouter()


@router.get("/sales", response_model=SalesReport)
async def sales_report(db: ConnectionManager = Depends(get_db)):
    return SalesReport(total_sales=await billing_service.total_sales(db))


@router.get("/invoices", response_model=InvoiceResponse)
async def latest_invoice_report(db: ConnectionManager = Depends(get_db)):
    """The most recently created invoice."""
    return await billing_service.latest_invoice(db)


@router.get("/low-stock", response_model=List[InventoryItemResponse])
async def low_stock_report(db: ConnectionManager = Depends(get_db)):
    return await inventory_service.low_stock(db)
