from typing import List

from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.invoice import InvoiceResponse
from bizops.services import billing_service

router = APIRouter()


@router.get("", response_model=List[InvoiceResponse])
async def list_invoices_endpoint(db: ConnectionManager = Depends(get_db)):
    return await billing_service.list_invoices(db)
