from typing import List

from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.order import OrderPlacementResponse, OrderRequest, OrderResponse
from bizops.services.order_service import list_orders, place_order

router = APIRouter()


@router.get("", response_model=List[OrderResponse])
async def list_orders_endpoint(db: ConnectionManager = Depends(get_db)):
    return await list_orders(db)


@router.post("", response_model=OrderPlacementResponse)
async def create_order_endpoint(request_data: OrderRequest, db: ConnectionManager = Depends(get_db)):
    """
    Places an order and creates its invoice. Stock is deducted in the same
    transaction; business-rule rejections come back as 4xx with an `error` field.
    """
    placement = await place_order(db, request_data)
    return OrderPlacementResponse(**placement.model_dump())
