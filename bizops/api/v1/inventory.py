import logging
from typing import List

from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.inventory import InventoryItemRequest, InventoryItemResponse, StockUpdateRequest
from bizops.schemas.response import MessageResponse
from bizops.services import inventory_service

log = logging.getLogger("bizops.api.inventory")

router = APIRouter()


@router.get("", response_model=List[InventoryItemResponse])
async def list_inventory_endpoint(db: ConnectionManager = Depends(get_db)):
    return await inventory_service.list_inventory(db)


@router.post("", response_model=MessageResponse)
async def add_inventory_item(item_data: InventoryItemRequest, db: ConnectionManager = Depends(get_db)):
    item_id = await inventory_service.add_item(db, item_data)
    return MessageResponse(message="Inventory item added", id=item_id)


# Declared before /{item_id} so "updateStock" is not parsed as an id
@router.put("/updateStock", response_model=MessageResponse, response_model_exclude_none=True)
async def update_stock(payload: StockUpdateRequest, db: ConnectionManager = Depends(get_db)):
    """Deducts stock for a product; refuses to go below zero."""
    await inventory_service.deduct_stock(db, payload.product_name, payload.quantity)
    return MessageResponse(message="Inventory stock updated")


@router.put("/{item_id}", response_model=MessageResponse, response_model_exclude_none=True)
async def update_inventory_item(item_id: int, item_data: InventoryItemRequest, db: ConnectionManager = Depends(get_db)):
    await inventory_service.update_item(db, item_id, item_data)
    return MessageResponse(message="Inventory item updated")


@router.delete("/{item_id}", response_model=MessageResponse, response_model_exclude_none=True)
async def delete_inventory_item(item_id: int, db: ConnectionManager = Depends(get_db)):
    await inventory_service.delete_item(db, item_id)
    log.info(f"Inventory item {item_id} deleted")
    return MessageResponse(message="Inventory item deleted")
