import logging
from typing import List

from tortoise.expressions import F

from bizops.core.db import ConnectionManager
from bizops.core.exceptions import InsufficientStock, InvalidArgument, ProductNotFound, RecordNotFound
from bizops.models import InventoryItem
from bizops.schemas.inventory import InventoryItemRequest
from bizops.services.records import inventory_records

log = logging.getLogger("bizops.inventory")


async def list_inventory(db: ConnectionManager) -> List[InventoryItem]:
    return await inventory_records.list_all(db)


async def add_item(db: ConnectionManager, item: InventoryItemRequest) -> int:
    item_id = await inventory_records.insert(db, **item.model_dump())
    log.info(f"Inventory item {item_id} added: {item.product_name}")
    return item_id


async def update_item(db: ConnectionManager, item_id: int, item: InventoryItemRequest) -> None:
    if not await inventory_records.update(db, item_id, **item.model_dump()):
        raise RecordNotFound(f"Inventory item {item_id} not found")


async def delete_item(db: ConnectionManager, item_id: int) -> None:
    if not await inventory_records.delete(db, item_id):
        raise RecordNotFound(f"Inventory item {item_id} not found")


async def deduct_stock(db: ConnectionManager, product_name: str, quantity: int) -> None:
    """
    Deducts stock outside of order placement with a single conditional
    update, so stock can never go below zero.
    """
    if quantity <= 0:
        raise InvalidArgument(f"Quantity must be a positive integer, got {quantity}")

    async with db.session() as conn:
        updated = await (
            InventoryItem.filter(product_name=product_name, stock_quantity__gte=quantity)
            .using_db(conn)
            .update(stock_quantity=F("stock_quantity") - quantity)
        )
        if updated:
            log.info(f"Deducted {quantity} from '{product_name}'")
            return
        # Nothing changed: tell a missing product apart from a short one
        if not await InventoryItem.filter(product_name=product_name).using_db(conn).exists():
            raise ProductNotFound(f"Product not found: {product_name}")
    raise InsufficientStock()


async def low_stock(db: ConnectionManager) -> List[InventoryItem]:
    """Items at or below their reorder threshold."""
    items = await inventory_records.list_all(db)
    return [item for item in items if item.stock_quantity <= item.reorder_threshold]
