import asyncio
import logging
from decimal import Decimal

from tortoise.expressions import F

from bizops.core.config import ORDER_TIMEOUT
from bizops.core.db import ConnectionManager
from bizops.core.exceptions import (
    AmbiguousProduct,
    InsufficientStock,
    InvalidArgument,
    ProductNotFound,
    WorkflowTimeout,
)
from bizops.models import InventoryItem, Invoice, Order
from bizops.schemas.order import OrderPlacement, OrderRequest
from bizops.services.records import order_records

log = logging.getLogger("bizops.orders")

CENTS = Decimal("0.01")
INVOICE_STATUS = "Pending"


async def place_order(db: ConnectionManager, request: OrderRequest, timeout: float = ORDER_TIMEOUT) -> OrderPlacement:
    """
    Places an order: checks stock, creates the Order and its Invoice and
    deducts stock, all in one transaction. Either everything commits or
    nothing is visible.

    The workflow is bounded by `timeout`. On expiry the transaction is
    cancelled and rolled back; callers should re-read orders and inventory
    before retrying.
    """
    if request.quantity <= 0:
        raise InvalidArgument(f"Quantity must be a positive integer, got {request.quantity}")

    try:
        return await asyncio.wait_for(_place_order(db, request), timeout=timeout)
    except asyncio.TimeoutError:
        log.error(f"Order placement for '{request.product_name}' timed out after {timeout}s")
        raise WorkflowTimeout()


async def _place_order(db: ConnectionManager, request: OrderRequest) -> OrderPlacement:
    async with db.transaction() as conn:
        # 1. Lock the product row so concurrent orders on it queue up here
        items = await (
            InventoryItem.filter(product_name=request.product_name)
            .limit(2)
            .select_for_update()
            .using_db(conn)
        )
        if not items:
            raise ProductNotFound(f"Product not found: {request.product_name}")
        if len(items) > 1:
            raise AmbiguousProduct(f"Product name '{request.product_name}' matches more than one inventory item")
        item = items[0]

        # 2. Availability check; nothing has been written yet
        if item.stock_quantity < request.quantity:
            log.info(
                f"Rejected order for '{item.product_name}': requested {request.quantity}, "
                f"available {item.stock_quantity}"
            )
            raise InsufficientStock()

        amount = (item.price * request.quantity).quantize(CENTS)

        # 3. Order header and its invoice
        order = await Order.create(
            client_name=request.client_name,
            product_name=item.product_name,
            quantity=request.quantity,
            order_date=request.order_date,
            status=request.status,
            using_db=conn,
        )
        invoice = await Invoice.create(
            order=order,
            amount=amount,
            due_date=request.order_date,
            status=INVOICE_STATUS,
            using_db=conn,
        )

        # 4. Conditional decrement. Zero rows means another writer took the
        # stock; raising here rolls back the order and invoice above.
        updated = await (
            InventoryItem.filter(id=item.id, stock_quantity__gte=request.quantity)
            .using_db(conn)
            .update(stock_quantity=F("stock_quantity") - request.quantity)
        )
        if not updated:
            raise InsufficientStock()

    remaining = item.stock_quantity - request.quantity
    log.info(f"Order {order.id} placed for {request.client_name}: {request.quantity} x {item.product_name} = {amount}")
    if remaining <= item.reorder_threshold:
        log.warning(
            f"Low stock for '{item.product_name}': {remaining} left, reorder threshold {item.reorder_threshold}"
        )

    return OrderPlacement(order_id=order.id, invoice_id=invoice.id, amount=amount)


async def list_orders(db: ConnectionManager):
    """Lists all orders, oldest first."""
    return await order_records.list_all(db)
