# bizops/scripts/seed_data.py
import asyncio
import logging
from decimal import Decimal

from bizops.core.db import ConnectionManager
from bizops.models import Client, InventoryItem

log = logging.getLogger("bizops.seed")

INVENTORY = [
    # product_name, stock_quantity, reorder_threshold, price
    ("Printer Paper A4", 200, 20, Decimal("4.99")),
    ("Toner Cartridge", 15, 5, Decimal("59.00")),
    ("Stapler", 40, 10, Decimal("2.50")),
]


async def seed(db: ConnectionManager):
    async with db.session() as conn:
        for name, stock, threshold, price in INVENTORY:
            item, created = await InventoryItem.get_or_create(
                product_name=name,
                defaults={"stock_quantity": stock, "reorder_threshold": threshold, "price": price},
                using_db=conn,
            )
            # If existing, reset quantities (idempotent)
            if not created:
                item.stock_quantity = stock
                await item.save(using_db=conn)
            log.info(f"Inventory item {item.id}: {name} ({stock} in stock)")

        client, _ = await Client.get_or_create(
            name="Demo Client",
            defaults={"email": "demo@example.com", "contact_number": "555-0100"},
            using_db=conn,
        )
        log.info(f"Client {client.id}: {client.name}")


async def main():
    db = ConnectionManager()
    if not await db.connect():
        raise SystemExit("Could not connect to the database.")
    try:
        await seed(db)
    finally:
        await db.close()


if __name__ == "__main__":
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(name)s - %(levelname)s - %(message)s')
    asyncio.run(main())
