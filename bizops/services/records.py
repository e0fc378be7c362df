from typing import Any, Generic, List, Optional, Type, TypeVar

from tortoise import models

from bizops.core.db import ConnectionManager
from bizops.models import Client, InventoryItem, Invoice, Order, User

ModelT = TypeVar("ModelT", bound=models.Model)


class RecordAccess(Generic[ModelT]):
    """
    Single-statement CRUD for one table.

    Every call runs through ConnectionManager.session(), so ORM and driver
    errors reach the caller as StorageFailure with the underlying message.
    Nothing is retried.
    """

    def __init__(self, model: Type[ModelT]):
        self.model = model

    async def list_all(self, db: ConnectionManager) -> List[ModelT]:
        async with db.session() as conn:
            return await self.model.all().order_by("id").using_db(conn)

    async def get(self, db: ConnectionManager, record_id: int) -> Optional[ModelT]:
        async with db.session() as conn:
            return await self.model.get_or_none(id=record_id).using_db(conn)

    async def insert(self, db: ConnectionManager, **fields: Any) -> int:
        """Inserts a row and returns its generated id."""
        async with db.session() as conn:
            record = await self.model.create(using_db=conn, **fields)
        return record.id

    async def update(self, db: ConnectionManager, record_id: int, **fields: Any) -> int:
        """Updates a row by id and returns the number of rows affected."""
        async with db.session() as conn:
            return await self.model.filter(id=record_id).using_db(conn).update(**fields)

    async def delete(self, db: ConnectionManager, record_id: int) -> int:
        """Deletes a row by id and returns the number of rows affected."""
        async with db.session() as conn:
            return await self.model.filter(id=record_id).using_db(conn).delete()


inventory_records = RecordAccess(InventoryItem)
order_records = RecordAccess(Order)
invoice_records = RecordAccess(Invoice)
client_records = RecordAccess(Client)
user_records = RecordAccess(User)
