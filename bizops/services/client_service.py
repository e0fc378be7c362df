from typing import List

from bizops.core.db import ConnectionManager
from bizops.models import Client
from bizops.schemas.client import ClientRequest
from bizops.services.records import client_records


async def list_clients(db: ConnectionManager) -> List[Client]:
    return await client_records.list_all(db)


async def add_client(db: ConnectionManager, client: ClientRequest) -> int:
    # No dedup: posting the same client twice creates two rows
    return await client_records.insert(db, **client.model_dump())
