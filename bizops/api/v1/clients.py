from typing import List

from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.client import ClientRequest, ClientResponse
from bizops.schemas.response import MessageResponse
from bizops.services import client_service

router = APIRouter()


@router.get("", response_model=List[ClientResponse])
async def list_clients_endpoint(db: ConnectionManager = Depends(get_db)):
    return await client_service.list_clients(db)


@router.post("", response_model=MessageResponse)
async def add_client_endpoint(client_data: ClientRequest, db: ConnectionManager = Depends(get_db)):
    client_id = await client_service.add_client(db, client_data)
    return MessageResponse(message="Client added", id=client_id)
