from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class ClientRequest(BaseModel):
    name: str = Field(..., min_length=1)
    email: Optional[str] = None
    contact_number: Optional[str] = None
    address: Optional[str] = None


class ClientResponse(ClientRequest):
    model_config = ConfigDict(from_attributes=True)

    id: int
    created_at: Optional[datetime] = None
