from typing import Optional

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """Confirmation body for writes; id is set when a row was created."""
    message: str
    id: Optional[int] = None
