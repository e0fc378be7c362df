from fastapi import Request

from bizops.core.db import ConnectionManager


def get_db(request: Request) -> ConnectionManager:
    """The connection manager created in the application lifespan."""
    return request.app.state.db
