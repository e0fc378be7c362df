from fastapi import APIRouter, Depends

from bizops.api.deps import get_db
from bizops.core.db import ConnectionManager
from bizops.schemas.response import MessageResponse
from bizops.schemas.users import Credentials, LoginResponse, UserResponse
from bizops.services import account_service

router = APIRouter()


@router.post("/register", response_model=MessageResponse)
async def register_endpoint(credentials: Credentials, db: ConnectionManager = Depends(get_db)):
    user_id = await account_service.register(db, credentials.email, credentials.password)
    return MessageResponse(message="User registered successfully", id=user_id)


@router.post("/login", response_model=LoginResponse)
async def login_endpoint(credentials: Credentials, db: ConnectionManager = Depends(get_db)):
    """Verifies credentials only; no session or token is issued."""
    user = await account_service.login(db, credentials.email, credentials.password)
    return LoginResponse(user=UserResponse.model_validate(user))
