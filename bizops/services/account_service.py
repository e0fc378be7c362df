import logging

from werkzeug.security import check_password_hash, generate_password_hash

from bizops.core.db import ConnectionManager
from bizops.core.exceptions import InvalidCredentials
from bizops.models import User
from bizops.services.records import user_records

log = logging.getLogger("bizops.accounts")


async def register(db: ConnectionManager, email: str, password: str) -> int:
    user_id = await user_records.insert(db, email=email, password=generate_password_hash(password))
    log.info(f"User {user_id} registered")
    return user_id


async def login(db: ConnectionManager, email: str, password: str) -> User:
    """Returns the user when the password matches, otherwise raises InvalidCredentials."""
    async with db.session() as conn:
        user = await User.get_or_none(email=email).using_db(conn)
    # Same error for unknown email and wrong password
    if user is None or not check_password_hash(user.password, password):
        log.info("Rejected login attempt")
        raise InvalidCredentials()
    return user
