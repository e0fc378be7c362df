import asyncio
import logging
import ssl
from contextlib import asynccontextmanager
from enum import Enum
from typing import Any, AsyncIterator, Dict, Optional

from tortoise import Tortoise, connections
from tortoise.exceptions import BaseORMException, DBConnectionError
from tortoise.transactions import in_transaction

from bizops.core import config
from bizops.core.exceptions import ConnectionLost, StorageFailure

# Set logging level for Tortoise ORM
logging.getLogger("tortoise").setLevel(logging.INFO)
log = logging.getLogger("bizops.db")

# Define all models modules for the ORM
MODELS_MODULES = [
    "bizops.models.inventory",
    "bizops.models.order",
    "bizops.models.invoice",
    "bizops.models.client",
    "bizops.models.user",
]

# MySQL client errors: server gone away, lost connection during query, lost connection to server
LOST_CONNECTION_CODES = {2006, 2013, 2055}

CONNECT_ERRORS = (BaseORMException, OSError, asyncio.TimeoutError)


class ConnectionState(str, Enum):
    CONNECTING = "connecting"
    CONNECTED = "connected"
    LOST = "lost"
    FAILED = "failed"
    CLOSED = "closed"


def _ssl_context() -> Optional[ssl.SSLContext]:
    if not config.DB_SSL_CA:
        return None
    # Verifies both the certificate chain and the host name
    return ssl.create_default_context(cafile=config.DB_SSL_CA)


def build_tortoise_config(db_url: Optional[str] = None) -> Dict[str, Any]:
    """Builds the Tortoise config from DATABASE_URL or the DB_* settings."""
    db_url = db_url or config.DATABASE_URL
    if db_url:
        connection: Any = db_url
    else:
        credentials: Dict[str, Any] = {
            "host": config.DB_HOST,
            "port": config.DB_PORT,
            "user": config.DB_USER,
            "password": config.DB_PASSWORD,
            "database": config.DB_DATABASE,
            "minsize": config.DB_POOL_MIN,
            "maxsize": config.DB_POOL_MAX,
            "connect_timeout": config.DB_CONNECT_TIMEOUT,
        }
        ssl_ctx = _ssl_context()
        if ssl_ctx is not None:
            credentials["ssl"] = ssl_ctx
        connection = {"engine": "tortoise.backends.mysql", "credentials": credentials}

    return {
        "connections": {"default": connection},
        "apps": {"models": {"models": MODELS_MODULES, "default_connection": "default"}},
    }


def is_connection_lost(exc: BaseException) -> bool:
    """True for transport-level failures, as opposed to query or constraint errors."""
    if isinstance(exc, (DBConnectionError, ConnectionError)):
        return True
    # Tortoise wraps driver errors: OperationalError(pymysql.err.OperationalError(2013, "..."))
    for arg in exc.args:
        if isinstance(arg, ConnectionError):
            return True
        code = arg.args[0] if isinstance(arg, BaseException) and arg.args else arg
        if isinstance(code, int) and code in LOST_CONNECTION_CODES:
            return True
    return False


class ConnectionManager:
    """
    Owns the pooled database connection for the process.

    Created at startup, stored on app.state and handed to the service layer
    through a dependency. A background supervisor pings the database and
    reconnects with exponential backoff; the current state is reported by
    the /health endpoint instead of crashing the process.
    """

    def __init__(
        self,
        tortoise_config: Optional[Dict[str, Any]] = None,
        connection_name: str = "default",
        retry_delay: float = config.DB_RETRY_DELAY,
        max_delay: float = config.DB_RETRY_MAX_DELAY,
        max_attempts: int = config.DB_MAX_ATTEMPTS,
        health_interval: float = config.DB_HEALTH_INTERVAL,
        generate_schemas: bool = config.DB_GENERATE_SCHEMAS,
    ):
        self._tortoise_config = tortoise_config
        self.connection_name = connection_name
        self.retry_delay = retry_delay
        self.max_delay = max_delay
        self.max_attempts = max_attempts
        self.health_interval = health_interval
        self.generate_schemas = generate_schemas

        self.state = ConnectionState.CLOSED
        self.attempts = 0
        self.last_error: Optional[str] = None
        self._lost = asyncio.Event()
        self._supervisor: Optional[asyncio.Task] = None

    @property
    def is_connected(self) -> bool:
        return self.state is ConnectionState.CONNECTED

    def health(self) -> Dict[str, Any]:
        return {
            "state": self.state.value,
            "attempts": self.attempts,
            "last_error": self.last_error,
        }

    # ----------- Lifecycle -----------

    async def start(self) -> None:
        """Connects and supervises in the background so the server can start without a database."""
        self._supervisor = asyncio.create_task(self._run(), name="db-supervisor")

    async def connect(self) -> bool:
        """
        Opens the connection, retrying with exponential backoff.
        Returns False once max_attempts is exhausted.
        """
        delay = self.retry_delay
        for attempt in range(1, self.max_attempts + 1):
            self.state = ConnectionState.CONNECTING
            self.attempts = attempt
            try:
                await self._open()
            except CONNECT_ERRORS as exc:
                self.last_error = str(exc)
                log.error(f"Database connection attempt {attempt}/{self.max_attempts} failed: {exc}")
                await self._discard()
                if attempt == self.max_attempts:
                    break
                log.info(f"Retrying database connection in {delay:.1f}s")
                await asyncio.sleep(delay)
                delay = min(delay * 2, self.max_delay)
            else:
                self.state = ConnectionState.CONNECTED
                self.last_error = None
                self._lost.clear()
                log.info("Database connection established.")
                return True

        self.state = ConnectionState.FAILED
        log.critical(f"Could not connect to the database after {self.max_attempts} attempts.")
        return False

    async def reconnect(self) -> bool:
        self.state = ConnectionState.LOST
        log.warning("Reconnecting to the database...")
        await self._discard()
        self._lost.clear()
        return await self.connect()

    async def close(self) -> None:
        """Stops the supervisor and closes all connections."""
        if self._supervisor is not None:
            self._supervisor.cancel()
            try:
                await self._supervisor
            except asyncio.CancelledError:
                pass
            self._supervisor = None
        self.state = ConnectionState.CLOSED
        await Tortoise.close_connections()
        log.info("Database connections closed.")

    async def ping(self) -> bool:
        try:
            await connections.get(self.connection_name).execute_query("SELECT 1")
        except CONNECT_ERRORS as exc:
            self.last_error = str(exc)
            log.warning(f"Database health check failed: {exc}")
            return False
        return True

    def notify_connection_lost(self) -> None:
        """Wakes the supervisor; requests fail with StorageFailure until it reconnects."""
        if self.state is ConnectionState.CONNECTED:
            self.state = ConnectionState.LOST
            self._lost.set()

    async def _open(self) -> None:
        await Tortoise.init(config=self._tortoise_config or build_tortoise_config())
        # Tortoise connects lazily; force a round trip so failures surface here
        await connections.get(self.connection_name).execute_query("SELECT 1")
        if self.generate_schemas:
            await Tortoise.generate_schemas(safe=True)

    async def _discard(self) -> None:
        try:
            await Tortoise.close_connections()
        except CONNECT_ERRORS as exc:
            log.debug(f"Ignoring error while discarding connections: {exc}")

    async def _run(self) -> None:
        # Runs until close() cancels it; a failed round only pauses before the next one
        while True:
            if await self.connect():
                await self._supervise()
            log.warning(f"Database unavailable; next connection round in {self.health_interval:.1f}s")
            await asyncio.sleep(self.health_interval)

    async def _supervise(self) -> None:
        """Returns when a reconnect round fails, leaving the state at FAILED."""
        while self.state is not ConnectionState.CLOSED:
            try:
                await asyncio.wait_for(self._lost.wait(), timeout=self.health_interval)
            except asyncio.TimeoutError:
                pass
            if self._lost.is_set() or not await self.ping():
                if not await self.reconnect():
                    return

    # ----------- Unit of work -----------

    def _require_connection(self) -> None:
        if not self.is_connected:
            raise StorageFailure(f"Database unavailable ({self.state.value})")

    def _storage_failure(self, exc: BaseException) -> StorageFailure:
        if is_connection_lost(exc):
            log.warning(f"Database connection lost: {exc}")
            self.notify_connection_lost()
            return ConnectionLost(str(exc))
        return StorageFailure(str(exc))

    @asynccontextmanager
    async def session(self) -> AsyncIterator[Any]:
        """Runs plain statements on the shared pool, translating storage errors."""
        self._require_connection()
        try:
            yield connections.get(self.connection_name)
        except (BaseORMException, OSError) as exc:
            raise self._storage_failure(exc) from exc

    @asynccontextmanager
    async def transaction(self) -> AsyncIterator[Any]:
        """
        Runs the block in one database transaction. Any exception raised inside
        rolls it back; storage errors are re-raised as StorageFailure.
        """
        self._require_connection()
        try:
            async with in_transaction(self.connection_name) as conn:
                yield conn
        except (BaseORMException, OSError) as exc:
            raise self._storage_failure(exc) from exc
