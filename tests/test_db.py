import asyncio
from unittest.mock import AsyncMock, call, patch

import pytest
from tortoise.exceptions import DBConnectionError, IntegrityError, OperationalError

from bizops.core.db import ConnectionManager, ConnectionState, build_tortoise_config, is_connection_lost
from bizops.core.exceptions import ConnectionLost, StorageFailure
from bizops.models import Client


def unreachable_manager(**kwargs):
    """Manager whose _open/_discard never touch a real database."""
    manager = ConnectionManager(build_tortoise_config("sqlite://:memory:"), **kwargs)
    manager._discard = AsyncMock()
    return manager


async def wait_for_condition(predicate, timeout=1.0):
    deadline = asyncio.get_running_loop().time() + timeout
    while not predicate():
        if asyncio.get_running_loop().time() > deadline:
            return False
        await asyncio.sleep(0.01)
    return True


async def wait_for_state(manager, state, timeout=1.0):
    return await wait_for_condition(lambda: manager.state is state, timeout)


class TestConnect:
    @pytest.mark.asyncio
    async def test_retries_with_backoff_until_connected(self):
        manager = unreachable_manager(retry_delay=5, max_delay=60, max_attempts=5)
        manager._open = AsyncMock(side_effect=[DBConnectionError("refused"), DBConnectionError("refused"), None])

        with patch("bizops.core.db.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            connected = await manager.connect()

        assert connected
        assert manager.state is ConnectionState.CONNECTED
        assert manager.attempts == 3
        assert manager.last_error is None
        assert mock_sleep.await_args_list == [call(5), call(10)]

    @pytest.mark.asyncio
    async def test_gives_up_after_max_attempts(self):
        manager = unreachable_manager(retry_delay=5, max_delay=8, max_attempts=3)
        manager._open = AsyncMock(side_effect=OSError("certificate file not found"))

        with patch("bizops.core.db.asyncio.sleep", new_callable=AsyncMock) as mock_sleep:
            connected = await manager.connect()

        assert not connected
        assert manager.state is ConnectionState.FAILED
        assert manager.attempts == 3
        assert manager.last_error == "certificate file not found"
        # Backoff is capped at max_delay and there is no sleep after the last attempt
        assert mock_sleep.await_args_list == [call(5), call(8)]
        assert manager._discard.await_count == 3

    @pytest.mark.asyncio
    async def test_connects_to_sqlite(self, db):
        assert db.is_connected
        assert await db.ping()
        assert db.health()["state"] == "connected"


class TestUnitOfWork:
    @pytest.mark.asyncio
    async def test_refuses_work_when_not_connected(self):
        manager = ConnectionManager()

        with pytest.raises(StorageFailure) as excinfo:
            async with manager.session():
                pass

        assert excinfo.value.message == "Database unavailable (closed)"

    @pytest.mark.asyncio
    async def test_storage_errors_become_storage_failure(self, db):
        with pytest.raises(StorageFailure) as excinfo:
            async with db.session():
                raise IntegrityError("UNIQUE constraint failed: users.email")

        assert not isinstance(excinfo.value, ConnectionLost)
        assert "UNIQUE constraint failed" in excinfo.value.message
        assert db.is_connected

    @pytest.mark.asyncio
    async def test_lost_connection_wakes_supervisor(self, db):
        with pytest.raises(ConnectionLost):
            async with db.session():
                raise OperationalError(ConnectionResetError("Connection reset by peer"))

        assert db.state is ConnectionState.LOST
        assert db._lost.is_set()

    @pytest.mark.asyncio
    async def test_transaction_rolls_back_on_error(self, db):
        with pytest.raises(RuntimeError):
            async with db.transaction() as conn:
                await Client.create(name="Ghost", using_db=conn)
                raise RuntimeError("abort")

        assert await Client.all().count() == 0


class TestSupervisor:
    @pytest.mark.asyncio
    async def test_reconnects_after_lost_connection(self, db):
        db.notify_connection_lost()

        assert await db.reconnect()
        assert db.is_connected
        assert not db._lost.is_set()

    @pytest.mark.asyncio
    async def test_supervise_returns_when_reconnect_fails(self, db):
        db.reconnect = AsyncMock(return_value=False)
        db.notify_connection_lost()

        await db._supervise()

        db.reconnect.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_failed_startup_round_is_retried(self):
        """Exhausting max_attempts at startup is not the end: a later round connects."""
        manager = unreachable_manager(retry_delay=0, max_attempts=2, health_interval=0.01)
        manager._open = AsyncMock(side_effect=[DBConnectionError("refused"), DBConnectionError("refused"), None])
        manager.ping = AsyncMock(return_value=True)

        await manager.start()
        try:
            assert await wait_for_state(manager, ConnectionState.CONNECTED)
            assert manager._open.await_count == 3
        finally:
            with patch("bizops.core.db.Tortoise.close_connections", new_callable=AsyncMock):
                await manager.close()

    @pytest.mark.asyncio
    async def test_failed_reconnect_round_is_retried(self):
        manager = unreachable_manager(retry_delay=0, max_attempts=2, health_interval=0.01)
        manager._open = AsyncMock(
            side_effect=[None, DBConnectionError("gone away"), DBConnectionError("gone away"), None]
        )
        manager.ping = AsyncMock(return_value=True)

        await manager.start()
        try:
            assert await wait_for_state(manager, ConnectionState.CONNECTED)
            manager.notify_connection_lost()

            assert await wait_for_condition(lambda: manager._open.await_count == 4)
            assert await wait_for_state(manager, ConnectionState.CONNECTED)
        finally:
            with patch("bizops.core.db.Tortoise.close_connections", new_callable=AsyncMock):
                await manager.close()

        assert manager.state is ConnectionState.CLOSED

    @pytest.mark.asyncio
    async def test_close_is_reported_as_closed(self, db):
        await db.close()

        assert db.state is ConnectionState.CLOSED
        assert db.health()["state"] == "closed"


@pytest.mark.parametrize(
    "exc, lost",
    [
        (DBConnectionError("can't connect"), True),
        (OperationalError(Exception(2013, "Lost connection to MySQL server during query")), True),
        (OperationalError(Exception(2006, "MySQL server has gone away")), True),
        (OperationalError(BrokenPipeError("broken pipe")), True),
        (OperationalError(Exception(1064, "You have an error in your SQL syntax")), False),
        (IntegrityError(Exception(1062, "Duplicate entry")), False),
    ],
)
def test_is_connection_lost(exc, lost):
    assert is_connection_lost(exc) is lost


def test_mysql_config_without_tls(monkeypatch):
    monkeypatch.setattr("bizops.core.config.DATABASE_URL", None)
    monkeypatch.setattr("bizops.core.config.DB_SSL_CA", "")
    monkeypatch.setattr("bizops.core.config.DB_HOST", "db.internal")
    monkeypatch.setattr("bizops.core.config.DB_CONNECT_TIMEOUT", 30)

    connection = build_tortoise_config()["connections"]["default"]

    assert connection["engine"] == "tortoise.backends.mysql"
    assert connection["credentials"]["host"] == "db.internal"
    assert connection["credentials"]["connect_timeout"] == 30
    assert connection["credentials"]["maxsize"] >= connection["credentials"]["minsize"]
    assert "ssl" not in connection["credentials"]


def test_missing_certificate_fails_config(monkeypatch):
    monkeypatch.setattr("bizops.core.config.DATABASE_URL", None)
    monkeypatch.setattr("bizops.core.config.DB_SSL_CA", "/nonexistent/ca.pem")

    with pytest.raises(OSError):
        build_tortoise_config()
