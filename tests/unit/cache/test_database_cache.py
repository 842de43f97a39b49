"""Unit tests for the database response cache store."""

import sqlite3
from pathlib import Path

import pytest
from pydantic import SecretStr
from pytest_mock import MockerFixture

from cache import sql
from cache.cache_error import CacheError
from cache.database_cache import DatabaseCacheStore
from models.cache_record import CachedResponse
from models.config import (
    PostgreSQLDatabaseConfiguration,
    ResponseCacheConfiguration,
    SQLiteDatabaseConfiguration,
)
from utils.fingerprint import generate_fingerprint

FINGERPRINT = generate_fingerprint("query")


# pylint: disable=too-few-public-methods
class CursorMock:
    """Mock class for simulating DB cursor exceptions."""

    def __init__(self):
        """Construct the mock cursor class."""

    def execute(self, command):
        """Execute any SQL command."""
        raise sqlite3.Error("can not SELECT")

    def close(self):
        """Close the cursor."""


# pylint: disable=too-few-public-methods
class ConnectionMock:
    """Mock class for connection."""

    def __init__(self):
        """Construct the connection mock class."""

    def cursor(self):
        """Getter for mock cursor."""
        return CursorMock()


def create_cache(path, admission_threshold=3):
    """Create the cache instance."""
    db_path = str(path / "test.sqlite")
    config = ResponseCacheConfiguration(
        type="sqlite",
        sqlite=SQLiteDatabaseConfiguration(db_path=db_path),
        admission_threshold=admission_threshold,
    )
    return DatabaseCacheStore(config)


def test_cache_initialization(tmpdir):
    """Test that cache is connected after initialization."""
    cache = create_cache(tmpdir)
    assert cache is not None
    assert cache.connection is not None
    assert cache.admission_threshold == 3


def test_cache_initialization_wrong_connection():
    """Test the initialization when DB can not be connected."""
    with pytest.raises(Exception, match="unable to open database file"):
        _ = create_cache(Path("/foo/bar/baz"))


def test_connected_when_connected(tmpdir):
    """Test the connected() method."""
    # cache should be connected by default
    cache = create_cache(tmpdir)
    assert cache.connected() is True
    assert cache.ready() is True


def test_connected_when_disconnected(tmpdir):
    """Test the connected() method."""
    # simulate disconnected cache
    cache = create_cache(tmpdir)
    cache.connection = None
    assert cache.connected() is False
    assert cache.ready() is False


def test_connected_when_connection_error(tmpdir):
    """Test the connected() method."""
    # simulate connection error
    cache = create_cache(tmpdir)
    cache.connection = ConnectionMock()
    assert cache.connection is not None
    assert cache.connected() is False


@pytest.mark.asyncio
async def test_operation_when_disconnected(tmpdir):
    """Test that operation on disconnected store raises cache error."""
    cache = create_cache(tmpdir)
    cache.connection = None
    # no operation for @connection decorator
    cache.connect = lambda: None

    with pytest.raises(CacheError, match="store is disconnected"):
        await cache.get_record(FINGERPRINT)


@pytest.mark.asyncio
async def test_reconnect_before_operation(tmpdir):
    """Test that lost connection is re-established by the operation."""
    cache = create_cache(tmpdir)
    await cache.add_query("query", FINGERPRINT)
    cache.connection = None

    record = await cache.get_record(FINGERPRINT)

    assert record.threshold == 3
    assert cache.connection is not None


@pytest.mark.asyncio
async def test_reconnect_failure(tmpdir, mocker: MockerFixture):
    """Test that failed reconnect is reported as cache error."""
    cache = create_cache(tmpdir)
    cache.connection = None
    mocker.patch(
        "storage.database_store.connect_sqlite",
        side_effect=sqlite3.OperationalError("unable to open database file"),
    )

    with pytest.raises(CacheError, match="unable to reconnect DatabaseCacheStore"):
        await cache.get_record(FINGERPRINT)


@pytest.mark.asyncio
async def test_records_survive_new_store_instance(tmpdir):
    """Test that records are persisted in the database."""
    cache = create_cache(tmpdir)
    await cache.add_query("query", FINGERPRINT)
    await cache.decrement_threshold(FINGERPRINT)
    await cache.cache_response(FINGERPRINT, CachedResponse(kind="json", text="[1]"))

    other = create_cache(tmpdir)
    record = await other.get_record(FINGERPRINT)

    assert record.threshold == 0
    assert record.response.payload("json") == [1]


@pytest.mark.asyncio
async def test_decrement_after_admission(tmpdir):
    """Test that record with cached response is never decremented below zero."""
    cache = create_cache(tmpdir, admission_threshold=1)
    await cache.add_query("query", FINGERPRINT)

    assert await cache.decrement_threshold(FINGERPRINT) == 0
    await cache.cache_response(FINGERPRINT, CachedResponse(kind="text", text="x"))
    assert await cache.decrement_threshold(FINGERPRINT) == 0

    record = await cache.get_record(FINGERPRINT)
    assert record.threshold == 0


def test_postgres_statements_selected(mocker: MockerFixture):
    """Test that PostgreSQL statements are used for PostgreSQL store."""
    mock_connect = mocker.patch("storage.database_store.connect_pg")
    config = ResponseCacheConfiguration(
        type="postgres",
        postgres=PostgreSQLDatabaseConfiguration(
            db="database", user="user", password=SecretStr("password")
        ),
    )

    cache = DatabaseCacheStore(config)

    mock_connect.assert_called_once_with(config.postgres)
    assert cache.connection is mock_connect.return_value
    statement = cache._statement(  # pylint: disable=protected-access
        sql.SELECT_RECORD_PG, sql.SELECT_RECORD_SQLITE
    )
    assert statement == sql.SELECT_RECORD_PG
    cursor = mock_connect.return_value.cursor.return_value
    cursor.execute.assert_any_call(sql.CREATE_RESPONSE_CACHE_TABLE)
    cursor.execute.assert_any_call(sql.CREATE_EXPIRY_INDEX)


def test_initialization_failure_closes_connection(mocker: MockerFixture):
    """Test that connection is closed when tables can not be created."""
    mock_connect = mocker.patch("storage.database_store.connect_pg")
    cursor = mock_connect.return_value.cursor.return_value
    cursor.execute.side_effect = Exception("permission denied")
    config = ResponseCacheConfiguration(
        type="postgres",
        postgres=PostgreSQLDatabaseConfiguration(
            db="database", user="user", password=SecretStr("password")
        ),
    )

    with pytest.raises(Exception, match="permission denied"):
        DatabaseCacheStore(config)

    mock_connect.return_value.close.assert_called_once()
