"""Unit tests for CredentialStoreFactory class."""

from pathlib import Path

import pytest
from pydantic import SecretStr
from pytest_mock import MockerFixture

from authentication.credential_store_factory import CredentialStoreFactory
from authentication.database_credential_store import DatabaseCredentialStore
from authentication.in_memory_credential_store import InMemoryCredentialStore
from constants import STORE_TYPE_MEMORY, STORE_TYPE_POSTGRES, STORE_TYPE_SQLITE
from models.config import (
    PostgreSQLDatabaseConfiguration,
    SQLiteDatabaseConfiguration,
    StoreConfiguration,
)


def test_credential_store_in_memory() -> None:
    """Check if InMemoryCredentialStore is returned for memory configuration."""
    store = CredentialStoreFactory.credential_store(
        StoreConfiguration(type=STORE_TYPE_MEMORY)
    )
    assert isinstance(store, InMemoryCredentialStore)


def test_credential_store_sqlite(tmpdir: Path) -> None:
    """Check if DatabaseCredentialStore is returned for SQLite configuration."""
    config = StoreConfiguration(
        type=STORE_TYPE_SQLITE,
        sqlite=SQLiteDatabaseConfiguration(db_path=str(tmpdir / "test.sqlite")),
    )
    store = CredentialStoreFactory.credential_store(config)
    assert isinstance(store, DatabaseCredentialStore)


def test_credential_store_postgres(mocker: MockerFixture) -> None:
    """Check if DatabaseCredentialStore is returned for PostgreSQL configuration."""
    # don't connect to real PostgreSQL server
    mocker.patch("storage.database_store.connect_pg")
    config = StoreConfiguration(
        type=STORE_TYPE_POSTGRES,
        postgres=PostgreSQLDatabaseConfiguration(
            db="database", user="user", password=SecretStr("password")
        ),
    )
    store = CredentialStoreFactory.credential_store(config)
    assert isinstance(store, DatabaseCredentialStore)


def test_credential_store_wrong_type() -> None:
    """Check if wrong store type is detected properly."""
    config = StoreConfiguration(type=STORE_TYPE_MEMORY).model_copy(
        update={"type": "foo"}
    )
    with pytest.raises(ValueError, match="Invalid credential store type"):
        CredentialStoreFactory.credential_store(config)
