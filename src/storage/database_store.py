"""Common base for stores persisted in SQLite or PostgreSQL.

The store keeps one connection. Statements are selected per database dialect
by the concrete store: PostgreSQL uses `%s` placeholders, SQLite uses `?`.
Every public operation of a concrete store is wrapped with the
`utils.connection_decorator.connection` decorator, so a lost connection is
re-established lazily before the operation runs.
"""

import sqlite3
from abc import ABC, abstractmethod
from typing import Any, Optional

import psycopg2

from log import get_logger
from models.config import (
    PostgreSQLDatabaseConfiguration,
    SQLiteDatabaseConfiguration,
    StoreConfiguration,
)
from storage.connect_pg import connect_pg
from storage.connect_sqlite import connect_sqlite

logger = get_logger(__name__)


class DatabaseStore(ABC):
    """Base class for stores persisted in a relational database."""

    # error raised by operations when the store is disconnected
    disconnected_error: type[Exception] = ConnectionError

    def __init__(self, config: StoreConfiguration) -> None:
        """Store connection configuration and connect to the database."""
        self.sqlite_connection_config: Optional[SQLiteDatabaseConfiguration] = (
            config.sqlite
        )
        self.postgres_connection_config: Optional[PostgreSQLDatabaseConfiguration] = (
            config.postgres
        )
        self.connection: Any = None
        self.connect()

    @abstractmethod
    def _initialize_tables(self) -> None:
        """Initialize tables and indexes."""

    # pylint: disable=W0201
    def connect(self) -> None:
        """Initialize connection to database."""
        logger.info("Initializing connection to %s", self.__class__.__name__)
        if self.postgres_connection_config is not None:
            self.connection = connect_pg(self.postgres_connection_config)
        if self.sqlite_connection_config is not None:
            self.connection = connect_sqlite(self.sqlite_connection_config)

        try:
            self._initialize_tables()
        except Exception as e:
            self.connection.close()
            logger.exception("Error initializing database tables:\n%s", e)
            raise

    def connected(self) -> bool:
        """Check if connection to storage is alive."""
        if self.connection is None:
            logger.warning("Not connected, need to reconnect later")
            return False
        cursor = None
        try:
            cursor = self.connection.cursor()
            cursor.execute("SELECT 1")
            return True
        except (psycopg2.OperationalError, sqlite3.Error) as e:
            logger.error("Disconnected from storage: %s", e)
            return False
        finally:
            if cursor is not None:
                try:
                    cursor.close()
                except Exception:  # pylint: disable=broad-exception-caught
                    logger.warning("Unable to close cursor")

    def ready(self) -> bool:
        """Check if the store is ready to serve requests."""
        return self.connected()

    def _statement(self, postgres: str, sqlite: str) -> str:
        """Select statement for the configured database."""
        if self.postgres_connection_config is not None:
            return postgres
        return sqlite

    def _cursor(self, operation: str) -> Any:
        """Return new cursor, raising the store error when disconnected."""
        if self.connection is None:
            logger.error("%s is disconnected", self.__class__.__name__)
            raise self.disconnected_error(f"{operation}: store is disconnected")
        return self.connection.cursor()

    def _execute_script(self, *statements: str) -> None:
        """Execute DDL statements and commit."""
        cursor = self.connection.cursor()
        for statement in statements:
            cursor.execute(statement)
        cursor.close()
        self.connection.commit()
