"""Credential store persisted in SQLite or PostgreSQL.

Tokens are never stored in plain text, records are keyed by the SHA-256 hash
of the token.
"""

import json
from datetime import UTC, datetime
from typing import Any, Optional

from authentication.auth_error import CredentialNotFoundError, CredentialStoreError
from authentication.credential_store import CredentialStore
from authentication.sql import (
    CREATE_CREDENTIALS_TABLE,
    DELETE_CREDENTIAL_PG,
    DELETE_CREDENTIAL_SQLITE,
    INCREMENT_REQUESTS_PG,
    INCREMENT_REQUESTS_SQLITE,
    INSERT_CREDENTIAL_PG,
    INSERT_CREDENTIAL_SQLITE,
    SELECT_CREDENTIAL_PG,
    SELECT_CREDENTIAL_SQLITE,
    UPDATE_CREDENTIAL_PG,
    UPDATE_CREDENTIAL_SQLITE,
)
from log import get_logger
from models.credential import (
    AllowedEndpoints,
    CredentialRecord,
    CredentialStatus,
    NewCredential,
)
from storage.database_store import DatabaseStore
from utils.connection_decorator import connection
from utils.fingerprint import generate_fingerprint

logger = get_logger(__name__)


class DatabaseCredentialStore(DatabaseStore, CredentialStore):
    """Credential store persisted in a relational database."""

    disconnected_error = CredentialStoreError

    def _initialize_tables(self) -> None:
        """Initialize tables used by credential store."""
        logger.info("Initializing tables for credential store")
        self._execute_script(CREATE_CREDENTIALS_TABLE)

    @connection
    async def verify(self, token: str) -> bool:
        """Check that the token is known and active."""
        record = self._select(token)
        return record is not None and record.status == CredentialStatus.ACTIVE

    @connection
    async def add(self, token: str, credential: NewCredential) -> CredentialRecord:
        """Add new credential."""
        if not credential.owner_id:
            raise CredentialStoreError("Owner ID is required to create a credential")
        record = CredentialRecord(
            owner_id=credential.owner_id,
            status=credential.status,
            allowed_endpoints=credential.allowed_endpoints,
            request_limit=credential.request_limit,
            last_used=datetime.now(UTC),
        )
        statement = self._statement(INSERT_CREDENTIAL_PG, INSERT_CREDENTIAL_SQLITE)
        cursor = self._cursor("add credential")
        cursor.execute(
            statement,
            (
                _token_hash(token),
                record.owner_id,
                record.status.value,
                json.dumps(record.allowed_endpoints),
                record.request_count,
                record.request_limit,
                record.last_used.timestamp(),
            ),
        )
        cursor.close()
        self.connection.commit()
        logger.info("Added credential for owner %s", record.owner_id)
        return record

    @connection
    async def update(
        self,
        token: str,
        status: Optional[CredentialStatus] = None,
        allowed_endpoints: Optional[AllowedEndpoints] = None,
        request_count: Optional[int] = None,
    ) -> CredentialRecord:
        """Update selected attributes of an existing credential."""
        record = self._select(token)
        if record is None:
            raise CredentialNotFoundError()
        if status is not None:
            record.status = status
        if allowed_endpoints is not None:
            record.allowed_endpoints = allowed_endpoints
        if request_count is not None:
            record.request_count = request_count

        statement = self._statement(UPDATE_CREDENTIAL_PG, UPDATE_CREDENTIAL_SQLITE)
        cursor = self._cursor("update credential")
        cursor.execute(
            statement,
            (
                record.status.value,
                json.dumps(record.allowed_endpoints),
                record.request_count,
                _token_hash(token),
            ),
        )
        cursor.close()
        self.connection.commit()
        return record

    @connection
    async def get(self, token: str) -> Optional[CredentialRecord]:
        """Return the credential record, or None for unknown token."""
        return self._select(token)

    @connection
    async def delete(self, token: str) -> bool:
        """Delete credential."""
        statement = self._statement(DELETE_CREDENTIAL_PG, DELETE_CREDENTIAL_SQLITE)
        cursor = self._cursor("delete credential")
        cursor.execute(statement, (_token_hash(token),))
        deleted = cursor.rowcount > 0
        cursor.close()
        self.connection.commit()
        return deleted

    @connection
    async def increment_requests(self, token: str) -> CredentialRecord:
        """Count one authorized request in a single UPDATE statement."""
        statement = self._statement(INCREMENT_REQUESTS_PG, INCREMENT_REQUESTS_SQLITE)
        cursor = self._cursor("increment requests")
        cursor.execute(statement, (datetime.now(UTC).timestamp(), _token_hash(token)))
        updated = cursor.rowcount
        cursor.close()
        self.connection.commit()
        if updated == 0:
            raise CredentialNotFoundError()
        record = self._select(token)
        if record is None:
            raise CredentialNotFoundError()
        return record

    def _select(self, token: str) -> Optional[CredentialRecord]:
        """Read credential row and convert it into a record."""
        statement = self._statement(SELECT_CREDENTIAL_PG, SELECT_CREDENTIAL_SQLITE)
        cursor = self._cursor("get credential")
        cursor.execute(statement, (_token_hash(token),))
        row = cursor.fetchone()
        cursor.close()
        if row is None:
            return None
        return _record_from_row(row)


def _token_hash(token: str) -> str:
    return generate_fingerprint(token)


def _record_from_row(row: Any) -> CredentialRecord:
    owner_id, status, allowed_endpoints, request_count, request_limit, last_used = row
    return CredentialRecord(
        owner_id=owner_id,
        status=CredentialStatus(status),
        allowed_endpoints=json.loads(allowed_endpoints),
        request_count=request_count,
        request_limit=request_limit,
        last_used=datetime.fromtimestamp(last_used, UTC),
    )
