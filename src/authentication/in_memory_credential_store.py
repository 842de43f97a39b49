"""In-memory credential store implementation."""

import threading
from datetime import UTC, datetime
from typing import Optional

from authentication.auth_error import CredentialNotFoundError, CredentialStoreError
from authentication.credential_store import CredentialStore
from log import get_logger
from models.credential import (
    AllowedEndpoints,
    CredentialRecord,
    CredentialStatus,
    NewCredential,
)

logger = get_logger(__name__)


class InMemoryCredentialStore(CredentialStore):
    """Credential store that keeps records in a lock-guarded dictionary."""

    def __init__(self) -> None:
        """Create a new, empty, credential store."""
        self._credentials: dict[str, CredentialRecord] = {}
        self._lock = threading.Lock()

    async def verify(self, token: str) -> bool:
        """Check that the token is known and active."""
        with self._lock:
            record = self._credentials.get(token)
        return record is not None and record.status == CredentialStatus.ACTIVE

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
        with self._lock:
            self._credentials[token] = record
        logger.info("Added credential for owner %s", credential.owner_id)
        return record.model_copy(deep=True)

    async def update(
        self,
        token: str,
        status: Optional[CredentialStatus] = None,
        allowed_endpoints: Optional[AllowedEndpoints] = None,
        request_count: Optional[int] = None,
    ) -> CredentialRecord:
        """Update selected attributes of an existing credential."""
        with self._lock:
            record = self._credentials.get(token)
            if record is None:
                raise CredentialNotFoundError()
            if status is not None:
                record.status = status
            if allowed_endpoints is not None:
                record.allowed_endpoints = allowed_endpoints
            if request_count is not None:
                record.request_count = request_count
            return record.model_copy(deep=True)

    async def get(self, token: str) -> Optional[CredentialRecord]:
        """Return copy of the credential record."""
        with self._lock:
            record = self._credentials.get(token)
            return record.model_copy(deep=True) if record is not None else None

    async def delete(self, token: str) -> bool:
        """Delete credential."""
        with self._lock:
            return self._credentials.pop(token, None) is not None

    async def increment_requests(self, token: str) -> CredentialRecord:
        """Count one authorized request."""
        with self._lock:
            record = self._credentials.get(token)
            if record is None:
                raise CredentialNotFoundError()
            record.request_count += 1
            record.last_used = datetime.now(UTC)
            return record.model_copy(deep=True)
