"""Abstract class that is the parent for all credential store implementations.

A credential store keeps API-key-like secret tokens together with their
owner, status, endpoint allow-list and usage counters. Reading a credential
(`get`, `verify`) never changes it; only `increment_requests` and `update`
mutate the stored record.
"""

from abc import ABC, abstractmethod
from typing import Optional

from models.credential import (
    AllowedEndpoints,
    CredentialRecord,
    CredentialStatus,
    NewCredential,
)


class CredentialStore(ABC):
    """Abstract class that is the parent for all credential store implementations."""

    @abstractmethod
    async def verify(self, token: str) -> bool:
        """Check that the token is known and active, without touching the record."""

    @abstractmethod
    async def add(self, token: str, credential: NewCredential) -> CredentialRecord:
        """Add new credential.

        Raises:
            CredentialStoreError: if the owner ID is empty.
        """

    @abstractmethod
    async def update(
        self,
        token: str,
        status: Optional[CredentialStatus] = None,
        allowed_endpoints: Optional[AllowedEndpoints] = None,
        request_count: Optional[int] = None,
    ) -> CredentialRecord:
        """Update selected attributes of an existing credential.

        Raises:
            CredentialNotFoundError: if the token is unknown.
        """

    @abstractmethod
    async def get(self, token: str) -> Optional[CredentialRecord]:
        """Return the credential record, or None for unknown token."""

    @abstractmethod
    async def delete(self, token: str) -> bool:
        """Delete credential, returning whether it existed."""

    @abstractmethod
    async def increment_requests(self, token: str) -> CredentialRecord:
        """Count one authorized request and update the last used timestamp.

        Raises:
            CredentialNotFoundError: if the token is unknown.
        """

    def ready(self) -> bool:
        """Check if the store is ready to serve requests."""
        return True
