"""Abstract class that is the parent for all response cache store implementations.

The response cache maps a request fingerprint to a cache record. A record is
created with an admission threshold countdown set to the configured value N
and without any cached response. Each repeated sighting of the fingerprint
decrements the countdown, and the sighting that brings it to zero makes the
caller generate a fresh response and attach it with `cache_response`. That is
the only operation that ever attaches a response to a record, and it sets the
countdown to zero together with the response and its expiry.
"""

from abc import ABC, abstractmethod
from datetime import UTC, datetime, timedelta
from typing import Optional

import constants
from cache.cache_error import InvalidFingerprintError
from models.cache_record import CachedResponse, CacheRecord, ResponseKind


class CacheStore(ABC):
    """Abstract class that is the parent for all response cache store implementations.

    Attributes:
        admission_threshold: Number of sightings after which a response is cached.
        ttl: Number of seconds a cached response stays fresh.
    """

    admission_threshold: int = constants.DEFAULT_CACHE_ADMISSION_THRESHOLD
    ttl: int = constants.DEFAULT_CACHE_TTL

    @staticmethod
    def check_query(query: str, fingerprint: str) -> None:
        """Check that neither the fingerprint nor its query material is empty.

        Raises:
            InvalidFingerprintError: if the check fails.
        """
        if not fingerprint:
            raise InvalidFingerprintError("Fingerprint must not be empty")
        if not query:
            raise InvalidFingerprintError("Query must not be empty")

    def new_record(
        self, query: str, fingerprint: str, kind: ResponseKind
    ) -> CacheRecord:
        """Construct record for a fingerprint seen for the first time."""
        self.check_query(query, fingerprint)
        return CacheRecord(
            fingerprint=fingerprint,
            query=query,
            response_kind=kind,
            threshold=self.admission_threshold,
            created_at=datetime.now(UTC),
        )

    def expiry(self, now: Optional[datetime] = None) -> datetime:
        """Compute expiry of a response cached now."""
        return (now or datetime.now(UTC)) + timedelta(seconds=self.ttl)

    @abstractmethod
    async def add_query(
        self,
        query: str,
        fingerprint: str,
        kind: ResponseKind = constants.OUTPUT_KIND_TEXT,
    ) -> CacheRecord:
        """Insert record with full admission threshold and no response.

        Raises:
            InvalidFingerprintError: if fingerprint or query is empty.
        """

    @abstractmethod
    async def get_record(self, fingerprint: str) -> CacheRecord:
        """Return record for the fingerprint.

        Raises:
            CacheRecordNotFoundError: if the fingerprint has never been seen.
        """

    @abstractmethod
    async def decrement_threshold(self, fingerprint: str) -> int:
        """Count one repeated sighting of the fingerprint.

        The countdown is decremented by one and never goes below zero. The
        step to zero is reported to the caller but is not stored; it is
        stored by `cache_response` together with the response.

        Returns:
            Remaining threshold, or `constants.CACHE_THRESHOLD_NOT_FOUND`
            for unknown fingerprint.
        """

    @abstractmethod
    async def cache_response(
        self, fingerprint: str, response: CachedResponse
    ) -> CacheRecord:
        """Attach the response with a fresh expiry and zero the countdown.

        Raises:
            CacheRecordNotFoundError: if the fingerprint has never been seen.
        """

    def is_expired(self, record: CacheRecord) -> bool:
        """Check whether the record holds a response past its expiry."""
        return record.is_expired()

    @abstractmethod
    async def reset_record(self, fingerprint: str) -> CacheRecord:
        """Drop the cached response and restore the admission threshold.

        Raises:
            CacheRecordNotFoundError: if the fingerprint has never been seen.
        """

    @abstractmethod
    async def increment_hits(self, fingerprint: str) -> None:
        """Count one response served from cache."""

    @abstractmethod
    async def update_last_used(self, fingerprint: str) -> None:
        """Update the time the cached response was last served."""

    @abstractmethod
    async def update_last_accessed(self, fingerprint: str) -> None:
        """Update the time the record was last read."""

    @abstractmethod
    async def delete_record(self, fingerprint: str) -> bool:
        """Delete record, returning whether it existed."""

    @abstractmethod
    async def add_record(self, record: CacheRecord) -> None:
        """Insert or replace a complete record."""

    def ready(self) -> bool:
        """Check if the store is ready to serve requests."""
        return True
