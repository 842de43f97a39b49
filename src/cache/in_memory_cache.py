"""In-memory response cache store implementation."""

import threading
from datetime import UTC, datetime

import constants
from cache.cache import CacheStore
from cache.cache_error import CacheRecordNotFoundError
from log import get_logger
from models.cache_record import CachedResponse, CacheRecord, ResponseKind
from models.config import ResponseCacheConfiguration

logger = get_logger(__name__)


class InMemoryCacheStore(CacheStore):
    """Response cache store that keeps records in a lock-guarded dictionary."""

    def __init__(self, config: ResponseCacheConfiguration) -> None:
        """Create a new instance of in-memory cache store."""
        self.admission_threshold = config.admission_threshold
        self.ttl = config.ttl
        self._records: dict[str, CacheRecord] = {}
        self._lock = threading.Lock()

    async def add_query(
        self,
        query: str,
        fingerprint: str,
        kind: ResponseKind = constants.OUTPUT_KIND_TEXT,
    ) -> CacheRecord:
        """Insert record with full admission threshold and no response."""
        record = self.new_record(query, fingerprint, kind)
        with self._lock:
            self._records[fingerprint] = record
        logger.debug("New cache record %s", fingerprint)
        return record.model_copy(deep=True)

    async def get_record(self, fingerprint: str) -> CacheRecord:
        """Return copy of the record for the fingerprint."""
        with self._lock:
            return self._get(fingerprint).model_copy(deep=True)

    async def decrement_threshold(self, fingerprint: str) -> int:
        """Count one repeated sighting of the fingerprint."""
        with self._lock:
            record = self._records.get(fingerprint)
            if record is None:
                return constants.CACHE_THRESHOLD_NOT_FOUND
            if record.threshold > 1:
                record.threshold -= 1
                return record.threshold
            return 0

    async def cache_response(
        self, fingerprint: str, response: CachedResponse
    ) -> CacheRecord:
        """Attach the response with a fresh expiry and zero the countdown."""
        with self._lock:
            record = self._get(fingerprint)
            record.response = response
            record.threshold = 0
            record.expiry = self.expiry()
            logger.info("Response cached for fingerprint %s", fingerprint)
            return record.model_copy(deep=True)

    async def reset_record(self, fingerprint: str) -> CacheRecord:
        """Drop the cached response and restore the admission threshold."""
        with self._lock:
            record = self._get(fingerprint)
            record.response = None
            record.expiry = None
            record.threshold = self.admission_threshold
            return record.model_copy(deep=True)

    async def increment_hits(self, fingerprint: str) -> None:
        """Count one response served from cache."""
        with self._lock:
            self._get(fingerprint).hits += 1

    async def update_last_used(self, fingerprint: str) -> None:
        """Update the time the cached response was last served."""
        with self._lock:
            self._get(fingerprint).last_used = datetime.now(UTC)

    async def update_last_accessed(self, fingerprint: str) -> None:
        """Update the time the record was last read."""
        with self._lock:
            self._get(fingerprint).last_accessed = datetime.now(UTC)

    async def delete_record(self, fingerprint: str) -> bool:
        """Delete record."""
        with self._lock:
            return self._records.pop(fingerprint, None) is not None

    async def add_record(self, record: CacheRecord) -> None:
        """Insert or replace a complete record."""
        self.check_query(record.query, record.fingerprint)
        with self._lock:
            self._records[record.fingerprint] = record.model_copy(deep=True)

    def _get(self, fingerprint: str) -> CacheRecord:
        # caller holds the lock
        record = self._records.get(fingerprint)
        if record is None:
            raise CacheRecordNotFoundError(fingerprint)
        return record
