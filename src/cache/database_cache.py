"""Response cache store persisted in SQLite or PostgreSQL.

The cache itself is stored in following table:

```
     Column     |       Type       | Nullable |
----------------+------------------+----------+
 fingerprint    | text             | not null |
 query          | text             | not null |
 response_kind  | text             | not null |
 threshold      | int              | not null |
 hits           | int              | not null |
 response       | text             |          |
 expiry         | double precision |          |
 created_at     | double precision | not null |
 last_accessed  | double precision |          |
 last_used      | double precision |          |
Indexes:
    "response_cache_pkey" PRIMARY KEY, btree (fingerprint)
    "response_cache_expiry" btree (expiry)
```
"""

from datetime import UTC, datetime
from typing import Any, Optional

import constants
from cache import sql
from cache.cache import CacheStore
from cache.cache_error import CacheError, CacheRecordNotFoundError
from log import get_logger
from models.cache_record import CachedResponse, CacheRecord, ResponseKind
from models.config import ResponseCacheConfiguration
from storage.database_store import DatabaseStore
from utils.connection_decorator import connection

logger = get_logger(__name__)


class DatabaseCacheStore(DatabaseStore, CacheStore):
    """Response cache store persisted in a relational database."""

    disconnected_error = CacheError

    def __init__(self, config: ResponseCacheConfiguration) -> None:
        """Create a new instance of database cache store."""
        self.admission_threshold = config.admission_threshold
        self.ttl = config.ttl
        super().__init__(config)

    def _initialize_tables(self) -> None:
        """Initialize tables used by response cache."""
        logger.info("Initializing tables for response cache")
        self._execute_script(sql.CREATE_RESPONSE_CACHE_TABLE, sql.CREATE_EXPIRY_INDEX)

    @connection
    async def add_query(
        self,
        query: str,
        fingerprint: str,
        kind: ResponseKind = constants.OUTPUT_KIND_TEXT,
    ) -> CacheRecord:
        """Insert record with full admission threshold and no response."""
        record = self.new_record(query, fingerprint, kind)
        self._upsert(record)
        logger.debug("New cache record %s", fingerprint)
        return record

    @connection
    async def get_record(self, fingerprint: str) -> CacheRecord:
        """Return record for the fingerprint."""
        statement = self._statement(sql.SELECT_RECORD_PG, sql.SELECT_RECORD_SQLITE)
        cursor = self._cursor("get record")
        cursor.execute(statement, (fingerprint,))
        row = cursor.fetchone()
        cursor.close()
        if row is None:
            raise CacheRecordNotFoundError(fingerprint)
        return _record_from_row(row)

    @connection
    async def decrement_threshold(self, fingerprint: str) -> int:
        """Count one repeated sighting of the fingerprint."""
        cursor = self._cursor("decrement threshold")
        cursor.execute(
            self._statement(sql.DECREMENT_THRESHOLD_PG, sql.DECREMENT_THRESHOLD_SQLITE),
            (fingerprint,),
        )
        decremented = cursor.rowcount > 0
        self.connection.commit()
        cursor.execute(
            self._statement(sql.SELECT_THRESHOLD_PG, sql.SELECT_THRESHOLD_SQLITE),
            (fingerprint,),
        )
        row = cursor.fetchone()
        cursor.close()
        if row is None:
            return constants.CACHE_THRESHOLD_NOT_FOUND
        if not decremented:
            return 0
        return row[0]

    @connection
    async def cache_response(
        self, fingerprint: str, response: CachedResponse
    ) -> CacheRecord:
        """Attach the response with a fresh expiry and zero the countdown."""
        self._update(
            "cache response",
            self._statement(sql.CACHE_RESPONSE_PG, sql.CACHE_RESPONSE_SQLITE),
            (response.model_dump_json(), self.expiry().timestamp(), fingerprint),
            fingerprint,
        )
        logger.info("Response cached for fingerprint %s", fingerprint)
        return await self.get_record(fingerprint)

    @connection
    async def reset_record(self, fingerprint: str) -> CacheRecord:
        """Drop the cached response and restore the admission threshold."""
        self._update(
            "reset record",
            self._statement(sql.RESET_RECORD_PG, sql.RESET_RECORD_SQLITE),
            (self.admission_threshold, fingerprint),
            fingerprint,
        )
        return await self.get_record(fingerprint)

    @connection
    async def increment_hits(self, fingerprint: str) -> None:
        """Count one response served from cache."""
        self._update(
            "increment hits",
            self._statement(sql.INCREMENT_HITS_PG, sql.INCREMENT_HITS_SQLITE),
            (fingerprint,),
            fingerprint,
        )

    @connection
    async def update_last_used(self, fingerprint: str) -> None:
        """Update the time the cached response was last served."""
        self._update(
            "update last used",
            self._statement(sql.UPDATE_LAST_USED_PG, sql.UPDATE_LAST_USED_SQLITE),
            (datetime.now(UTC).timestamp(), fingerprint),
            fingerprint,
        )

    @connection
    async def update_last_accessed(self, fingerprint: str) -> None:
        """Update the time the record was last read."""
        self._update(
            "update last accessed",
            self._statement(
                sql.UPDATE_LAST_ACCESSED_PG, sql.UPDATE_LAST_ACCESSED_SQLITE
            ),
            (datetime.now(UTC).timestamp(), fingerprint),
            fingerprint,
        )

    @connection
    async def delete_record(self, fingerprint: str) -> bool:
        """Delete record."""
        cursor = self._cursor("delete record")
        cursor.execute(
            self._statement(sql.DELETE_RECORD_PG, sql.DELETE_RECORD_SQLITE),
            (fingerprint,),
        )
        deleted = cursor.rowcount > 0
        cursor.close()
        self.connection.commit()
        return deleted

    @connection
    async def add_record(self, record: CacheRecord) -> None:
        """Insert or replace a complete record."""
        self.check_query(record.query, record.fingerprint)
        self._upsert(record)

    def _upsert(self, record: CacheRecord) -> None:
        cursor = self._cursor("store record")
        cursor.execute(
            self._statement(sql.UPSERT_RECORD_PG, sql.UPSERT_RECORD_SQLITE),
            (
                record.fingerprint,
                record.query,
                record.response_kind,
                record.threshold,
                record.hits,
                record.response.model_dump_json() if record.response else None,
                _timestamp(record.expiry),
                record.created_at.timestamp(),
                _timestamp(record.last_accessed),
                _timestamp(record.last_used),
            ),
        )
        cursor.close()
        self.connection.commit()

    def _update(
        self, operation: str, statement: str, params: tuple, fingerprint: str
    ) -> None:
        cursor = self._cursor(operation)
        cursor.execute(statement, params)
        updated = cursor.rowcount
        cursor.close()
        self.connection.commit()
        if updated == 0:
            raise CacheRecordNotFoundError(fingerprint)


def _timestamp(value: Optional[datetime]) -> Optional[float]:
    return value.timestamp() if value is not None else None


def _datetime(value: Optional[float]) -> Optional[datetime]:
    return datetime.fromtimestamp(value, UTC) if value is not None else None


def _record_from_row(row: Any) -> CacheRecord:
    (
        fingerprint,
        query,
        response_kind,
        threshold,
        hits,
        response,
        expiry,
        created_at,
        last_accessed,
        last_used,
    ) = row
    return CacheRecord(
        fingerprint=fingerprint,
        query=query,
        response_kind=response_kind,
        threshold=threshold,
        hits=hits,
        response=(
            CachedResponse.model_validate_json(response)
            if response is not None
            else None
        ),
        expiry=_datetime(expiry),
        created_at=datetime.fromtimestamp(created_at, UTC),
        last_accessed=_datetime(last_accessed),
        last_used=_datetime(last_used),
    )
