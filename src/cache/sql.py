"""SQL statements used by the database response cache store."""

#     response   JSON serialized CachedResponse, NULL until admitted
#     expiry, created_at, last_accessed, last_used   POSIX timestamps
CREATE_RESPONSE_CACHE_TABLE = """
    CREATE TABLE IF NOT EXISTS response_cache (
        fingerprint   text NOT NULL,
        query         text NOT NULL,
        response_kind text NOT NULL,
        threshold     int NOT NULL,
        hits          int NOT NULL,
        response      text,
        expiry        double precision,
        created_at    double precision NOT NULL,
        last_accessed double precision,
        last_used     double precision,
        PRIMARY KEY(fingerprint)
    );
    """

CREATE_EXPIRY_INDEX = """
    CREATE INDEX IF NOT EXISTS response_cache_expiry
        ON response_cache (expiry)
    """

UPSERT_RECORD_PG = """
    INSERT INTO response_cache(fingerprint, query, response_kind, threshold, hits,
                               response, expiry, created_at, last_accessed, last_used)
    VALUES (%s, %s, %s, %s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (fingerprint) DO UPDATE
       SET query=EXCLUDED.query, response_kind=EXCLUDED.response_kind,
           threshold=EXCLUDED.threshold, hits=EXCLUDED.hits,
           response=EXCLUDED.response, expiry=EXCLUDED.expiry,
           created_at=EXCLUDED.created_at, last_accessed=EXCLUDED.last_accessed,
           last_used=EXCLUDED.last_used
    """

UPSERT_RECORD_SQLITE = """
    INSERT OR REPLACE INTO response_cache(fingerprint, query, response_kind, threshold,
                                          hits, response, expiry, created_at,
                                          last_accessed, last_used)
    VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
    """

SELECT_RECORD_PG = """
    SELECT fingerprint, query, response_kind, threshold, hits,
           response, expiry, created_at, last_accessed, last_used
      FROM response_cache
     WHERE fingerprint=%s
    """

SELECT_RECORD_SQLITE = """
    SELECT fingerprint, query, response_kind, threshold, hits,
           response, expiry, created_at, last_accessed, last_used
      FROM response_cache
     WHERE fingerprint=?
    """

SELECT_THRESHOLD_PG = """
    SELECT threshold
      FROM response_cache
     WHERE fingerprint=%s
    """

SELECT_THRESHOLD_SQLITE = """
    SELECT threshold
      FROM response_cache
     WHERE fingerprint=?
    """

# the step from 1 to 0 is stored by CACHE_RESPONSE only
DECREMENT_THRESHOLD_PG = """
    UPDATE response_cache
       SET threshold=threshold-1
     WHERE fingerprint=%s AND threshold>1
    """

DECREMENT_THRESHOLD_SQLITE = """
    UPDATE response_cache
       SET threshold=threshold-1
     WHERE fingerprint=? AND threshold>1
    """

CACHE_RESPONSE_PG = """
    UPDATE response_cache
       SET response=%s, expiry=%s, threshold=0
     WHERE fingerprint=%s
    """

CACHE_RESPONSE_SQLITE = """
    UPDATE response_cache
       SET response=?, expiry=?, threshold=0
     WHERE fingerprint=?
    """

RESET_RECORD_PG = """
    UPDATE response_cache
       SET response=NULL, expiry=NULL, threshold=%s
     WHERE fingerprint=%s
    """

RESET_RECORD_SQLITE = """
    UPDATE response_cache
       SET response=NULL, expiry=NULL, threshold=?
     WHERE fingerprint=?
    """

INCREMENT_HITS_PG = """
    UPDATE response_cache
       SET hits=hits+1
     WHERE fingerprint=%s
    """

INCREMENT_HITS_SQLITE = """
    UPDATE response_cache
       SET hits=hits+1
     WHERE fingerprint=?
    """

UPDATE_LAST_USED_PG = """
    UPDATE response_cache
       SET last_used=%s
     WHERE fingerprint=%s
    """

UPDATE_LAST_USED_SQLITE = """
    UPDATE response_cache
       SET last_used=?
     WHERE fingerprint=?
    """

UPDATE_LAST_ACCESSED_PG = """
    UPDATE response_cache
       SET last_accessed=%s
     WHERE fingerprint=%s
    """

UPDATE_LAST_ACCESSED_SQLITE = """
    UPDATE response_cache
       SET last_accessed=?
     WHERE fingerprint=?
    """

DELETE_RECORD_PG = """
    DELETE FROM response_cache
     WHERE fingerprint=%s
    """

DELETE_RECORD_SQLITE = """
    DELETE FROM response_cache
     WHERE fingerprint=?
    """
