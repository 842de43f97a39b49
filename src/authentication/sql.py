"""SQL statements used by the database credential store."""

#     token_hash         SHA-256 of the secret token
#     allowed_endpoints  JSON encoded list of endpoint names, or "all"
#     last_used          POSIX timestamp
CREATE_CREDENTIALS_TABLE = """
    CREATE TABLE IF NOT EXISTS credentials (
        token_hash        text NOT NULL,
        owner_id          text NOT NULL,
        status            text NOT NULL,
        allowed_endpoints text NOT NULL,
        request_count     int NOT NULL,
        request_limit     int,
        last_used         double precision NOT NULL,
        PRIMARY KEY(token_hash)
    );
    """

INSERT_CREDENTIAL_PG = """
    INSERT INTO credentials(token_hash, owner_id, status, allowed_endpoints,
                            request_count, request_limit, last_used)
    VALUES (%s, %s, %s, %s, %s, %s, %s)
    ON CONFLICT (token_hash) DO UPDATE
       SET owner_id=EXCLUDED.owner_id, status=EXCLUDED.status,
           allowed_endpoints=EXCLUDED.allowed_endpoints,
           request_count=EXCLUDED.request_count,
           request_limit=EXCLUDED.request_limit, last_used=EXCLUDED.last_used
    """

INSERT_CREDENTIAL_SQLITE = """
    INSERT OR REPLACE INTO credentials(token_hash, owner_id, status, allowed_endpoints,
                                       request_count, request_limit, last_used)
    VALUES (?, ?, ?, ?, ?, ?, ?)
    """

SELECT_CREDENTIAL_PG = """
    SELECT owner_id, status, allowed_endpoints, request_count, request_limit, last_used
      FROM credentials
     WHERE token_hash=%s
    """

SELECT_CREDENTIAL_SQLITE = """
    SELECT owner_id, status, allowed_endpoints, request_count, request_limit, last_used
      FROM credentials
     WHERE token_hash=?
    """

UPDATE_CREDENTIAL_PG = """
    UPDATE credentials
       SET status=%s, allowed_endpoints=%s, request_count=%s
     WHERE token_hash=%s
    """

UPDATE_CREDENTIAL_SQLITE = """
    UPDATE credentials
       SET status=?, allowed_endpoints=?, request_count=?
     WHERE token_hash=?
    """

INCREMENT_REQUESTS_PG = """
    UPDATE credentials
       SET request_count=request_count+1, last_used=%s
     WHERE token_hash=%s
    """

INCREMENT_REQUESTS_SQLITE = """
    UPDATE credentials
       SET request_count=request_count+1, last_used=?
     WHERE token_hash=?
    """

DELETE_CREDENTIAL_PG = """
    DELETE FROM credentials
     WHERE token_hash=%s
    """

DELETE_CREDENTIAL_SQLITE = """
    DELETE FROM credentials
     WHERE token_hash=?
    """
