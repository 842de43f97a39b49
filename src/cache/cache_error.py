"""Errors raised by the response cache."""


class CacheError(Exception):
    """Any error raised by the response cache store."""

    status_code = 500


class InvalidFingerprintError(CacheError):
    """Fingerprint or the query material it was built from is empty."""

    status_code = 400


class CacheRecordNotFoundError(CacheError):
    """The fingerprint has never been seen by the cache store."""

    status_code = 404

    def __init__(self, fingerprint: str) -> None:
        """Construct the error for given fingerprint."""
        super().__init__(f"Cache record not found for fingerprint {fingerprint}")
        self.fingerprint = fingerprint


class CachedResponseParseError(CacheError):
    """Stored payload does not match the kind expected at reconstruction time."""
