"""Errors raised by credential stores and by the credential authorization policy."""

from typing import Optional


class CredentialStoreError(Exception):
    """Any error raised by a credential store."""

    status_code = 500


class CredentialNotFoundError(CredentialStoreError):
    """Operation requires an existing credential."""

    status_code = 404

    def __init__(self) -> None:
        """Construct the error, the token itself is never part of the message."""
        super().__init__("Credential not found")


class AuthorizationError(Exception):
    """Request can not be authorized; each subclass is one distinct reason."""

    status_code = 401
    message = "Authorization failed."

    def __init__(self, message: Optional[str] = None) -> None:
        """Construct the error with the reason specific message."""
        super().__init__(message or self.message)


class MissingCredentialError(AuthorizationError):
    """No credential token was supplied with the request."""

    message = "Authorization required. Missing API key."


class CredentialStoreNotInitializedError(AuthorizationError):
    """Auth is enabled but there is no credential store to verify against."""

    status_code = 500
    message = "Authorization failed. API key store not initialized."


class MissingOwnerError(AuthorizationError):
    """Request does not say which owner the credential belongs to."""

    message = "Authorization failed. User ID not provided."


class UnknownCredentialError(AuthorizationError):
    """Supplied token is not known to the store."""

    message = "Authorization failed. API key not found."


class DisabledCredentialError(AuthorizationError):
    """Credential exists but it is not active."""

    status_code = 403
    message = "Authorization failed. API key is disabled."


class OwnerMismatchError(AuthorizationError):
    """Claimed owner does not own the credential."""

    status_code = 403
    message = "Authorization failed. Invalid user ID."


class RequestLimitExceededError(AuthorizationError):
    """Credential reached its request limit."""

    status_code = 429
    message = "Authorization failed. Requests limit exceeded for the provided API key."


class EndpointNotAllowedError(AuthorizationError):
    """Endpoint is not in the credential's allow-list."""

    status_code = 403
    message = "Authorization failed. Endpoint not allowed for the provided API key."
