"""Credential authorization policy."""

from typing import Optional

from authentication.auth_error import (
    CredentialNotFoundError,
    CredentialStoreNotInitializedError,
    DisabledCredentialError,
    EndpointNotAllowedError,
    MissingCredentialError,
    MissingOwnerError,
    OwnerMismatchError,
    RequestLimitExceededError,
    UnknownCredentialError,
)
from authentication.credential_store import CredentialStore
from log import get_logger
from models.credential import CredentialRecord, CredentialStatus

logger = get_logger(__name__)


async def authorize_request(
    token: Optional[str],
    owner_id: Optional[str],
    endpoint: str,
    store: Optional[CredentialStore],
) -> CredentialRecord:
    """Authorize one request against the credential store.

    Checks are done in a fixed order and the first failing one decides the
    error. The request counter of the credential is incremented exactly once,
    and only when all checks pass. A store that can not be reached is
    reported the same way as a missing store.

    Raises:
        AuthorizationError: subclass describing the failed check.

    Returns:
        The credential record after the request has been counted.
    """
    if not token:
        raise MissingCredentialError()
    if store is None:
        raise CredentialStoreNotInitializedError()
    if not owner_id:
        raise MissingOwnerError()

    try:
        record = await store.get(token)
    except Exception as e:
        logger.error("Unable to read credential from %s: %s", type(store).__name__, e)
        raise CredentialStoreNotInitializedError() from e
    if record is None:
        raise UnknownCredentialError()
    if record.status != CredentialStatus.ACTIVE:
        raise DisabledCredentialError()
    if record.owner_id != owner_id:
        raise OwnerMismatchError()
    if record.limit_reached():
        raise RequestLimitExceededError()
    if not record.allows_endpoint(endpoint):
        raise EndpointNotAllowedError()

    logger.debug("Request of owner %s authorized for endpoint %s", owner_id, endpoint)
    try:
        return await store.increment_requests(token)
    except CredentialNotFoundError as e:
        raise UnknownCredentialError() from e
    except Exception as e:
        logger.error("Unable to count request in %s: %s", type(store).__name__, e)
        raise CredentialStoreNotInitializedError() from e
