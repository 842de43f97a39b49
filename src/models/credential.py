"""Models for API credentials."""

from datetime import datetime
from enum import Enum
from typing import Optional, Union

from pydantic import BaseModel, Field, NonNegativeInt, PositiveInt
from typing_extensions import Literal

import constants


class CredentialStatus(str, Enum):
    """Status of a credential; only active credentials authorize requests."""

    ACTIVE = constants.CREDENTIAL_STATUS_ACTIVE
    DISABLED = constants.CREDENTIAL_STATUS_DISABLED


AllowedEndpoints = Union[Literal["all"], list[str]]


class CredentialRecord(BaseModel):
    """Model representing a stored credential.

    The secret token is the key the record is stored under and is never part
    of the record itself.

    Attributes:
        owner_id: ID of the credential owner.
        status: Credential status.
        allowed_endpoints: Endpoint names the credential may call, or "all".
        request_count: Number of authorized requests made so far.
        request_limit: Optional maximal number of requests.
        last_used: Time of the last authorized request (or creation).
    """

    owner_id: str
    status: CredentialStatus = CredentialStatus.DISABLED
    allowed_endpoints: AllowedEndpoints = Field(default_factory=list)
    request_count: NonNegativeInt = 0
    request_limit: Optional[PositiveInt] = None
    last_used: datetime

    def allows_endpoint(self, endpoint: str) -> bool:
        """Check the endpoint against the allow-list."""
        if self.allowed_endpoints == constants.ALL_ENDPOINTS:
            return True
        return endpoint in self.allowed_endpoints

    def limit_reached(self) -> bool:
        """Check if the request limit, if any, has been reached."""
        return (
            self.request_limit is not None and self.request_count >= self.request_limit
        )


class NewCredential(BaseModel):
    """Parameters of a credential to be created.

    New credentials are disabled and allowed to call no endpoint unless
    stated otherwise.
    """

    owner_id: str
    status: CredentialStatus = CredentialStatus.DISABLED
    allowed_endpoints: AllowedEndpoints = Field(default_factory=list)
    request_limit: Optional[PositiveInt] = None
