"""Credential store factory class."""

import constants
from authentication.credential_store import CredentialStore
from authentication.database_credential_store import DatabaseCredentialStore
from authentication.in_memory_credential_store import InMemoryCredentialStore
from log import get_logger
from models.config import StoreConfiguration

logger = get_logger(__name__)


class CredentialStoreFactory:  # pylint: disable=too-few-public-methods
    """Credential store factory class."""

    @staticmethod
    def credential_store(config: StoreConfiguration) -> CredentialStore:
        """Create an instance of CredentialStore based on loaded configuration.

        Returns:
            An instance of `CredentialStore` (either `InMemoryCredentialStore`
            or `DatabaseCredentialStore`).
        """
        logger.info("Creating credential store instance of type %s", config.type)
        match config.type:
            case constants.STORE_TYPE_MEMORY:
                return InMemoryCredentialStore()
            case constants.STORE_TYPE_SQLITE | constants.STORE_TYPE_POSTGRES:
                return DatabaseCredentialStore(config)
            case _:
                raise ValueError(
                    f"Invalid credential store type: {config.type}. "
                    f"Use '{constants.STORE_TYPE_MEMORY}', "
                    f"'{constants.STORE_TYPE_SQLITE}' or "
                    f"'{constants.STORE_TYPE_POSTGRES}' options."
                )
