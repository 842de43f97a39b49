"""Response cache store factory class."""

import constants
from cache.cache import CacheStore
from cache.database_cache import DatabaseCacheStore
from cache.in_memory_cache import InMemoryCacheStore
from log import get_logger
from models.config import ResponseCacheConfiguration

logger = get_logger(__name__)


# pylint: disable=R0903
class CacheFactory:
    """Response cache store factory class."""

    @staticmethod
    def response_cache(config: ResponseCacheConfiguration) -> CacheStore:
        """Create an instance of CacheStore based on loaded configuration.

        Returns:
            An instance of `CacheStore` (either `InMemoryCacheStore` or
            `DatabaseCacheStore`).
        """
        logger.info("Creating response cache instance of type %s", config.type)
        match config.type:
            case constants.STORE_TYPE_MEMORY:
                return InMemoryCacheStore(config)
            case constants.STORE_TYPE_SQLITE | constants.STORE_TYPE_POSTGRES:
                return DatabaseCacheStore(config)
            case _:
                raise ValueError(
                    f"Invalid response cache type: {config.type}. "
                    f"Use '{constants.STORE_TYPE_MEMORY}', "
                    f"'{constants.STORE_TYPE_SQLITE}' or "
                    f"'{constants.STORE_TYPE_POSTGRES}' options."
                )
