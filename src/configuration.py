"""Configuration loader."""

import logging
from typing import Any, Optional

# We want to support environment variable replacement in the configuration
# similarly to how it is done in llama-stack, so we use their function directly
from llama_stack.core.stack import replace_env_vars

import yaml
from models.config import (
    Configuration,
    EndpointConfiguration,
    InferenceConfiguration,
    LlamaStackConfiguration,
    ServiceConfiguration,
    StoresConfiguration,
)

from authentication.credential_store import CredentialStore
from authentication.credential_store_factory import CredentialStoreFactory
from cache.cache import CacheStore
from cache.cache_factory import CacheFactory
from generators.generator import ResponseGenerator
from history.chat_history_factory import ChatHistoryFactory
from history.chat_history_store import ChatHistoryStore
from pipeline.registry import EndpointRegistry


logger = logging.getLogger(__name__)


class LogicError(Exception):
    """Error in application logic."""


class AppConfig:  # pylint: disable=too-many-instance-attributes
    """Singleton class to load and store the configuration."""

    _instance = None

    def __new__(cls, *args: Any, **kwargs: Any) -> "AppConfig":
        """Create a new instance of the class."""
        if not isinstance(cls._instance, cls):
            cls._instance = super().__new__(cls, *args, **kwargs)
        return cls._instance

    def __init__(self) -> None:
        """Initialize the class instance."""
        self._configuration: Optional[Configuration] = None
        self._credential_store: Optional[CredentialStore] = None
        self._response_cache: Optional[CacheStore] = None
        self._chat_history_store: Optional[ChatHistoryStore] = None
        self._endpoint_registry: Optional[EndpointRegistry] = None

    def load_configuration(self, filename: str) -> None:
        """Load configuration from YAML file."""
        with open(filename, encoding="utf-8") as fin:
            config_dict = yaml.safe_load(fin)
            config_dict = replace_env_vars(config_dict)
            logger.info("Loaded configuration from %s", filename)
            self.init_from_dict(config_dict)

    def init_from_dict(self, config_dict: dict[Any, Any]) -> None:
        """Initialize configuration from a dictionary."""
        self._configuration = Configuration(**config_dict)
        # stores and endpoints are rebuilt lazily for the new configuration
        self._credential_store = None
        self._response_cache = None
        self._chat_history_store = None
        self._endpoint_registry = None

    @property
    def configuration(self) -> Configuration:
        """Return the whole configuration."""
        if self._configuration is None:
            raise LogicError("logic error: configuration is not loaded")
        return self._configuration

    @property
    def service_configuration(self) -> ServiceConfiguration:
        """Return service configuration."""
        return self.configuration.service

    @property
    def llama_stack_configuration(self) -> LlamaStackConfiguration:
        """Return Llama stack configuration."""
        return self.configuration.llama_stack

    @property
    def inference(self) -> InferenceConfiguration:
        """Return inference configuration."""
        return self.configuration.inference

    @property
    def stores_configuration(self) -> StoresConfiguration:
        """Return configuration of the shared stores."""
        return self.configuration.stores

    @property
    def endpoints(self) -> list[EndpointConfiguration]:
        """Return chat endpoint definitions."""
        return self.configuration.endpoints

    @property
    def credential_store(self) -> Optional[CredentialStore]:
        """Return the credential store, if configured."""
        config = self.stores_configuration.credentials
        if self._credential_store is None and config is not None:
            self._credential_store = CredentialStoreFactory.credential_store(config)
        return self._credential_store

    @property
    def response_cache(self) -> Optional[CacheStore]:
        """Return the response cache store, if configured."""
        config = self.stores_configuration.response_cache
        if self._response_cache is None and config is not None:
            self._response_cache = CacheFactory.response_cache(config)
        return self._response_cache

    @property
    def chat_history_store(self) -> Optional[ChatHistoryStore]:
        """Return the chat history store, if configured."""
        config = self.stores_configuration.chat_history
        if self._chat_history_store is None and config is not None:
            self._chat_history_store = ChatHistoryFactory.chat_history(config)
        return self._chat_history_store

    def stores(self) -> dict[str, Any]:
        """Return configured stores by name."""
        stores = {
            "credentials": self.credential_store,
            "response_cache": self.response_cache,
            "chat_history": self.chat_history_store,
        }
        return {name: store for name, store in stores.items() if store is not None}

    def build_endpoint_registry(self, generator: ResponseGenerator) -> EndpointRegistry:
        """Assemble chat endpoints from the configuration, once."""
        self._endpoint_registry = EndpointRegistry.from_configuration(
            self.endpoints,
            generator,
            inference=self.inference,
            credential_store=self.credential_store,
            cache_store=self.response_cache,
            history_store=self.chat_history_store,
        )
        return self._endpoint_registry

    @property
    def endpoint_registry(self) -> EndpointRegistry:
        """Return the chat endpoint registry."""
        if self._endpoint_registry is None:
            raise LogicError("logic error: chat endpoints are not initialized")
        return self._endpoint_registry


configuration: AppConfig = AppConfig()
