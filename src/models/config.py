"""Model with service configuration."""

from pathlib import Path
from typing import Optional, Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    model_validator,
    FilePath,
    PositiveInt,
    PositiveFloat,
    SecretStr,
)

from typing_extensions import Self, Literal

import constants

from utils import checks


class ConfigurationBase(BaseModel):
    """Base class for all configuration models that rejects unknown fields."""

    model_config = ConfigDict(extra="forbid")


class TLSConfiguration(ConfigurationBase):
    """TLS configuration."""

    tls_certificate_path: Optional[FilePath] = None
    tls_key_path: Optional[FilePath] = None
    tls_key_password: Optional[FilePath] = None


class CORSConfiguration(ConfigurationBase):
    """CORS configuration."""

    allow_origins: list[str] = [
        "*"
    ]  # not AnyHttpUrl: we need to support "*" that is not valid URL
    allow_credentials: bool = False
    allow_methods: list[str] = ["*"]
    allow_headers: list[str] = ["*"]

    @model_validator(mode="after")
    def check_cors_configuration(self) -> Self:
        """Check CORS configuration."""
        # credentials are not allowed with wildcard origins per CORS/Fetch spec.
        # see https://fastapi.tiangolo.com/tutorial/cors/
        if self.allow_credentials and "*" in self.allow_origins:
            raise ValueError(
                "Invalid CORS configuration: allow_credentials can not be set to true when "
                "allow origins contains '*' wildcard."
                "Use explicit origins or disable credential."
            )
        return self


class SQLiteDatabaseConfiguration(ConfigurationBase):
    """SQLite database configuration."""

    db_path: str


class PostgreSQLDatabaseConfiguration(ConfigurationBase):
    """PostgreSQL database configuration."""

    host: str = "localhost"
    port: PositiveInt = 5432
    db: str
    user: str
    password: SecretStr
    ssl_mode: str = constants.POSTGRES_DEFAULT_SSL_MODE
    gss_encmode: str = constants.POSTGRES_DEFAULT_GSS_ENCMODE
    ca_cert_path: Optional[FilePath] = None

    @model_validator(mode="after")
    def check_postgres_configuration(self) -> Self:
        """Check PostgreSQL configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class ServiceConfiguration(ConfigurationBase):
    """Service configuration."""

    host: str = "localhost"
    port: PositiveInt = 8080
    workers: PositiveInt = 1
    color_log: bool = True
    access_log: bool = True
    tls_config: TLSConfiguration = Field(default_factory=TLSConfiguration)
    cors: CORSConfiguration = Field(default_factory=CORSConfiguration)

    @model_validator(mode="after")
    def check_service_configuration(self) -> Self:
        """Check service configuration."""
        if self.port > 65535:
            raise ValueError("Port value should be less than 65536")
        return self


class LlamaStackConfiguration(ConfigurationBase):
    """Llama stack configuration."""

    url: Optional[str] = None
    api_key: Optional[SecretStr] = None
    use_as_library_client: Optional[bool] = None
    library_client_config_path: Optional[str] = None

    @model_validator(mode="after")
    def check_llama_stack_model(self) -> Self:
        """
        Validate the Llama stack configuration after model initialization.

        Ensures that either a URL is provided for server mode or library client
        mode is explicitly enabled. If library client mode is enabled, verifies
        that a configuration file path is specified and points to an existing,
        readable file.
        """
        if self.url is None:
            if self.use_as_library_client is None:
                raise ValueError(
                    "Llama stack URL is not specified and library client mode is not specified"
                )
            if self.use_as_library_client is False:
                raise ValueError(
                    "Llama stack URL is not specified and library client mode is not enabled"
                )
        if self.use_as_library_client is None:
            self.use_as_library_client = False
        if self.use_as_library_client:
            if self.library_client_config_path is None:
                # pylint: disable=line-too-long
                raise ValueError(
                    "Llama stack library client mode is enabled but a configuration file path is not specified"  # noqa: E501
                )
            checks.file_check(
                Path(self.library_client_config_path), "Llama Stack configuration file"
            )
        return self


class InferenceConfiguration(ConfigurationBase):
    """Inference configuration."""

    default_model: Optional[str] = None
    default_provider: Optional[str] = None

    @model_validator(mode="after")
    def check_default_model_and_provider(self) -> Self:
        """Check default model and provider."""
        if self.default_model is None and self.default_provider is not None:
            raise ValueError(
                "Default model must be specified when default provider is set"
            )
        if self.default_model is not None and self.default_provider is None:
            raise ValueError(
                "Default provider must be specified when default model is set"
            )
        return self


class StoreConfiguration(ConfigurationBase):
    """Backend selection shared by credential, cache and chat history stores."""

    type: Literal["memory", "sqlite", "postgres"] = constants.STORE_TYPE_MEMORY
    sqlite: Optional[SQLiteDatabaseConfiguration] = None
    postgres: Optional[PostgreSQLDatabaseConfiguration] = None

    @model_validator(mode="after")
    def check_store_configuration(self) -> Self:
        """Check that exactly the selected backend is configured."""
        match self.type:
            case constants.STORE_TYPE_MEMORY:
                if any([self.sqlite, self.postgres]):
                    raise ValueError(
                        "Memory store is selected, database configuration must not be provided"
                    )
            case constants.STORE_TYPE_SQLITE:
                if self.sqlite is None:
                    raise ValueError("SQLite store is selected, but not configured")
                if self.postgres is not None:
                    raise ValueError("Only SQLite store config must be provided")
            case constants.STORE_TYPE_POSTGRES:
                if self.postgres is None:
                    raise ValueError(
                        "PostgreSQL store is selected, but not configured"
                    )
                if self.sqlite is not None:
                    raise ValueError("Only PostgreSQL store config must be provided")
        return self


class ResponseCacheConfiguration(StoreConfiguration):
    """Response cache store configuration."""

    admission_threshold: PositiveInt = constants.DEFAULT_CACHE_ADMISSION_THRESHOLD
    ttl: PositiveInt = constants.DEFAULT_CACHE_TTL


class StoresConfiguration(ConfigurationBase):
    """Shared stores used by the chat endpoints."""

    credentials: Optional[StoreConfiguration] = None
    response_cache: Optional[ResponseCacheConfiguration] = None
    chat_history: Optional[StoreConfiguration] = None


class RetrieverConfiguration(ConfigurationBase):
    """Retriever construction configuration."""

    type: Literal["vector_io", "file"] = constants.RETRIEVER_TYPE_VECTOR_IO
    vector_db_id: Optional[str] = None
    max_chunks: PositiveInt = constants.DEFAULT_RETRIEVER_MAX_CHUNKS
    path: Optional[FilePath] = None

    @model_validator(mode="after")
    def check_retriever_configuration(self) -> Self:
        """Check that the selected retriever type has what it needs."""
        if self.type == constants.RETRIEVER_TYPE_VECTOR_IO and not self.vector_db_id:
            raise ValueError("vector_db_id is required for vector_io retriever")
        if self.type == constants.RETRIEVER_TYPE_FILE and self.path is None:
            raise ValueError("path is required for file retriever")
        return self


class RagConfiguration(ConfigurationBase):
    """Retrieval augmented generation configuration for one endpoint."""

    enabled: bool = False
    retriever: Optional[RetrieverConfiguration] = None

    @model_validator(mode="after")
    def check_rag_configuration(self) -> Self:
        """Check that a retriever is configured whenever RAG is enabled."""
        if self.enabled and self.retriever is None:
            raise ValueError(
                "To enable RAG you must provide either retriever or retriever config"
            )
        return self


class OutputConfiguration(ConfigurationBase):
    """Declared output kind of an endpoint."""

    kind: Literal["text", "json", "media"] = constants.OUTPUT_KIND_TEXT
    json_schema: Optional[dict[str, Any]] = None
    content_type: Optional[str] = None

    @model_validator(mode="after")
    def check_output_configuration(self) -> Self:
        """Check output kind specific options."""
        if self.kind == constants.OUTPUT_KIND_MEDIA and not self.content_type:
            raise ValueError("content_type is required for media output")
        if self.json_schema is not None and self.kind != constants.OUTPUT_KIND_JSON:
            raise ValueError("json_schema can be used only with json output")
        return self


class EndpointConfiguration(ConfigurationBase):
    """One chat endpoint definition."""

    name: str = Field(min_length=1)
    agent_type: Literal["open-ended", "close-ended", "rag"] = (
        constants.AGENT_TYPE_OPEN_ENDED
    )
    topic: Optional[str] = None
    system_prompt: Optional[str] = None
    system_prompt_path: Optional[FilePath] = None
    enable_auth: bool = False
    enable_chat_history: bool = False
    enable_cache: bool = False
    fingerprint_history: bool = True
    rag: RagConfiguration = Field(default_factory=RagConfiguration)
    output: OutputConfiguration = Field(default_factory=OutputConfiguration)
    verbose: bool = False
    model: Optional[str] = None
    provider: Optional[str] = None
    temperature: Optional[float] = None
    max_tokens: Optional[PositiveInt] = None
    tools: list[dict[str, Any]] = Field(default_factory=list)
    generation_timeout: Optional[PositiveFloat] = None

    @model_validator(mode="after")
    def check_endpoint_configuration(self) -> Self:
        """Check agent type, topic and system prompt options."""
        if self.agent_type == constants.AGENT_TYPE_RAG and not self.rag.enabled:
            raise ValueError("RAG agent requires the rag section to be enabled")
        if self.agent_type != constants.AGENT_TYPE_OPEN_ENDED or self.rag.enabled:
            if not self.topic:
                raise ValueError(
                    f"Topic is required for endpoint '{self.name}' "
                    "with close-ended or RAG chat agent"
                )
        if self.system_prompt is not None and self.system_prompt_path is not None:
            raise ValueError(
                "system_prompt and system_prompt_path can not be used together"
            )
        if self.system_prompt_path is not None:
            checks.file_check(self.system_prompt_path, "system prompt")
            self.system_prompt = checks.get_attribute_from_file(
                dict(self), "system_prompt_path"
            )
        return self


class Configuration(ConfigurationBase):
    """Global service configuration."""

    name: str
    service: ServiceConfiguration = Field(default_factory=ServiceConfiguration)
    llama_stack: LlamaStackConfiguration
    inference: InferenceConfiguration = Field(default_factory=InferenceConfiguration)
    stores: StoresConfiguration = Field(default_factory=StoresConfiguration)
    endpoints: list[EndpointConfiguration] = Field(default_factory=list)

    @model_validator(mode="after")
    def check_endpoints(self) -> Self:
        """Check that endpoint names are unique and their stores are configured."""
        names = [endpoint.name for endpoint in self.endpoints]
        if len(names) != len(set(names)):
            raise ValueError("Endpoint names must be unique")
        for endpoint in self.endpoints:
            if endpoint.enable_auth and self.stores.credentials is None:
                raise ValueError(
                    f"Endpoint '{endpoint.name}' enables auth, "
                    "but credential store is not configured"
                )
            if endpoint.enable_cache and self.stores.response_cache is None:
                raise ValueError(
                    f"Endpoint '{endpoint.name}' enables cache, "
                    "but response cache store is not configured"
                )
            if endpoint.enable_chat_history and self.stores.chat_history is None:
                raise ValueError(
                    f"Endpoint '{endpoint.name}' enables chat history, "
                    "but chat history store is not configured"
                )
        return self

    def dump(self, filename: str = "configuration.json") -> None:
        """Dump actual configuration into JSON file."""
        with open(filename, "w", encoding="utf-8") as fout:
            fout.write(self.model_dump_json(indent=4))
