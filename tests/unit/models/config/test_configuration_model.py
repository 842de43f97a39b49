"""Unit tests for the global Configuration model."""

import json
from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from models.config import (
    Configuration,
    CORSConfiguration,
    EndpointConfiguration,
    InferenceConfiguration,
    LlamaStackConfiguration,
    ResponseCacheConfiguration,
    ServiceConfiguration,
    StoreConfiguration,
    StoresConfiguration,
)
from utils.checks import InvalidConfigurationError

LLAMA_STACK = LlamaStackConfiguration(url="http://localhost:8321")


def test_configuration_minimal() -> None:
    """Test configuration with defaults only."""
    cfg = Configuration(name="test", llama_stack=LLAMA_STACK)

    assert cfg.service.port == 8080
    assert cfg.stores.credentials is None
    assert not cfg.endpoints


def test_endpoint_names_unique() -> None:
    """Test that endpoint names must be unique."""
    with pytest.raises(ValidationError, match="Endpoint names must be unique"):
        Configuration(
            name="test",
            llama_stack=LLAMA_STACK,
            endpoints=[
                EndpointConfiguration(name="assistant"),
                EndpointConfiguration(name="assistant"),
            ],
        )


@pytest.mark.parametrize(
    "option,message",
    [
        ("enable_auth", "credential store is not configured"),
        ("enable_cache", "response cache store is not configured"),
        ("enable_chat_history", "chat history store is not configured"),
    ],
)
def test_endpoint_store_required(option: str, message: str) -> None:
    """Test that enabled concern needs its store."""
    with pytest.raises(ValidationError, match=message):
        Configuration(
            name="test",
            llama_stack=LLAMA_STACK,
            endpoints=[EndpointConfiguration(name="assistant", **{option: True})],
        )


def test_endpoint_stores_configured() -> None:
    """Test endpoint with every concern enabled."""
    cfg = Configuration(
        name="test",
        llama_stack=LLAMA_STACK,
        stores=StoresConfiguration(
            credentials=StoreConfiguration(),
            response_cache=ResponseCacheConfiguration(),
            chat_history=StoreConfiguration(),
        ),
        endpoints=[
            EndpointConfiguration(
                name="assistant",
                enable_auth=True,
                enable_cache=True,
                enable_chat_history=True,
            )
        ],
    )
    assert cfg.endpoints[0].enable_cache is True


def test_service_wrong_port() -> None:
    """Test that too large port is rejected."""
    with pytest.raises(ValidationError, match="Port value should be less than 65536"):
        ServiceConfiguration(port=70000)


def test_cors_credentials_with_wildcard() -> None:
    """Test that credentials can not be allowed for any origin."""
    with pytest.raises(ValidationError, match="allow_credentials can not be set"):
        CORSConfiguration(allow_credentials=True)

    cfg = CORSConfiguration(allow_origins=["https://example.com"], allow_credentials=True)
    assert cfg.allow_credentials is True


def test_inference_model_and_provider() -> None:
    """Test that default model and provider are given together."""
    with pytest.raises(ValidationError, match="Default model must be specified"):
        InferenceConfiguration(default_provider="provider")
    with pytest.raises(ValidationError, match="Default provider must be specified"):
        InferenceConfiguration(default_model="model")


def test_llama_stack_configuration_constructor() -> None:
    """Test valid combinations of Llama Stack options."""
    cfg = LlamaStackConfiguration(url="http://localhost")
    assert cfg.use_as_library_client is False

    cfg = LlamaStackConfiguration(
        use_as_library_client=False, url="http://localhost", api_key=SecretStr("foo")
    )
    assert cfg.api_key.get_secret_value() == "foo"


def test_llama_stack_library_client(tmp_path: Path) -> None:
    """Test library client mode with existing configuration file."""
    run_yaml = tmp_path / "run.yaml"
    run_yaml.write_text("version: 2\n", encoding="utf-8")

    cfg = LlamaStackConfiguration(
        use_as_library_client=True, library_client_config_path=str(run_yaml)
    )
    assert cfg.use_as_library_client is True


def test_llama_stack_no_run_yaml() -> None:
    """Test that library client mode requires existing file."""
    with pytest.raises(
        InvalidConfigurationError,
        match="Llama Stack configuration file 'not a file' is not a file",
    ):
        LlamaStackConfiguration(
            use_as_library_client=True, library_client_config_path="not a file"
        )


def test_llama_stack_wrong_configuration() -> None:
    """Test that either URL or library client mode is required."""
    with pytest.raises(ValueError, match="library client mode is not specified"):
        LlamaStackConfiguration()
    with pytest.raises(ValueError, match="library client mode is not enabled"):
        LlamaStackConfiguration(use_as_library_client=False)
    with pytest.raises(ValueError, match="configuration file path is not specified"):
        LlamaStackConfiguration(use_as_library_client=True)


def test_dump_configuration(tmp_path: Path) -> None:
    """Test that configuration can be serialized to a JSON file."""
    cfg = Configuration(
        name="test_name",
        llama_stack=LlamaStackConfiguration(
            url="http://localhost:8321", api_key=SecretStr("whatever")
        ),
        inference=InferenceConfiguration(
            default_provider="default_provider", default_model="default_model"
        ),
        stores=StoresConfiguration(
            response_cache=ResponseCacheConfiguration(admission_threshold=2)
        ),
        endpoints=[EndpointConfiguration(name="assistant", enable_cache=True)],
    )
    dump_file = tmp_path / "test.json"
    cfg.dump(str(dump_file))

    with open(dump_file, "r", encoding="utf-8") as fin:
        content = json.load(fin)

    assert content["name"] == "test_name"
    for section in ["service", "llama_stack", "inference", "stores", "endpoints"]:
        assert section in content
    # secrets are not dumped in plain text
    assert content["llama_stack"]["api_key"] == "**********"
    assert content["stores"]["response_cache"]["admission_threshold"] == 2
    assert content["endpoints"][0]["name"] == "assistant"
    assert content["endpoints"][0]["enable_cache"] is True
