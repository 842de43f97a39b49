"""Unit tests."""

from configuration import configuration  # noqa: F401

config_dict = {
    "name": "test",
    "service": {
        "host": "localhost",
        "port": 8080,
        "workers": 1,
        "color_log": True,
        "access_log": True,
    },
    "llama_stack": {
        "api_key": "test-key",
        "url": "http://test.com:1234",
        "use_as_library_client": False,
    },
    "inference": {
        "default_model": "test-model",
        "default_provider": "test-provider",
    },
    "stores": {
        "credentials": {"type": "memory"},
        "response_cache": {"type": "memory", "admission_threshold": 2},
        "chat_history": {"type": "memory"},
    },
    "endpoints": [
        {"name": "assistant"},
    ],
}

# NOTE: Configuration must be initialized before importing app.main,
# since the FastAPI application reads service name and CORS options
# during import time
configuration.init_from_dict(config_dict)
