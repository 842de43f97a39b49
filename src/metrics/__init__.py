"""Metrics module for chat endpoint stack."""

from prometheus_client import (
    Counter,
    Gauge,
    Histogram,
)

# Counter to track REST API calls
# This will be used to count how many times each API endpoint is called
# and the status code of the response
rest_api_calls_total = Counter(
    "ces_rest_api_calls_total", "REST API calls counter", ["path", "status_code"]
)

# Histogram to measure response durations
# This will be used to track how long it takes to handle requests
response_duration_seconds = Histogram(
    "ces_response_duration_seconds", "Response durations", ["path"]
)

# Metric that indicates what provider + model combinations are available,
# the default one is set to 1
provider_model_configuration = Gauge(
    "ces_provider_model_configuration",
    "LLM provider/models combinations defined in configuration",
    ["provider", "model"],
)

# Chat endpoint requests by outcome (fresh, cached, greeting, error)
chat_requests_total = Counter(
    "ces_chat_requests_total", "Chat endpoint requests", ["endpoint", "outcome"]
)

# Metric that counts how many LLM calls were made for each provider + model
llm_calls_total = Counter(
    "ces_llm_calls_total", "LLM calls counter", ["provider", "model"]
)

# Metric that counts how many LLM calls failed
llm_calls_failures_total = Counter(
    "ces_llm_calls_failures_total", "LLM calls failures"
)

llm_token_sent_total = Counter(
    "ces_llm_token_sent_total", "LLM tokens sent", ["provider", "model"]
)

llm_token_received_total = Counter(
    "ces_llm_token_received_total", "LLM tokens received", ["provider", "model"]
)

# Responses served from the response cache
cache_hits_total = Counter(
    "ces_cache_hits_total", "Responses served from cache", ["endpoint"]
)

# Responses admitted into the response cache
cached_responses_total = Counter(
    "ces_cached_responses_total", "Responses admitted into cache", ["endpoint"]
)
