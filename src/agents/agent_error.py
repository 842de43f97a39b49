"""Errors raised while selecting or configuring a chat agent."""


class AgentConfigurationError(Exception):
    """Chat agent can not be built from the endpoint configuration."""

    status_code = 500


class RagConfigurationError(AgentConfigurationError):
    """RAG is enabled, but the agent lacks what it needs to ground answers."""
