"""Response generator backed by the Llama Stack Responses API."""

import json
from typing import Any, Optional, cast

from llama_stack_client import APIConnectionError, APIStatusError, AsyncLlamaStackClient

import constants
from generators.generation_error import GenerationError
from generators.generator import GenerateRequest, GenerateResponse, ResponseGenerator
from log import get_logger
from models.chat_history import ChatMessage
from models.responses import ToolCall, UsageDetails

logger = get_logger(__name__)

ROLE_MAPPING = {
    constants.ROLE_SYSTEM: "system",
    constants.ROLE_USER: "user",
    constants.ROLE_MODEL: "assistant",
}


class LlamaStackGenerator(ResponseGenerator):  # pylint: disable=too-few-public-methods
    """Generator that calls `client.responses.create()` of Llama Stack."""

    def __init__(
        self,
        client: AsyncLlamaStackClient,
        default_model: Optional[str] = None,
        default_provider: Optional[str] = None,
    ) -> None:
        """Initialize generator with the async client and default model."""
        self.client = client
        self.default_model = default_model
        self.default_provider = default_provider

    def model_id(self, request: GenerateRequest) -> str:
        """Return Llama Stack model ID in provider/model format."""
        model = request.model_settings.model or self.default_model
        provider = request.model_settings.provider or self.default_provider
        if not model:
            raise GenerationError("No model configured")
        if provider and not model.startswith(f"{provider}/"):
            return f"{provider}/{model}"
        return model

    async def generate(self, request: GenerateRequest) -> GenerateResponse:
        """Generate response for the request."""
        if request.output.kind == constants.OUTPUT_KIND_MEDIA:
            raise GenerationError("Media output is not supported by Llama Stack")

        messages = request.messages()
        create_kwargs: dict[str, Any] = {
            "input": [
                _to_input_message(message)
                for message in messages
                if message.role != constants.ROLE_SYSTEM
            ],
            "model": self.model_id(request),
            "instructions": _instructions(messages),
            "stream": False,
            "store": False,
        }
        if request.tools:
            create_kwargs["tools"] = cast(Any, request.tools)
        if request.model_settings.temperature is not None:
            create_kwargs["temperature"] = request.model_settings.temperature
        if request.model_settings.max_tokens is not None:
            create_kwargs["max_output_tokens"] = request.model_settings.max_tokens
        if request.output.kind == constants.OUTPUT_KIND_JSON:
            create_kwargs["text"] = {"format": _json_format(request)}

        try:
            response = await self.client.responses.create(**create_kwargs)
        except APIConnectionError as e:
            logger.error("Unable to connect to Llama Stack: %s", e)
            raise GenerationError(f"Unable to connect to Llama Stack: {e}") from e
        except APIStatusError as e:
            logger.error("Llama Stack returned error: %s", e)
            raise GenerationError(str(e)) from e

        text = "".join(
            _extract_text_from_response_output_item(output_item)
            for output_item in response.output
        )
        tool_calls = [
            tool_call
            for tool_call in (
                _build_tool_call(output_item) for output_item in response.output
            )
            if tool_call is not None
        ]
        logger.debug(
            "Response processing complete - Tool calls: %d, Response length: %d chars",
            len(tool_calls),
            len(text),
        )

        output: Any = text
        if request.output.kind == constants.OUTPUT_KIND_JSON:
            try:
                output = json.loads(text)
            except json.JSONDecodeError as e:
                raise GenerationError(f"Model returned invalid JSON: {e}") from e

        return GenerateResponse(
            text=text,
            output=output,
            usage=_usage(response, tool_calls),
            messages=messages,
        )


def _instructions(messages: list[ChatMessage]) -> str:
    return "\n\n".join(
        message.content for message in messages if message.role == constants.ROLE_SYSTEM
    )


def _to_input_message(message: ChatMessage) -> dict[str, Any]:
    return {
        "type": "message",
        "role": ROLE_MAPPING[message.role],
        "content": message.content,
    }


def _json_format(request: GenerateRequest) -> dict[str, Any]:
    if request.output.json_schema is None:
        return {"type": "json_object"}
    return {
        "type": "json_schema",
        "name": "response",
        "schema": request.output.json_schema,
    }


def _extract_text_from_response_output_item(output_item: Any) -> str:
    """Extract assistant message text from a Responses API output item."""
    if getattr(output_item, "type", None) != "message":
        return ""
    if getattr(output_item, "role", None) != "assistant":
        return ""

    content = getattr(output_item, "content", None)
    if isinstance(content, str):
        return content

    text_fragments: list[str] = []
    if isinstance(content, list):
        for part in content:
            if isinstance(part, str):
                text_fragments.append(part)
                continue
            text_value = getattr(part, "text", None)
            if text_value:
                text_fragments.append(text_value)
                continue
            refusal = getattr(part, "refusal", None)
            if refusal:
                text_fragments.append(refusal)
    return "".join(text_fragments)


def _build_tool_call(output_item: Any) -> Optional[ToolCall]:
    """Summarize function and MCP tool calls found in the response output."""
    item_type = getattr(output_item, "type", None)
    if item_type == "function_call":
        return ToolCall(
            tool_name=getattr(output_item, "name", "function_call"),
            arguments=getattr(output_item, "arguments", None),
        )
    if item_type == "mcp_call":
        return ToolCall(
            tool_name=getattr(output_item, "name", "mcp_call"),
            arguments=getattr(output_item, "arguments", None),
            result=getattr(output_item, "output", None),
        )
    return None


def _usage(response: Any, tool_calls: list[ToolCall]) -> UsageDetails:
    """Read token usage, which may be missing or a plain dict."""
    usage = getattr(response, "usage", None)
    if isinstance(usage, dict):
        input_tokens = usage.get("input_tokens", 0)
        output_tokens = usage.get("output_tokens", 0)
    else:
        input_tokens = getattr(usage, "input_tokens", 0)
        output_tokens = getattr(usage, "output_tokens", 0)
    input_tokens = input_tokens or 0
    output_tokens = output_tokens or 0
    return UsageDetails(
        input_tokens=input_tokens,
        output_tokens=output_tokens,
        total_tokens=input_tokens + output_tokens,
        tool_calls=tool_calls,
    )
