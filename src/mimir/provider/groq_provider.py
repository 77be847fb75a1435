"""Completion provider backed by the Groq chat completions API."""

from __future__ import annotations

import logging
import os
from collections.abc import AsyncIterator
from typing import Any

from groq import AsyncGroq, GroqError

from ..config import DEFAULT_MODEL
from ..errors import ProviderError
from .base import (
    DELTA,
    DONE,
    Completion,
    FunctionCallResult,
    Message,
    StreamChunk,
    ToolCall,
)

logger = logging.getLogger(__name__)


class GroqCompletionProvider:
    """CompletionProvider implementation that wraps AsyncGroq.

    Example:
        from groq import AsyncGroq
        from mimir.provider import GroqCompletionProvider

        provider = GroqCompletionProvider(AsyncGroq(api_key="..."))
        completion = await provider.generate("Hi", "You are a helpful assistant")
    """

    def __init__(
        self,
        client: AsyncGroq | None = None,
        default_model: str = DEFAULT_MODEL,
    ) -> None:
        """Initialize the provider.

        Args:
            client: The AsyncGroq client. Built from GROQ_API_KEY if omitted.
            default_model: Model used when a call does not name one.
        """
        self._client = client or AsyncGroq(api_key=os.getenv("GROQ_API_KEY"))
        self._default_model = default_model

    @property
    def default_model(self) -> str:
        return self._default_model

    async def generate(
        self,
        input: str,
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> Completion:
        """Generate a complete text response.

        Raises:
            ProviderError: If the Groq call fails.
        """
        try:
            response = await self._client.chat.completions.create(
                model=model or self._default_model,
                messages=self._build_messages(input, instructions, context),
            )
        except GroqError as e:
            logger.error("Error generating response: %s", e)
            raise ProviderError(f"Generation failed: {e}") from e

        content = response.choices[0].message.content if response.choices else None
        return Completion(output=content or "", request_id=response.id)

    async def stream(
        self,
        input: str,
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        """Stream a response as delta chunks, ending with a terminal chunk.

        Raises:
            ProviderError: If the Groq call fails, before or during streaming.
        """
        try:
            stream = await self._client.chat.completions.create(
                model=model or self._default_model,
                messages=self._build_messages(input, instructions, context),
                stream=True,
            )
            async for chunk in stream:
                if not chunk.choices:
                    continue
                choice = chunk.choices[0]
                if choice.delta and choice.delta.content:
                    yield StreamChunk(delta=choice.delta.content, type=DELTA)
                if choice.finish_reason is not None:
                    yield StreamChunk(done=True, type=DONE)
                    return
        except GroqError as e:
            logger.error("Error streaming response: %s", e)
            raise ProviderError(f"Streaming failed: {e}") from e

        # Stream ended without a finish reason
        yield StreamChunk(done=True, type=DONE)

    async def function_call(
        self,
        input: str,
        tools: list[dict[str, Any]],
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> FunctionCallResult:
        """Offer functions to the model and return the calls it makes.

        Args:
            input: The user input.
            tools: Function definitions, either bare {name, description,
                parameters} dicts or full {"type": "function", ...} schemas.
            instructions: System instructions.
            model: Model override.
            context: Prior conversation turns.

        Raises:
            ProviderError: If the Groq call fails.
        """
        try:
            response = await self._client.chat.completions.create(
                model=model or self._default_model,
                messages=self._build_messages(input, instructions, context),
                tools=[_as_tool_schema(tool) for tool in tools],
                tool_choice="auto",
            )
        except GroqError as e:
            logger.error("Error making function call: %s", e)
            raise ProviderError(f"Function call failed: {e}") from e

        if not response.choices:
            return FunctionCallResult(request_id=response.id)

        message = response.choices[0].message
        tool_calls = [
            ToolCall(
                id=tc.id,
                name=tc.function.name,
                arguments=tc.function.arguments or "{}",
            )
            for tc in message.tool_calls or []
        ]
        return FunctionCallResult(
            tool_calls=tool_calls,
            message_content=message.content,
            request_id=response.id,
        )

    def _build_messages(
        self,
        input: str,
        instructions: str,
        context: list[Message] | None,
    ) -> list[dict[str, Any]]:
        messages: list[dict[str, Any]] = [{"role": "system", "content": instructions}]
        for msg in context or []:
            messages.append({"role": msg["role"], "content": msg["content"]})
        messages.append({"role": "user", "content": input})
        return messages


def _as_tool_schema(tool: dict[str, Any]) -> dict[str, Any]:
    if tool.get("type") == "function":
        return tool
    return {
        "type": "function",
        "function": {
            "name": tool["name"],
            "description": tool.get("description", ""),
            "parameters": tool.get("parameters", {"type": "object", "properties": {}}),
        },
    }
