"""Memory agent: generation with command detection and memory retrieval."""

from __future__ import annotations

import json
import logging
import time
from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any

from ..config import AgentConfig
from ..errors import ProviderError
from ..logging import JSONLLogger
from ..memory import (
    MemoryCommand,
    MemoryRecord,
    MemoryService,
    MemoryUpdateResult,
    MemoryUpdater,
    build_memory_registry,
    detect_memory_command,
    extract_keywords,
)
from ..provider.base import DELTA, DONE, CompletionProvider, StreamChunk
from .prompt import build_instructions, format_acknowledgment
from .session import SessionContexts

logger = logging.getLogger(__name__)

MEMORY_TOOLS_INSTRUCTIONS = "You are a helpful assistant with access to memory management tools"
NO_TOOL_CALLED = "No memory tool was called"


@dataclass
class AgentResponse:
    """Result of a generation turn."""

    output: str
    request_id: str | None = None
    memories_used: list[MemoryRecord] | None = None
    memory_update: MemoryUpdateResult | None = None
    from_command: bool = False

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data, excluding unset fields."""
        data: dict[str, Any] = {"output": self.output, "request_id": self.request_id}
        if self.memories_used is not None:
            data["memories_used"] = [record.to_dict() for record in self.memories_used]
        if self.memory_update is not None:
            data["memory_update"] = self.memory_update.to_dict()
        return data


@dataclass
class MemoryToolCallResult:
    """Result of letting the model pick one memory tool."""

    output: str
    tool: str | None = None
    arguments: dict[str, Any] = field(default_factory=dict)
    result: Any = NO_TOOL_CALLED
    success: bool = True
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {"result": self.result, "output": self.output}
        if self.tool is not None:
            data["tool"] = self.tool
            data["arguments"] = self.arguments
        if self.error is not None:
            data["error"] = self.error
        return data


class MemoryAgent:
    """Conversational agent with a persistent memory it can be told to change.

    Every turn first looks for an explicit memory command. A command is
    written straight to memory and acknowledged without calling the model.
    Other turns are generated by the provider, after which the model is
    asked whether the exchange should change memory.
    """

    def __init__(
        self,
        provider: CompletionProvider,
        service: MemoryService | None = None,
        config: AgentConfig | None = None,
        audit_logger: JSONLLogger | None = None,
    ) -> None:
        """Initialize the agent.

        Args:
            provider: The language-model provider.
            service: Memory service. Defaults to one over a fresh in-memory store.
            config: Agent configuration.
            audit_logger: Optional JSONL audit log for memory writes.
        """
        self.provider = provider
        self.service = service or MemoryService()
        self.config = config or AgentConfig()
        self.audit_logger = audit_logger
        self.sessions = SessionContexts(max_messages=self.config.max_context_messages)
        self.updater = MemoryUpdater(
            self.service,
            provider,
            model=self.config.update_model,
            audit_logger=audit_logger,
        )
        self.tools = build_memory_registry(self.service, audit_logger)

    async def generate_response(
        self,
        input: str,
        instructions: str | None = None,
        model: str | None = None,
        session_id: str | None = None,
    ) -> AgentResponse:
        """Generate a reply, or store an explicit memory command.

        Raises:
            ProviderError: If generation fails.
            ValidationError: If a detected command cannot be stored.
        """
        command = detect_memory_command(input)
        if command is not None:
            return self._acknowledge(command, input, session_id)

        completion = await self.provider.generate(
            input,
            instructions or self.config.instructions,
            model or self.config.model,
            self.sessions.get(session_id) or None,
        )

        update = await self.consider_updating_memory(input, completion.output, session_id)
        self.sessions.record_exchange(session_id, input, completion.output)

        return AgentResponse(
            output=completion.output,
            request_id=completion.request_id,
            memory_update=update,
        )

    async def generate_response_with_memory(
        self,
        input: str,
        instructions: str | None = None,
        model: str | None = None,
        session_id: str | None = None,
    ) -> AgentResponse:
        """Generate a reply with relevant memories added to the instructions.

        Raises:
            ProviderError: If generation fails.
            ValidationError: If a detected command cannot be stored.
        """
        command = detect_memory_command(input)
        if command is not None:
            response = self._acknowledge(command, input, session_id)
            response.memories_used = []
            return response

        memories = self.service.search_by_keywords(extract_keywords(input))
        logger.debug("Using %d memories for input", len(memories))

        completion = await self.provider.generate(
            input,
            build_instructions(instructions or self.config.instructions, memories),
            model or self.config.model,
            self.sessions.get(session_id) or None,
        )

        update = await self.consider_updating_memory(input, completion.output, session_id)
        self.sessions.record_exchange(session_id, input, completion.output)

        return AgentResponse(
            output=completion.output,
            request_id=completion.request_id,
            memories_used=memories,
            memory_update=update,
        )

    async def stream_response(
        self,
        input: str,
        instructions: str | None = None,
        model: str | None = None,
        session_id: str | None = None,
        update_memory: bool = True,
    ) -> AsyncIterator[StreamChunk]:
        """Stream a reply chunk by chunk.

        With update_memory set, memory is updated once the terminal chunk
        arrives, from the accumulated text. A consumer that stops early
        skips the update; the provider stream is only closed when this
        generator is finalized.

        Raises:
            ProviderError: If streaming fails.
        """
        command = detect_memory_command(input)
        if command is not None:
            response = self._acknowledge(command, input, session_id)
            yield StreamChunk(delta=response.output, type=DELTA)
            yield StreamChunk(done=True, type=DONE)
            return

        parts: list[str] = []
        async for chunk in self.provider.stream(
            input,
            instructions or self.config.instructions,
            model or self.config.model,
            self.sessions.get(session_id) or None,
        ):
            if chunk.delta:
                parts.append(chunk.delta)
            if chunk.done and update_memory:
                await self.update_memory_after_stream(input, "".join(parts), session_id)
            yield chunk
            if chunk.done:
                return

    async def update_memory_after_stream(
        self,
        input: str,
        output: str,
        session_id: str | None = None,
    ) -> MemoryUpdateResult:
        """Record a streamed exchange and consider updating memory from it."""
        self.sessions.record_exchange(session_id, input, output)
        return await self.consider_updating_memory(input, output, session_id)

    async def consider_updating_memory(
        self,
        user_input: str,
        agent_output: str,
        session_id: str | None = None,
    ) -> MemoryUpdateResult:
        """Ask whether an exchange should change memory. Never raises."""
        return await self.updater.consider(user_input, agent_output, session_id)

    def get_all_memories(self) -> list[MemoryRecord]:
        return self.service.get_all_memories()

    def search_memories(self, query: str) -> list[MemoryRecord]:
        return self.service.search_memories(query)

    async def process_memory_tool_call(
        self,
        input: str,
        instructions: str | None = None,
        session_id: str | None = None,
    ) -> MemoryToolCallResult:
        """Let the model manage memory through the memory tools.

        Only the first tool call the model makes is executed.

        Raises:
            ProviderError: If the function call fails or returns
                arguments that are not a JSON object.
        """
        response = await self.provider.function_call(
            input,
            self.tools.get_tools_schema(),
            instructions or MEMORY_TOOLS_INSTRUCTIONS,
            self.config.model,
            self.sessions.get(session_id) or None,
        )
        output = response.message_content or ""

        if not response.tool_calls:
            self.sessions.record_exchange(session_id, input, output)
            return MemoryToolCallResult(output=output)

        call = response.tool_calls[0]
        try:
            args = json.loads(call.arguments or "{}")
        except json.JSONDecodeError as e:
            raise ProviderError(f"Malformed arguments for {call.name}: {e}") from e
        if not isinstance(args, dict):
            raise ProviderError(f"Arguments for {call.name} must be a JSON object")

        result = await self.tools.dispatch(call.name, args)
        self.sessions.record_exchange(session_id, input, output)

        return MemoryToolCallResult(
            output=output,
            tool=call.name,
            arguments=args,
            result=result.data if result.success else {"error": result.error},
            success=result.success,
            error=result.error,
        )

    def _acknowledge(
        self, command: MemoryCommand, input: str, session_id: str | None
    ) -> AgentResponse:
        record = self.updater.store_command(command, session_id=session_id)
        output = format_acknowledgment(command, record.description)
        self.sessions.record_exchange(session_id, input, output)
        return AgentResponse(
            output=output,
            request_id=f"memory-command-{int(time.time() * 1000)}",
            from_command=True,
        )
