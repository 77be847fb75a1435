"""Completion provider interface consumed by the memory agent."""

from collections.abc import AsyncIterator
from dataclasses import dataclass, field
from typing import Any, Protocol, runtime_checkable

Message = dict[str, str]

DELTA = "content.delta"
DONE = "content.done"


@dataclass(frozen=True)
class Completion:
    """A finished text generation."""

    output: str
    request_id: str | None = None


@dataclass(frozen=True)
class StreamChunk:
    """One event of a streamed generation."""

    delta: str = ""
    done: bool = False
    type: str = DELTA


@dataclass(frozen=True)
class ToolCall:
    """A function call requested by the model. Arguments are raw JSON text."""

    id: str
    name: str
    arguments: str


@dataclass
class FunctionCallResult:
    """Response to a function-calling request."""

    tool_calls: list[ToolCall] = field(default_factory=list)
    message_content: str | None = None
    request_id: str | None = None


@runtime_checkable
class CompletionProvider(Protocol):
    """Protocol for language-model backends.

    Implementations raise ProviderError when the backend call fails.
    """

    async def generate(
        self,
        input: str,
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> Completion:
        ...

    def stream(
        self,
        input: str,
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> AsyncIterator[StreamChunk]:
        ...

    async def function_call(
        self,
        input: str,
        tools: list[dict[str, Any]],
        instructions: str,
        model: str | None = None,
        context: list[Message] | None = None,
    ) -> FunctionCallResult:
        ...
