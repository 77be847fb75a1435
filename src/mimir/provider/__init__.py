"""Language-model providers."""

from .base import (
    Completion,
    CompletionProvider,
    FunctionCallResult,
    Message,
    StreamChunk,
    ToolCall,
)
from .groq_provider import GroqCompletionProvider

__all__ = [
    "Completion",
    "CompletionProvider",
    "FunctionCallResult",
    "GroqCompletionProvider",
    "Message",
    "StreamChunk",
    "ToolCall",
]
