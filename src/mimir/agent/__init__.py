"""Memory agent and prompt helpers."""

from .memory_agent import AgentResponse, MemoryAgent, MemoryToolCallResult
from .prompt import build_instructions, format_acknowledgment, format_memory_digest
from .session import SessionContexts

__all__ = [
    "AgentResponse",
    "MemoryAgent",
    "MemoryToolCallResult",
    "SessionContexts",
    "build_instructions",
    "format_acknowledgment",
    "format_memory_digest",
]
