"""Configuration loaded from environment variables."""

import os
from dataclasses import dataclass

DEFAULT_MODEL = "llama-3.1-70b-versatile"
DEFAULT_INSTRUCTIONS = "You are a helpful assistant"


@dataclass
class MemoryConfig:
    """Limits and write policy for the memory service.

    Attributes:
        max_description_length: Longest accepted description, in characters.
        max_content_length: Longest accepted content, in characters.
        max_query_length: Longest accepted search query, in characters.
        sanitize_on_write: Strip HTML/script markup before storing.
    """

    max_description_length: int = 1000
    max_content_length: int = 10000
    max_query_length: int = 200
    sanitize_on_write: bool = False


@dataclass
class AgentConfig:
    """Configuration for the memory agent."""

    model: str = DEFAULT_MODEL
    instructions: str = DEFAULT_INSTRUCTIONS
    memory_update_model: str | None = None
    max_context_messages: int | None = None

    @property
    def update_model(self) -> str:
        """Model used for the memory-update function call."""
        return self.memory_update_model or self.model


def _env_bool(name: str, default: bool) -> bool:
    value = os.getenv(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_int(name: str) -> int | None:
    value = os.getenv(name)
    return int(value) if value else None


def config_from_env() -> tuple[AgentConfig, MemoryConfig]:
    """Load configuration from environment variables."""
    agent_config = AgentConfig(
        model=os.getenv("GROQ_MODEL", DEFAULT_MODEL),
        memory_update_model=os.getenv("MIMIR_MEMORY_MODEL") or None,
        max_context_messages=_env_int("MIMIR_MAX_CONTEXT_MESSAGES"),
    )

    memory_config = MemoryConfig(
        max_description_length=int(os.getenv("MIMIR_MAX_DESCRIPTION_LENGTH", "1000")),
        max_content_length=int(os.getenv("MIMIR_MAX_CONTENT_LENGTH", "10000")),
        max_query_length=int(os.getenv("MIMIR_MAX_QUERY_LENGTH", "200")),
        sanitize_on_write=_env_bool("MIMIR_SANITIZE_ON_WRITE", False),
    )

    return agent_config, memory_config
