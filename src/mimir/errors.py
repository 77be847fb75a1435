"""Exceptions raised by the memory subsystem and the completion provider."""


class MimirError(Exception):
    """Base class for all Mimir errors."""


class ValidationError(MimirError, ValueError):
    """Raised when input to the memory service is missing, empty or oversized."""

    def __init__(self, message: str, field: str | None = None) -> None:
        super().__init__(message)
        self.field = field


class ProviderError(MimirError):
    """Raised when a call to the language-model provider fails."""
