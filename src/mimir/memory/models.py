"""Data models for the memory system."""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any


@dataclass(frozen=True)
class MemoryRecord:
    """A remembered fact held by the memory store.

    Attributes:
        id: Opaque unique identifier assigned by the store.
        description: Short label of what the record represents.
        content: The remembered fact.
        created_at: UTC timestamp set once at creation.
        updated_at: UTC timestamp set at creation and on every update.
    """

    id: str
    description: str
    content: str
    created_at: datetime
    updated_at: datetime

    def to_dict(self) -> dict[str, Any]:
        """Convert to plain data with ISO timestamps."""
        return {
            "id": self.id,
            "description": self.description,
            "content": self.content,
            "created_at": self.created_at.isoformat(),
            "updated_at": self.updated_at.isoformat(),
        }


class CommandKind(Enum):
    """Kinds of explicit memory directives found in user input."""

    REMEMBER = "remember"
    NOTE = "note"


@dataclass(frozen=True)
class MemoryCommand:
    """An explicit "remember"/"note" directive parsed from user input."""

    kind: CommandKind
    content: str
    description: str | None = None


@dataclass(frozen=True)
class MemoryUpdate:
    """One write applied by the model-reviewed path."""

    action: str
    item: MemoryRecord | None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "item": self.item.to_dict() if self.item else None,
        }


@dataclass
class MemoryUpdateResult:
    """Outcome of a memory-update decision for one interaction."""

    updated: bool
    reasoning: str | None = None
    updates: list[MemoryUpdate] = field(default_factory=list)
    error: str | None = None

    def to_dict(self) -> dict[str, Any]:
        """Convert to dict, excluding unset fields."""
        data: dict[str, Any] = {"updated": self.updated}
        if self.reasoning is not None:
            data["reasoning"] = self.reasoning
        if self.updated:
            data["updates"] = [update.to_dict() for update in self.updates]
        if self.error is not None:
            data["error"] = self.error
        return data
