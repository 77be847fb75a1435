"""Memory writes driven by user commands or by model decisions.

Two paths lead into the store:

- direct: an explicit "remember"/"note" command found in user input is
  stored as-is, with no model in the loop.
- reviewed: the model is shown the exchange and asked, through a
  function call, which memory items to create or update.
"""

from __future__ import annotations

import json
import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from ..errors import ValidationError
from ..logging import DIRECT, REVIEWED, JSONLLogger
from .commands import detect_memory_command
from .keywords import extract_keywords
from .models import CommandKind, MemoryCommand, MemoryRecord, MemoryUpdate, MemoryUpdateResult
from .service import MemoryService

if TYPE_CHECKING:
    from ..provider import CompletionProvider

logger = logging.getLogger(__name__)

UPDATE_FUNCTION_NAME = "update_agent_memory"
EXPLICIT_REQUEST_REASONING = "User explicitly requested to remember this information"

UPDATE_MEMORY_FUNCTION: dict[str, Any] = {
    "name": UPDATE_FUNCTION_NAME,
    "description": "Update the agent's memory based on the conversation",
    "parameters": {
        "type": "object",
        "properties": {
            "should_update": {
                "type": "boolean",
                "description": (
                    "Whether the agent should update its memory based on this interaction"
                ),
            },
            "memory_items": {
                "type": "array",
                "description": "Memory items to create or update",
                "items": {
                    "type": "object",
                    "properties": {
                        "action": {
                            "type": "string",
                            "enum": ["create", "update"],
                            "description": (
                                "Whether to create a new memory item or update an existing one"
                            ),
                        },
                        "id": {
                            "type": "string",
                            "description": (
                                "ID of the memory item to update (only required for updates)"
                            ),
                        },
                        "description": {
                            "type": "string",
                            "description": (
                                "Short description of what this memory item represents"
                            ),
                        },
                        "content": {
                            "type": "string",
                            "description": "Content of the memory item",
                        },
                    },
                    "required": ["action", "description", "content"],
                },
            },
            "reasoning": {
                "type": "string",
                "description": "Reasoning for the memory update decision",
            },
        },
        "required": ["should_update", "reasoning"],
    },
}

MEMORY_UPDATE_INSTRUCTIONS = """You are an agent that decides whether to update its memory based on conversations.
Review the user's input and your response, then decide if you should:
1. Create new memory items about information shared by the user
2. Update existing memory items with new information

Be generous with what you store - if the user mentions any personal details, preferences,
facts about themselves, or important context, you should remember it.

Your memory items should have a concise description and detailed content.
"""

UPDATE_PROMPT = """USER INPUT: {user_input}

AGENT RESPONSE: {agent_output}

Should I update my memory based on this interaction? If so, what memory items should I create or update?
"""


@dataclass(frozen=True)
class MemoryItemSuggestion:
    """A memory item proposed by the model, checked for shape."""

    action: str
    description: str
    content: str
    id: str | None = None

    @classmethod
    def from_dict(cls, item: Any) -> MemoryItemSuggestion | None:
        """Build a suggestion from raw function-call data.

        Returns:
            The suggestion, or None if the item is malformed.
        """
        if not isinstance(item, dict):
            return None

        action = item.get("action")
        description = item.get("description")
        content = item.get("content")
        record_id = item.get("id")

        if action not in ("create", "update"):
            return None
        if not isinstance(description, str) or not description.strip():
            return None
        if not isinstance(content, str) or not content.strip():
            return None
        if action == "update" and (not isinstance(record_id, str) or not record_id):
            return None

        return cls(
            action=action,
            description=description,
            content=content,
            id=record_id if isinstance(record_id, str) else None,
        )


def parse_suggestions(items: Any) -> list[MemoryItemSuggestion]:
    """Keep the well-formed items of a memory_items payload."""
    if not isinstance(items, list):
        return []

    suggestions = []
    for item in items:
        suggestion = MemoryItemSuggestion.from_dict(item)
        if suggestion is None:
            logger.warning("Skipping invalid memory item: %s", item)
            continue
        suggestions.append(suggestion)
    return suggestions


def describe_command(command: MemoryCommand) -> str:
    """Description for a command, generated when the user gave none."""
    if command.description:
        return command.description
    if command.kind is CommandKind.NOTE:
        return "User note"

    keywords = extract_keywords(command.content)
    topic = keywords[0] if keywords else "user information"
    return f"User information about {topic}"


class MemoryUpdater:
    """Applies memory writes from explicit commands and model decisions."""

    def __init__(
        self,
        service: MemoryService,
        provider: CompletionProvider,
        model: str | None = None,
        audit_logger: JSONLLogger | None = None,
    ) -> None:
        """Initialize the updater.

        Args:
            service: The MemoryService writes go through.
            provider: The provider asked for memory decisions.
            model: Model for the decision call, provider default if None.
            audit_logger: Optional audit log for writes.
        """
        self.service = service
        self.provider = provider
        self.model = model
        self.audit_logger = audit_logger

    def store_command(
        self, command: MemoryCommand, session_id: str | None = None
    ) -> MemoryRecord:
        """Store an explicit command directly, without any model review.

        Raises:
            ValidationError: If the command content fails validation.
        """
        record = self.service.store_memory(describe_command(command), command.content)
        logger.info("Stored memory from explicit %s command", command.kind.value)
        if self.audit_logger is not None:
            self.audit_logger.log_memory_write(
                DIRECT,
                "created",
                record.id,
                session_id=session_id,
                command=command.kind.value,
            )
        return record

    async def consider(
        self,
        user_input: str,
        agent_output: str,
        session_id: str | None = None,
    ) -> MemoryUpdateResult:
        """Decide whether an exchange should change memory, and apply it.

        Never raises: failures are logged and reported in the result.

        Args:
            user_input: What the user said.
            agent_output: What the agent answered.
            session_id: Optional session for the audit log.

        Returns:
            The decision and the writes that were applied.
        """
        try:
            command = detect_memory_command(user_input)
            if command is not None:
                record = self.store_command(command, session_id=session_id)
                return MemoryUpdateResult(
                    updated=True,
                    reasoning=EXPLICIT_REQUEST_REASONING,
                    updates=[MemoryUpdate(action="created", item=record)],
                )

            response = await self.provider.function_call(
                UPDATE_PROMPT.format(user_input=user_input, agent_output=agent_output),
                [UPDATE_MEMORY_FUNCTION],
                MEMORY_UPDATE_INSTRUCTIONS,
                model=self.model,
            )

            if not response.tool_calls:
                logger.info("No memory updates needed")
                return MemoryUpdateResult(updated=False)

            call = response.tool_calls[0]
            if call.name != UPDATE_FUNCTION_NAME:
                logger.warning("Unexpected function in memory decision: %s", call.name)
                return MemoryUpdateResult(updated=False)

            args = json.loads(call.arguments)
            if not isinstance(args, dict):
                raise ValueError("Function arguments must be a JSON object")

            reasoning = args.get("reasoning")
            if not args.get("should_update"):
                logger.info("Agent decided not to update memory: %s", reasoning)
                return MemoryUpdateResult(updated=False, reasoning=reasoning)

            logger.info("Updating agent memory: %s", reasoning)
            suggestions = parse_suggestions(args.get("memory_items"))
            updates = self._apply(suggestions, reasoning, session_id)
            return MemoryUpdateResult(updated=True, reasoning=reasoning, updates=updates)

        except Exception as e:
            logger.exception("Error updating memory")
            if self.audit_logger is not None:
                self.audit_logger.log_memory_update_failed(str(e), session_id=session_id)
            return MemoryUpdateResult(updated=False, error=str(e))

    def _apply(
        self,
        suggestions: list[MemoryItemSuggestion],
        reasoning: str | None,
        session_id: str | None,
    ) -> list[MemoryUpdate]:
        updates: list[MemoryUpdate] = []
        for suggestion in suggestions:
            try:
                update = self._apply_one(suggestion)
            except ValidationError as e:
                logger.warning("Skipping memory item %s: %s", suggestion, e)
                continue

            updates.append(update)
            if self.audit_logger is not None and update.item is not None:
                self.audit_logger.log_memory_write(
                    REVIEWED,
                    update.action,
                    update.item.id,
                    session_id=session_id,
                    reasoning=reasoning,
                )
        return updates

    def _apply_one(self, suggestion: MemoryItemSuggestion) -> MemoryUpdate:
        if suggestion.action == "create":
            record = self.service.store_memory(suggestion.description, suggestion.content)
            return MemoryUpdate(action="created", item=record)

        record = self.service.update_memory(
            suggestion.id or "",
            description=suggestion.description,
            content=suggestion.content,
        )
        return MemoryUpdate(action="updated", item=record)
