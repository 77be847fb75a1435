"""Prompt and reply text used by the memory agent."""

from ..memory.models import CommandKind, MemoryCommand, MemoryRecord

MEMORY_DIGEST_HEADER = "Here are some relevant things I remember:"


def format_memory_digest(records: list[MemoryRecord]) -> str:
    """Format memories as a block for the model's instructions.

    Returns an empty string when there is nothing to add.
    """
    if not records:
        return ""

    lines = [f"- {record.description}: {record.content}" for record in records]
    return MEMORY_DIGEST_HEADER + "\n" + "\n".join(lines)


def build_instructions(instructions: str, records: list[MemoryRecord]) -> str:
    """Append the memory digest to the base instructions."""
    digest = format_memory_digest(records)
    if not digest:
        return instructions
    return f"{instructions}\n\n{digest}"


def format_acknowledgment(command: MemoryCommand, description: str) -> str:
    """Canned reply for a memory command stored without generation."""
    if command.kind is CommandKind.REMEMBER:
        detail = f'I\'ll remember that "{command.content}".'
    else:
        detail = f'I\'ve made a note about "{description}".'
    return f"I've saved that information for you. {detail}"
