"""Memory module: storage, command detection, retrieval and updates."""

from .commands import COMMAND_RULES, CommandRule, detect_memory_command
from .keywords import STOP_WORDS, extract_keywords, rank_by_relevance, score_record
from .models import (
    CommandKind,
    MemoryCommand,
    MemoryRecord,
    MemoryUpdate,
    MemoryUpdateResult,
)
from .service import MemoryService, strip_markup
from .store import InMemoryStore, MemoryStore
from .tools import MEMORY_TOOL_CLASSES, build_memory_registry
from .updater import MemoryItemSuggestion, MemoryUpdater, describe_command, parse_suggestions

__all__ = [
    "COMMAND_RULES",
    "CommandKind",
    "CommandRule",
    "InMemoryStore",
    "MEMORY_TOOL_CLASSES",
    "MemoryCommand",
    "MemoryItemSuggestion",
    "MemoryRecord",
    "MemoryService",
    "MemoryStore",
    "MemoryUpdate",
    "MemoryUpdateResult",
    "MemoryUpdater",
    "STOP_WORDS",
    "build_memory_registry",
    "describe_command",
    "detect_memory_command",
    "extract_keywords",
    "parse_suggestions",
    "rank_by_relevance",
    "score_record",
    "strip_markup",
]
