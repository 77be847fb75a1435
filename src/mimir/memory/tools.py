"""Memory tools offered to the model for explicit memory management."""

from typing import Any

from ..logging import TOOL, JSONLLogger
from ..tools.base import Tool, ToolResult
from ..tools.registry import ToolRegistry
from .models import MemoryRecord
from .service import MemoryService

NOT_FOUND = "No memory with that ID"


def _object(required: list[str], **properties: str) -> dict[str, Any]:
    """JSON Schema object whose properties are all strings."""
    return {
        "type": "object",
        "properties": {
            key: {"type": "string", "description": text} for key, text in properties.items()
        },
        "required": required,
    }


class MemoryTool(Tool):
    """Base for tools that operate on a MemoryService."""

    def __init__(
        self,
        service: MemoryService,
        audit_logger: JSONLLogger | None = None,
    ) -> None:
        """Initialize with a memory service.

        Args:
            service: The MemoryService all operations go through.
            audit_logger: Optional audit log for writes.
        """
        self.service = service
        self.audit_logger = audit_logger

    def _audit(self, action: str, record_id: str | None) -> None:
        if self.audit_logger is not None:
            self.audit_logger.log_memory_write(TOOL, action, record_id, tool_name=self.name)

    def _record_result(self, record: MemoryRecord | None, summary: str) -> ToolResult:
        if record is None:
            return ToolResult(success=True, output=NOT_FOUND, data=None)
        return ToolResult(
            success=True,
            output=f"{summary}{record.description}: {record.content}",
            data=record.to_dict(),
        )

    def _list_result(self, records: list[MemoryRecord]) -> ToolResult:
        if records:
            output = "\n".join(f"- [{r.id}] {r.description}: {r.content}" for r in records)
        else:
            output = "No memories found"
        return ToolResult(
            success=True,
            output=output,
            data=[record.to_dict() for record in records],
        )


class CreateMemoryTool(MemoryTool):
    name = "create_memory"
    description = "Create a new memory item"
    parameters = _object(
        ["description", "content"],
        description="Short description of what this memory represents",
        content="Content of the memory item",
    )

    async def execute(self, **kwargs: Any) -> ToolResult:
        record = self.service.store_memory(
            kwargs.get("description", ""), kwargs.get("content", "")
        )
        self._audit("created", record.id)
        return self._record_result(record, "Remembered ")


class GetMemoryTool(MemoryTool):
    name = "get_memory"
    description = "Get a memory item by ID"
    parameters = _object(["id"], id="ID of the memory item to retrieve")

    async def execute(self, **kwargs: Any) -> ToolResult:
        return self._record_result(self.service.get_memory(kwargs.get("id", "")), "")


class UpdateMemoryTool(MemoryTool):
    """Changes the description and/or content of a memory."""

    name = "update_memory"
    description = "Update an existing memory item"
    parameters = _object(
        ["id"],
        id="ID of the memory item to update",
        description="New description (optional)",
        content="New content (optional)",
    )

    async def execute(self, **kwargs: Any) -> ToolResult:
        record = self.service.update_memory(
            kwargs.get("id", ""),
            description=kwargs.get("description"),
            content=kwargs.get("content"),
        )
        if record is not None:
            self._audit("updated", record.id)
        return self._record_result(record, "Updated ")


class DeleteMemoryTool(MemoryTool):
    name = "delete_memory"
    description = "Delete a memory item"
    parameters = _object(["id"], id="ID of the memory item to delete")

    async def execute(self, **kwargs: Any) -> ToolResult:
        record_id = kwargs.get("id", "")
        deleted = self.service.delete_memory(record_id)
        if deleted:
            self._audit("deleted", record_id)
        return ToolResult(
            success=True,
            output="Deleted" if deleted else NOT_FOUND,
            data=deleted,
        )


class SearchMemoriesTool(MemoryTool):
    """Case-insensitive substring search over memories."""

    name = "search_memories"
    description = "Search for memory items"
    parameters = _object(["query"], query="Search query")

    async def execute(self, **kwargs: Any) -> ToolResult:
        return self._list_result(self.service.search_memories(kwargs.get("query", "")))


class ListAllMemoriesTool(MemoryTool):
    name = "list_all_memories"
    description = "List all memory items"

    async def execute(self, **kwargs: Any) -> ToolResult:
        return self._list_result(self.service.get_all_memories())


MEMORY_TOOL_CLASSES: tuple[type[MemoryTool], ...] = (
    CreateMemoryTool,
    GetMemoryTool,
    UpdateMemoryTool,
    DeleteMemoryTool,
    SearchMemoriesTool,
    ListAllMemoriesTool,
)


def build_memory_registry(
    service: MemoryService,
    audit_logger: JSONLLogger | None = None,
) -> ToolRegistry:
    """Create a registry holding one instance of every memory tool."""
    registry = ToolRegistry()
    for tool_class in MEMORY_TOOL_CLASSES:
        registry.register(tool_class(service, audit_logger))
    return registry
