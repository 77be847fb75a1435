"""Tool registry for managing and dispatching tools."""

import logging
from typing import Any

from ..errors import MimirError
from .base import Tool, ToolResult

logger = logging.getLogger(__name__)


def _failure(error: str) -> ToolResult:
    return ToolResult(success=False, output="", error=error)


class ToolRegistry:
    """Named tools, exported as function schemas and dispatched by name."""

    def __init__(self) -> None:
        self._tools: dict[str, Tool] = {}

    def register(self, tool: Tool) -> None:
        """Register a tool.

        Raises:
            ValueError: If a tool with the same name is already registered.
        """
        if tool.name in self._tools:
            raise ValueError(f"Tool '{tool.name}' already registered")
        self._tools[tool.name] = tool

    def get(self, name: str) -> Tool | None:
        return self._tools.get(name)

    def list_tools(self) -> list[str]:
        """Registered tool names, in registration order."""
        return list(self._tools)

    def get_tools_schema(self) -> list[dict[str, Any]]:
        return [tool.get_schema() for tool in self._tools.values()]

    async def dispatch(self, tool_name: str, args: dict[str, Any]) -> ToolResult:
        """Run a tool by name. Never raises.

        Unknown tools, invalid arguments and errors raised by the tool all
        come back as a failed ToolResult.
        """
        tool = self._tools.get(tool_name)
        if tool is None:
            return _failure(f"Unknown tool: {tool_name}")

        valid, error = tool.validate_args(args)
        if not valid:
            return _failure(error or "Invalid arguments")

        try:
            return await tool.execute(**args)
        except MimirError as e:
            logger.info("Tool %s rejected call: %s", tool_name, e)
            return _failure(str(e))
        except Exception as e:
            logger.warning("Tool %s failed: %s", tool_name, e)
            return _failure(f"Tool execution failed: {e}")
