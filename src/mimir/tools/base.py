"""Base tool interface."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from typing import Any, ClassVar

_JSON_TYPES: dict[str, type | tuple[type, ...]] = {
    "string": str,
    "boolean": bool,
    "array": list,
    "object": dict,
}


@dataclass
class ToolResult:
    """Result from tool execution.

    ``data`` carries the plain-data result handed back to API callers,
    ``output`` its human-readable summary.
    """

    success: bool
    output: str
    error: str | None = None
    data: Any = None


class Tool(ABC):
    """A function the model can call.

    Subclasses declare ``name``, ``description`` and a JSON Schema
    ``parameters`` object as class attributes and implement ``execute``.
    """

    name: ClassVar[str]
    description: ClassVar[str]
    parameters: ClassVar[dict[str, Any]] = {"type": "object", "properties": {}, "required": []}

    @abstractmethod
    async def execute(self, **kwargs: Any) -> ToolResult:
        """Run the tool with validated arguments."""

    def get_schema(self) -> dict[str, Any]:
        """Schema in the chat-completions ``tools`` format."""
        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": self.parameters,
            },
        }

    def validate_args(self, args: dict[str, Any]) -> tuple[bool, str | None]:
        """Check required arguments and primitive types.

        Unknown arguments and None values are let through.
        """
        properties = self.parameters.get("properties", {})

        missing = [f for f in self.parameters.get("required", []) if f not in args]
        if missing:
            return False, f"Missing required argument: {missing[0]}"

        for key, value in args.items():
            if key not in properties or value is None:
                continue
            expected = _JSON_TYPES.get(properties[key].get("type", ""))
            if expected is not None and not isinstance(value, expected):
                return False, f"Argument '{key}' must be a {properties[key]['type']}"

        return True, None
