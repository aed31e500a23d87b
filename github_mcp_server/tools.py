"""
MCP Tools base.

Provides the tool contract, tolerant argument accessors and the registry
the server dispatches tools/call requests through.
"""

from abc import ABC, abstractmethod
from types import MappingProxyType
from typing import Any, Dict, Iterable, List, Mapping, Optional

from .protocol import Tool, ToolParameter


class ToolError(Exception):
    """Domain failure raised by a tool. Reported to the caller as isError."""


def get_string(arguments: Mapping[str, Any], key: str, default: str = "") -> str:
    """Read a string argument. Non-string values yield the default."""
    value = arguments.get(key)
    if isinstance(value, str):
        return value
    return default


def get_bool(arguments: Mapping[str, Any], key: str, default: bool = False) -> bool:
    """Read a boolean argument, accepting "true"/"false" strings."""
    value = arguments.get(key)
    if isinstance(value, bool):
        return value
    if isinstance(value, str):
        text = value.strip().lower()
        if text == "true":
            return True
        if text == "false":
            return False
    return default


def get_int(arguments: Mapping[str, Any], key: str, default: int = 0) -> int:
    """Read an integer argument, accepting integral floats and numeric strings."""
    value = arguments.get(key)
    if isinstance(value, bool):
        return default
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if value.is_integer() else default
    if isinstance(value, str):
        try:
            return int(value.strip())
        except ValueError:
            return default
    return default


class BaseTool(ABC):
    """Base class for MCP tools."""

    @property
    @abstractmethod
    def name(self) -> str:
        """Tool name."""
        pass

    @property
    @abstractmethod
    def description(self) -> str:
        """Tool description."""
        pass

    @property
    @abstractmethod
    def parameters(self) -> List[ToolParameter]:
        """Tool parameters."""
        pass

    @abstractmethod
    async def execute(self, arguments: Dict[str, Any]) -> Any:
        """Run the tool and return a JSON-serializable value.

        Raises:
            ToolError: the requested operation failed.
        """
        pass

    def get_definition(self) -> Tool:
        """Get the MCP tool definition."""
        return Tool(
            name=self.name,
            description=self.description,
            parameters=self.parameters,
        )

    @property
    def input_schema(self) -> dict:
        return self.get_definition().input_schema()

    def validate_arguments(self, arguments: Mapping[str, Any]) -> Optional[str]:
        """Validate arguments. Returns error message if invalid."""
        for param in self.parameters:
            if param.required and arguments.get(param.name) is None:
                return f"Missing required parameter: {param.name}"
        return None


class ToolRegistry:
    """Fixed set of tools keyed by name, in registration order."""

    def __init__(self, tools: Iterable[BaseTool] = ()):
        registered: Dict[str, BaseTool] = {}
        for tool in tools:
            if tool.name in registered:
                raise ValueError(f"Duplicate tool name: {tool.name}")
            registered[tool.name] = tool
        self._tools = registered

    @property
    def tools(self) -> Mapping[str, BaseTool]:
        return MappingProxyType(self._tools)

    def get(self, name: str) -> Optional[BaseTool]:
        """Get a tool by name."""
        return self._tools.get(name)

    def list_tools(self) -> List[Tool]:
        """List all registered tools as MCP Tool definitions."""
        return [tool.get_definition() for tool in self._tools.values()]

    def __contains__(self, name: object) -> bool:
        return name in self._tools

    def __len__(self) -> int:
        return len(self._tools)
