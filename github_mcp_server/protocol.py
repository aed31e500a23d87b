"""
MCP Protocol definitions.

Implements the JSON-RPC envelopes and tool structures exchanged with the
MCP client, one JSON value per line.
"""

import json
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, List, Optional, Union


class MCPErrorCode(Enum):
    """Standard JSON-RPC error codes."""
    METHOD_NOT_FOUND = -32601
    INTERNAL_ERROR = -32603


class ToolCallError(ValueError):
    """A tools/call request that cannot be routed to a tool."""


@dataclass
class MCPError:
    """MCP Error object."""
    code: int
    message: str
    data: Optional[Any] = None

    @classmethod
    def from_code(cls, code: MCPErrorCode, message: str, data: Any = None) -> "MCPError":
        return cls(code=code.value, message=message, data=data)

    @classmethod
    def internal(cls, data: Any = None) -> "MCPError":
        """The generic error used for decode and handler failures."""
        return cls.from_code(MCPErrorCode.INTERNAL_ERROR, "Internal error", data)

    def to_dict(self) -> dict:
        result = {"code": self.code, "message": self.message}
        if self.data is not None:
            result["data"] = self.data
        return result


@dataclass
class MCPMessage:
    """Base MCP message."""
    jsonrpc: str = "2.0"
    id: Optional[Union[str, int, float]] = None

    def to_dict(self) -> dict:
        return {"jsonrpc": self.jsonrpc, "id": self.id}


@dataclass
class MCPRequest(MCPMessage):
    """MCP Request message."""
    method: str = ""
    params: Optional[Any] = None

    @classmethod
    def from_dict(cls, data: dict) -> "MCPRequest":
        method = data.get("method", "")
        if not isinstance(method, str):
            raise ValueError(f"Request method must be a string, got {type(method).__name__}")
        return cls(
            jsonrpc=data.get("jsonrpc", "2.0"),
            id=data.get("id"),
            method=method,
            params=data.get("params"),
        )


@dataclass
class MCPResponse(MCPMessage):
    """
    MCP Response message.

    Exactly one of result/error is serialized. The id is always written,
    null included, so the caller can correlate failures.
    """
    result: Optional[Any] = None
    error: Optional[MCPError] = None

    def to_dict(self) -> dict:
        result = super().to_dict()
        if self.error is not None:
            result["error"] = self.error.to_dict()
        else:
            result["result"] = self.result if self.result is not None else {}
        return result

    @classmethod
    def success(cls, id: Any, result: Any) -> "MCPResponse":
        return cls(id=id, result=result)

    @classmethod
    def failure(cls, id: Any, error: MCPError) -> "MCPResponse":
        return cls(id=id, error=error)


@dataclass
class ToolParameter:
    """Tool parameter definition."""
    name: str
    type: str
    description: str
    required: bool = False
    default: Optional[Any] = None

    def to_json_schema(self) -> dict:
        """Convert to JSON schema property."""
        schema = {
            "type": self.type,
            "description": self.description,
        }
        if self.default is not None:
            schema["default"] = self.default
        return schema


@dataclass
class Tool:
    """Tool definition for MCP."""
    name: str
    description: str
    parameters: List[ToolParameter] = field(default_factory=list)

    @property
    def required(self) -> List[str]:
        return [p.name for p in self.parameters if p.required]

    def input_schema(self) -> dict:
        return {
            "type": "object",
            "properties": {p.name: p.to_json_schema() for p in self.parameters},
            "required": self.required,
        }

    def to_dict(self) -> dict:
        """Convert to MCP tool definition format."""
        return {
            "name": self.name,
            "description": self.description,
            "inputSchema": self.input_schema(),
        }


@dataclass
class ContentBlock:
    """A unit of tool output. Only text blocks are produced."""
    text: str
    type: str = "text"

    def to_dict(self) -> dict:
        return {"type": self.type, "text": self.text}


@dataclass
class ToolCallRequest:
    """Decoded params of a tools/call request."""
    name: str
    arguments: Dict[str, Any] = field(default_factory=dict)

    @classmethod
    def from_params(cls, params: Any) -> "ToolCallRequest":
        if params is None:
            raise ToolCallError("Missing parameters for tool call")
        if not isinstance(params, dict):
            raise ToolCallError("Invalid tool call request")

        name = params.get("name")
        arguments = params.get("arguments")
        if arguments is None:
            arguments = {}

        if not isinstance(name, str) or not name or not isinstance(arguments, dict):
            raise ToolCallError("Invalid tool call request")

        return cls(name=name, arguments=arguments)


@dataclass
class ToolCallResult:
    """Result of tools/call. A tool failure is reported here with is_error set."""
    content: List[ContentBlock]
    is_error: bool = False

    @classmethod
    def from_value(cls, value: Any) -> "ToolCallResult":
        text = json.dumps(value, indent=2, default=str)
        return cls(content=[ContentBlock(text=text)])

    @classmethod
    def from_error(cls, message: str) -> "ToolCallResult":
        return cls(content=[ContentBlock(text=message)], is_error=True)

    def to_dict(self) -> dict:
        return {
            "content": [block.to_dict() for block in self.content],
            "isError": self.is_error,
        }


def parse_request(data: Union[str, dict]) -> MCPRequest:
    """Parse a raw line or decoded object into a request."""
    if isinstance(data, str):
        try:
            data = json.loads(data)
        except json.JSONDecodeError as e:
            raise ValueError(f"Invalid JSON: {e}")

    if not isinstance(data, dict):
        raise ValueError("Message must be a JSON object")

    return MCPRequest.from_dict(data)
