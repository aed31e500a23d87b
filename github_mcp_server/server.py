"""
MCP Server implementation.

Main server that reads requests line by line, dispatches them and writes
one response per request.
"""

import logging
import os
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, Mapping, Optional

from .github import DEFAULT_API_URL, GitHubClient
from .github_tools import create_default_registry
from .protocol import (
    MCPError,
    MCPErrorCode,
    MCPRequest,
    MCPResponse,
    ToolCallError,
    ToolCallRequest,
    ToolCallResult,
    parse_request,
)
from .tools import BaseTool, ToolRegistry
from .transport import Transport, StdioTransport


logger = logging.getLogger(__name__)

Handler = Callable[[Optional[Any]], Awaitable[Any]]


class ConfigurationError(Exception):
    """The process environment cannot start a server."""


@dataclass
class ServerConfig:
    """Configuration for MCP server."""
    github_token: str = ""
    name: str = "GitHub MCP Server"
    version: str = "1.0.0"
    protocol_version: str = "2024-11-05"
    github_api_url: str = DEFAULT_API_URL
    request_timeout: float = 30.0
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "ServerConfig":
        """
        Build configuration from environment variables.

        GITHUB_TOKEN is required. GITHUB_API_URL, GITHUB_MCP_TIMEOUT and
        GITHUB_MCP_LOG_LEVEL override the defaults.

        Raises:
            ConfigurationError: the token is missing or a value is invalid.
        """
        environ = os.environ if environ is None else environ

        token = environ.get("GITHUB_TOKEN", "").strip()
        if not token:
            raise ConfigurationError("GITHUB_TOKEN environment variable is required")

        config = cls(github_token=token)

        if environ.get("GITHUB_API_URL"):
            config.github_api_url = environ["GITHUB_API_URL"]

        if environ.get("GITHUB_MCP_TIMEOUT"):
            try:
                config.request_timeout = float(environ["GITHUB_MCP_TIMEOUT"])
            except ValueError:
                raise ConfigurationError(
                    f"GITHUB_MCP_TIMEOUT must be a number, got {environ['GITHUB_MCP_TIMEOUT']!r}"
                )
            if config.request_timeout <= 0:
                raise ConfigurationError("GITHUB_MCP_TIMEOUT must be positive")

        if environ.get("GITHUB_MCP_LOG_LEVEL"):
            config.log_level = environ["GITHUB_MCP_LOG_LEVEL"].upper()

        return config


class MCPServer:
    """
    MCP Server that dispatches requests to a fixed tool registry.

    The server holds no per-session state: initialize is answered but not
    required before other methods.
    """

    def __init__(
        self,
        config: Optional[ServerConfig] = None,
        registry: Optional[ToolRegistry] = None,
    ):
        self.config = config or ServerConfig()
        self.registry = registry if registry is not None else ToolRegistry()
        self._handlers: Dict[str, Handler] = {
            "initialize": self._handle_initialize,
            "notifications/initialized": self._handle_initialized,
            "tools/list": self._handle_list_tools,
            "tools/call": self._handle_call_tool,
        }

    async def _handle_initialize(self, params: Optional[Any]) -> dict:
        """Handle initialize request."""
        return {
            "protocolVersion": self.config.protocol_version,
            "capabilities": {
                "tools": {},
            },
            "serverInfo": {
                "name": self.config.name,
                "version": self.config.version,
            },
        }

    async def _handle_initialized(self, params: Optional[Any]) -> dict:
        """Handle initialized notification."""
        logger.info("Client initialized")
        return {}

    async def _handle_list_tools(self, params: Optional[Any]) -> dict:
        """Handle tools/list request."""
        tools = self.registry.list_tools()
        return {
            "tools": [t.to_dict() for t in tools],
        }

    async def _handle_call_tool(self, params: Optional[Any]) -> dict:
        """Handle tools/call request."""
        call = ToolCallRequest.from_params(params)

        tool = self.registry.get(call.name)
        if tool is None:
            raise ToolCallError(f"Unknown tool: {call.name}")

        result = await self._call_tool(tool, call.arguments)
        return result.to_dict()

    async def _call_tool(self, tool: BaseTool, arguments: Dict[str, Any]) -> ToolCallResult:
        """Run a tool, reporting any failure inside the result."""
        error = tool.validate_arguments(arguments)
        if error:
            return ToolCallResult.from_error(f"Error executing tool: {error}")

        try:
            value = await tool.execute(arguments)
            return ToolCallResult.from_value(value)
        except Exception as e:
            logger.warning(f"Tool {tool.name} failed: {e}")
            return ToolCallResult.from_error(f"Error executing tool: {e}")

    async def process_request(self, request: MCPRequest) -> MCPResponse:
        """Process a single MCP request."""
        handler = self._handlers.get(request.method)

        if handler is None:
            error = MCPError.from_code(
                MCPErrorCode.METHOD_NOT_FOUND,
                f"Method not found: {request.method}",
            )
            return MCPResponse.failure(request.id, error)

        try:
            result = await handler(request.params)
            return MCPResponse.success(request.id, result)
        except Exception as e:
            logger.exception(f"Error processing {request.method}: {e}")
            return MCPResponse.failure(request.id, MCPError.internal(str(e)))

    async def handle_line(self, line: str) -> dict:
        """Decode one line and return the response to write for it."""
        try:
            request = parse_request(line)
        except ValueError as e:
            logger.error(f"Error processing request: {e}")
            return MCPResponse.failure(None, MCPError.internal(str(e))).to_dict()

        response = await self.process_request(request)
        return response.to_dict()

    async def run(self, transport: Optional[Transport] = None) -> None:
        """Run the server main loop until the input is exhausted."""
        transport = transport or StdioTransport()

        logger.info(f"{self.config.name} v{self.config.version} starting")

        try:
            async with transport:
                while True:
                    try:
                        line = await transport.receive()
                    except UnicodeDecodeError as e:
                        logger.error(f"Error reading request: {e}")
                        await self._send_internal_error(transport, e)
                        continue

                    if line is None:
                        logger.info("EOF received, shutting down")
                        break

                    try:
                        response = await self.handle_line(line)
                        await transport.send(response)
                    except Exception as e:
                        logger.exception(f"Error processing request: {e}")
                        await self._send_internal_error(transport, e)
        finally:
            logger.info("Server stopped")

    async def _send_internal_error(self, transport: Transport, exc: Exception) -> None:
        response = MCPResponse.failure(None, MCPError.internal(str(exc)))
        try:
            await transport.send(response.to_dict())
        except Exception as e:
            logger.error(f"Could not write error response: {e}")


async def run_server(config: ServerConfig, transport: Optional[Transport] = None) -> None:
    """
    Serve the GitHub tools until the transport reaches EOF.

    Args:
        config: Server configuration, including the GitHub token
        transport: Transport to serve on (stdin/stdout by default)
    """
    async with GitHubClient(
        config.github_token,
        base_url=config.github_api_url,
        timeout=config.request_timeout,
    ) as client:
        server = MCPServer(config, create_default_registry(client))
        await server.run(transport)
