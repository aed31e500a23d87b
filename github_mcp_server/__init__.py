"""
GitHub MCP Server - MCP server exposing GitHub repository and pull request tools.

The Model Context Protocol (MCP) enables AI assistants to interact with
external tools and data sources through a standardized interface.
"""

from .protocol import (
    MCPMessage,
    MCPRequest,
    MCPResponse,
    MCPError,
    MCPErrorCode,
    ContentBlock,
    Tool,
    ToolCallError,
    ToolCallRequest,
    ToolCallResult,
    ToolParameter,
)
from .server import ConfigurationError, MCPServer, ServerConfig, run_server
from .tools import BaseTool, ToolError, ToolRegistry
from .github import GitHubClient, GitHubError
from .github_tools import (
    PullRequestReviewerTool,
    RepositoryAnalyzerTool,
    RepositoryContentsTool,
    create_default_registry,
)
from .transport import (
    Transport,
    StdioTransport,
)

__version__ = "1.0.0"

__all__ = [
    # Protocol
    "MCPMessage",
    "MCPRequest",
    "MCPResponse",
    "MCPError",
    "MCPErrorCode",
    "ContentBlock",
    "Tool",
    "ToolCallError",
    "ToolCallRequest",
    "ToolCallResult",
    "ToolParameter",
    # Server
    "MCPServer",
    "ServerConfig",
    "ConfigurationError",
    "run_server",
    # Tools
    "BaseTool",
    "ToolError",
    "ToolRegistry",
    "RepositoryAnalyzerTool",
    "PullRequestReviewerTool",
    "RepositoryContentsTool",
    "create_default_registry",
    # GitHub
    "GitHubClient",
    "GitHubError",
    # Transport
    "Transport",
    "StdioTransport",
]
