"""Tool declarations, registry and execution layer.

This package provides the name-keyed tool registry, the executor that runs
tool calls requested by the model, and the built-in tools.
"""

from toolchat_server.tools.builtin import build_default_registry
from toolchat_server.tools.executor import ToolExecutor
from toolchat_server.tools.registry import ToolRegistry
from toolchat_server.tools.types import (
    ToolCallRequest,
    ToolDeclaration,
    ToolParameter,
    ToolResult,
)
from toolchat_server.tools.weather import WeatherClient

__all__ = [
    "ToolCallRequest",
    "ToolDeclaration",
    "ToolExecutor",
    "ToolParameter",
    "ToolRegistry",
    "ToolResult",
    "WeatherClient",
    "build_default_registry",
]
