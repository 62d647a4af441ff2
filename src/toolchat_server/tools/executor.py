"""ToolExecutor: runs tool calls requested by the model.

The executor looks up the tool in the ToolRegistry, validates the arguments
against the tool's declaration, invokes the handler and normalizes whatever
happens into a ToolResult. Tool-side failures never propagate past execute():
a missing or failing tool is turned into an error payload the model can read.
"""

import inspect
import logging
from typing import Any

from toolchat_server.errors import ToolExecutionError, UnknownToolError
from toolchat_server.tools.registry import ToolRegistry
from toolchat_server.tools.types import ToolCallRequest, ToolDeclaration, ToolResult

logger = logging.getLogger(__name__)


def validate_arguments(
    declaration: ToolDeclaration, arguments: dict[str, Any]
) -> tuple[dict[str, Any], str | None]:
    """Check arguments against a declaration.

    Args:
        declaration: The tool's declaration
        arguments: Arguments supplied by the model

    Returns:
        Tuple of (accepted_arguments, error_message). error_message is None
        when the arguments are valid. Arguments the declaration does not know
        about are dropped from accepted_arguments.
    """
    missing = [name for name in declaration.required if name not in arguments]
    if missing:
        return {}, f"Missing required argument(s) for {declaration.name}: {', '.join(missing)}"

    accepted: dict[str, Any] = {}
    for name, value in arguments.items():
        parameter = declaration.get_parameter(name)
        if parameter is None:
            logger.debug(f"Dropping undeclared argument '{name}' for {declaration.name}")
            continue
        if not parameter.accepts(value):
            return (
                {},
                f"Argument '{name}' for {declaration.name} must be of type "
                f"{parameter.type}, got {type(value).__name__}",
            )
        accepted[name] = value

    return accepted, None


class ToolExecutor:
    """Executes tool calls against a ToolRegistry.

    Usage::

        executor = ToolExecutor(registry)
        result = await executor.execute(ToolCallRequest("getCurrentTime"))
        if result.is_error:
            print(result.payload["error"])
    """

    def __init__(self, registry: ToolRegistry) -> None:
        self._registry = registry

    async def execute(self, request: ToolCallRequest) -> ToolResult:
        """Execute a single tool call.

        Args:
            request: The tool call requested by the model

        Returns:
            ToolResult with the tool's payload, or an error payload if the tool
            is unknown, the arguments are invalid or the tool failed.
        """
        try:
            declaration = self._registry.get_declaration(request.name)
            handler = self._registry.resolve(request.name)
        except UnknownToolError as e:
            logger.warning(f"Model requested unregistered tool: {request.name}")
            return ToolResult.failure(request.name, str(e))

        arguments, error = validate_arguments(declaration, request.arguments or {})
        if error is not None:
            logger.warning(f"Rejected call to {request.name}: {error}")
            return ToolResult.failure(request.name, error)

        logger.info(f"Executing tool {request.name} with arguments {arguments}")

        try:
            result = handler(**arguments)
            if inspect.isawaitable(result):
                result = await result
        except ToolExecutionError as e:
            logger.warning(f"Tool {request.name} failed: {e}")
            return ToolResult.failure(request.name, str(e))
        except Exception as e:
            logger.exception(f"Tool {request.name} raised an unexpected error")
            return ToolResult.failure(request.name, f"{type(e).__name__}: {e}")

        if not isinstance(result, dict):
            result = {"result": result}

        logger.debug(f"Tool {request.name} returned: {result}")
        return ToolResult(name=request.name, payload=result)

    async def execute_all(self, requests: list[ToolCallRequest]) -> list[ToolResult]:
        """Execute several tool calls one after another, preserving order."""
        return [await self.execute(request) for request in requests]
