"""ToolRegistry: name-keyed dispatch table for tools.

Maps each tool name to its declaration and its handler. The registry is
populated once at startup and then sealed, so concurrent requests only read it.
"""

import logging
from typing import Any, Awaitable, Callable

from toolchat_server.errors import (
    DuplicateToolError,
    RegistrySealedError,
    UnknownToolError,
)
from toolchat_server.tools.types import ToolDeclaration

logger = logging.getLogger(__name__)

# A handler receives the validated arguments as keyword arguments and returns
# a mapping (or an awaitable resolving to one).
ToolHandler = Callable[..., dict[str, Any] | Awaitable[dict[str, Any]]]


class ToolRegistry:
    """Registry of tools available to the model.

    Declarations are kept in registration order, which is also the order in
    which they are presented to the model.
    """

    def __init__(self) -> None:
        self._declarations: dict[str, ToolDeclaration] = {}
        self._handlers: dict[str, ToolHandler] = {}
        self._sealed = False

    def register(self, declaration: ToolDeclaration, handler: ToolHandler) -> None:
        """Register a tool.

        Args:
            declaration: The tool's schema as shown to the model
            handler: Callable invoked with the tool's arguments

        Raises:
            DuplicateToolError: If a tool with this name is already registered
            RegistrySealedError: If the registry has been sealed
        """
        if self._sealed:
            raise RegistrySealedError(
                f"Cannot register '{declaration.name}': registry is sealed"
            )
        if declaration.name in self._declarations:
            raise DuplicateToolError(declaration.name)

        self._declarations[declaration.name] = declaration
        self._handlers[declaration.name] = handler
        logger.debug(f"Registered tool: {declaration.name}")

    def resolve(self, name: str) -> ToolHandler:
        """Get the handler for a tool.

        Raises:
            UnknownToolError: If no tool with this name is registered
        """
        try:
            return self._handlers[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def get_declaration(self, name: str) -> ToolDeclaration:
        """Get the declaration for a tool.

        Raises:
            UnknownToolError: If no tool with this name is registered
        """
        try:
            return self._declarations[name]
        except KeyError:
            raise UnknownToolError(name) from None

    def list_declarations(self) -> list[ToolDeclaration]:
        """Return all declarations in registration order."""
        return list(self._declarations.values())

    def names(self) -> list[str]:
        return list(self._declarations)

    def to_ollama_tools(self) -> list[dict[str, Any]]:
        """Render every declaration as an Ollama tool schema."""
        return [decl.to_ollama_schema() for decl in self._declarations.values()]

    def seal(self) -> None:
        """Make the registry read-only."""
        self._sealed = True
        logger.info(f"Tool registry sealed with {len(self)} tools: {self.names()}")

    @property
    def sealed(self) -> bool:
        return self._sealed

    def __contains__(self, name: object) -> bool:
        return name in self._declarations

    def __len__(self) -> int:
        return len(self._declarations)
