"""Exception hierarchy for toolchat-server.

Tool-side errors (UnknownToolError, ToolExecutionError) are absorbed by the
ToolExecutor and turned into error ToolResults. ModelUnavailableError fails the
whole chat request. ValidationError is raised before any model call or storage
write and maps to a client error.
"""


class ToolchatError(Exception):
    """Base class for all toolchat-server errors."""


class DuplicateToolError(ToolchatError):
    """A tool with the same name is already registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Tool '{name}' is already registered")
        self.name = name


class RegistrySealedError(ToolchatError):
    """The tool registry no longer accepts registrations."""


class UnknownToolError(ToolchatError):
    """The requested tool is not registered."""

    def __init__(self, name: str) -> None:
        super().__init__(f"Unknown tool: {name}")
        self.name = name


class ToolExecutionError(ToolchatError):
    """A tool's underlying capability failed (e.g. a network fetch)."""


class ModelUnavailableError(ToolchatError):
    """The model capability was unreachable or returned malformed output."""


class ValidationError(ToolchatError):
    """Inbound data is incomplete or malformed.

    Attributes:
        details: Optional mapping with field-level information for the client.
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        super().__init__(message)
        self.details = details or {}


class StoreNotReadyError(ToolchatError):
    """The transcript store was used before startup finished opening it."""
