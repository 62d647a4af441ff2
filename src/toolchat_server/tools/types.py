"""Data types for tool declarations, tool calls and tool results.

These types form the contract between the model capability, the
ToolRegistry and the ToolExecutor.
"""

from dataclasses import dataclass, field
from typing import Any

# Primitive parameter types accepted in a declaration, mapped to the Python
# types an argument value may have.
PRIMITIVE_TYPES: dict[str, tuple[type, ...]] = {
    "string": (str,),
    "number": (int, float),
    "integer": (int,),
    "boolean": (bool,),
}


@dataclass(frozen=True)
class ToolParameter:
    """A single named argument accepted by a tool.

    Attributes:
        name: Argument name as seen by the model
        type: One of "string", "number", "integer", "boolean"
        description: Natural-language hint for the model
        required: Whether the model must supply this argument
    """

    name: str
    type: str
    description: str = ""
    required: bool = False

    def __post_init__(self) -> None:
        """Reject types the wire schema cannot express."""
        if self.type not in PRIMITIVE_TYPES:
            raise ValueError(
                f"Unsupported parameter type '{self.type}' for '{self.name}'"
            )

    def accepts(self, value: Any) -> bool:
        """Check whether a value matches this parameter's primitive type."""
        # bool is a subclass of int, but never a valid number
        if isinstance(value, bool) and self.type != "boolean":
            return False
        return isinstance(value, PRIMITIVE_TYPES[self.type])


@dataclass(frozen=True)
class ToolDeclaration:
    """Immutable description of a tool exposed to the model."""

    name: str
    description: str
    parameters: tuple[ToolParameter, ...] = ()

    @property
    def required(self) -> list[str]:
        """Names of the required parameters, in declaration order."""
        return [p.name for p in self.parameters if p.required]

    def get_parameter(self, name: str) -> ToolParameter | None:
        for parameter in self.parameters:
            if parameter.name == name:
                return parameter
        return None

    def to_ollama_schema(self) -> dict[str, Any]:
        """Render the declaration in the function-tool format Ollama expects.

        Returns:
            Dict of the form {"type": "function", "function": {...}}
        """
        properties: dict[str, Any] = {}
        for parameter in self.parameters:
            prop: dict[str, Any] = {"type": parameter.type}
            if parameter.description:
                prop["description"] = parameter.description
            properties[parameter.name] = prop

        return {
            "type": "function",
            "function": {
                "name": self.name,
                "description": self.description,
                "parameters": {
                    "type": "object",
                    "properties": properties,
                    "required": self.required,
                },
            },
        }


@dataclass
class ToolCallRequest:
    """A request from the model to run one tool."""

    name: str
    arguments: dict[str, Any] = field(default_factory=dict)


@dataclass
class ToolResult:
    """Outcome of a tool execution, fed back to the model.

    Error results carry a payload of the form {"error": "<message>"}.
    """

    name: str
    payload: dict[str, Any] = field(default_factory=dict)
    is_error: bool = False

    @classmethod
    def failure(cls, name: str, message: str) -> "ToolResult":
        """Build an error result with a human-readable message."""
        return cls(name=name, payload={"error": message}, is_error=True)

    def to_dict(self) -> dict[str, Any]:
        return {"name": self.name, "payload": self.payload, "is_error": self.is_error}
