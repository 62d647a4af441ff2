"""Data types for conversation history and model replies.

This module defines the message dataclasses that make up a conversation
history and the tagged ModelReply variant returned by a ConversationSession.
"""

from dataclasses import dataclass, field
from typing import Any, Literal

from toolchat_server.tools.types import ToolCallRequest


@dataclass
class UserMessage:
    """A message from the user."""

    role: str = "user"
    content: str = ""
    message_id: str = ""
    timestamp: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'user'."""
        self.role = "user"


@dataclass
class ModelMessage:
    """A reply from the model.

    tool_calls holds the raw tool-call requests when the model asked for a
    tool instead of (or in addition to) answering in text.
    """

    role: str = "model"
    content: str = ""
    message_id: str = ""
    timestamp: str = ""
    tool_calls: list[dict[str, Any]] | None = None

    def __post_init__(self) -> None:
        """Validate role is always 'model'."""
        self.role = "model"


@dataclass
class ToolMessage:
    """The result of a tool execution."""

    role: str = "tool"
    tool_name: str = ""
    content: dict[str, Any] = field(default_factory=dict)
    message_id: str = ""
    timestamp: str = ""

    def __post_init__(self) -> None:
        """Validate role is always 'tool'."""
        self.role = "tool"


# Union type for all message types
Message = UserMessage | ModelMessage | ToolMessage


@dataclass
class TextReply:
    """The model answered in text."""

    content: str
    kind: Literal["text"] = "text"


@dataclass
class ToolCallReply:
    """The model asked for a tool to be executed."""

    request: ToolCallRequest
    content: str = ""
    kind: Literal["tool_call"] = "tool_call"


ModelReply = TextReply | ToolCallReply
