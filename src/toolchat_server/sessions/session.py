"""ConversationSession: one exchange with the model.

This module provides the ConversationSession class which handles:
- Holding the ordered message history of one chat request
- Converting the history to the Ollama wire format
- Sending user messages and tool results to the model
- Parsing model replies into TextReply / ToolCallReply

It also provides helpers to convert messages to and from plain dicts so a
history can round-trip through the API unchanged.
"""

import asyncio
import json
import logging
import uuid
from dataclasses import asdict, fields
from datetime import datetime, timezone
from typing import Any

from toolchat_server.errors import ModelUnavailableError, ValidationError
from toolchat_server.ollama.client import OllamaClient
from toolchat_server.sessions.types import (
    Message,
    ModelMessage,
    ModelReply,
    TextReply,
    ToolCallReply,
    ToolMessage,
    UserMessage,
)
from toolchat_server.tools.types import ToolCallRequest, ToolResult

logger = logging.getLogger(__name__)

_MESSAGE_TYPES: dict[str, type] = {
    "user": UserMessage,
    "model": ModelMessage,
    "tool": ToolMessage,
}

# Ollama calls the model role "assistant"
_OLLAMA_ROLES = {"user": "user", "model": "assistant", "tool": "tool"}


def generate_message_id() -> str:
    """Generate a new unique message ID.

    Returns:
        10-character hexadecimal string
    """
    return uuid.uuid4().hex[:10]


def utc_timestamp() -> str:
    """Current UTC time as ISO 8601 with a trailing Z."""
    return datetime.now(timezone.utc).isoformat().replace("+00:00", "Z")


def message_from_dict(data: dict[str, Any]) -> Message:
    """Convert a dictionary to the appropriate Message type.

    Keys that the message type does not define are ignored.

    Args:
        data: Message data as a dictionary

    Returns:
        Appropriate Message dataclass instance

    Raises:
        ValidationError: If role is unknown
    """
    role = data.get("role")
    message_cls = _MESSAGE_TYPES.get(role)  # type: ignore[arg-type]
    if message_cls is None:
        raise ValidationError(
            f"Unknown message role: {role}", details={"role": role}
        )

    known = {f.name for f in fields(message_cls)}
    kwargs = {k: v for k, v in data.items() if k in known and v is not None}
    return message_cls(**kwargs)


def message_to_dict(message: Message) -> dict[str, Any]:
    return asdict(message)


def _tool_call_names(message: ModelMessage, index: int) -> list[str]:
    """Names requested by a model message's tool_calls.

    Raises:
        ValidationError: If an entry lacks a function name or mapping arguments
    """
    names = []
    for entry in message.tool_calls or []:
        function = entry.get("function") if isinstance(entry, dict) else None
        name = function.get("name") if isinstance(function, dict) else None
        arguments = function.get("arguments", {}) if isinstance(function, dict) else None
        if not isinstance(name, str) or not name or not isinstance(arguments, dict):
            raise ValidationError(
                f"Malformed tool call in message at index {index}",
                details={"index": index},
            )
        names.append(name)
    return names


def check_history_order(messages: list[Message]) -> None:
    """Verify that every tool message directly answers a tool call.

    Each tool_calls entry must name a function and carry mapping arguments.
    A tool message must immediately follow a model message that carries
    tool_calls, and its tool_name must be one of the functions called there.

    Raises:
        ValidationError: If a tool call is malformed or a tool message is out of place
    """
    called: dict[int, list[str]] = {}
    for index, message in enumerate(messages):
        if isinstance(message, ModelMessage):
            called[index] = _tool_call_names(message, index)
            continue
        if not isinstance(message, ToolMessage):
            continue

        names = called.get(index - 1)
        if not names:
            raise ValidationError(
                f"Tool message at index {index} does not follow a tool call",
                details={"index": index},
            )
        if message.tool_name not in names:
            raise ValidationError(
                f"Tool message at index {index} answers {message.tool_name!r}, "
                f"but the model called {', '.join(names)}",
                details={"index": index, "tool_name": message.tool_name},
            )


def convert_messages_to_ollama_format(messages: list[Message]) -> list[dict]:
    """Convert session messages to Ollama API format.

    Args:
        messages: List of message objects (UserMessage, ModelMessage, ToolMessage)

    Returns:
        List of message dicts in Ollama format: [{"role": "...", "content": "..."}, ...]
    """
    ollama_messages = []

    for msg in messages:
        if isinstance(msg, ToolMessage):
            ollama_messages.append(
                {
                    "role": "tool",
                    "content": json.dumps(msg.content, ensure_ascii=False),
                    "tool_name": msg.tool_name,
                }
            )
            continue

        ollama_msg: dict[str, Any] = {
            "role": _OLLAMA_ROLES[msg.role],
            "content": msg.content,
        }

        # Add tool_calls for model messages that have them
        if isinstance(msg, ModelMessage) and msg.tool_calls:
            ollama_msg["tool_calls"] = msg.tool_calls

        ollama_messages.append(ollama_msg)

    return ollama_messages


def _parse_tool_call(raw: Any) -> ToolCallRequest:
    """Parse one entry of a reply's tool_calls list.

    Raises:
        ModelUnavailableError: If the entry is malformed
    """
    function = raw.get("function") if isinstance(raw, dict) else None
    if not isinstance(function, dict):
        raise ModelUnavailableError("Malformed tool call in model reply")

    name = function.get("name")
    if not isinstance(name, str) or not name:
        raise ModelUnavailableError("Tool call in model reply has no name")

    arguments = function.get("arguments") or {}
    if isinstance(arguments, str):
        try:
            arguments = json.loads(arguments)
        except json.JSONDecodeError as e:
            raise ModelUnavailableError(
                f"Tool call arguments for {name} are not valid JSON"
            ) from e
    if not isinstance(arguments, dict):
        raise ModelUnavailableError(f"Tool call arguments for {name} are not a mapping")

    return ToolCallRequest(name=name, arguments=arguments)


def parse_model_reply(response: Any) -> tuple[ModelMessage, ModelReply]:
    """Turn a raw Ollama chat response into a history message and a reply.

    Only the first tool call is kept; a reply yields at most one tool call
    per round.

    Returns:
        Tuple of (message_to_append, reply)

    Raises:
        ModelUnavailableError: If the response is malformed
    """
    message = response.get("message") if isinstance(response, dict) else None
    if not isinstance(message, dict):
        raise ModelUnavailableError("Model response has no message")

    content = message.get("content") or ""
    if not isinstance(content, str):
        raise ModelUnavailableError("Model response content is not text")

    tool_calls = message.get("tool_calls") or []
    if not isinstance(tool_calls, list):
        raise ModelUnavailableError("Model response tool_calls is not a list")
    if not tool_calls:
        model_message = ModelMessage(
            content=content,
            message_id=generate_message_id(),
            timestamp=utc_timestamp(),
        )
        return model_message, TextReply(content=content)

    if len(tool_calls) > 1:
        logger.warning(
            f"Model requested {len(tool_calls)} tool calls; only the first is used"
        )

    request = _parse_tool_call(tool_calls[0])
    model_message = ModelMessage(
        content=content,
        message_id=generate_message_id(),
        timestamp=utc_timestamp(),
        tool_calls=[
            {"function": {"name": request.name, "arguments": request.arguments}}
        ],
    )
    return model_message, ToolCallReply(request=request, content=content)


class ConversationSession:
    """Holds the ordered history of one chat exchange with the model.

    The session copies the history it is given, so the caller's list is never
    mutated. Every message sent and every reply received is appended before
    control returns to the caller.
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        model: str,
        tools: list[dict[str, Any]] | None = None,
        history: list[Message] | None = None,
        options: dict[str, Any] | None = None,
        timeout: float | None = None,
    ):
        """Initialize a ConversationSession.

        Args:
            ollama_client: Client for the model capability
            model: The model name to chat with
            tools: Tool schemas offered to the model on every call
            history: Prior conversation (copied)
            options: Optional model parameters
            timeout: Optional deadline in seconds for each model call
        """
        self.ollama_client = ollama_client
        self.model = model
        self.tools = tools or []
        self.options = options
        self.timeout = timeout
        self.history: list[Message] = list(history or [])

    async def send_user_message(self, text: str) -> ModelReply:
        """Send a user message and return the model's reply.

        Raises:
            ModelUnavailableError: If the model fails or replies malformed output
        """
        self.history.append(
            UserMessage(
                content=text,
                message_id=generate_message_id(),
                timestamp=utc_timestamp(),
            )
        )
        return await self._exchange()

    async def send_tool_result(self, result: ToolResult) -> ModelReply:
        """Send a tool result and return the model's reply.

        Raises:
            ModelUnavailableError: If the model fails or replies malformed output
        """
        self.history.append(
            ToolMessage(
                tool_name=result.name,
                content=result.payload,
                message_id=generate_message_id(),
                timestamp=utc_timestamp(),
            )
        )
        return await self._exchange()

    async def _exchange(self) -> ModelReply:
        """Send the current history to the model and record its reply."""
        ollama_messages = convert_messages_to_ollama_format(self.history)
        logger.info(
            f"Sending {len(ollama_messages)} messages to Ollama with model {self.model}"
        )

        try:
            response = await asyncio.wait_for(
                self.ollama_client.chat(
                    model=self.model,
                    messages=ollama_messages,
                    tools=self.tools,
                    options=self.options,
                ),
                timeout=self.timeout,
            )
        except asyncio.TimeoutError as e:
            logger.error(f"Model call exceeded deadline of {self.timeout}s")
            raise ModelUnavailableError(
                f"Model did not reply within {self.timeout} seconds"
            ) from e
        except Exception as e:
            logger.error(f"Model call failed: {e}")
            raise ModelUnavailableError(f"Failed to get response from model: {e}") from e

        model_message, reply = parse_model_reply(response)
        self.history.append(model_message)

        logger.debug(f"Model replied with kind={reply.kind}")
        return reply
