"""Pydantic models for chat API requests and responses.

This module defines the request and response schemas for the chat endpoint,
including the wire shape of history messages.
"""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator


class HistoryMessage(BaseModel):
    """A single message in a conversation history.

    User and model messages carry text content; tool messages carry the
    tool's result payload as a JSON object.
    """

    role: Literal["user", "model", "tool"] = Field(description="Message role")
    content: str | dict[str, Any] = Field(
        default="", description="Text, or the tool payload for tool messages"
    )
    message_id: str = Field(default="", description="Unique message identifier")
    timestamp: str = Field(default="", description="ISO 8601 timestamp")
    tool_calls: list[dict[str, Any]] | None = Field(
        default=None, description="Tool call requested by the model (if any)"
    )
    tool_name: str | None = Field(
        default=None, description="Name of the tool that produced a tool message"
    )

    model_config = ConfigDict(from_attributes=True)

    @model_validator(mode="after")
    def validate_content_shape(self) -> "HistoryMessage":
        """Ensure content matches the role."""
        if self.role == "tool":
            if not isinstance(self.content, dict):
                raise ValueError("Tool messages must carry an object payload")
            if not self.tool_name:
                raise ValueError("Tool messages must name their tool")
        elif not isinstance(self.content, str):
            raise ValueError(f"{self.role} messages must carry text content")
        return self


class ChatRequest(BaseModel):
    """Request body for POST /api/v1/chat."""

    message: str = Field(
        ..., min_length=1, description="The user message to send"
    )
    history: list[HistoryMessage] = Field(
        default_factory=list,
        description="Prior conversation, as returned by the previous call",
    )

    @field_validator("message")
    @classmethod
    def validate_message(cls, v: str) -> str:
        """Validate that the message is not just whitespace."""
        if not v.strip():
            raise ValueError("Message cannot be empty or whitespace only")
        return v

    model_config = ConfigDict(
        json_schema_extra={
            "examples": [
                {"message": "What time is it?", "history": []},
            ]
        }
    )


class ToolCallExecuted(BaseModel):
    """A tool executed while producing the reply."""

    name: str = Field(description="Tool name")
    payload: dict[str, Any] = Field(description="Tool result or error payload")
    is_error: bool = Field(default=False, description="Whether the tool failed")


class ChatResponse(BaseModel):
    """Response body for POST /api/v1/chat."""

    final_text: str = Field(description="The model's final reply")
    history: list[HistoryMessage] = Field(
        description="Updated history; send it back unchanged with the next message"
    )
    tool_calls_executed: list[ToolCallExecuted] = Field(
        default_factory=list,
        description="Tools that were executed during this response",
    )

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "final_text": "It is 14:32 right now.",
                "history": [
                    {"role": "user", "content": "What time is it?"},
                    {
                        "role": "model",
                        "content": "",
                        "tool_calls": [
                            {"function": {"name": "getCurrentTime", "arguments": {}}}
                        ],
                    },
                    {
                        "role": "tool",
                        "tool_name": "getCurrentTime",
                        "content": {"current_time": "19/10/2026, 14:32:05"},
                    },
                    {"role": "model", "content": "It is 14:32 right now."},
                ],
                "tool_calls_executed": [
                    {
                        "name": "getCurrentTime",
                        "payload": {"current_time": "19/10/2026, 14:32:05"},
                        "is_error": False,
                    }
                ],
            }
        }
    )
