"""Conversation history and transcript persistence for toolchat-server.

This package provides the message types, the per-request ConversationSession
and the TranscriptStore for completed session summaries.
"""

from toolchat_server.sessions.session import (
    ConversationSession,
    check_history_order,
    message_from_dict,
    message_to_dict,
)
from toolchat_server.sessions.transcripts import SessionSummary, TranscriptStore
from toolchat_server.sessions.types import (
    Message,
    ModelMessage,
    ModelReply,
    TextReply,
    ToolCallReply,
    ToolMessage,
    UserMessage,
)

__all__ = [
    # Core classes
    "ConversationSession",
    "TranscriptStore",
    "SessionSummary",
    # Message types
    "Message",
    "UserMessage",
    "ModelMessage",
    "ToolMessage",
    # Replies
    "ModelReply",
    "TextReply",
    "ToolCallReply",
    # Helpers
    "check_history_order",
    "message_from_dict",
    "message_to_dict",
]
