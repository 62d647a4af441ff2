"""Pydantic models for API request and response schemas.

This package contains all Pydantic models used for validating and
serializing API requests and responses across all endpoints.
"""

from toolchat_server.models.chat import (
    ChatRequest,
    ChatResponse,
    HistoryMessage,
    ToolCallExecuted,
)
from toolchat_server.models.health import HealthResponse
from toolchat_server.models.tools import ToolDeclarationResponse, ToolListResponse
from toolchat_server.models.transcripts import (
    SaveTranscriptRequest,
    SaveTranscriptResponse,
    TranscriptListResponse,
    TranscriptRecord,
)

__all__ = [
    "ChatRequest",
    "ChatResponse",
    "HealthResponse",
    "HistoryMessage",
    "SaveTranscriptRequest",
    "SaveTranscriptResponse",
    "ToolCallExecuted",
    "ToolDeclarationResponse",
    "ToolListResponse",
    "TranscriptListResponse",
    "TranscriptRecord",
]
