"""Pydantic models for transcript API requests and responses."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class SaveTranscriptRequest(BaseModel):
    """Request body for POST /api/v1/transcripts.

    Fields are optional at the schema level so that incomplete submissions
    reach the store's own validation and get a uniform 400 response.
    Accepts both snake_case and camelCase keys (session_id / sessionId).
    """

    session_id: str | None = Field(None, description="Chat session identifier")
    user_id: str | None = Field(
        None, description="Participant identifier (defaults to 'anonymous')"
    )
    bot_id: str | None = Field(None, description="Bot identifier")
    start_time: str | None = Field(None, description="ISO 8601 session start")
    end_time: str | None = Field(None, description="ISO 8601 session end")
    messages: list[dict[str, Any]] = Field(
        default_factory=list, description="Messages exchanged during the session"
    )

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class SaveTranscriptResponse(BaseModel):
    """Confirmation returned after a transcript is stored."""

    message: str
    session_id: str


class TranscriptRecord(BaseModel):
    """A stored transcript record."""

    session_id: str
    user_id: str
    bot_id: str
    start_time: str | None = None
    end_time: str | None = None
    messages: list[dict[str, Any]]
    logged_at: str


class TranscriptListResponse(BaseModel):
    """All records stored for one session, oldest first."""

    session_id: str
    records: list[TranscriptRecord]
