"""Transcripts router for persisting completed chat sessions.

This module provides REST API endpoints for:
- Storing a completed session summary
- Reading back the records stored for a session

These endpoints never run the chat loop.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status

from toolchat_server.dependencies import get_transcript_store
from toolchat_server.errors import ValidationError
from toolchat_server.models.transcripts import (
    SaveTranscriptRequest,
    SaveTranscriptResponse,
    TranscriptListResponse,
    TranscriptRecord,
)
from toolchat_server.sessions.transcripts import SessionSummary, TranscriptStore

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/transcripts", tags=["transcripts"])


def _bad_request(code: str, error: ValidationError) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_400_BAD_REQUEST,
        detail={
            "error": {
                "code": code,
                "message": str(error),
                "details": error.details,
            }
        },
    )


@router.post(
    "",
    response_model=SaveTranscriptResponse,
    status_code=status.HTTP_201_CREATED,
)
async def save_transcript(
    request_body: SaveTranscriptRequest,
    store: TranscriptStore = Depends(get_transcript_store),
) -> SaveTranscriptResponse:
    """Store a completed session summary.

    Raises:
        HTTPException: 400 if identifiers or messages are missing,
            503 if the store is not initialized
    """
    summary = SessionSummary(
        session_id=request_body.session_id,
        user_id=request_body.user_id,
        bot_id=request_body.bot_id,
        start_time=request_body.start_time,
        end_time=request_body.end_time,
        messages=request_body.messages,
    )

    try:
        session_id = store.save(summary)
    except ValidationError as e:
        logger.info(f"Rejected transcript: {e} {e.details}")
        raise _bad_request("incomplete_transcript", e)

    return SaveTranscriptResponse(message="Transcript saved", session_id=session_id)


@router.get("/{session_id}", response_model=TranscriptListResponse)
async def get_transcripts(
    session_id: str,
    store: TranscriptStore = Depends(get_transcript_store),
) -> TranscriptListResponse:
    """Get all records stored for a session.

    Raises:
        HTTPException: 400 for an invalid session id, 404 if nothing is stored
    """
    try:
        records = store.load(session_id)
    except ValidationError as e:
        raise _bad_request("invalid_session_id", e)
    except FileNotFoundError:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail={
                "error": {
                    "code": "transcript_not_found",
                    "message": f"No transcripts stored for session {session_id}",
                    "details": {"session_id": session_id},
                }
            },
        )

    return TranscriptListResponse(
        session_id=session_id,
        records=[TranscriptRecord(**record) for record in records],
    )
