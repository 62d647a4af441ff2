"""Chat API endpoint.

This module provides the endpoint that runs one tool-calling round-trip:
the caller supplies the user message and the prior history, and receives the
final reply together with the updated history.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException

from toolchat_server.dependencies import get_chat_orchestrator
from toolchat_server.errors import ValidationError
from toolchat_server.models.chat import (
    ChatRequest,
    ChatResponse,
    HistoryMessage,
    ToolCallExecuted,
)
from toolchat_server.services.orchestrator import ChatOrchestrator
from toolchat_server.sessions.session import (
    check_history_order,
    message_from_dict,
    message_to_dict,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1/chat", tags=["chat"])


@router.post("", response_model=ChatResponse)
async def chat(
    request_body: ChatRequest,
    orchestrator: ChatOrchestrator = Depends(get_chat_orchestrator),
) -> ChatResponse:
    """Send a message and receive the model's final reply.

    If the model asks for a tool, the tool is executed and its result is sent
    back to the model before the reply is returned.

    Args:
        request_body: Chat request containing the message and prior history
        orchestrator: Injected chat orchestrator

    Returns:
        ChatResponse with the final text and the updated history

    Raises:
        HTTPException: 400 if the history is out of order, 500 if the model fails
    """
    try:
        history = [message_from_dict(m.model_dump()) for m in request_body.history]
        check_history_order(history)
    except ValidationError as e:
        logger.info(f"Rejected chat request: {e}")
        raise HTTPException(
            status_code=400,
            detail={
                "error": {
                    "code": "invalid_history",
                    "message": str(e),
                    "details": e.details,
                }
            },
        )

    logger.info(f"Chat request with {len(history)} history messages")

    outcome = await orchestrator.run(request_body.message, history)

    if not outcome.succeeded:
        raise HTTPException(
            status_code=500,
            detail={
                "error": {
                    "code": "internal_error",
                    "message": outcome.error,
                    "details": {},
                },
                "history": [],
            },
        )

    logger.info(
        f"Chat completed: {len(outcome.tool_results)} tool(s) executed, "
        f"{len(outcome.history)} messages in history"
    )

    return ChatResponse(
        final_text=outcome.final_text or "",
        history=[HistoryMessage(**message_to_dict(m)) for m in outcome.history],
        tool_calls_executed=[
            ToolCallExecuted(**result.to_dict()) for result in outcome.tool_results
        ],
    )
