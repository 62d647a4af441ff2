"""Health check endpoint router."""

import logging

from fastapi import APIRouter, Request

from toolchat_server import __version__
from toolchat_server.models.health import HealthResponse
from toolchat_server.ollama import OllamaClient

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["health"])


@router.get("/health", response_model=HealthResponse)
async def health_check(request: Request) -> HealthResponse:
    """Health check endpoint.

    Returns the current health status and version of the toolchat-server.
    Also checks connectivity to the Ollama server if the client is initialized.

    Args:
        request: The FastAPI request object.

    Returns:
        HealthResponse: Health status and version information.
    """
    state = request.app.state
    ollama_connected = None
    ollama_host = None

    # Check if Ollama client is available and test connectivity
    if hasattr(state, "ollama_client"):
        ollama_client: OllamaClient = state.ollama_client
        ollama_host = ollama_client.host

        try:
            ollama_connected = await ollama_client.check_connection()
            logger.debug(f"Ollama connectivity check: {ollama_connected}")
        except Exception as e:
            logger.warning(f"Ollama connectivity check failed: {e}")
            ollama_connected = False

    store = getattr(state, "transcript_store", None)
    registry = getattr(state, "tool_registry", None)

    return HealthResponse(
        status="ok",
        version=__version__,
        ollama_connected=ollama_connected,
        ollama_host=ollama_host,
        model=state.settings.model,
        transcript_store_ready=bool(store and store.ready),
        tools=registry.names() if registry is not None else [],
    )
