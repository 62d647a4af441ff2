"""Dependency injection providers for FastAPI endpoints.

This module provides FastAPI dependency functions that are used across
multiple routers to inject the process-wide resources created during
application startup.
"""

from functools import lru_cache

from fastapi import HTTPException, Request

from toolchat_server.config import ToolchatServerSettings
from toolchat_server.ollama import OllamaClient
from toolchat_server.services import ChatOrchestrator
from toolchat_server.sessions import TranscriptStore
from toolchat_server.tools import ToolRegistry


def _not_initialized(resource: str) -> HTTPException:
    return HTTPException(
        status_code=503,
        detail={
            "error": {
                "code": "service_unavailable",
                "message": f"{resource} not initialized",
                "details": {},
            }
        },
    )


@lru_cache
def get_settings() -> ToolchatServerSettings:
    """Get the application settings instance.

    This function is cached so that the same settings instance is reused
    across all requests. Settings are loaded from environment variables
    with the TOOLCHAT_ prefix.

    Returns:
        ToolchatServerSettings: The application configuration settings.
    """
    return ToolchatServerSettings()


def get_ollama_client(request: Request) -> OllamaClient:
    """Get the Ollama client from app state.

    Raises:
        HTTPException: If the Ollama client is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "ollama_client"):
        raise _not_initialized("Ollama client")
    return request.app.state.ollama_client


def get_tool_registry(request: Request) -> ToolRegistry:
    """Get the sealed tool registry built at startup.

    Raises:
        HTTPException: If the registry is not initialized (503 Service Unavailable).
    """
    if not hasattr(request.app.state, "tool_registry"):
        raise _not_initialized("Tool registry")
    return request.app.state.tool_registry


def get_transcript_store(request: Request) -> TranscriptStore:
    """Get the transcript store opened at startup.

    The store is only handed out once its startup barrier (open()) has run.

    Raises:
        HTTPException: If the store is missing or not yet open (503 Service Unavailable).
    """
    store: TranscriptStore | None = getattr(request.app.state, "transcript_store", None)
    if store is None or not store.ready:
        raise _not_initialized("Transcript store")
    return store


def get_chat_orchestrator(request: Request) -> ChatOrchestrator:
    """Build a ChatOrchestrator for the current request.

    Uses settings from app.state so tests can use their own isolated settings.

    Raises:
        HTTPException: If the Ollama client or registry is not initialized.
    """
    settings: ToolchatServerSettings = request.app.state.settings

    return ChatOrchestrator(
        ollama_client=get_ollama_client(request),
        registry=get_tool_registry(request),
        model=settings.model,
        model_timeout=settings.model_timeout,
        tool_timeout=settings.tool_timeout,
    )
