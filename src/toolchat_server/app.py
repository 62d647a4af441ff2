"""FastAPI application factory and lifespan management.

This module contains the create_app() factory function that creates and configures
the FastAPI application instance, including lifespan management for startup/shutdown
and router registration.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from toolchat_server import __version__
from toolchat_server.config import ToolchatServerSettings
from toolchat_server.ollama import OllamaClient
from toolchat_server.routers import chat, health, tools, transcripts
from toolchat_server.sessions import TranscriptStore
from toolchat_server.tools import WeatherClient, build_default_registry

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Lifespan context manager for FastAPI application.

    Process-wide resources are created once at startup and stored in
    app.state for reuse across all requests:
    - the Ollama client
    - the weather HTTP client and the sealed tool registry built on it
    - the transcript store, opened before the app starts serving

    Args:
        app: The FastAPI application instance.

    Yields:
        None: Control is yielded while the app is running.
    """
    settings: ToolchatServerSettings = app.state.settings

    # Startup: Initialize Ollama client
    app.state.ollama_client = OllamaClient(host=settings.ollama_host)
    logger.info(f"Initialized Ollama client with host: {settings.ollama_host}")

    # Check initial connectivity
    connected = await app.state.ollama_client.check_connection()
    if connected:
        logger.info("Successfully connected to Ollama")
    else:
        logger.warning("Could not connect to Ollama - check if server is running")

    # Tools
    app.state.weather_client = WeatherClient(
        api_key=settings.openweather_api_key,
        base_url=settings.openweather_url,
        lang=settings.weather_lang,
        timeout=settings.weather_timeout,
    )
    if not settings.openweather_api_key:
        logger.warning("No OpenWeather API key configured - getWeather will fail")
    app.state.tool_registry = build_default_registry(
        app.state.weather_client, timezone=settings.timezone
    )

    # Transcript store: must be open before any request can reach it
    transcript_store = TranscriptStore(settings.resolved_transcripts_dir)
    transcript_store.open()
    app.state.transcript_store = transcript_store

    yield

    # Shutdown: Clean up resources
    transcript_store.close()
    await app.state.weather_client.close()
    if hasattr(app.state, "ollama_client"):
        await app.state.ollama_client.close()
        logger.info("Ollama client closed")


def create_app(settings: ToolchatServerSettings | None = None) -> FastAPI:
    """Create and configure the FastAPI application.

    This factory function creates a FastAPI instance with all routers,
    middleware, and configuration applied. It can accept an optional
    settings object for testing or explicit configuration.

    Args:
        settings: Optional ToolchatServerSettings instance. If not provided,
                  settings will be loaded from environment variables.

    Returns:
        FastAPI: Configured FastAPI application instance.
    """
    if settings is None:
        from toolchat_server.dependencies import get_settings

        settings = get_settings()

    app = FastAPI(
        title="toolchat-server",
        description="Headless FastAPI gateway for tool-calling LLM conversations via Ollama",
        version=__version__,
        lifespan=lifespan,
    )

    # Store settings in app.state for lifespan access
    app.state.settings = settings

    # Configure CORS
    # Note: FastAPI's type hints for add_middleware are overly strict
    app.add_middleware(
        CORSMiddleware,  # type: ignore[arg-type]
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    # Register routers
    app.include_router(health.router)
    app.include_router(chat.router)
    app.include_router(tools.router)
    app.include_router(transcripts.router)

    return app
