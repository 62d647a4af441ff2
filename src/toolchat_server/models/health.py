"""Health check response model."""

from pydantic import BaseModel, Field


class HealthResponse(BaseModel):
    """Response model for the health check endpoint.

    Attributes:
        status: Health status indicator ("ok" or "error").
        version: The version of toolchat-server.
        ollama_connected: Whether Ollama answered the connectivity check.
        ollama_host: The Ollama host URL.
        model: The model used for chat.
        transcript_store_ready: Whether the transcript store finished opening.
        tools: Names of the registered tools.
    """

    status: str = Field(..., description="Health status of the service")
    version: str = Field(..., description="Version of toolchat-server")
    ollama_connected: bool | None = Field(
        default=None,
        description="Whether Ollama is connected",
    )
    ollama_host: str | None = Field(
        default=None,
        description="Ollama host URL",
    )
    model: str | None = Field(default=None, description="Model used for chat")
    transcript_store_ready: bool = Field(
        default=False, description="Whether the transcript store is open"
    )
    tools: list[str] = Field(
        default_factory=list, description="Registered tool names"
    )
