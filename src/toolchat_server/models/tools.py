"""Pydantic models for the tools API."""

from typing import Any

from pydantic import BaseModel, Field


class ToolDeclarationResponse(BaseModel):
    """A tool as declared to the model."""

    name: str = Field(..., description="Tool name")
    description: str = Field(..., description="Natural-language description")
    parameters: dict[str, Any] = Field(
        ..., description="JSON schema of the accepted arguments"
    )


class ToolListResponse(BaseModel):
    """Response model for listing registered tools, in registration order."""

    tools: list[ToolDeclarationResponse] = Field(default_factory=list)
