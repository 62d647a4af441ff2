"""Tools router for inspecting the tools offered to the model."""

import logging

from fastapi import APIRouter, Depends

from toolchat_server.dependencies import get_tool_registry
from toolchat_server.models.tools import ToolDeclarationResponse, ToolListResponse
from toolchat_server.tools import ToolRegistry

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/v1", tags=["tools"])


@router.get("/tools", response_model=ToolListResponse)
async def list_tools(
    registry: ToolRegistry = Depends(get_tool_registry),
) -> ToolListResponse:
    """List the registered tools with the schemas sent to the model."""
    tools = []
    for schema in registry.to_ollama_tools():
        function = schema["function"]
        tools.append(
            ToolDeclarationResponse(
                name=function["name"],
                description=function["description"],
                parameters=function["parameters"],
            )
        )

    logger.debug(f"Listed {len(tools)} tools")
    return ToolListResponse(tools=tools)
