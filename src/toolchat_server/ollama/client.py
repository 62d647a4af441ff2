"""Async Ollama client wrapper.

This module provides an async wrapper around the ollama.AsyncClient for
communicating with the Ollama API. The client is designed to be created once
at startup and reused by every request.
"""

import logging
from typing import Any

import ollama

logger = logging.getLogger(__name__)


def _to_dict(obj: Any) -> dict[str, Any]:
    """Convert an ollama response object to a plain dict."""
    if hasattr(obj, "model_dump"):
        return obj.model_dump()
    if isinstance(obj, dict):
        return obj
    return vars(obj)


class OllamaClient:
    """Async client for interacting with the Ollama API.

    Attributes:
        host: The Ollama server URL (e.g., "http://localhost:11434")
        _client: The underlying ollama.AsyncClient instance
    """

    def __init__(self, host: str) -> None:
        """Initialize the Ollama client.

        Args:
            host: The Ollama server URL
        """
        self.host = host
        self._client = ollama.AsyncClient(host=host)
        logger.info(f"OllamaClient initialized with host: {host}")

    async def check_connection(self) -> bool:
        """Check if the Ollama server is reachable.

        Returns:
            bool: True if connection is successful, False otherwise
        """
        try:
            # Try to list models as a connectivity check
            await self._client.list()
            logger.debug("Ollama connection check: successful")
            return True
        except Exception as e:
            logger.warning(f"Ollama connection check failed: {e}")
            return False

    async def chat(
        self,
        model: str,
        messages: list[dict[str, Any]],
        tools: list[dict[str, Any]] | None = None,
        options: dict[str, Any] | None = None,
    ) -> dict[str, Any]:
        """Send a chat request and return the complete response.

        Args:
            model: The model name to use for the chat
            messages: List of message dicts in Ollama format:
                      [{"role": "user", "content": "..."}, ...]
            tools: Optional tool schemas the model may call
            options: Optional model parameters (temperature, etc.)

        Returns:
            dict: The response. Contains:
                  - model: str - The model name
                  - message: dict - role, content and optional tool_calls
                  - done: bool
                  - eval_count / prompt_eval_count when reported

        Raises:
            Exception: If the Ollama API request fails
        """
        try:
            logger.debug(
                f"Sending chat request to {model}: {len(messages)} messages, "
                f"{len(tools or [])} tools"
            )

            response = await self._client.chat(
                model=model,
                messages=messages,
                tools=tools or None,
                stream=False,
                options=options,
            )
            response_dict = _to_dict(response)

            logger.debug(
                f"Received chat response: done={response_dict.get('done')}, "
                f"eval_count={response_dict.get('eval_count')}"
            )
            return response_dict

        except Exception as e:
            logger.error(f"Chat request failed: {e}")
            raise

    async def close(self) -> None:
        """Close the client and clean up resources.

        ollama.AsyncClient doesn't require explicit cleanup in current versions.
        """
        logger.debug("OllamaClient closed")
