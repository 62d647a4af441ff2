"""Ollama client wrapper and integration layer.

This package provides the async client used to talk to the model capability.
"""

from toolchat_server.ollama.client import OllamaClient

__all__ = ["OllamaClient"]
