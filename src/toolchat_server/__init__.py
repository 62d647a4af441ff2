"""toolchat-server: Headless FastAPI gateway for tool-calling LLM conversations.

This package provides a REST API that forwards user messages to a model served
by Ollama, executes the tool the model asks for, and returns the final reply
together with the updated conversation history.
"""

__version__ = "0.1.0"

from toolchat_server.app import create_app  # noqa: E402

__all__ = ["create_app", "__version__"]
