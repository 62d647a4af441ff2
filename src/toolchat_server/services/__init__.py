"""Service layer for toolchat-server.

This package contains the chat orchestration loop.
"""

from toolchat_server.services.orchestrator import (
    ChatOrchestrator,
    ChatOutcome,
    LoopState,
)

__all__ = ["ChatOrchestrator", "ChatOutcome", "LoopState"]
