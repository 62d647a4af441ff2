"""ChatOrchestrator: the tool-calling loop behind the chat endpoint.

One run handles a single round-trip:

    AWAITING_MODEL -> (text) -> DONE
    AWAITING_MODEL -> (tool call) -> TOOL_REQUESTED
        -> AWAITING_MODEL_AFTER_TOOL -> DONE

Any ModelUnavailableError, or expiry of the tool deadline, ends the run in
FAILED with an empty history. The reply that follows a tool result is always
final: a second tool call at that point is surfaced as text and not executed.
"""

import asyncio
import enum
import logging
from dataclasses import dataclass, field
from typing import Any

from toolchat_server.errors import ModelUnavailableError
from toolchat_server.ollama.client import OllamaClient
from toolchat_server.sessions.session import ConversationSession
from toolchat_server.sessions.types import Message, ToolCallReply
from toolchat_server.tools.executor import ToolExecutor
from toolchat_server.tools.registry import ToolRegistry
from toolchat_server.tools.types import ToolResult

logger = logging.getLogger(__name__)

GENERIC_ERROR_MESSAGE = "Internal server error."


class LoopState(str, enum.Enum):
    """States of a single orchestration run."""

    AWAITING_MODEL = "awaiting_model"
    TOOL_REQUESTED = "tool_requested"
    AWAITING_MODEL_AFTER_TOOL = "awaiting_model_after_tool"
    DONE = "done"
    FAILED = "failed"


@dataclass
class ChatOutcome:
    """Result of an orchestration run.

    Attributes:
        state: DONE or FAILED
        final_text: The model's final reply (None when FAILED)
        history: Updated history; empty when FAILED
        tool_results: Tool results produced during the run
        error: Generic error message when FAILED
    """

    state: LoopState
    final_text: str | None = None
    history: list[Message] = field(default_factory=list)
    tool_results: list[ToolResult] = field(default_factory=list)
    error: str | None = None

    @property
    def succeeded(self) -> bool:
        return self.state is LoopState.DONE


class ChatOrchestrator:
    """Runs the user message -> optional tool call -> final reply cycle.

    The orchestrator holds only read-only collaborators; every run builds its
    own ConversationSession, so one instance can serve concurrent requests.
    """

    def __init__(
        self,
        ollama_client: OllamaClient,
        registry: ToolRegistry,
        model: str,
        executor: ToolExecutor | None = None,
        options: dict[str, Any] | None = None,
        model_timeout: float | None = None,
        tool_timeout: float | None = None,
    ) -> None:
        self.ollama_client = ollama_client
        self.registry = registry
        self.executor = executor or ToolExecutor(registry)
        self.model = model
        self.options = options
        self.model_timeout = model_timeout
        self.tool_timeout = tool_timeout

    def _new_session(self, history: list[Message]) -> ConversationSession:
        return ConversationSession(
            ollama_client=self.ollama_client,
            model=self.model,
            tools=self.registry.to_ollama_tools(),
            history=history,
            options=self.options,
            timeout=self.model_timeout,
        )

    async def run(self, message: str, history: list[Message] | None = None) -> ChatOutcome:
        """Run one round-trip for a user message.

        Args:
            message: The user's message text
            history: Prior conversation; it is copied, never mutated

        Returns:
            ChatOutcome in state DONE with the final text and updated history,
            or in state FAILED with an empty history
        """
        session = self._new_session(history or [])
        state = LoopState.AWAITING_MODEL
        tool_results: list[ToolResult] = []

        try:
            reply = await session.send_user_message(message)

            if isinstance(reply, ToolCallReply):
                state = self._transition(state, LoopState.TOOL_REQUESTED)
                result = await asyncio.wait_for(
                    self.executor.execute(reply.request), timeout=self.tool_timeout
                )
                tool_results.append(result)

                state = self._transition(state, LoopState.AWAITING_MODEL_AFTER_TOOL)
                reply = await session.send_tool_result(result)

                if isinstance(reply, ToolCallReply):
                    logger.info(
                        f"Model requested {reply.request.name} after a tool result; "
                        "returning its reply as final text"
                    )

        except ModelUnavailableError as e:
            logger.error(f"Chat failed in state {state.value}: {e}")
            return self._failed(state)
        except asyncio.TimeoutError:
            logger.error(f"Tool execution exceeded deadline of {self.tool_timeout}s")
            return self._failed(state)

        state = self._transition(state, LoopState.DONE)
        return ChatOutcome(
            state=state,
            final_text=reply.content,
            history=session.history,
            tool_results=tool_results,
        )

    @staticmethod
    def _transition(current: LoopState, new: LoopState) -> LoopState:
        logger.debug(f"Orchestrator state: {current.value} -> {new.value}")
        return new

    def _failed(self, state: LoopState) -> ChatOutcome:
        self._transition(state, LoopState.FAILED)
        return ChatOutcome(
            state=LoopState.FAILED,
            history=[],
            error=GENERIC_ERROR_MESSAGE,
        )
