"""Unit tests for the ChatOrchestrator tool-calling loop."""

import asyncio
import logging
from unittest.mock import AsyncMock

import pytest

from toolchat_server.services import ChatOrchestrator, LoopState
from toolchat_server.services.orchestrator import GENERIC_ERROR_MESSAGE
from toolchat_server.sessions import ModelMessage, ToolMessage, UserMessage
from toolchat_server.tools import ToolDeclaration, ToolParameter, ToolRegistry


def text(content: str) -> dict:
    return {"message": {"role": "assistant", "content": content}, "done": True}


def tool_call(name: str, arguments: dict | None = None) -> dict:
    return {
        "message": {
            "role": "assistant",
            "content": "",
            "tool_calls": [{"function": {"name": name, "arguments": arguments or {}}}],
        },
        "done": True,
    }


@pytest.fixture
def tool_calls():
    return []


@pytest.fixture
def registry(tool_calls):
    registry = ToolRegistry()

    def get_time():
        tool_calls.append("clock")
        return {"current_time": "19/10/2026, 12:00:00"}

    async def slow():
        await asyncio.sleep(1)
        return {}

    def explode():
        raise RuntimeError("boom")

    registry.register(ToolDeclaration(name="clock", description="Time."), get_time)
    registry.register(ToolDeclaration(name="slow", description="Slow."), slow)
    registry.register(ToolDeclaration(name="explode", description="Fails."), explode)
    registry.register(
        ToolDeclaration(
            name="lookup",
            description="Lookup.",
            parameters=(ToolParameter(name="key", type="string", required=True),),
        ),
        lambda key: {"value": key.upper()},
    )
    registry.seal()
    return registry


@pytest.fixture
def ollama_client():
    return AsyncMock()


@pytest.fixture
def orchestrator(ollama_client, registry):
    return ChatOrchestrator(ollama_client, registry, model="llama3.2:latest")


@pytest.mark.asyncio
async def test_text_reply(orchestrator, ollama_client):
    """Test that a text reply finishes in DONE with two new messages."""
    ollama_client.chat.side_effect = [text("Hello!")]

    outcome = await orchestrator.run("Hi", [])

    assert outcome.state is LoopState.DONE
    assert outcome.succeeded
    assert outcome.final_text == "Hello!"
    assert [m.role for m in outcome.history] == ["user", "model"]
    assert outcome.tool_results == []


@pytest.mark.asyncio
async def test_tool_round_trip(orchestrator, ollama_client, tool_calls):
    """Test one tool call followed by a final text reply."""
    ollama_client.chat.side_effect = [tool_call("clock"), text("It is noon.")]

    outcome = await orchestrator.run("What time is it?", [])

    assert outcome.state is LoopState.DONE
    assert outcome.final_text == "It is noon."
    assert [m.role for m in outcome.history] == ["user", "model", "tool", "model"]
    assert outcome.history[2].content == {"current_time": "19/10/2026, 12:00:00"}
    assert tool_calls == ["clock"]
    assert [r.name for r in outcome.tool_results] == ["clock"]
    assert ollama_client.chat.await_count == 2


@pytest.mark.asyncio
async def test_tool_arguments_passed(orchestrator, ollama_client):
    """Test that validated arguments reach the handler."""
    ollama_client.chat.side_effect = [tool_call("lookup", {"key": "abc"}), text("ABC")]

    outcome = await orchestrator.run("Look up abc", [])

    assert outcome.tool_results[0].payload == {"value": "ABC"}


@pytest.mark.asyncio
async def test_every_call_carries_tools(orchestrator, ollama_client):
    """Test that the tool schemas go with both model calls."""
    ollama_client.chat.side_effect = [tool_call("clock"), text("Noon.")]

    await orchestrator.run("Time?", [])

    for call in ollama_client.chat.call_args_list:
        names = [t["function"]["name"] for t in call.kwargs["tools"]]
        assert names == ["clock", "slow", "explode", "lookup"]


@pytest.mark.asyncio
async def test_history_extends_prior_conversation(orchestrator, ollama_client):
    """Test that prior history is kept and not mutated."""
    ollama_client.chat.side_effect = [text("Sure.")]
    prior = [UserMessage(content="Hi"), ModelMessage(content="Hello!")]

    outcome = await orchestrator.run("Thanks", prior)

    assert len(prior) == 2
    assert outcome.history[:2] == prior
    assert len(outcome.history) == 4


@pytest.mark.asyncio
async def test_failing_tool_still_completes(orchestrator, ollama_client):
    """Test that a tool exception is sent to the model as an error payload."""
    ollama_client.chat.side_effect = [tool_call("explode"), text("Sorry.")]

    outcome = await orchestrator.run("Do it", [])

    assert outcome.state is LoopState.DONE
    tool_message = outcome.history[2]
    assert isinstance(tool_message, ToolMessage)
    assert tool_message.content == {"error": "RuntimeError: boom"}
    assert outcome.tool_results[0].is_error is True


@pytest.mark.asyncio
async def test_unknown_tool_still_completes(orchestrator, ollama_client):
    """Test that an unregistered tool is reported back to the model."""
    ollama_client.chat.side_effect = [tool_call("teleport"), text("I can't.")]

    outcome = await orchestrator.run("Teleport me", [])

    assert outcome.state is LoopState.DONE
    assert outcome.history[2].content == {"error": "Unknown tool: teleport"}


@pytest.mark.asyncio
async def test_second_tool_call_is_final(orchestrator, ollama_client, tool_calls):
    """Test that a tool call after a tool result is not executed."""
    second = tool_call("clock")
    second["message"]["content"] = "Let me check again."
    ollama_client.chat.side_effect = [tool_call("clock"), second]

    outcome = await orchestrator.run("Time?", [])

    assert outcome.state is LoopState.DONE
    assert outcome.final_text == "Let me check again."
    assert tool_calls == ["clock"]
    assert len(outcome.history) == 4


@pytest.mark.asyncio
async def test_model_failure(orchestrator, ollama_client):
    """Test that a model failure ends in FAILED with empty history."""
    ollama_client.chat.side_effect = Exception("unreachable")

    outcome = await orchestrator.run("Hi", [UserMessage(content="earlier")])

    assert outcome.state is LoopState.FAILED
    assert not outcome.succeeded
    assert outcome.history == []
    assert outcome.final_text is None
    assert outcome.error == GENERIC_ERROR_MESSAGE


@pytest.mark.asyncio
async def test_model_failure_after_tool(orchestrator, ollama_client):
    """Test that a failure on the post-tool call also ends in FAILED."""
    ollama_client.chat.side_effect = [tool_call("clock"), Exception("crashed")]

    outcome = await orchestrator.run("Time?", [])

    assert outcome.state is LoopState.FAILED
    assert outcome.history == []


@pytest.mark.asyncio
async def test_malformed_reply_fails(orchestrator, ollama_client):
    """Test that malformed model output ends in FAILED."""
    ollama_client.chat.side_effect = [{"done": True}]

    outcome = await orchestrator.run("Hi", [])

    assert outcome.state is LoopState.FAILED


@pytest.mark.asyncio
async def test_tool_deadline(ollama_client, registry):
    """Test that a tool past its deadline ends in FAILED."""
    orchestrator = ChatOrchestrator(
        ollama_client, registry, model="m", tool_timeout=0.01
    )
    ollama_client.chat.side_effect = [tool_call("slow"), text("never")]

    outcome = await orchestrator.run("Go slow", [])

    assert outcome.state is LoopState.FAILED
    assert outcome.history == []
    assert ollama_client.chat.await_count == 1


@pytest.mark.asyncio
async def test_model_deadline(ollama_client, registry):
    """Test that a model call past its deadline ends in FAILED."""

    async def slow_chat(**kwargs):
        await asyncio.sleep(1)
        return text("late")

    ollama_client.chat.side_effect = slow_chat
    orchestrator = ChatOrchestrator(
        ollama_client, registry, model="m", model_timeout=0.01
    )

    outcome = await orchestrator.run("Hi", [])

    assert outcome.state is LoopState.FAILED


@pytest.mark.asyncio
async def test_state_transitions_logged(orchestrator, ollama_client, caplog):
    """Test that the loop passes through the expected states."""
    ollama_client.chat.side_effect = [tool_call("clock"), text("Noon.")]

    with caplog.at_level(logging.DEBUG, logger="toolchat_server.services.orchestrator"):
        await orchestrator.run("Time?", [])

    transitions = [r.getMessage() for r in caplog.records if "state:" in r.getMessage()]
    assert transitions == [
        "Orchestrator state: awaiting_model -> tool_requested",
        "Orchestrator state: tool_requested -> awaiting_model_after_tool",
        "Orchestrator state: awaiting_model_after_tool -> done",
    ]


@pytest.mark.asyncio
async def test_concurrent_runs_isolated(orchestrator, ollama_client):
    """Test that concurrent runs on one orchestrator do not share history."""

    async def echo_chat(model, messages, tools, options):
        await asyncio.sleep(0)
        return text(f"echo: {messages[-1]['content']}")

    ollama_client.chat.side_effect = echo_chat

    outcomes = await asyncio.gather(
        *(orchestrator.run(f"msg {i}", []) for i in range(5))
    )

    for i, outcome in enumerate(outcomes):
        assert outcome.final_text == f"echo: msg {i}"
        assert len(outcome.history) == 2
