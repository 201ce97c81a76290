import json

import httpx
import pytest

from vaultagents.errors import ProviderError
from vaultagents.providers.base import ChatMessage, ToolCall
from vaultagents.providers.ollama import OllamaClient, model_capabilities


@pytest.mark.asyncio
async def test_chat_posts_native_payload_and_parses_tool_calls() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        assert request.url.path == "/api/chat"
        captured.update(json.loads(request.content.decode("utf-8")))
        return httpx.Response(
            200,
            json={
                "model": "llama3.2",
                "message": {
                    "role": "assistant",
                    "content": "",
                    "tool_calls": [
                        {"function": {"name": "read_vault_file", "arguments": {"path": "a.md"}}},
                        {"function": {"name": "get_current_time", "arguments": "{}"}},
                        {"function": {"name": "call_agent", "arguments": '{"agentId": "b"}'}},
                        {"function": {"arguments": {}}},
                    ],
                },
                "done": True,
            },
        )

    client = OllamaClient("http://ollama.local/", transport=httpx.MockTransport(handler))
    reply = await client.chat(
        "llama3.2",
        [
            ChatMessage(role="system", content="sys"),
            ChatMessage(role="user", content="hi"),
        ],
        [
            {
                "name": "read_vault_file",
                "description": "Read a file",
                "parameters": {"type": "object", "properties": {"path": {"type": "string"}}},
            }
        ],
    )

    assert captured["model"] == "llama3.2"
    assert captured["stream"] is False
    assert captured["messages"] == [
        {"role": "system", "content": "sys"},
        {"role": "user", "content": "hi"},
    ]
    assert captured["tools"] == [
        {
            "type": "function",
            "function": {
                "name": "read_vault_file",
                "description": "Read a file",
                "parameters": {"type": "object", "properties": {"path": {"type": "string"}}},
            },
        }
    ]
    assert reply.role == "assistant"
    assert reply.tool_calls == [
        ToolCall(name="read_vault_file", arguments={"path": "a.md"}),
        ToolCall(name="get_current_time", arguments={}),
        ToolCall(name="call_agent", arguments={"agentId": "b"}),
    ]


@pytest.mark.asyncio
async def test_chat_without_tools_omits_tools_key() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(json.loads(request.content.decode("utf-8")))
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "hey"}})

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    reply = await client.chat("m", [ChatMessage(role="user", content="hi")], [])

    assert "tools" not in captured
    assert reply == ChatMessage(role="assistant", content="hey")


@pytest.mark.asyncio
async def test_chat_serializes_assistant_tool_calls_and_tool_results() -> None:
    captured: dict[str, object] = {}

    def handler(request: httpx.Request) -> httpx.Response:
        captured.update(json.loads(request.content.decode("utf-8")))
        return httpx.Response(200, json={"message": {"role": "assistant", "content": "ok"}})

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    await client.chat(
        "m",
        [
            ChatMessage(role="user", content="time?"),
            ChatMessage(
                role="assistant",
                content="",
                tool_calls=[ToolCall(name="get_current_time", arguments={})],
            ),
            ChatMessage(role="tool", content="noon"),
        ],
    )
    assert captured["messages"] == [
        {"role": "user", "content": "time?"},
        {
            "role": "assistant",
            "content": "",
            "tool_calls": [{"function": {"name": "get_current_time", "arguments": {}}}],
        },
        {"role": "tool", "content": "noon"},
    ]


@pytest.mark.asyncio
async def test_chat_raises_provider_error_on_http_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(500, text="model crashed")

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderError) as excinfo:
        await client.chat("m", [ChatMessage(role="user", content="hi")])
    assert str(excinfo.value) == "Ollama error: model crashed"
    assert excinfo.value.retryable is True


@pytest.mark.asyncio
async def test_chat_raises_provider_error_on_transport_failure() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderError, match="connection refused"):
        await client.chat("m", [ChatMessage(role="user", content="hi")])


@pytest.mark.asyncio
async def test_chat_rejects_payload_without_message() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        return httpx.Response(200, json={"done": True})

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    with pytest.raises(ProviderError):
        await client.chat("m", [ChatMessage(role="user", content="hi")])


@pytest.mark.asyncio
async def test_list_models_show_model_and_health() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        if request.url.path == "/api/tags":
            return httpx.Response(200, json={"models": [{"name": "llama3.2"}, "junk"]})
        if request.url.path == "/api/show":
            body = json.loads(request.content.decode("utf-8"))
            if body["name"] == "llama3.2":
                return httpx.Response(200, json={"template": "{{ .Tools }}"})
            return httpx.Response(404, json={"error": "not found"})
        return httpx.Response(404)

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    assert await client.list_models() == [{"name": "llama3.2"}]
    assert await client.show_model("llama3.2") == {"template": "{{ .Tools }}"}
    assert await client.show_model("other") is None
    assert await client.health_check() is True


@pytest.mark.asyncio
async def test_list_models_returns_empty_when_unreachable() -> None:
    def handler(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("down", request=request)

    client = OllamaClient("http://ollama.local", transport=httpx.MockTransport(handler))
    assert await client.list_models() == []
    assert await client.health_check() is False


def test_model_capabilities() -> None:
    details = {
        "details": {"families": ["llama", "vision"]},
        "template": "{{ if .Tools }}tool block{{ end }}",
    }
    assert model_capabilities("llama3.2-vision", details) == ["vision", "tools"]
    assert model_capabilities("deepseek-r1", {"template": ""}) == ["thinking"]
    assert model_capabilities("anything", None) == []
