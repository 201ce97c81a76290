"""Ollama provider adapter using the native /api/chat endpoint."""

import json
import logging
from typing import Any

import httpx

from vaultagents.errors import ProviderError
from vaultagents.providers.base import ChatMessage, ToolCall

logger = logging.getLogger(__name__)


class OllamaClient:
    def __init__(
        self,
        base_url: str,
        *,
        timeout_seconds: float = 120,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = self._normalize_base_url(base_url)
        self.timeout_seconds = timeout_seconds
        self._transport = transport

    @staticmethod
    def _normalize_base_url(base_url: str) -> str:
        return base_url.strip().rstrip("/")

    @staticmethod
    def _to_tools(tools: list[dict[str, Any]] | None) -> list[dict[str, Any]] | None:
        if not tools:
            return None
        normalized: list[dict[str, Any]] = []
        for tool in tools:
            name = tool.get("name")
            if not isinstance(name, str) or not name:
                continue
            params = tool.get("parameters")
            function: dict[str, Any] = {
                "name": name,
                "parameters": (
                    params
                    if isinstance(params, dict)
                    else {"type": "object", "properties": {}, "required": []}
                ),
            }
            description = tool.get("description")
            if isinstance(description, str) and description:
                function["description"] = description
            normalized.append({"type": "function", "function": function})
        return normalized or None

    @staticmethod
    def _parse_arguments(arguments: object) -> dict[str, Any]:
        if isinstance(arguments, dict):
            return arguments
        if isinstance(arguments, str) and arguments.strip():
            try:
                decoded = json.loads(arguments)
            except json.JSONDecodeError:
                return {}
            if isinstance(decoded, dict):
                return decoded
        return {}

    @staticmethod
    def _parse_response(payload: dict[str, Any]) -> ChatMessage:
        message = payload.get("message")
        if not isinstance(message, dict):
            raise ProviderError("ollama response message missing", retryable=False)
        content = message.get("content")
        tool_calls: list[ToolCall] = []
        raw_calls = message.get("tool_calls")
        if isinstance(raw_calls, list):
            for call in raw_calls:
                if not isinstance(call, dict):
                    continue
                fn = call.get("function")
                if not isinstance(fn, dict):
                    continue
                name = fn.get("name")
                if isinstance(name, str) and name.strip():
                    tool_calls.append(
                        ToolCall(
                            name=name.strip(),
                            arguments=OllamaClient._parse_arguments(fn.get("arguments")),
                        )
                    )
        return ChatMessage(
            role="assistant",
            content=content if isinstance(content, str) else "",
            tool_calls=tool_calls,
        )

    def _client(self, timeout: float | None = None) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=timeout if timeout is not None else self.timeout_seconds,
            transport=self._transport,
        )

    async def chat(
        self,
        model: str,
        messages: list[ChatMessage],
        tools: list[dict[str, Any]] | None = None,
    ) -> ChatMessage:
        body: dict[str, Any] = {
            "model": model,
            "messages": [message.to_wire() for message in messages],
            "stream": False,
        }
        normalized_tools = self._to_tools(tools)
        if normalized_tools is not None:
            body["tools"] = normalized_tools
        endpoint = f"{self.base_url}/api/chat"
        logger.debug(
            "POST %s model=%s messages=%d tools=%d",
            endpoint,
            model,
            len(messages),
            len(normalized_tools or []),
        )
        try:
            async with self._client() as client:
                response = await client.post(endpoint, json=body)
        except httpx.HTTPError as exc:
            raise ProviderError(
                f"Error connecting to Ollama: {type(exc).__name__}: {exc}"
            ) from exc
        if response.status_code >= 400:
            raise ProviderError(
                f"Ollama error: {response.text.strip() or response.status_code}",
                retryable=response.status_code >= 500,
            )
        try:
            payload = response.json()
        except ValueError as exc:
            raise ProviderError("ollama response is not JSON", retryable=False) from exc
        if not isinstance(payload, dict):
            raise ProviderError("ollama response is not an object", retryable=False)
        return self._parse_response(payload)

    async def list_models(self) -> list[dict[str, Any]]:
        try:
            async with self._client(timeout=10) as client:
                response = await client.get(f"{self.base_url}/api/tags")
                response.raise_for_status()
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error listing models: %s", exc)
            return []
        models = payload.get("models") if isinstance(payload, dict) else None
        if not isinstance(models, list):
            return []
        return [item for item in models if isinstance(item, dict)]

    async def show_model(self, name: str) -> dict[str, Any] | None:
        try:
            async with self._client(timeout=10) as client:
                response = await client.post(f"{self.base_url}/api/show", json={"name": name})
            if response.status_code >= 400:
                return None
            payload = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Error getting model details for %s: %s", name, exc)
            return None
        return payload if isinstance(payload, dict) else None

    async def health_check(self) -> bool:
        try:
            async with self._client(timeout=10) as client:
                response = await client.get(f"{self.base_url}/api/tags")
            return response.status_code < 400
        except httpx.HTTPError:
            return False


def model_capabilities(name: str, details: dict[str, Any] | None) -> list[str]:
    """Capability tags shown next to a model when choosing one for an agent."""
    if not details:
        return []
    tags: list[str] = []
    info = details.get("details")
    families = info.get("families") if isinstance(info, dict) else None
    if isinstance(families, list) and "vision" in families:
        tags.append("vision")
    modelfile = details.get("modelfile")
    template = details.get("template")
    if (isinstance(modelfile, str) and "tools" in modelfile) or (
        isinstance(template, str) and "tool" in template
    ):
        tags.append("tools")
    lowered = name.lower()
    if "r1" in lowered or "thought" in lowered:
        tags.append("thinking")
    return tags
