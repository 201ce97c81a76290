"""Tool registration helpers."""

from collections.abc import Awaitable, Callable
from dataclasses import dataclass, field
from typing import TYPE_CHECKING, Any

if TYPE_CHECKING:
    from vaultagents.agents.types import Agent


@dataclass(slots=True)
class DelegationResult:
    reply: str | None
    error: str | None = None


Delegate = Callable[["Agent", str, int], Awaitable[DelegationResult]]


@dataclass(slots=True)
class ToolContext:
    """Per-call execution context handed to tool handlers."""

    agent: "Agent"
    depth: int = 0
    delegate: Delegate | None = None


ToolCallable = Callable[[dict[str, Any], ToolContext], Awaitable[str]]


@dataclass(slots=True)
class ToolDef:
    name: str
    description: str
    handler: ToolCallable
    parameters: dict[str, object] = field(
        default_factory=lambda: {"type": "object", "properties": {}, "required": []}
    )

    def schema(self) -> dict[str, object]:
        return {
            "name": self.name,
            "description": self.description,
            "parameters": self.parameters,
        }


class ToolRegistry:
    def __init__(self) -> None:
        self._tools: dict[str, ToolDef] = {}

    def register(
        self,
        name: str,
        description: str,
        handler: ToolCallable,
        parameters: dict[str, object] | None = None,
    ) -> None:
        self._tools[name] = ToolDef(
            name=name,
            description=description,
            handler=handler,
            parameters=parameters or {"type": "object", "properties": {}, "required": []},
        )

    def get(self, name: str) -> ToolDef | None:
        return self._tools.get(name)

    def schemas(self, names: set[str] | None = None) -> list[dict[str, object]]:
        return [
            tool.schema()
            for tool in self._tools.values()
            if names is None or tool.name in names
        ]
