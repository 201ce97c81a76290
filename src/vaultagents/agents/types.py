"""Agent data models."""

from dataclasses import dataclass, field
from typing import Any

TOOL_GET_CURRENT_TIME = "get_current_time"
TOOL_READ_VAULT_FILE = "read_vault_file"
TOOL_CALL_AGENT = "call_agent"
TOOL_SEND_NOTIFICATION = "send_notification"

BUILTIN_TOOL_NAMES = (
    TOOL_GET_CURRENT_TIME,
    TOOL_READ_VAULT_FILE,
    TOOL_CALL_AGENT,
    TOOL_SEND_NOTIFICATION,
)


@dataclass(slots=True)
class Agent:
    id: str
    name: str
    system_prompt: str
    model: str
    enabled_tools: list[str] = field(default_factory=list)
    allowed_paths: str = ""

    def can_use(self, tool_name: str) -> bool:
        return tool_name in self.enabled_tools

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "systemPrompt": self.system_prompt,
            "model": self.model,
            "enabledTools": list(self.enabled_tools),
            "allowedPaths": self.allowed_paths,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any]) -> "Agent":
        agent_id = payload.get("id")
        if not isinstance(agent_id, str) or not agent_id.strip():
            raise ValueError("agent entry missing id")
        tools_raw = payload.get("enabledTools") or []
        tools: list[str] = []
        if isinstance(tools_raw, list):
            for item in tools_raw:
                if isinstance(item, str) and item.strip() and item.strip() not in tools:
                    tools.append(item.strip())
        allowed_paths = payload.get("allowedPaths")
        return cls(
            id=agent_id.strip(),
            name=str(payload.get("name") or agent_id),
            system_prompt=str(payload.get("systemPrompt") or ""),
            model=str(payload.get("model") or ""),
            enabled_tools=tools,
            allowed_paths=allowed_paths if isinstance(allowed_paths, str) else "",
        )
