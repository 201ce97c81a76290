"""Agent settings persistence backed by a JSON file."""

import json
import logging
from dataclasses import dataclass, field
from pathlib import Path

from vaultagents.agents.types import BUILTIN_TOOL_NAMES, Agent
from vaultagents.errors import StoreError

logger = logging.getLogger(__name__)

DEFAULT_OLLAMA_URL = "http://localhost:11434"


def default_agents() -> list[Agent]:
    return [
        Agent(
            id="default-assistant",
            name="General Assistant",
            system_prompt="You are a helpful AI assistant.",
            model="llama3.2-latest",
            enabled_tools=list(BUILTIN_TOOL_NAMES),
            allowed_paths="",
        )
    ]


@dataclass(slots=True)
class StoredSettings:
    agents: list[Agent] = field(default_factory=default_agents)
    ollama_url: str = DEFAULT_OLLAMA_URL


class SettingsStore:
    """Loads and saves the agent list plus the model server URL."""

    def __init__(self, path: Path, *, default_ollama_url: str = DEFAULT_OLLAMA_URL) -> None:
        self.path = path.expanduser()
        self.default_ollama_url = default_ollama_url

    def load(self) -> StoredSettings:
        if not self.path.exists():
            logger.info("No settings file at %s, using defaults", self.path)
            return StoredSettings(ollama_url=self.default_ollama_url)
        try:
            raw = json.loads(self.path.read_text(encoding="utf-8"))
        except (OSError, json.JSONDecodeError) as exc:
            raise StoreError(f"cannot read settings file {self.path}: {exc}") from exc
        if not isinstance(raw, dict):
            raise StoreError(f"settings file {self.path} is not a JSON object")

        settings = StoredSettings(ollama_url=self.default_ollama_url)
        url = raw.get("ollamaUrl")
        if isinstance(url, str) and url.strip():
            settings.ollama_url = url.strip()
        agents_raw = raw.get("agents")
        if isinstance(agents_raw, list):
            agents: list[Agent] = []
            seen: set[str] = set()
            for entry in agents_raw:
                if not isinstance(entry, dict):
                    continue
                try:
                    agent = Agent.from_dict(entry)
                except ValueError:
                    logger.warning("Skipping malformed agent entry in %s", self.path)
                    continue
                if agent.id in seen:
                    logger.warning("Skipping duplicate agent id %s in %s", agent.id, self.path)
                    continue
                seen.add(agent.id)
                agents.append(agent)
            settings.agents = agents
        return settings

    def save(self, settings: StoredSettings) -> None:
        payload = {
            "agents": [agent.to_dict() for agent in settings.agents],
            "ollamaUrl": settings.ollama_url,
        }
        try:
            self.path.parent.mkdir(parents=True, exist_ok=True)
            self.path.write_text(json.dumps(payload, indent=2) + "\n", encoding="utf-8")
        except OSError as exc:
            raise StoreError(f"cannot write settings file {self.path}: {exc}") from exc
        logger.debug("Saved %d agents to %s", len(settings.agents), self.path)
