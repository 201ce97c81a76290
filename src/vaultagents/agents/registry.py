"""Agent registry service."""

import logging
import threading
from collections.abc import Iterable
from dataclasses import replace

from vaultagents.agents.store import SettingsStore, StoredSettings
from vaultagents.agents.types import Agent
from vaultagents.ids import new_id

logger = logging.getLogger(__name__)


def _copy(agent: Agent) -> Agent:
    return replace(agent, enabled_tools=list(agent.enabled_tools))


class AgentRegistry:
    """Ordered agent definitions shared by concurrent orchestration runs.

    Reads hand out copies so a run never observes a half-applied edit.
    Writes are serialized and persisted when a store is attached.
    """

    def __init__(
        self,
        agents: Iterable[Agent] = (),
        *,
        store: SettingsStore | None = None,
        settings: StoredSettings | None = None,
    ) -> None:
        self._lock = threading.RLock()
        self._store = store
        self._settings = settings or StoredSettings(agents=[])
        seeded = [_copy(agent) for agent in agents]
        if seeded:
            self._settings.agents = seeded

    @classmethod
    def from_store(cls, store: SettingsStore) -> "AgentRegistry":
        return cls(store=store, settings=store.load())

    @property
    def ollama_url(self) -> str:
        with self._lock:
            return self._settings.ollama_url

    def get_agents(self) -> list[Agent]:
        with self._lock:
            return [_copy(agent) for agent in self._settings.agents]

    def get_agent(self, agent_id: str) -> Agent | None:
        with self._lock:
            for agent in self._settings.agents:
                if agent.id == agent_id:
                    return _copy(agent)
        return None

    def create_agent(
        self,
        name: str,
        system_prompt: str,
        model: str,
        enabled_tools: Iterable[str] = (),
        allowed_paths: str = "",
    ) -> Agent:
        agent = Agent(
            id=new_id("agent"),
            name=name,
            system_prompt=system_prompt,
            model=model,
            enabled_tools=list(dict.fromkeys(enabled_tools)),
            allowed_paths=allowed_paths,
        )
        with self._lock:
            self._settings.agents.append(agent)
            self._persist()
        logger.info("Created agent %s (%s)", agent.name, agent.id)
        return _copy(agent)

    def update_agent(self, agent: Agent) -> bool:
        with self._lock:
            for idx, existing in enumerate(self._settings.agents):
                if existing.id == agent.id:
                    self._settings.agents[idx] = _copy(agent)
                    self._persist()
                    logger.info("Updated agent %s (%s)", agent.name, agent.id)
                    return True
        return False

    def delete_agent(self, agent_id: str) -> bool:
        with self._lock:
            remaining = [a for a in self._settings.agents if a.id != agent_id]
            if len(remaining) == len(self._settings.agents):
                return False
            self._settings.agents = remaining
            self._persist()
        logger.info("Deleted agent %s", agent_id)
        return True

    def _persist(self) -> None:
        if self._store is not None:
            self._store.save(self._settings)
