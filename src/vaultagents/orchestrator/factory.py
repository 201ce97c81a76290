"""Orchestrator construction helpers."""

from pathlib import Path

from vaultagents.agents.registry import AgentRegistry
from vaultagents.agents.store import SettingsStore
from vaultagents.config import Settings, validate_settings
from vaultagents.orchestrator.loop import Orchestrator
from vaultagents.providers.ollama import OllamaClient
from vaultagents.tools.catalog import ToolCatalog
from vaultagents.tools.notify import build_notifier
from vaultagents.tools.vault import FileSystemVaultReader


def build_registry(settings: Settings) -> AgentRegistry:
    store = SettingsStore(
        Path(settings.agents_file),
        default_ollama_url=settings.ollama_base_url,
    )
    return AgentRegistry.from_store(store)


def build_client(settings: Settings, registry: AgentRegistry) -> OllamaClient:
    return OllamaClient(
        registry.ollama_url or settings.ollama_base_url,
        timeout_seconds=settings.ollama_timeout_seconds,
    )


def build_orchestrator(
    settings: Settings,
    registry: AgentRegistry | None = None,
) -> Orchestrator:
    validate_settings(settings)
    agents = registry or build_registry(settings)
    catalog = ToolCatalog(
        agents,
        vault=FileSystemVaultReader(Path(settings.vault_root)),
        notifier=build_notifier(settings.notifier_backend),
        max_delegation_depth=settings.max_delegation_depth,
    )
    return Orchestrator(
        build_client(settings, agents),
        agents,
        catalog,
        max_iterations=settings.max_tool_iterations,
        default_model=settings.default_model,
    )
