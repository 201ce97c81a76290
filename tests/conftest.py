from pathlib import Path

import pytest

from vaultagents.config import get_settings
from vaultagents.logging import clear_context


@pytest.fixture(autouse=True)
def test_env(tmp_path: Path, monkeypatch: pytest.MonkeyPatch):
    vault = tmp_path / "vault"
    vault.mkdir()
    monkeypatch.setenv("APP_ENV", "test")
    monkeypatch.setenv("AGENTS_FILE", str(tmp_path / "config" / "agents.json"))
    monkeypatch.setenv("VAULT_ROOT", str(vault))
    monkeypatch.setenv("NOTIFIER_BACKEND", "log")
    monkeypatch.setenv("OLLAMA_BASE_URL", "http://ollama.local")
    for key in ("MAX_TOOL_ITERATIONS", "MAX_DELEGATION_DEPTH", "DEFAULT_MODEL"):
        monkeypatch.delenv(key, raising=False)
    get_settings.cache_clear()
    clear_context()
    yield
    get_settings.cache_clear()
    clear_context()


@pytest.fixture
def vault_root(tmp_path: Path) -> Path:
    return tmp_path / "vault"
