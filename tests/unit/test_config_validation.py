import pytest

from vaultagents.config import get_settings, validate_settings
from vaultagents.errors import ConfigError


def test_defaults_are_valid() -> None:
    settings = get_settings()
    assert settings.app_env == "test"
    assert settings.max_tool_iterations == 5
    assert settings.max_delegation_depth == 3
    assert settings.default_model == "llama3.2-latest"
    validate_settings(settings)


def test_settings_read_from_env(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_TOOL_ITERATIONS", "8")
    monkeypatch.setenv("MAX_DELEGATION_DEPTH", "1")
    monkeypatch.setenv("DEFAULT_MODEL", "qwen2.5")
    get_settings.cache_clear()

    settings = get_settings()
    assert settings.max_tool_iterations == 8
    assert settings.max_delegation_depth == 1
    assert settings.default_model == "qwen2.5"
    assert settings.ollama_base_url == "http://ollama.local"


@pytest.mark.parametrize(
    ("key", "value", "fragment"),
    [
        ("MAX_TOOL_ITERATIONS", "0", "MAX_TOOL_ITERATIONS"),
        ("MAX_DELEGATION_DEPTH", "-1", "MAX_DELEGATION_DEPTH"),
        ("OLLAMA_TIMEOUT_SECONDS", "0", "OLLAMA_TIMEOUT_SECONDS"),
        ("NOTIFIER_BACKEND", "pager", "NOTIFIER_BACKEND"),
        ("OLLAMA_BASE_URL", " ", "OLLAMA_BASE_URL"),
        ("DEFAULT_MODEL", "", "DEFAULT_MODEL"),
    ],
)
def test_invalid_values_rejected(
    monkeypatch: pytest.MonkeyPatch, key: str, value: str, fragment: str
) -> None:
    monkeypatch.setenv(key, value)
    get_settings.cache_clear()

    with pytest.raises(ConfigError) as excinfo:
        validate_settings(get_settings())
    assert str(excinfo.value).startswith("invalid configuration:")
    assert fragment in str(excinfo.value)


def test_zero_delegation_depth_is_allowed(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("MAX_DELEGATION_DEPTH", "0")
    get_settings.cache_clear()
    validate_settings(get_settings())
