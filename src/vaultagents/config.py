"""Application configuration contract."""

from functools import lru_cache

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from vaultagents.errors import ConfigError

NOTIFIER_BACKENDS = {"desktop", "log"}


class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = Field(alias="APP_ENV", default="dev")
    log_level: str = Field(alias="LOG_LEVEL", default="INFO")
    agents_file: str = Field(
        alias="AGENTS_FILE", default="~/.config/vaultagents/agents.json"
    )
    vault_root: str = Field(alias="VAULT_ROOT", default=".")

    ollama_base_url: str = Field(alias="OLLAMA_BASE_URL", default="http://localhost:11434")
    ollama_timeout_seconds: int = Field(alias="OLLAMA_TIMEOUT_SECONDS", default=120)
    default_model: str = Field(alias="DEFAULT_MODEL", default="llama3.2-latest")

    max_tool_iterations: int = Field(alias="MAX_TOOL_ITERATIONS", default=5)
    max_delegation_depth: int = Field(alias="MAX_DELEGATION_DEPTH", default=3)
    notifier_backend: str = Field(alias="NOTIFIER_BACKEND", default="desktop")


def validate_settings(settings: Settings) -> None:
    invalid: list[str] = []
    if settings.max_tool_iterations < 1:
        invalid.append("MAX_TOOL_ITERATIONS(must be >= 1)")
    if settings.max_delegation_depth < 0:
        invalid.append("MAX_DELEGATION_DEPTH(must be >= 0)")
    if settings.ollama_timeout_seconds < 1:
        invalid.append("OLLAMA_TIMEOUT_SECONDS(must be >= 1)")
    if settings.notifier_backend.strip().lower() not in NOTIFIER_BACKENDS:
        invalid.append("NOTIFIER_BACKEND(expected desktop or log)")
    if not settings.ollama_base_url.strip():
        invalid.append("OLLAMA_BASE_URL")
    if not settings.default_model.strip():
        invalid.append("DEFAULT_MODEL")

    if invalid:
        keys = ", ".join(invalid)
        raise ConfigError(f"invalid configuration: {keys}")


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    return Settings()
