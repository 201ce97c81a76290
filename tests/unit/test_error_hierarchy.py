"""Tests for error hierarchy."""

from vaultagents.errors import (
    ConfigError,
    NotificationDeniedError,
    NotificationError,
    NotificationUnsupportedError,
    ProviderError,
    StoreError,
    ToolError,
    VaultAgentsError,
)


def test_hierarchy() -> None:
    assert issubclass(ProviderError, VaultAgentsError)
    assert issubclass(ToolError, VaultAgentsError)
    assert issubclass(ConfigError, VaultAgentsError)
    assert issubclass(StoreError, VaultAgentsError)
    assert issubclass(NotificationError, ToolError)
    assert issubclass(NotificationUnsupportedError, NotificationError)
    assert issubclass(NotificationDeniedError, NotificationError)


def test_retryable_default() -> None:
    assert VaultAgentsError("test").retryable is False
    assert ProviderError("test").retryable is True
    assert ToolError("test").retryable is False
    assert StoreError("test").retryable is False


def test_retryable_override() -> None:
    err = ProviderError("bad payload", retryable=False)
    assert str(err) == "bad payload"
    assert err.retryable is False


def test_catch_as_base_error() -> None:
    try:
        raise NotificationDeniedError("denied")
    except VaultAgentsError as exc:
        assert str(exc) == "denied"
        assert exc.retryable is False
