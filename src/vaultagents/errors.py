"""vaultagents exception hierarchy.

All package-specific exceptions inherit from VaultAgentsError,
enabling structured error handling and cleaner catch clauses.
"""


class VaultAgentsError(Exception):
    """Base exception for all vaultagents errors."""

    def __init__(self, message: str = "", *, retryable: bool = False) -> None:
        super().__init__(message)
        self.retryable = retryable


class ProviderError(VaultAgentsError):
    """Error communicating with the model server."""

    def __init__(self, message: str = "", *, retryable: bool = True) -> None:
        super().__init__(message, retryable=retryable)


class ToolError(VaultAgentsError):
    """Error executing a tool."""


class NotificationError(ToolError):
    """The host could not display a notification."""


class NotificationUnsupportedError(NotificationError):
    """The host has no notification surface."""


class NotificationDeniedError(NotificationError):
    """The host refused notification permission."""


class ConfigError(VaultAgentsError):
    """Invalid or missing configuration."""


class StoreError(VaultAgentsError):
    """The agent settings file could not be read or written."""
