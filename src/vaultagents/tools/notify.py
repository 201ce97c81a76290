"""Host notification surfaces for the send_notification tool."""

import asyncio
import logging
import platform
import shutil
from typing import Protocol

from vaultagents.errors import (
    ConfigError,
    NotificationDeniedError,
    NotificationError,
    NotificationUnsupportedError,
)

logger = logging.getLogger(__name__)

_DENIED_MARKERS = ("not authorized", "not allowed", "permission denied")


class Notifier(Protocol):
    async def notify(self, title: str, body: str) -> None:
        """Show a notification or raise a NotificationError subclass."""
        ...


class LogNotifier:
    """Writes notifications to the log; used for headless hosts."""

    async def notify(self, title: str, body: str) -> None:
        logger.warning("NOTIFICATION %s: %s", title, body)


def _applescript_quote(value: str) -> str:
    return '"' + value.replace("\\", "\\\\").replace('"', '\\"') + '"'


class DesktopNotifier:
    """Desktop popups through notify-send (Linux) or osascript (macOS)."""

    def __init__(self, system: str | None = None, timeout_seconds: float = 10.0) -> None:
        self.system = system or platform.system()
        self.timeout_seconds = timeout_seconds

    def command(self, title: str, body: str) -> list[str]:
        if self.system == "Linux":
            binary = shutil.which("notify-send")
            if binary is None:
                raise NotificationUnsupportedError("notify-send is not installed")
            return [binary, "--urgency=critical", "--app-name=vaultagents", title, body]
        if self.system == "Darwin":
            binary = shutil.which("osascript")
            if binary is None:
                raise NotificationUnsupportedError("osascript is not available")
            script = (
                f"display notification {_applescript_quote(body)} "
                f"with title {_applescript_quote(title)}"
            )
            return [binary, "-e", script]
        raise NotificationUnsupportedError(f"no notification surface on {self.system}")

    async def notify(self, title: str, body: str) -> None:
        argv = self.command(title, body)
        proc = await asyncio.create_subprocess_exec(
            *argv,
            stdout=asyncio.subprocess.DEVNULL,
            stderr=asyncio.subprocess.PIPE,
        )
        try:
            _, stderr = await asyncio.wait_for(proc.communicate(), timeout=self.timeout_seconds)
        except TimeoutError as exc:
            proc.kill()
            await proc.wait()
            raise NotificationError("notification command timed out") from exc
        if proc.returncode != 0:
            detail = (stderr or b"").decode("utf-8", errors="ignore").strip()
            if any(marker in detail.lower() for marker in _DENIED_MARKERS):
                raise NotificationDeniedError(detail)
            raise NotificationError(detail or f"exit status {proc.returncode}")


def build_notifier(backend: str) -> Notifier:
    value = backend.strip().lower()
    if value == "desktop":
        return DesktopNotifier()
    if value == "log":
        return LogNotifier()
    raise ConfigError(f"unknown notifier backend: {backend}")
