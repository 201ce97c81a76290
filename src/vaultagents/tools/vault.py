"""Read access to the note vault."""

import asyncio
import logging
from pathlib import Path
from typing import Protocol

from vaultagents.tools.paths import has_dot_segments, normalize_vault_path

logger = logging.getLogger(__name__)


class VaultReader(Protocol):
    async def read_text(self, path: str) -> str | None:
        """Return the file text, or None when no such file exists."""
        ...


def _is_subpath(path: Path, parent: Path) -> bool:
    try:
        path.relative_to(parent)
        return True
    except ValueError:
        return False


class FileSystemVaultReader:
    def __init__(self, root: Path) -> None:
        self.root = root.expanduser().resolve()

    def resolve(self, path: str) -> Path | None:
        normalized = normalize_vault_path(path)
        if normalized == "/" or has_dot_segments(normalized):
            return None
        candidate = (self.root / normalized).resolve()
        if not _is_subpath(candidate, self.root):
            logger.warning("Rejected vault path outside root: %s", path)
            return None
        if not candidate.is_file():
            return None
        return candidate

    async def read_text(self, path: str) -> str | None:
        target = self.resolve(path)
        if target is None:
            return None
        return await asyncio.to_thread(target.read_text, encoding="utf-8", errors="replace")
