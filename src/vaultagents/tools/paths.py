"""Vault path normalization and per-agent path allowlists."""

import re
import unicodedata

_SLASHES = re.compile(r"[\\/]+")


def normalize_vault_path(value: str) -> str:
    """Normalize a vault-relative path.

    Backslashes become forward slashes, repeated separators collapse,
    leading and trailing separators are dropped and the text is NFC
    normalized. The vault root normalizes to "/".
    """
    cleaned = _SLASHES.sub("/", value.replace("\u00a0", " ").replace("\u202f", " "))
    cleaned = cleaned.strip("/")
    if not cleaned:
        return "/"
    return unicodedata.normalize("NFC", cleaned)


def has_dot_segments(path: str) -> bool:
    """True when a normalized path contains a "." or ".." segment."""
    return any(part in {".", ".."} for part in path.split("/"))


def parse_allowed_paths(spec: str | None) -> list[str]:
    if not spec:
        return []
    prefixes: list[str] = []
    for item in spec.split(","):
        clean = item.strip()
        if clean:
            prefixes.append(normalize_vault_path(clean))
    return prefixes


def is_path_allowed(path: str, allowed_paths_spec: str | None) -> bool:
    # Empty allowlist means unrestricted.
    allowed = parse_allowed_paths(allowed_paths_spec)
    if not allowed:
        return True
    candidate = normalize_vault_path(path)
    if has_dot_segments(candidate):
        return False
    # Plain prefix match: "Project" also admits "Project2/x".
    return any(candidate.startswith(prefix) for prefix in allowed)
