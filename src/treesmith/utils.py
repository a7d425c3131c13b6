"""Shared utility functions."""

from __future__ import annotations

import os
from pathlib import Path, PurePosixPath


def xdg_config_home() -> Path:
    """Return XDG_CONFIG_HOME, defaulting to ~/.config."""
    return Path(os.environ.get("XDG_CONFIG_HOME", Path.home() / ".config"))


def base_name(path: str) -> str:
    """Last segment of a path, accepting either separator."""
    return path.replace("\\", "/").rstrip("/").split("/")[-1]


def relative_label(path: str, root: str) -> str:
    """POSIX-style path of *path* relative to *root*.

    Falls back to the base name when *path* is not below *root*.
    """
    try:
        rel = Path(path).relative_to(Path(root))
    except ValueError:
        return base_name(path)
    return str(PurePosixPath(*rel.parts)) if rel.parts else base_name(path)


def join_under(root: str, relative: str) -> str:
    """Join a slash-separated relative path below *root*.

    Leading slashes are dropped so the result always stays below *root*.
    """
    parts = [p for p in relative.replace("\\", "/").split("/") if p]
    return str(Path(root).joinpath(*parts))


def bytes_to_human(size_bytes: int) -> str:
    """Convert byte count to a human-readable string."""
    if size_bytes < 0:
        return f"-{bytes_to_human(-size_bytes)}"
    if size_bytes == 0:
        return "0 B"

    units = ("B", "KB", "MB", "GB", "TB")
    value = float(size_bytes)
    for unit in units[:-1]:
        if abs(value) < 1024:
            return f"{value:.1f} {unit}" if unit != "B" else f"{int(value)} B"
        value /= 1024
    return f"{value:.1f} {units[-1]}"
