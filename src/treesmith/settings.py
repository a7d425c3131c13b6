"""JSON-backed settings store."""

from __future__ import annotations

import copy
import json
import logging
from pathlib import Path
from typing import Any

from treesmith.utils import xdg_config_home

log = logging.getLogger(__name__)

_SETTINGS_DIR = "treesmith"
_SETTINGS_FILE = "settings.json"

DEFAULTS: dict[str, Any] = {
    "scan": {
        "ignore": ["node_modules", ".git", "dist", "build", ".next"],
        "line_count_ceiling": 1024 * 1024,
    },
    "distribute": {
        "extensions": ["js", "jsx", "ts", "tsx", "py", "html", "css", "json", "java", "c", "cpp", "txt", "md"],
    },
    "collect": {
        "relative_headers": False,
    },
}


class Settings:
    """Persistent settings backed by a JSON file.

    Uses dot-notation keys for nested access:
        settings.get("scan.ignore")  # reads data["scan"]["ignore"]
        settings.set("scan.line_count_ceiling", 65536)  # writes + saves

    Keys missing from the file fall back to ``DEFAULTS``.
    """

    _instance: Settings | None = None

    def __init__(self, path: Path | None = None) -> None:
        self._path = path or (xdg_config_home() / _SETTINGS_DIR / _SETTINGS_FILE)
        self._data: dict[str, Any] = {}
        self._load()

    @classmethod
    def instance(cls) -> Settings:
        """Return the singleton settings instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    @property
    def path(self) -> Path:
        return self._path

    def get(self, key: str, default: Any = None) -> Any:
        """Get a value by dot-notation key."""
        found, value = _lookup(self._data, key)
        if found:
            return value
        found, value = _lookup(DEFAULTS, key)
        if found:
            return copy.deepcopy(value)
        return default

    def set(self, key: str, value: Any) -> None:
        """Set a value by dot-notation key and persist to disk."""
        parts = key.split(".")
        node = self._data
        for part in parts[:-1]:
            if part not in node or not isinstance(node[part], dict):
                node[part] = {}
            node = node[part]
        node[parts[-1]] = value
        self._save()

    # Typed accessors used by the engines

    @property
    def ignore_names(self) -> frozenset[str]:
        return frozenset(self.get("scan.ignore") or ())

    @property
    def line_count_ceiling(self) -> int:
        try:
            return int(self.get("scan.line_count_ceiling"))
        except (TypeError, ValueError):
            log.warning("Invalid scan.line_count_ceiling, using default")
            return DEFAULTS["scan"]["line_count_ceiling"]

    @property
    def extensions(self) -> tuple[str, ...]:
        return tuple(str(ext).lstrip(".") for ext in self.get("distribute.extensions") or ())

    def _load(self) -> None:
        """Load settings from disk, gracefully handling errors."""
        if not self._path.exists():
            return
        try:
            self._data = json.loads(self._path.read_text(encoding="utf-8"))
        except (json.JSONDecodeError, OSError) as e:
            log.warning("Could not load settings from %s: %s", self._path, e)
            self._data = {}
        if not isinstance(self._data, dict):
            log.warning("Ignoring settings file %s: top level is not an object", self._path)
            self._data = {}

    def _save(self) -> None:
        """Persist settings to disk."""
        try:
            self._path.parent.mkdir(parents=True, exist_ok=True)
            self._path.write_text(
                json.dumps(self._data, indent=2, ensure_ascii=False) + "\n",
                encoding="utf-8",
            )
        except OSError as e:
            log.warning("Could not save settings to %s: %s", self._path, e)


def _lookup(data: dict[str, Any], key: str) -> tuple[bool, Any]:
    node: Any = data
    for part in key.split("."):
        if not isinstance(node, dict) or part not in node:
            return False, None
        node = node[part]
    return True, node
