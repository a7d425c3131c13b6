"""Shared test fixtures."""

from __future__ import annotations

import pytest

from treesmith.settings import Settings


@pytest.fixture(autouse=True)
def isolate_settings(tmp_path, monkeypatch):
    """Point settings at a temp config dir and drop the cached singleton."""
    config_home = tmp_path / "config"
    monkeypatch.setenv("XDG_CONFIG_HOME", str(config_home))
    monkeypatch.setattr(Settings, "_instance", None)
    return config_home / "treesmith" / "settings.json"


@pytest.fixture
def project(tmp_path):
    """A small project tree on disk.

    project/
    ├── src/
    │   ├── App.jsx
    │   └── utils/
    │       └── math.py
    ├── README.md
    └── package.json
    """
    root = tmp_path / "project"
    (root / "src" / "utils").mkdir(parents=True)
    (root / "src" / "App.jsx").write_text("export default function App() {}\n")
    (root / "src" / "utils" / "math.py").write_text("def add(a, b):\n    return a + b\n")
    (root / "README.md").write_text("# Project\n")
    (root / "package.json").write_text('{"name": "project"}\n')
    return root
