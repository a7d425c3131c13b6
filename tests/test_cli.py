"""Tests for the click command line."""

from __future__ import annotations

import json

import pytest
from click.testing import CliRunner

from treesmith.cli import main


@pytest.fixture
def runner():
    return CliRunner()


class TestTreeCommand:
    def test_prints_diagram(self, runner, project):
        result = runner.invoke(main, ["tree", str(project)])
        assert result.exit_code == 0
        assert result.output.startswith("project/\n")
        assert "App.jsx" in result.output
        assert "math.py" in result.output

    def test_exclude(self, runner, project):
        result = runner.invoke(main, ["tree", str(project), "--exclude", "src"])
        assert result.exit_code == 0
        assert "[excluded]" in result.output
        assert "App.jsx" not in result.output

    def test_json(self, runner, project):
        result = runner.invoke(main, ["tree", str(project), "--json"])
        data = json.loads(result.output)
        assert data["text"].startswith("project/\n")
        assert {n["name"] for n in data["tree"]} == {"src", "README.md", "package.json"}


class TestParseCommand:
    def test_json(self, runner):
        result = runner.invoke(main, ["parse", "--json"], input="app/\n└── main.py\n")
        assert result.exit_code == 0
        assert json.loads(result.output) == [
            {"name": "app", "isFile": False, "level": 0, "fullPath": "app"},
            {"name": "main.py", "isFile": True, "level": 1, "fullPath": "app/main.py"},
        ]

    def test_text(self, runner):
        result = runner.invoke(main, ["parse"], input="app/\n└── main.py\n")
        assert "app/main.py" in result.output


class TestCreateCommand:
    def test_creates(self, runner, tmp_path):
        result = runner.invoke(main, ["create", str(tmp_path)], input="app/\n├── lib/\n└── main.py\n")
        assert result.exit_code == 0
        assert (tmp_path / "app" / "lib").is_dir()
        assert (tmp_path / "app" / "main.py").is_file()

    def test_blank_input_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["create", str(tmp_path)], input="\n")
        assert result.exit_code == 1


class TestCollectAndDistribute:
    def test_round_trip_through_files(self, runner, project, tmp_path):
        blob = tmp_path / "blob.txt"
        result = runner.invoke(main, ["collect", str(project), "--relative", "-o", str(blob)])
        assert result.exit_code == 0
        assert "# ===== src/utils/math.py =====" in blob.read_text()

        target = tmp_path / "copy"
        target.mkdir()
        result = runner.invoke(main, ["distribute", str(target), str(blob)])
        assert result.exit_code == 0
        assert (target / "src" / "utils" / "math.py").read_text() == "def add(a, b):\n    return a + b\n"
        assert (target / "README.md").read_text() == "# Project\n"

    def test_collect_selected_paths_basename_headers(self, runner, project, tmp_path):
        blob = tmp_path / "blob.txt"
        result = runner.invoke(main, ["collect", str(project), str(project / "src" / "App.jsx"), "-o", str(blob)])
        assert result.exit_code == 0
        assert blob.read_text() == "\n\n# ===== App.jsx =====\nexport default function App() {}\n\n"

    def test_distribute_dry_run_json(self, runner, tmp_path):
        result = runner.invoke(main, ["distribute", str(tmp_path), "--dry-run", "--json"], input="// a.js\n1\n")
        assert result.exit_code == 0
        data = json.loads(result.output)
        assert data["status"] == "ok"
        assert data["dry_run"] is True
        assert data["files"] == ["a.js"]
        assert not (tmp_path / "a.js").exists()

    def test_distribute_without_headers_fails(self, runner, tmp_path):
        result = runner.invoke(main, ["distribute", str(tmp_path)], input="nothing here\n")
        assert result.exit_code == 1
        assert not list(tmp_path.iterdir())

    def test_distribute_with_no_extensions_configured(self, runner, tmp_path):
        assert runner.invoke(main, ["config", "set", "distribute.extensions", "[]"]).exit_code == 0
        result = runner.invoke(main, ["distribute", str(tmp_path)], input="// a.js\n1\n")
        assert result.exit_code == 1
        assert "distribute.extensions" in result.output
        assert not isinstance(result.exception, ValueError)


class TestOtherCommands:
    def test_analyze_json(self, runner, project):
        result = runner.invoke(main, ["analyze", str(project), "--json"])
        assert result.exit_code == 0
        assert json.loads(result.output)["files"] == 4

    def test_analyze_text(self, runner, project):
        result = runner.invoke(main, ["analyze", str(project)])
        assert result.exit_code == 0
        assert "By extension" in result.output

    def test_strip_comments(self, runner):
        result = runner.invoke(main, ["strip-comments"], input="x = 1  # note\n")
        assert result.output == "x = 1\n"

    def test_config_set_and_get(self, runner, isolate_settings):
        assert runner.invoke(main, ["config", "set", "scan.line_count_ceiling", "10"]).exit_code == 0
        assert json.loads(isolate_settings.read_text())["scan"]["line_count_ceiling"] == 10

        result = runner.invoke(main, ["config", "get", "scan.line_count_ceiling"])
        assert result.output.strip() == "10"

    def test_config_get_unknown(self, runner):
        assert runner.invoke(main, ["config", "get", "nope"]).exit_code == 1
