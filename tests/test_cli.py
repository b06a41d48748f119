"""Tests for the commitgate command-line interface."""

import json
import shlex
import sys

import pytest
import yaml
from click.testing import CliRunner

from commitgate.cli import cli
from commitgate.config import ConfigLoader
from commitgate.config.defaults import DEFAULT_HOOKS


def python_command(code: str) -> str:
    return f"{shlex.quote(sys.executable)} -c {shlex.quote(code)}"


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def write_config(tmp_path):
    def _write(data) -> str:
        path = tmp_path / "commitgate.yaml"
        path.write_text(yaml.safe_dump(data))
        return str(path)

    return _write


@pytest.fixture
def passing_config(write_config):
    return write_config({
        "hooks": {"pre_commit": ["security_scan", "asset_validator"]},
        "checks": {
            "security_scan": {"kind": "pattern_scan", "parameters": {"patterns": ["password", "api_key"]}},
            "asset_validator": {
                "kind": "reference_validation",
                "include": ["*.java"],
                "parameters": {"asset_directory": "res", "check_formats": ["png"]},
            },
        },
        "notifications": {"on_success": "All good", "on_failure": "Commit blocked"},
    })


class TestRunCommand:
    """Test `commitgate run`."""

    def test_success_exit_zero(self, runner, passing_config, project_dir):
        result = runner.invoke(cli, ["run", "--config", passing_config, "--root", str(project_dir)])
        assert result.exit_code == 0, result.output
        assert "All good" in result.output

    def test_violation_exit_one(self, runner, passing_config, project_dir):
        (project_dir / "src" / "Secrets.java").write_text('String api_key = "XYZ";\n')
        result = runner.invoke(cli, ["run", "--config", passing_config, "--root", str(project_dir)])
        assert result.exit_code == 1
        assert "Commit blocked" in result.output

    def test_explicit_files(self, runner, passing_config, project_dir):
        (project_dir / "src" / "Secrets.java").write_text('String api_key = "XYZ";\n')
        result = runner.invoke(
            cli, ["run", "--config", passing_config, "--root", str(project_dir), "src/Game.java"]
        )
        assert result.exit_code == 0, result.output

    def test_failing_command_with_fail_fast(self, runner, write_config, project_dir):
        config = write_config({
            "hooks": {"pre_commit": ["compile_check", "style_check"]},
            "checks": {
                "compile_check": {"kind": "command", "parameters": {"command": python_command("import sys; sys.exit(1)")}},
                "style_check": {"kind": "command", "parameters": {"command": python_command("pass")}},
            },
        })
        result = runner.invoke(
            cli,
            ["run", "--config", config, "--root", str(project_dir), "--fail-fast", "--format", "json"],
        )

        assert result.exit_code == 1
        data = json.loads(result.stdout)
        assert [r["name"] for r in data["results"]] == ["compile_check"]
        assert data["results"][0]["status"] == "fail"

    def test_unknown_hook_skipped(self, runner, write_config, project_dir):
        config = write_config({"hooks": {"pre_commit": ["unknown_check"]}})
        result = runner.invoke(cli, ["run", "--config", config, "--root", str(project_dir), "--format", "json"])

        assert result.exit_code == 0
        data = json.loads(result.stdout)
        assert data["results"][0]["status"] == "skipped"

    def test_unknown_hook_strict_exit_two(self, runner, write_config, project_dir):
        config = write_config({"hooks": {"pre_commit": ["unknown_check"]}})
        result = runner.invoke(cli, ["run", "--config", config, "--root", str(project_dir), "--strict"])
        assert result.exit_code == 2

    def test_invalid_config_exit_two(self, runner, tmp_path, project_dir):
        path = tmp_path / "broken.yaml"
        path.write_text("hooks: [unclosed\n")
        result = runner.invoke(cli, ["run", "--config", str(path), "--root", str(project_dir)])
        assert result.exit_code == 2

    def test_coverage_option(self, runner, write_config, project_dir):
        config = write_config({
            "hooks": {"pre_commit": ["coverage_check"]},
            "checks": {"coverage_check": {"kind": "coverage", "parameters": {"minimum_coverage": 70}}},
        })
        base = ["run", "--config", config, "--root", str(project_dir), "--format", "json"]

        low = runner.invoke(cli, base + ["--coverage", "65"])
        assert low.exit_code == 1
        assert "5.0 points short" in json.loads(low.stdout)["results"][0]["messages"][0]

        ok = runner.invoke(cli, base + ["--coverage", "70"])
        assert ok.exit_code == 0

    def test_commands_run_in_root(self, runner, write_config, project_dir, tmp_path, monkeypatch):
        elsewhere = tmp_path / "elsewhere"
        elsewhere.mkdir()
        monkeypatch.chdir(elsewhere)

        write_report = (
            "import json, os; os.makedirs('out', exist_ok=True); "
            "json.dump({'totals': {'percent_covered': 90.0}}, open('out/coverage.json', 'w'))"
        )
        config = write_config({
            "hooks": {"pre_commit": ["read_sources", "test_runner", "coverage_check"]},
            "checks": {
                "read_sources": {
                    "kind": "command",
                    "include": ["*.java"],
                    "parameters": {
                        "command": python_command("import sys; [open(p).read() for p in sys.argv[1:]]") + " {files}",
                    },
                },
                "test_runner": {"kind": "command", "parameters": {"command": python_command(write_report)}},
                "coverage_check": {
                    "kind": "coverage",
                    "parameters": {"minimum_coverage": 70, "coverage_file": "out/coverage.json"},
                },
            },
        })
        result = runner.invoke(cli, ["run", "--config", config, "--root", str(project_dir), "--format", "json"])

        data = json.loads(result.stdout)
        assert [r["status"] for r in data["results"]] == ["pass", "pass", "pass"], data
        assert result.exit_code == 0
        assert (project_dir / "out" / "coverage.json").exists()
        assert not (elsewhere / "out").exists()

    def test_dry_run_executes_nothing(self, runner, write_config, project_dir, tmp_path):
        marker = tmp_path / "ran.txt"
        config = write_config({
            "hooks": {"pre_commit": ["touch", "missing"]},
            "checks": {
                "touch": {
                    "kind": "command",
                    "parameters": {"command": python_command(f"open({str(marker)!r}, 'w').close()")},
                },
            },
        })
        result = runner.invoke(cli, ["run", "--config", config, "--root", str(project_dir), "--dry-run"])

        assert result.exit_code == 0, result.output
        assert not marker.exists()
        assert "nothing was executed" in result.output


class TestOtherCommands:
    """Test validate, list and init."""

    def test_validate(self, runner, passing_config):
        result = runner.invoke(cli, ["validate", "--config", passing_config])
        assert result.exit_code == 0
        assert "Configuration is valid" in result.output

    def test_validate_strict_unresolved(self, runner, write_config):
        config = write_config({"hooks": {"pre_commit": ["ghost"]}})
        result = runner.invoke(cli, ["validate", "--config", config, "--strict"])
        assert result.exit_code == 2

    def test_list_hooks(self, runner, passing_config):
        result = runner.invoke(cli, ["list", "hooks", "--config", passing_config])
        assert result.exit_code == 0
        assert "security_scan" in result.output

    def test_init_writes_defaults(self, runner, tmp_path):
        output = tmp_path / "commitgate.yaml"
        result = runner.invoke(cli, ["init", "--output", str(output)])

        assert result.exit_code == 0, result.output
        assert ConfigLoader(output).load().config.hook_list == DEFAULT_HOOKS

    def test_init_does_not_overwrite_without_confirmation(self, runner, tmp_path):
        output = tmp_path / "commitgate.yaml"
        output.write_text("keep: me\n")
        result = runner.invoke(cli, ["init", "--output", str(output)], input="n\n")

        assert result.exit_code == 0
        assert output.read_text() == "keep: me\n"

    def test_version(self, runner):
        result = runner.invoke(cli, ["--version"])
        assert result.exit_code == 0
        assert "1.0.0" in result.output
