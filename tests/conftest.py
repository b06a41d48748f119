"""pytest configuration and shared fixtures for commitgate tests."""

from pathlib import Path
from typing import Callable, Dict, List, Optional, Sequence, Set, Union

import pytest

from commitgate.config import PipelineConfig
from commitgate.pipeline.capabilities import CommandOutput


class FakeRunner:
    """CommandRunner returning scripted outputs keyed by command name."""

    def __init__(self, outputs: Optional[Dict[str, Union[CommandOutput, Exception, Callable]]] = None):
        self.outputs = outputs or {}
        self.calls: List[dict] = []

    def execute(self, command: str, args: Sequence[str], timeout: float, cwd=None) -> CommandOutput:
        self.calls.append({"command": command, "args": list(args), "timeout": timeout, "cwd": cwd})
        outcome = self.outputs.get(command, CommandOutput(exit_code=0))
        if callable(outcome) and not isinstance(outcome, CommandOutput):
            outcome = outcome(command, args, timeout)
        if isinstance(outcome, Exception):
            raise outcome
        return outcome


class MemoryFileSystem:
    """FileSystem over an in-memory mapping of path to content."""

    def __init__(self, files: Optional[Dict[str, Union[str, bytes]]] = None, dirs: Sequence[str] = ()):
        self.files: Dict[str, bytes] = {
            path: content.encode("utf-8") if isinstance(content, str) else content
            for path, content in (files or {}).items()
        }
        self.dirs: Set[str] = set(dirs)
        self.unreadable: Set[str] = set()
        self.reads: List[str] = []

    def list_files(self, root=".") -> Set[str]:
        return set(self.files)

    def read_file(self, path) -> bytes:
        path = str(path)
        self.reads.append(path)
        if path in self.unreadable:
            raise PermissionError(f"Permission denied: {path}")
        if path not in self.files:
            raise FileNotFoundError(f"No such file: {path}")
        return self.files[path]

    def exists(self, path) -> bool:
        path = str(path)
        return path in self.files or self.is_dir(path)

    def is_dir(self, path) -> bool:
        path = str(path).rstrip("/")
        if path in self.dirs:
            return True
        return any(f.startswith(path + "/") for f in self.files)


@pytest.fixture
def fake_runner():
    return FakeRunner()


@pytest.fixture
def memory_fs():
    return MemoryFileSystem()


@pytest.fixture
def sample_config_data():
    """A small pipeline touching every check kind."""
    return {
        "agent": {"name": "test-pipeline", "version": "0.1.0"},
        "hooks": {
            "pre_commit": ["compile_check", "security_scan", "coverage_check", "asset_validator"],
        },
        "checks": {
            "compile_check": {
                "kind": "command",
                "include": ["*.java"],
                "parameters": {"command": "javac -d out {files}", "timeout": 30},
            },
            "security_scan": {
                "kind": "pattern_scan",
                "exclude_paths": ["out"],
                "parameters": {"patterns": ["password", "api_key"]},
            },
            "coverage_check": {
                "kind": "coverage",
                "use_exclusions": False,
                "parameters": {"minimum_coverage": 70, "coverage": 80},
            },
            "asset_validator": {
                "kind": "reference_validation",
                "include": ["*.java"],
                "parameters": {"asset_directory": "res", "check_formats": ["png", "wav"]},
            },
        },
        "exclusions": {
            "ignore_paths": [".git/**", "*.class"],
            "ignore_files": ["*Test.java"],
        },
        "notifications": {"on_success": "All good", "on_failure": "Commit blocked"},
    }


@pytest.fixture
def sample_config(sample_config_data):
    return PipelineConfig(**sample_config_data)


@pytest.fixture
def project_dir(tmp_path: Path) -> Path:
    """A tiny source tree on disk."""
    root = tmp_path / "project"
    (root / "src").mkdir(parents=True)
    (root / "res").mkdir()
    (root / "res" / "player.png").write_bytes(b"\x89PNG")
    (root / "src" / "Game.java").write_text(
        'class Game {\n    String sprite = "res/player.png";\n}\n'
    )
    return root
