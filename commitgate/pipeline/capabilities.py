"""
Execution Capabilities

Process and filesystem access used by checks, behind small interfaces so
they can be replaced in tests or embedded callers.
"""

import logging
import os
import subprocess
from dataclasses import dataclass
from pathlib import Path
from typing import List, Optional, Protocol, Sequence, Set, Union

from .filters import normalize_path

logger = logging.getLogger(__name__)


class CommandLaunchError(Exception):
    """The command could not be started."""
    pass


class CommandTimeout(Exception):
    """The command ran past its timeout and was killed."""

    def __init__(self, command: str, timeout: float, stdout: str = "", stderr: str = ""):
        super().__init__(f"'{command}' timed out after {timeout:g}s")
        self.command = command
        self.timeout = timeout
        self.stdout = stdout
        self.stderr = stderr


@dataclass(frozen=True)
class CommandOutput:
    """Captured result of a finished command."""
    exit_code: int
    stdout: str = ""
    stderr: str = ""

    @property
    def output_lines(self) -> List[str]:
        """Non-empty lines of stderr followed by stdout."""
        text = "\n".join(part for part in (self.stderr, self.stdout) if part)
        return [line.rstrip() for line in text.splitlines() if line.strip()]


class CommandRunner(Protocol):
    """Runs an external command with a bounded timeout."""

    def execute(
        self,
        command: str,
        args: Sequence[str],
        timeout: float,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandOutput: ...


class FileSystem(Protocol):
    """Read access to the source tree."""

    def list_files(self, root: Union[str, Path]) -> Set[str]: ...

    def read_file(self, path: Union[str, Path]) -> bytes: ...

    def exists(self, path: Union[str, Path]) -> bool: ...

    def is_dir(self, path: Union[str, Path]) -> bool: ...


def _to_text(data: Union[str, bytes, None]) -> str:
    if data is None:
        return ""
    if isinstance(data, bytes):
        return data.decode("utf-8", errors="replace")
    return data


class SubprocessRunner:
    """
    CommandRunner backed by ``subprocess.run``.

    Commands run in ``cwd`` unless a call names its own working directory;
    a relative one is resolved against ``cwd``.
    """

    def __init__(self, cwd: Optional[Union[str, Path]] = None, env: Optional[dict] = None):
        self.cwd = Path(cwd) if cwd is not None else None
        self.env = env

    def _workdir(self, cwd: Optional[Union[str, Path]]) -> Optional[Path]:
        if cwd is None:
            return self.cwd
        path = Path(cwd)
        if path.is_absolute() or self.cwd is None:
            return path
        return self.cwd / path

    def execute(
        self,
        command: str,
        args: Sequence[str],
        timeout: float,
        cwd: Optional[Union[str, Path]] = None,
    ) -> CommandOutput:
        if timeout is None or not timeout > 0:
            raise ValueError(f"timeout must be positive, got {timeout!r}")

        argv = [command, *args]
        workdir = self._workdir(cwd)
        logger.debug("Running %s (timeout %ss, cwd %s)", argv, timeout, workdir)

        try:
            proc = subprocess.run(
                argv,
                cwd=workdir,
                env=self.env,
                capture_output=True,
                text=True,
                errors="replace",
                check=False,
                timeout=timeout,
            )
        except subprocess.TimeoutExpired as e:
            # subprocess.run kills the child before re-raising
            raise CommandTimeout(
                " ".join(argv), timeout, _to_text(e.stdout), _to_text(e.stderr)
            ) from e
        except OSError as e:
            raise CommandLaunchError(f"Cannot launch '{command}': {e}") from e

        return CommandOutput(
            exit_code=proc.returncode,
            stdout=proc.stdout or "",
            stderr=proc.stderr or "",
        )


class LocalFileSystem:
    """
    FileSystem over the local disk.

    Relative paths are resolved against ``root``; listed paths are
    returned relative to it.
    """

    def __init__(self, root: Union[str, Path] = "."):
        self.root = Path(root)

    def _resolve(self, path: Union[str, Path]) -> Path:
        path = Path(path)
        return path if path.is_absolute() else self.root / path

    def list_files(self, root: Union[str, Path] = ".") -> Set[str]:
        base = self._resolve(root)
        if not base.is_dir():
            raise NotADirectoryError(f"Not a directory: {base}")

        files = set()
        for dirpath, _dirnames, filenames in os.walk(base):
            for filename in filenames:
                full = Path(dirpath) / filename
                if full.is_relative_to(self.root):
                    full = full.relative_to(self.root)
                files.add(normalize_path(full))
        return files

    def read_file(self, path: Union[str, Path]) -> bytes:
        return self._resolve(path).read_bytes()

    def exists(self, path: Union[str, Path]) -> bool:
        return self._resolve(path).exists()

    def is_dir(self, path: Union[str, Path]) -> bool:
        return self._resolve(path).is_dir()
