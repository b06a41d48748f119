"""
Command Check

Runs an external tool and maps its exit status to a check result.
"""

import shlex
from typing import List, Set

from ...config.models import CheckDefinition, CheckKind
from ..capabilities import CommandLaunchError, CommandRunner, CommandTimeout
from ..models import CheckStatus
from .base import CheckExecutor, CheckOutcome, ExecutionError, require_param

FILES_PLACEHOLDER = "{files}"
DEFAULT_TIMEOUT = 300.0
MAX_OUTPUT_LINES = 50


def build_argv(template: str, files: Set[str]) -> List[str]:
    """
    Split a command template and expand the ``{files}`` placeholder.

    A standalone ``{files}`` token becomes one argument per file; a token
    that embeds it gets the files joined by spaces.
    """
    try:
        tokens = shlex.split(template)
    except ValueError as e:
        raise ExecutionError(f"Cannot parse command '{template}': {e}")

    ordered = sorted(files)
    argv: List[str] = []
    for token in tokens:
        if token == FILES_PLACEHOLDER:
            argv.extend(ordered)
        elif FILES_PLACEHOLDER in token:
            argv.append(token.replace(FILES_PLACEHOLDER, " ".join(ordered)))
        else:
            argv.append(token)
    return argv


def tail_lines(lines: List[str], limit: int = MAX_OUTPUT_LINES) -> List[str]:
    """Keep the last ``limit`` lines, noting how many were dropped."""
    if len(lines) <= limit:
        return lines
    dropped = len(lines) - limit
    return [f"... {dropped} earlier line(s) omitted"] + lines[-limit:]


class CommandCheck(CheckExecutor):
    """
    Launches the configured command.

    Parameters:
        command: command template, ``{files}`` expands to the filtered files
        timeout: seconds before the process is killed (default 300, must be positive)
        fail_on_error: nonzero exit fails the check (default true)
        cwd: working directory, relative to the source root
    """

    kind = CheckKind.COMMAND

    def __init__(self, runner: CommandRunner):
        self.runner = runner

    def execute(self, definition: CheckDefinition, files: Set[str]) -> CheckOutcome:
        template = str(require_param(definition, "command"))
        params = definition.parameters

        try:
            timeout = float(params.get("timeout", DEFAULT_TIMEOUT))
        except (TypeError, ValueError):
            raise ExecutionError(f"Invalid timeout for '{definition.name}': {params.get('timeout')!r}")
        if not timeout > 0:
            raise ExecutionError(f"Timeout for '{definition.name}' must be positive, got {timeout:g}")

        if FILES_PLACEHOLDER in template and not files:
            return CheckOutcome(
                status=CheckStatus.SKIPPED,
                messages=["No files matched; command not run"],
            )

        argv = build_argv(template, files)
        if not argv:
            raise ExecutionError(f"Check '{definition.name}' has an empty command")

        try:
            output = self.runner.execute(argv[0], argv[1:], timeout, cwd=params.get("cwd"))
        except CommandTimeout as e:
            return CheckOutcome(
                status=CheckStatus.FAIL,
                messages=[f"Command timed out after {timeout:g}s: {template}"],
                warnings=tail_lines(
                    [line for line in (e.stderr + "\n" + e.stdout).splitlines() if line.strip()]
                ),
                suggestions=[f"Raise 'timeout' for {definition.name} or speed up the command"],
            )
        except CommandLaunchError as e:
            raise ExecutionError(str(e))

        if output.exit_code == 0:
            return CheckOutcome(status=CheckStatus.PASS)

        lines = tail_lines(output.output_lines)
        summary = f"Command exited with code {output.exit_code}: {template}"

        if not params.get("fail_on_error", True):
            return CheckOutcome(status=CheckStatus.PASS, warnings=[summary] + lines)

        shown = " ".join(argv[:4]) + (" ..." if len(argv) > 4 else "")
        return CheckOutcome(
            status=CheckStatus.FAIL,
            messages=[summary] + lines,
            suggestions=[f"Run '{shown}' locally to reproduce"],
        )
