"""
Coverage Check

Compares a supplied coverage percentage against a minimum threshold. The
percentage is never computed here: it comes from the caller or from an
artifact written by an earlier test run.
"""

import json
from typing import Any, Optional, Set

from ...config.models import CheckDefinition, CheckKind
from ..capabilities import FileSystem
from ..models import CheckStatus
from .base import CheckExecutor, CheckOutcome, ExecutionError, decode_text, require_param


def _as_percent(value: Any, source: str) -> float:
    try:
        percent = float(str(value).strip().rstrip("%"))
    except (TypeError, ValueError):
        raise ExecutionError(f"Coverage value from {source} is not a number: {value!r}")
    if not 0.0 <= percent <= 100.0:
        raise ExecutionError(f"Coverage value from {source} is out of range: {percent}")
    return percent


def parse_coverage_artifact(text: str, source: str) -> float:
    """
    Extract a percentage from a coverage artifact.

    Understands coverage.py JSON reports (``totals.percent_covered``), a
    JSON object with a ``coverage`` or ``percent_covered`` key, a bare JSON
    number, or plain text such as ``82.5%``.
    """
    try:
        data = json.loads(text)
    except ValueError:
        return _as_percent(text, source)

    if isinstance(data, dict):
        totals = data.get("totals")
        if isinstance(totals, dict) and "percent_covered" in totals:
            return _as_percent(totals["percent_covered"], source)
        for key in ("percent_covered", "coverage"):
            if key in data:
                return _as_percent(data[key], source)
        raise ExecutionError(f"No coverage percentage found in {source}")

    return _as_percent(data, source)


class CoverageCheck(CheckExecutor):
    """
    Gates on a minimum coverage percentage.

    Parameters:
        minimum_coverage: required threshold in percent
        coverage: the measured percentage
        coverage_file: artifact to read the percentage from

    A value given to the constructor (e.g. from the command line) takes
    precedence over both parameters.
    """

    kind = CheckKind.COVERAGE

    def __init__(self, filesystem: FileSystem, supplied_coverage: Optional[float] = None):
        self.filesystem = filesystem
        self.supplied_coverage = supplied_coverage

    def _measured(self, definition: CheckDefinition) -> float:
        if self.supplied_coverage is not None:
            return _as_percent(self.supplied_coverage, "the command line")

        params = definition.parameters
        if params.get("coverage") is not None:
            return _as_percent(params["coverage"], f"'{definition.name}' parameters")

        artifact = params.get("coverage_file")
        if not artifact:
            raise ExecutionError(f"No coverage data supplied for '{definition.name}'")

        try:
            content = self.filesystem.read_file(artifact)
        except OSError as e:
            raise ExecutionError(f"Cannot read coverage artifact {artifact}: {e}")
        return parse_coverage_artifact(decode_text(content), str(artifact))

    def execute(self, definition: CheckDefinition, files: Set[str]) -> CheckOutcome:
        minimum = _as_percent(require_param(definition, "minimum_coverage"), "minimum_coverage")
        measured = self._measured(definition)

        if measured >= minimum:
            return CheckOutcome(
                status=CheckStatus.PASS,
                messages=[f"Coverage {measured:.1f}% meets the minimum of {minimum:.1f}%"],
            )

        gap = minimum - measured
        return CheckOutcome(
            status=CheckStatus.FAIL,
            messages=[
                f"Coverage {measured:.1f}% is below the minimum of {minimum:.1f}% "
                f"({gap:.1f} points short)"
            ],
            suggestions=["Add tests for new or changed code to raise coverage"],
        )
