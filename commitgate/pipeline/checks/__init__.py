"""
Check Implementations

One executor per check kind.
"""

from typing import Dict, Optional

from ...config.models import CheckKind
from ..capabilities import CommandRunner, FileSystem
from .base import CheckExecutor, CheckOutcome, ExecutionError
from .command import CommandCheck
from .coverage import CoverageCheck
from .pattern_scan import PatternScanCheck
from .references import ReferenceCheck


def build_executors(
    runner: CommandRunner,
    filesystem: FileSystem,
    supplied_coverage: Optional[float] = None,
) -> Dict[CheckKind, CheckExecutor]:
    """Create the executor table used by the orchestrator."""
    return {
        CheckKind.COMMAND: CommandCheck(runner),
        CheckKind.PATTERN_SCAN: PatternScanCheck(filesystem),
        CheckKind.COVERAGE: CoverageCheck(filesystem, supplied_coverage),
        CheckKind.REFERENCE_VALIDATION: ReferenceCheck(filesystem),
    }


__all__ = [
    "CheckExecutor",
    "CheckOutcome",
    "ExecutionError",
    "CommandCheck",
    "CoverageCheck",
    "PatternScanCheck",
    "ReferenceCheck",
    "build_executors",
]
