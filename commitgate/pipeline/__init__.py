"""
Check Pipeline

Resolves hooks, runs checks and reports the outcome of a pre-commit run.
"""

from .models import CheckResult, CheckStatus, Overall, Report
from .filters import filter_paths
from .registry import CheckRegistry
from .capabilities import (
    CommandLaunchError,
    CommandOutput,
    CommandRunner,
    CommandTimeout,
    FileSystem,
    LocalFileSystem,
    SubprocessRunner,
)
from .orchestrator import Orchestrator
from .reporter import RenderedReport, Reporter

__all__ = [
    "CheckResult",
    "CheckStatus",
    "Overall",
    "Report",
    "filter_paths",
    "CheckRegistry",
    "CommandLaunchError",
    "CommandOutput",
    "CommandRunner",
    "CommandTimeout",
    "FileSystem",
    "LocalFileSystem",
    "SubprocessRunner",
    "Orchestrator",
    "RenderedReport",
    "Reporter",
]
