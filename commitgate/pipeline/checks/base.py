"""Base check executor and shared helpers."""

import logging
import time
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from typing import Any, List, Set

from ...config.models import CheckDefinition, CheckKind
from ..models import CheckResult, CheckStatus

logger = logging.getLogger(__name__)


class ExecutionError(Exception):
    """A check could not run: missing input, unreadable file, failed launch."""
    pass


@dataclass
class CheckOutcome:
    """What an executor found, before timing is attached."""

    status: CheckStatus
    messages: List[str] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)
    suggestions: List[str] = field(default_factory=list)


class CheckExecutor(ABC):
    """Base class for check executors."""

    # Override in subclasses
    kind: CheckKind

    @abstractmethod
    def execute(self, definition: CheckDefinition, files: Set[str]) -> CheckOutcome:
        """
        Run the check.

        Expected violations are returned as a FAIL outcome. Raise
        ExecutionError when the check cannot run at all.
        """
        pass

    def run(self, definition: CheckDefinition, files: Set[str]) -> CheckResult:
        """
        Run a check definition against a filtered file set.

        Never raises; infrastructure problems become ERRORED results.
        """
        start = time.perf_counter()
        logger.info("Running %s check '%s' on %d file(s)", self.kind.value, definition.name, len(files))

        try:
            outcome = self.execute(definition, files)
        except ExecutionError as e:
            logger.warning("Check '%s' errored: %s", definition.name, e)
            outcome = CheckOutcome(status=CheckStatus.ERRORED, messages=[str(e)])
        except Exception as e:
            logger.exception("Check '%s' raised unexpectedly", definition.name)
            outcome = CheckOutcome(
                status=CheckStatus.ERRORED,
                messages=[f"Internal error in {self.kind.value} check: {e.__class__.__name__}: {e}"],
            )

        duration = time.perf_counter() - start
        logger.info("Check '%s' finished: %s (%.2fs)", definition.name, outcome.status.value, duration)

        return CheckResult(
            name=definition.name,
            status=outcome.status,
            messages=list(outcome.messages),
            warnings=list(outcome.warnings),
            suggestions=list(outcome.suggestions),
            duration=duration,
        )

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(kind={self.kind.value})"


def require_param(definition: CheckDefinition, key: str) -> Any:
    """Fetch a required parameter or raise ExecutionError."""
    value = definition.parameters.get(key)
    if value is None or value == "":
        raise ExecutionError(f"Check '{definition.name}' is missing required parameter '{key}'")
    return value


def list_param(definition: CheckDefinition, key: str) -> List[str]:
    """Fetch a parameter that may be a single string or a list of strings."""
    value = definition.parameters.get(key)
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    return [str(v) for v in value]


def decode_text(data: bytes) -> str:
    """Decode file content, replacing undecodable bytes."""
    return data.decode("utf-8", errors="replace")
