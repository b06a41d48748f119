"""
Pattern Scan Check

Searches file contents for forbidden text such as hardcoded credentials.
"""

import re
from typing import List, Optional, Pattern, Set, Tuple

from ...config.models import CheckDefinition, CheckKind
from ..capabilities import FileSystem
from ..models import CheckStatus
from .base import CheckExecutor, CheckOutcome, ExecutionError, decode_text, list_param


def compile_patterns(definition: CheckDefinition) -> List[Tuple[str, Pattern[str]]]:
    """
    Build (label, regex) pairs from ``patterns`` and ``regex`` parameters.

    Plain patterns are literal substrings. Matching ignores case unless
    ``case_sensitive`` is set.
    """
    flags = 0 if definition.parameters.get("case_sensitive", False) else re.IGNORECASE
    compiled = []

    for text in list_param(definition, "patterns"):
        compiled.append((text, re.compile(re.escape(text), flags)))

    for expr in list_param(definition, "regex"):
        try:
            compiled.append((expr, re.compile(expr, flags)))
        except re.error as e:
            raise ExecutionError(f"Invalid regular expression {expr!r} in '{definition.name}': {e}")

    if not compiled:
        raise ExecutionError(f"Check '{definition.name}' defines no patterns to scan for")
    return compiled


def first_match(text: str, patterns: List[Tuple[str, Pattern[str]]]) -> Optional[Tuple[int, str]]:
    """Return (line number, pattern label) of the first matching line."""
    for lineno, line in enumerate(text.splitlines(), start=1):
        for label, regex in patterns:
            if regex.search(line):
                return lineno, label
    return None


class PatternScanCheck(CheckExecutor):
    """Reports the first match in every file; all files are scanned."""

    kind = CheckKind.PATTERN_SCAN

    def __init__(self, filesystem: FileSystem):
        self.filesystem = filesystem

    def execute(self, definition: CheckDefinition, files: Set[str]) -> CheckOutcome:
        patterns = compile_patterns(definition)
        messages = []

        for path in sorted(files):
            try:
                content = self.filesystem.read_file(path)
            except OSError as e:
                raise ExecutionError(f"Cannot read {path}: {e}")

            found = first_match(decode_text(content), patterns)
            if found:
                lineno, label = found
                messages.append(f"{path}:{lineno}: matched '{label}'")

        if not messages:
            return CheckOutcome(status=CheckStatus.PASS)

        return CheckOutcome(
            status=CheckStatus.FAIL,
            messages=messages,
            suggestions=["Move sensitive values to environment variables or a secrets store"],
        )
