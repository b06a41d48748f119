"""
Reference Validation Check

Verifies that asset paths mentioned in source files point to existing
files with an allowed format.
"""

import re
from pathlib import PurePosixPath
from typing import Iterator, List, Set, Tuple

from ...config.models import CheckDefinition, CheckKind
from ..capabilities import FileSystem
from ..models import CheckStatus
from .base import CheckExecutor, CheckOutcome, ExecutionError, decode_text, list_param, require_param

DEFAULT_ASSET_EXTENSIONS = [
    "png", "jpg", "jpeg", "gif", "bmp", "svg", "webp",
    "wav", "mp3", "ogg", "flac",
    "ttf", "otf",
]

# Quoted literal ending in a file extension, e.g. "sprites/player.png"
LITERAL_RE = re.compile(r"""(["'])([^"'\s]+\.([A-Za-z0-9]{2,5}))\1""")


def _normalize_extensions(values: List[str]) -> List[str]:
    return [v.lower().lstrip(".") for v in values if v]


def find_references(text: str, extensions: Set[str]) -> Iterator[Tuple[int, str, str]]:
    """Yield (line number, reference, extension) for asset-like literals."""
    for lineno, line in enumerate(text.splitlines(), start=1):
        for match in LITERAL_RE.finditer(line):
            reference, ext = match.group(2), match.group(3).lower()
            if ext in extensions and "://" not in reference:
                yield lineno, reference, ext


def asset_relative(reference: str, asset_directory: str) -> str:
    """
    Strip a leading slash and asset directory prefix from a reference.

    The prefix is either the directory as configured or its last component,
    so ``"res/player.png"`` resolves under an absolute ``/srv/game/res`` too.
    """
    ref = reference.lstrip("/")
    directory = PurePosixPath(asset_directory)
    for prefix in (str(directory).strip("/"), directory.name):
        if prefix and prefix != "." and ref.startswith(prefix + "/"):
            return ref[len(prefix) + 1:]
    return ref


class ReferenceCheck(CheckExecutor):
    """
    Validates asset references.

    Parameters:
        asset_directory: directory assets must live under (required)
        check_formats: allowed extensions; empty means any known asset type
        asset_extensions: extensions that identify a literal as an asset reference
        validate_references: set false to turn the check into a no-op
    """

    kind = CheckKind.REFERENCE_VALIDATION

    def __init__(self, filesystem: FileSystem):
        self.filesystem = filesystem

    def execute(self, definition: CheckDefinition, files: Set[str]) -> CheckOutcome:
        params = definition.parameters
        if not params.get("validate_references", True):
            return CheckOutcome(status=CheckStatus.PASS, warnings=["Reference validation is turned off"])

        asset_directory = str(PurePosixPath(str(require_param(definition, "asset_directory"))))
        if not self.filesystem.is_dir(asset_directory):
            raise ExecutionError(f"Asset directory not found: {asset_directory}")

        allowed = set(_normalize_extensions(list_param(definition, "check_formats")))
        known = set(_normalize_extensions(list_param(definition, "asset_extensions") or DEFAULT_ASSET_EXTENSIONS))
        candidates = known | allowed
        allowed_text = ", ".join(sorted(allowed)) if allowed else "any"

        messages = []
        checked = 0
        for path in sorted(files):
            try:
                content = self.filesystem.read_file(path)
            except OSError as e:
                raise ExecutionError(f"Cannot read {path}: {e}")

            seen = set()
            for lineno, reference, ext in find_references(decode_text(content), candidates):
                if reference in seen:
                    continue
                seen.add(reference)
                checked += 1

                if allowed and ext not in allowed:
                    messages.append(
                        f"{path}:{lineno}: '{reference}' has unsupported format '.{ext}' (allowed: {allowed_text})"
                    )
                    continue

                target = str(PurePosixPath(asset_directory) / asset_relative(reference, asset_directory))
                if not self.filesystem.exists(target):
                    messages.append(f"{path}:{lineno}: '{reference}' not found under {asset_directory.rstrip('/')}/")

        if not messages:
            return CheckOutcome(
                status=CheckStatus.PASS,
                messages=[f"{checked} asset reference(s) verified"] if checked else [],
            )

        return CheckOutcome(
            status=CheckStatus.FAIL,
            messages=messages,
            suggestions=[f"Add the missing files to {asset_directory.rstrip('/')}/ or fix the references"],
        )
