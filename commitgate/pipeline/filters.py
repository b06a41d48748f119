"""
Path Filtering

Applies exclusion globs to a candidate file set.

Glob semantics are case-sensitive: ``*`` and ``?`` stay inside one path
segment, ``**`` spans any number of segments and ``[...]`` is a character
class. An ``ignore_paths`` glob without a ``/`` is tested against every
segment of a path, so ``.git`` or ``*.class`` apply at any depth. A glob
containing ``/`` is tested against the full path and each of its directory
prefixes. ``ignore_files`` globs are tested against the basename only.
"""

import logging
import re
from functools import lru_cache
from pathlib import Path, PurePosixPath
from typing import Iterable, List, Optional, Pattern, Set, Union

from ..config.models import ExclusionRules

logger = logging.getLogger(__name__)

PathLike = Union[str, Path, PurePosixPath]


@lru_cache(maxsize=512)
def compile_glob(pattern: str) -> Pattern[str]:
    """Translate a glob into an anchored regular expression."""
    out: List[str] = []
    i, n = 0, len(pattern)

    while i < n:
        c = pattern[i]
        if c == "*":
            if pattern.startswith("**", i):
                i += 2
                if i < n and pattern[i] == "/":
                    i += 1
                    out.append("(?:.*/)?")
                else:
                    out.append(".*")
                continue
            out.append("[^/]*")
        elif c == "?":
            out.append("[^/]")
        elif c == "[":
            end = pattern.find("]", i + 2)
            if end == -1:
                out.append(re.escape(c))
            else:
                body = pattern[i + 1:end]
                if body.startswith("!"):
                    body = "^" + body[1:]
                out.append("[" + body.replace("\\", "\\\\") + "]")
                i = end + 1
                continue
        else:
            out.append(re.escape(c))
        i += 1

    return re.compile("^" + "".join(out) + "$")


def normalize_path(path: PathLike) -> str:
    """Render a path as a POSIX-style relative string."""
    text = str(path).replace("\\", "/")
    normalized = str(PurePosixPath(text))
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def _clean_glob(pattern: str) -> str:
    return pattern.strip().strip("/")


def matches_path_glob(path: str, pattern: str) -> bool:
    """Segment match for slash-free globs, full/prefix match otherwise."""
    glob = _clean_glob(pattern)
    if not glob:
        return False
    regex = compile_glob(glob)
    parts = path.split("/")

    if "/" not in glob:
        return any(regex.match(part) for part in parts)

    prefixes = ("/".join(parts[:i]) for i in range(1, len(parts) + 1))
    return any(regex.match(prefix) for prefix in prefixes)


def matches_file_glob(path: str, pattern: str) -> bool:
    """Basename match."""
    return bool(compile_glob(pattern.strip()).match(path.rsplit("/", 1)[-1]))


def is_excluded(path: str, rules: ExclusionRules) -> bool:
    """Check a normalized path against the exclusion rules."""
    if any(matches_path_glob(path, g) for g in rules.ignore_paths):
        return True
    return any(matches_file_glob(path, g) for g in rules.ignore_files)


def is_included(path: str, include: Iterable[str]) -> bool:
    """Check a normalized path against include globs (basename or full path)."""
    for pattern in include:
        regex = compile_glob(_clean_glob(pattern))
        if regex.match(path) or regex.match(path.rsplit("/", 1)[-1]):
            return True
    return False


def filter_paths(
    files: Iterable[PathLike],
    rules: Optional[ExclusionRules] = None,
    include: Optional[Iterable[str]] = None,
) -> Set[str]:
    """
    Remove excluded paths from a file set.

    Args:
        files: Candidate paths
        rules: Exclusion rules; None means nothing is excluded
        include: Optional globs a path must match to be kept

    Returns:
        The surviving paths, normalized
    """
    include = list(include or [])
    kept: Set[str] = set()

    for raw in files:
        path = normalize_path(raw)
        if rules is not None and is_excluded(path, rules):
            continue
        if include and not is_included(path, include):
            continue
        kept.add(path)

    logger.debug("Path filter kept %d path(s)", len(kept))
    return kept
