"""Workspace walking and source/header discovery."""

from __future__ import annotations

import os
from fnmatch import fnmatchcase
from pathlib import Path
from typing import Iterable, Iterator, List, Sequence, Set, Tuple

from .errors import FilesystemAccessError, MalformedConfigurationError
from .logging import get_logger
from .models import DiscoveryResult

logger = get_logger("discovery")

SOURCE_EXTENSIONS: Tuple[str, ...] = (".c", ".cpp")
HEADER_EXTENSIONS: Tuple[str, ...] = (".h", ".hpp")

# Build output, version control metadata, the tool cache, and CMake's scratch directory.
DEFAULT_EXCLUSIONS: Tuple[str, ...] = ("build", ".git", ".cmakegen", "CMakeFiles")


def validate_exclusion_pattern(pattern: str) -> str:
    """Return ``pattern`` unchanged or raise MalformedConfigurationError.

    Patterns are matched with :func:`fnmatch.fnmatchcase` against a single
    path component, so separators and relative markers are rejected.
    """
    if not isinstance(pattern, str) or not pattern.strip():
        raise MalformedConfigurationError("Exclusion pattern must be a non-empty string")
    if pattern != pattern.strip():
        raise MalformedConfigurationError(
            f"Exclusion pattern {pattern!r} has leading or trailing whitespace"
        )
    if "/" in pattern or "\\" in pattern:
        raise MalformedConfigurationError(
            f"Exclusion pattern {pattern!r} must name a single path component"
        )
    if pattern in {".", ".."}:
        raise MalformedConfigurationError(f"Exclusion pattern {pattern!r} is not allowed")
    if not _brackets_balanced(pattern):
        raise MalformedConfigurationError(f"Exclusion pattern {pattern!r} has an unclosed '['")
    return pattern


def _brackets_balanced(pattern: str) -> bool:
    index = 0
    while index < len(pattern):
        if pattern[index] == "[":
            close = index + 1
            if close < len(pattern) and pattern[close] == "!":
                close += 1
            if close < len(pattern) and pattern[close] == "]":
                close += 1
            close = pattern.find("]", close)
            if close == -1:
                return False
            index = close
        index += 1
    return True


def is_excluded(component: str, exclusions: Iterable[str]) -> bool:
    """Return True when a single path component matches any exclusion pattern."""
    return any(fnmatchcase(component, pattern) for pattern in exclusions)


def _raise_walk_error(exc: OSError) -> None:
    raise FilesystemAccessError(
        f"Cannot read directory {exc.filename or ''}: {exc.strerror or exc}"
    ) from exc


def _dir_identity(path: str) -> Tuple[int, int]:
    try:
        stat_result = os.stat(path)
    except OSError as exc:
        raise FilesystemAccessError(f"Cannot stat directory {path}: {exc}") from exc
    return stat_result.st_dev, stat_result.st_ino


def _iter_files(root: Path, exclusions: Sequence[str]) -> Iterator[str]:
    """Yield relative POSIX paths of every non-excluded file under ``root``.

    Symlinked directories are followed, but each physical directory is
    entered once, which keeps link cycles from recursing forever.
    """
    visited: Set[Tuple[int, int]] = {_dir_identity(str(root))}

    for dirpath, dirnames, filenames in os.walk(root, followlinks=True, onerror=_raise_walk_error):
        current_dir = Path(dirpath)
        rel_dir = current_dir.relative_to(root).as_posix() if current_dir != root else ""

        kept: List[str] = []
        # Sorted so the first path to reach a shared directory is stable.
        for name in sorted(dirnames):
            if is_excluded(name, exclusions):
                logger.debug("Skipping excluded directory %s", f"{rel_dir}/{name}" if rel_dir else name)
                continue
            identity = _dir_identity(os.path.join(dirpath, name))
            if identity in visited:
                logger.debug("Skipping already visited directory %s", os.path.join(dirpath, name))
                continue
            visited.add(identity)
            kept.append(name)
        dirnames[:] = kept

        for filename in filenames:
            if is_excluded(filename, exclusions):
                continue
            yield f"{rel_dir}/{filename}" if rel_dir else filename


def discover(
    root: Path | str,
    extensions: Iterable[str],
    exclusions: Iterable[str] = DEFAULT_EXCLUSIONS,
) -> Tuple[str, ...]:
    """Return sorted relative paths under ``root`` whose suffix is in ``extensions``."""
    root_path = _resolve_root(root)
    suffixes = frozenset(extensions)
    patterns = tuple(validate_exclusion_pattern(pattern) for pattern in exclusions)

    matches = {
        rel_path
        for rel_path in _iter_files(root_path, patterns)
        if os.path.splitext(rel_path)[1] in suffixes
    }
    return tuple(sorted(matches))


def discover_sources(
    root: Path | str, exclusions: Iterable[str] = DEFAULT_EXCLUSIONS
) -> Tuple[str, ...]:
    return discover(root, SOURCE_EXTENSIONS, exclusions)


def discover_headers(
    root: Path | str, exclusions: Iterable[str] = DEFAULT_EXCLUSIONS
) -> Tuple[str, ...]:
    return discover(root, HEADER_EXTENSIONS, exclusions)


def scan_workspace(
    root: Path | str, exclusions: Iterable[str] = DEFAULT_EXCLUSIONS
) -> DiscoveryResult:
    """Discover sources and headers with shared exclusion rules."""
    root_path = _resolve_root(root)
    patterns = tuple(exclusions)
    sources = discover_sources(root_path, patterns)
    headers = discover_headers(root_path, patterns)
    logger.info("Discovered %d source(s) and %d header(s) under %s", len(sources), len(headers), root_path)
    return DiscoveryResult(root=root_path, sources=sources, headers=headers)


def _resolve_root(root: Path | str) -> Path:
    root_path = Path(root).expanduser().resolve()
    if not root_path.exists():
        raise FilesystemAccessError(f"Workspace path not found: {root}")
    if not root_path.is_dir():
        raise FilesystemAccessError(f"Workspace path is not a directory: {root}")
    return root_path


__all__ = [
    "DEFAULT_EXCLUSIONS",
    "HEADER_EXTENSIONS",
    "SOURCE_EXTENSIONS",
    "discover",
    "discover_headers",
    "discover_sources",
    "is_excluded",
    "scan_workspace",
    "validate_exclusion_pattern",
]
