"""Removal of stale descriptors and CMake build artifacts."""

from __future__ import annotations

import shutil
from pathlib import Path
from typing import List, Tuple

from .errors import FilesystemAccessError
from .logging import get_logger

logger = get_logger("cleaner")

DESCRIPTOR_FILENAME = "CMakeLists.txt"

TRANSIENT_FILES: Tuple[str, ...] = (
    DESCRIPTOR_FILENAME,
    "CMakeCache.txt",
    "cmake_install.cmake",
    "Makefile",
    "compile_commands.json",
)

TRANSIENT_DIRS: Tuple[str, ...] = ("CMakeFiles",)

# Files or directories that mark a directory as a CMake binary tree.
BUILD_TREE_MARKERS: Tuple[str, ...] = ("CMakeCache.txt", "CMakeFiles")


def is_build_tree(path: Path) -> bool:
    """Return True when ``path`` is a directory CMake has configured into."""
    return path.is_dir() and any((path / marker).exists() for marker in BUILD_TREE_MARKERS)


def clean_workspace(root: Path | str, output_dir: str = "build") -> Tuple[str, ...]:
    """Delete the previous descriptor and transient build artifacts under ``root``.

    The output directory is only deleted when CMake has configured into it.
    Missing artifacts are skipped, so running this on a pristine workspace is a
    no-op. Returns the names that were removed.
    """
    root_path = Path(root)
    removed: List[str] = []

    for name in TRANSIENT_FILES:
        path = root_path / name
        if path.is_symlink() or path.is_file():
            _remove(path, directory=False)
            removed.append(name)

    for name in TRANSIENT_DIRS:
        path = root_path / name
        if path.is_symlink():
            _remove(path, directory=False)
            removed.append(name)
        elif path.is_dir():
            _remove(path, directory=True)
            removed.append(name)

    output_path = root_path / output_dir
    if output_path.is_symlink():
        _remove(output_path, directory=False)
        removed.append(output_dir)
    elif is_build_tree(output_path):
        _remove(output_path, directory=True)
        removed.append(output_dir)
    elif output_path.is_dir():
        logger.warning(
            "Leaving %s in place: it has no CMakeCache.txt or CMakeFiles/", output_path
        )

    if removed:
        logger.info("Removed %s", ", ".join(removed))
    else:
        logger.debug("Nothing to clean under %s", root_path)
    return tuple(removed)


def _remove(path: Path, *, directory: bool) -> None:
    try:
        if directory:
            shutil.rmtree(path)
        else:
            path.unlink()
    except FileNotFoundError:
        # Removed concurrently; the end state is the same.
        return
    except OSError as exc:
        raise FilesystemAccessError(f"Cannot remove {path}: {exc}") from exc


__all__ = ["DESCRIPTOR_FILENAME", "TRANSIENT_DIRS", "TRANSIENT_FILES", "clean_workspace", "is_build_tree"]
