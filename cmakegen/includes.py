"""Reduce discovered headers to compiler include directories."""

from __future__ import annotations

import posixpath
from typing import Iterable, Tuple

ROOT_DIR = "."


def derive_include_dirs(headers: Iterable[str]) -> Tuple[str, ...]:
    """Return the sorted, de-duplicated parent directories of ``headers``.

    Headers at the workspace root map to ``"."`` rather than being dropped.
    """
    directories = {posixpath.dirname(header) or ROOT_DIR for header in headers}
    return tuple(sorted(directories))


__all__ = ["ROOT_DIR", "derive_include_dirs"]
