"""Decide what goes into a generated CMakeLists.txt."""

from __future__ import annotations

from pathlib import Path
from typing import Iterable, List, Optional, Sequence, Tuple

from .discovery import DEFAULT_EXCLUSIONS, HEADER_EXTENSIONS, SOURCE_EXTENSIONS
from .logging import get_logger
from .models import BuildDescriptor, GlobRule, LinkageTemplate, TargetDeclaration
from .serializer import SOURCE_DIR, render_descriptor

logger = get_logger("synthesizer")

MINIMUM_CMAKE_VERSION = "3.12"
NO_SOURCES_MARKER = "No source files found"

# -Werror=return-type turns a missing return value into a hard error;
# -Wno-unused-parameter tolerates ignored argc/argv style parameters.
WARNING_FLAGS: Tuple[str, ...] = (
    "-Wall",
    "-Wextra",
    "-Wpedantic",
    "-Werror=return-type",
    "-Wno-unused-parameter",
)

SOURCES_VARIABLE = "PROJECT_SOURCES"
HEADERS_VARIABLE = "PROJECT_HEADERS"


def linkage_templates(target: str) -> Tuple[LinkageTemplate, ...]:
    """Example library-linking snippets, emitted only as comments."""
    return (
        LinkageTemplate(
            title="System shared library by name",
            lines=(f"target_link_libraries({target} PRIVATE pthread)",),
        ),
        LinkageTemplate(
            title="Shared library by absolute path",
            lines=(f"target_link_libraries({target} PRIVATE /usr/local/lib/libexample.so)",),
        ),
        LinkageTemplate(
            title="Static library by absolute path",
            lines=(f"target_link_libraries({target} PRIVATE /usr/local/lib/libexample.a)",),
        ),
        LinkageTemplate(
            title="Library by name from a search directory",
            lines=(
                "link_directories(/opt/example/lib)",
                f"target_link_libraries({target} PRIVATE example)",
            ),
        ),
    )


def pattern_to_regex(pattern: str) -> str:
    """Translate an fnmatch exclusion pattern into a CMake path-component regex.

    The regex is applied to workspace-relative paths, so it matches the
    component at the start of the path or after any ``/``.
    """
    parts: List[str] = []
    index = 0
    while index < len(pattern):
        char = pattern[index]
        if char == "*":
            parts.append("[^/]*")
        elif char == "?":
            parts.append("[^/]")
        elif char == "[":
            close = index + 1
            if close < len(pattern) and pattern[close] == "!":
                close += 1
            if close < len(pattern) and pattern[close] == "]":
                close += 1
            close = pattern.find("]", close)
            if close == -1:
                parts.append("\\[")
            else:
                body = pattern[index + 1 : close]
                negate = body.startswith("!")
                if negate:
                    body = body[1:]
                # fnmatch reads a leading "^" literally; moved last so CMake does not negate.
                if body.startswith("^") and len(body) > 1:
                    body = body[1:] + "^"
                if negate:
                    body = "^" + body
                parts.append("\\^" if body == "^" else f"[{body}]")
                index = close
        elif char in ".^$+()|{}\\":
            parts.append("\\" + char)
        else:
            parts.append(char)
        index += 1
    return "(^|/)" + "".join(parts) + "(/|$)"


def _glob_rule(variable: str, extensions: Sequence[str], exclusions: Sequence[str]) -> GlobRule:
    return GlobRule(
        variable=variable,
        globs=tuple(f"{SOURCE_DIR}/*{extension}" for extension in extensions),
        excludes=tuple(pattern_to_regex(pattern) for pattern in exclusions),
    )


def build_descriptor(
    project_name: str,
    standard: str,
    sources: Sequence[str],
    headers: Sequence[str],
    include_dirs: Sequence[str],
    output_root: str,
    *,
    workspace: Optional[Path] = None,
    exclusions: Iterable[str] = DEFAULT_EXCLUSIONS,
) -> BuildDescriptor:
    """Assemble the descriptor value; no text layout happens here."""
    patterns = tuple(exclusions)
    include_tuple = tuple(include_dirs)

    target: Optional[TargetDeclaration] = None
    diagnostics: Tuple[str, ...] = ()
    if sources:
        target = TargetDeclaration(
            name=project_name,
            units=(*sources, *headers),
            include_dirs=include_tuple,
        )
    else:
        logger.warning("%s; the descriptor will declare no target", NO_SOURCES_MARKER)
        diagnostics = (f"{NO_SOURCES_MARKER}: no target declared",)

    root_label = workspace.as_posix() if workspace is not None else "."
    status_lines = (
        f"Workspace root: {root_label}",
        f"Sources found: {len(sources)}",
        f"Include directories: {';'.join(include_tuple) if include_tuple else '(none)'}",
    )

    return BuildDescriptor(
        minimum_version=MINIMUM_CMAKE_VERSION,
        project_name=project_name,
        standard=str(standard),
        output_root=output_root,
        source_rule=_glob_rule(SOURCES_VARIABLE, SOURCE_EXTENSIONS, patterns),
        header_rule=_glob_rule(HEADERS_VARIABLE, HEADER_EXTENSIONS, patterns),
        include_dirs=include_tuple,
        warning_flags=WARNING_FLAGS,
        target=target,
        linkage_templates=linkage_templates(project_name),
        status_lines=status_lines,
        diagnostics=diagnostics,
    )


def synthesize(
    project_name: str,
    standard: str,
    sources: Sequence[str],
    headers: Sequence[str],
    include_dirs: Sequence[str],
    output_root: str,
    *,
    workspace: Optional[Path] = None,
    exclusions: Iterable[str] = DEFAULT_EXCLUSIONS,
) -> str:
    """Return CMakeLists.txt text for the given discovery results."""
    descriptor = build_descriptor(
        project_name,
        standard,
        sources,
        headers,
        include_dirs,
        output_root,
        workspace=workspace,
        exclusions=exclusions,
    )
    return render_descriptor(descriptor)


__all__ = [
    "MINIMUM_CMAKE_VERSION",
    "NO_SOURCES_MARKER",
    "WARNING_FLAGS",
    "build_descriptor",
    "linkage_templates",
    "pattern_to_regex",
    "synthesize",
]
