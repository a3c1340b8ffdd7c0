"""Text layout for BuildDescriptor values."""

from __future__ import annotations

from typing import List

from .includes import ROOT_DIR
from .models import BuildDescriptor, GlobRule

HEADER_COMMENT = (
    "# Generated by cmakegen. Re-run cmakegen to refresh; manual edits are overwritten."
)
LINKAGE_BEGIN = "# >>> linkage templates (inert)"
LINKAGE_END = "# <<< linkage templates"
INDENT = "    "
SOURCE_DIR = "${CMAKE_CURRENT_SOURCE_DIR}"


def escape(value: str, *, expand: bool = False) -> str:
    """Escape ``value`` for use inside a CMake quoted argument.

    With ``expand`` the ``${...}`` references are left for CMake to expand;
    otherwise ``$`` is escaped so workspace paths are taken literally.
    """
    escaped = value.replace("\\", "\\\\").replace('"', '\\"')
    if not expand:
        escaped = escaped.replace("$", "\\$")
    return escaped


def quote(value: str, *, expand: bool = False) -> str:
    """Return ``value`` as a CMake quoted argument."""
    return f'"{escape(value, expand=expand)}"'


def source_path(relative: str) -> str:
    """Quote a workspace-relative path anchored at the current source dir."""
    if relative == ROOT_DIR:
        return quote(SOURCE_DIR, expand=True)
    return f'"{SOURCE_DIR}/{escape(relative)}"'


def _render_glob_rule(rule: GlobRule) -> List[str]:
    lines = [
        f"file(GLOB_RECURSE {rule.variable} RELATIVE {quote(SOURCE_DIR, expand=True)}"
        " CONFIGURE_DEPENDS"
    ]
    lines.extend(f"{INDENT}{quote(glob, expand=True)}" for glob in rule.globs)
    lines.append(")")
    lines.extend(
        f"list(FILTER {rule.variable} EXCLUDE REGEX {quote(regex)})" for regex in rule.excludes
    )
    return lines


def render_descriptor(descriptor: BuildDescriptor) -> str:
    """Serialize ``descriptor`` to CMakeLists.txt text ending in one newline."""
    name = descriptor.project_name
    lines: List[str] = [
        HEADER_COMMENT,
        f"cmake_minimum_required(VERSION {descriptor.minimum_version})",
        f"project({name} LANGUAGES C CXX)",
        "",
        f"set(CMAKE_CXX_STANDARD {descriptor.standard})",
        "set(CMAKE_CXX_STANDARD_REQUIRED ON)",
        "set(CMAKE_CXX_EXTENSIONS OFF)",
        "",
        f"# Configure out of the source tree: cmake -S . -B {descriptor.output_root}",
        "set(CMAKE_RUNTIME_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/bin)",
        "set(CMAKE_LIBRARY_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/lib)",
        "set(CMAKE_ARCHIVE_OUTPUT_DIRECTORY ${CMAKE_BINARY_DIR}/lib)",
        "",
    ]

    lines.append("# Discovery rules. The target below lists the files found when this was generated.")
    lines.extend(_render_glob_rule(descriptor.source_rule))
    lines.append("")
    lines.extend(_render_glob_rule(descriptor.header_rule))
    lines.append("")

    lines.append(f"set(WARNING_FLAGS {' '.join(descriptor.warning_flags)})")
    lines.append("")

    target = descriptor.target
    if target is not None:
        lines.append(f"add_executable({target.name}")
        lines.extend(f"{INDENT}{quote(unit)}" for unit in target.units)
        lines.append(")")
        if target.include_dirs:
            lines.append(f"target_include_directories({target.name} PRIVATE")
            lines.extend(f"{INDENT}{source_path(directory)}" for directory in target.include_dirs)
            lines.append(")")
        lines.append(f"target_compile_options({target.name} PRIVATE ${{WARNING_FLAGS}})")
    else:
        for diagnostic in descriptor.diagnostics:
            lines.append(f"# {diagnostic}")
            lines.append(f"message(WARNING {quote(diagnostic)})")
    lines.append("")

    lines.append(LINKAGE_BEGIN)
    for template in descriptor.linkage_templates:
        lines.append(f"# {template.title}:")
        lines.extend(f"#{INDENT}{line}" for line in template.lines)
    lines.append(LINKAGE_END)
    lines.append("")

    lines.extend(f"message(STATUS {quote(status)})" for status in descriptor.status_lines)

    return "\n".join(lines).rstrip("\n") + "\n"


__all__ = ["HEADER_COMMENT", "LINKAGE_BEGIN", "LINKAGE_END", "escape", "quote", "render_descriptor", "source_path"]
