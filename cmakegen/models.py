"""Core data models shared across cmakegen components."""

from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Tuple


@dataclass(frozen=True)
class DiscoveryResult:
    """Sources and headers found under a workspace, relative and sorted."""

    root: Path
    sources: Tuple[str, ...]
    headers: Tuple[str, ...]


@dataclass(frozen=True)
class GlobRule:
    """File discovery rule: include globs filtered by exclusion patterns."""

    variable: str
    globs: Tuple[str, ...]
    excludes: Tuple[str, ...]


@dataclass(frozen=True)
class TargetDeclaration:
    """The single executable target compiled from the discovered sources."""

    name: str
    units: Tuple[str, ...]
    include_dirs: Tuple[str, ...]


@dataclass(frozen=True)
class LinkageTemplate:
    """Commented example showing one way to link a library."""

    title: str
    lines: Tuple[str, ...]


@dataclass(frozen=True)
class BuildDescriptor:
    """Structured form of a generated CMakeLists.txt."""

    minimum_version: str
    project_name: str
    standard: str
    output_root: str
    source_rule: GlobRule
    header_rule: GlobRule
    include_dirs: Tuple[str, ...]
    warning_flags: Tuple[str, ...]
    target: Optional[TargetDeclaration]
    linkage_templates: Tuple[LinkageTemplate, ...]
    status_lines: Tuple[str, ...]
    diagnostics: Tuple[str, ...] = field(default_factory=tuple)

    @property
    def has_target(self) -> bool:
        return self.target is not None


@dataclass
class GenerationResult:
    """Outcome of a full clean/discover/synthesize/write run."""

    path: Path
    descriptor: BuildDescriptor
    discovery: DiscoveryResult
    removed: Tuple[str, ...] = ()
    written: bool = True

    @property
    def degraded(self) -> bool:
        """True when no sources were found and no target was declared."""
        return not self.discovery.sources
