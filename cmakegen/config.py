"""Configuration loading for cmakegen (.cmakegen.yml plus CLI overrides)."""

from __future__ import annotations

import re
from dataclasses import dataclass, field, replace
from pathlib import Path
from typing import Any, Dict, List, Optional, Sequence

import yaml

from .discovery import DEFAULT_EXCLUSIONS, validate_exclusion_pattern
from .errors import MalformedConfigurationError

CONFIG_FILENAME = ".cmakegen.yml"
DEFAULT_PROJECT_NAME = "MyProject"
DEFAULT_STANDARD = "17"
DEFAULT_OUTPUT_DIR = "build"
SUPPORTED_STANDARDS = ("11", "14", "17", "20", "23")

_PROJECT_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_.+-]*$")


@dataclass
class GeneratorConfig:
    """Effective settings for one generation run."""

    root: Path
    project_name: str = DEFAULT_PROJECT_NAME
    standard: str = DEFAULT_STANDARD
    output_dir: str = DEFAULT_OUTPUT_DIR
    exclude_paths: List[str] = field(default_factory=list)

    @property
    def exclusions(self) -> tuple[str, ...]:
        """Default exclusions, the output directory, then user patterns, without repeats."""
        ordered: List[str] = []
        for pattern in (*DEFAULT_EXCLUSIONS, self.output_dir, *self.exclude_paths):
            if pattern not in ordered:
                ordered.append(pattern)
        return tuple(ordered)

    def with_overrides(
        self,
        *,
        project_name: Optional[str] = None,
        standard: Optional[str] = None,
        output_dir: Optional[str] = None,
        exclude_paths: Sequence[str] = (),
    ) -> "GeneratorConfig":
        """Return a copy with CLI-supplied values layered over file values."""
        return replace(
            self,
            project_name=project_name if project_name is not None else self.project_name,
            standard=standard if standard is not None else self.standard,
            output_dir=output_dir if output_dir is not None else self.output_dir,
            exclude_paths=[*self.exclude_paths, *exclude_paths],
        )

    def validate(self) -> "GeneratorConfig":
        """Raise MalformedConfigurationError when any setting is unusable."""
        if not _PROJECT_NAME_RE.match(self.project_name):
            raise MalformedConfigurationError(
                f"Invalid project name {self.project_name!r}: use letters, digits, '_', '.', '+' or '-'"
            )
        if self.standard not in SUPPORTED_STANDARDS:
            raise MalformedConfigurationError(
                f"Unsupported C++ standard {self.standard!r}; "
                f"expected one of {', '.join(SUPPORTED_STANDARDS)}"
            )
        output = self.output_dir.strip()
        if not output or output in {".", ".."} or "/" in output or "\\" in output:
            raise MalformedConfigurationError(
                f"Invalid output directory {self.output_dir!r}: must be a single directory name"
            )
        if any(char in output for char in "*?["):
            raise MalformedConfigurationError(
                f"Invalid output directory {self.output_dir!r}: wildcards are not allowed"
            )
        validate_exclusion_pattern(self.output_dir)
        for pattern in self.exclude_paths:
            validate_exclusion_pattern(pattern)
        return self


def load_config(config_path: Path) -> GeneratorConfig:
    """Load configuration from disk, returning defaults when no file exists."""
    config_file = _resolve_config_path(config_path)
    root = config_file.parent.resolve()

    if not config_file.exists():
        return GeneratorConfig(root=root)

    data = _read_config(config_file)
    if not isinstance(data, dict):
        raise MalformedConfigurationError(f"{CONFIG_FILENAME} must contain a mapping at the root")

    config = GeneratorConfig(root=root)

    project_data = _as_dict(data.get("project"))
    name = _as_str(project_data.get("name"))
    if name is not None:
        config.project_name = name
    standard = _as_str(project_data.get("standard"))
    if standard is not None:
        config.standard = standard

    output_dir = _as_str(data.get("output_dir"))
    if output_dir is not None:
        config.output_dir = output_dir

    config.exclude_paths = _as_str_list(data.get("exclude_paths"))
    return config


def _resolve_config_path(config_path: Path) -> Path:
    config_path = config_path.expanduser()
    if config_path.is_dir():
        return (config_path / CONFIG_FILENAME).resolve()
    if config_path.name != CONFIG_FILENAME:
        return (config_path.parent / CONFIG_FILENAME).resolve()
    return config_path.resolve()


def _read_config(path: Path) -> Dict[str, Any]:
    try:
        text = path.read_text(encoding="utf-8")
    except UnicodeDecodeError as exc:
        raise MalformedConfigurationError(f"{path.name} is not valid UTF-8: {exc}") from exc
    if not text.strip():
        return {}
    try:
        loaded = yaml.safe_load(text)
    except yaml.YAMLError as exc:
        raise MalformedConfigurationError(f"Failed to parse {path.name}: {exc}") from exc
    return loaded if loaded is not None else {}


def _as_dict(value: Any) -> Dict[str, Any]:
    return value if isinstance(value, dict) else {}


def _as_str(value: Any) -> Optional[str]:
    if isinstance(value, bool):
        return None
    return str(value) if isinstance(value, (str, int, float)) else None


def _as_str_list(value: Any) -> List[str]:
    if value is None:
        return []
    if isinstance(value, str):
        return [value]
    if isinstance(value, Sequence):
        return [str(item) for item in value if isinstance(item, (str, int, float))]
    return []


__all__ = [
    "CONFIG_FILENAME",
    "DEFAULT_OUTPUT_DIR",
    "DEFAULT_PROJECT_NAME",
    "DEFAULT_STANDARD",
    "GeneratorConfig",
    "SUPPORTED_STANDARDS",
    "load_config",
]
