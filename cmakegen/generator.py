"""Pipeline orchestration: clean, discover, derive, synthesize, write."""

from __future__ import annotations

from pathlib import Path
from typing import Optional, Sequence

from .cleaner import DESCRIPTOR_FILENAME, clean_workspace, is_build_tree
from .config import GeneratorConfig, load_config
from .discovery import (
    DEFAULT_EXCLUSIONS,
    HEADER_EXTENSIONS,
    SOURCE_EXTENSIONS,
    discover,
    scan_workspace,
)
from .errors import FilesystemAccessError, MalformedConfigurationError
from .includes import derive_include_dirs
from .logging import get_logger
from .models import GenerationResult
from .serializer import render_descriptor
from .synthesizer import build_descriptor


class Generator:
    """Coordinates one CMakeLists.txt generation run for a workspace."""

    def __init__(self) -> None:
        self._logger = get_logger("generator")

    def resolve_config(
        self,
        path: str | Path,
        *,
        project_name: Optional[str] = None,
        standard: Optional[str] = None,
        output_dir: Optional[str] = None,
        exclude_paths: Sequence[str] = (),
    ) -> GeneratorConfig:
        """Load ``.cmakegen.yml``, apply overrides, and validate the result.

        Nothing on disk is modified here, so a MalformedConfigurationError
        always surfaces before cleaning starts.
        """
        root = Path(path).expanduser().resolve()
        if not root.exists():
            raise FilesystemAccessError(f"Workspace path not found: {path}")
        if not root.is_dir():
            raise FilesystemAccessError(f"Workspace path is not a directory: {path}")

        try:
            config = load_config(root)
        except OSError as exc:
            raise FilesystemAccessError(f"Cannot read configuration in {root}: {exc}") from exc
        config = config.with_overrides(
            project_name=project_name,
            standard=standard,
            output_dir=output_dir,
            exclude_paths=exclude_paths,
        ).validate()
        self._check_output_dir(config)
        return config

    def _check_output_dir(self, config: GeneratorConfig) -> None:
        """Refuse an output directory that holds project sources or headers.

        The output directory is excluded from discovery and may be deleted by
        the cleaner, so it must not be part of the source tree.
        """
        output = config.root / config.output_dir
        if output.is_symlink() or not output.is_dir() or is_build_tree(output):
            return
        found = discover(output, (*SOURCE_EXTENSIONS, *HEADER_EXTENSIONS), DEFAULT_EXCLUSIONS)
        if found:
            raise MalformedConfigurationError(
                f"Output directory {config.output_dir!r} contains project files "
                f"(e.g. {config.output_dir}/{found[0]}); choose a dedicated build directory"
            )

    def run(
        self,
        path: str | Path = ".",
        *,
        project_name: Optional[str] = None,
        standard: Optional[str] = None,
        output_dir: Optional[str] = None,
        exclude_paths: Sequence[str] = (),
        clean: bool = True,
        dry_run: bool = False,
    ) -> GenerationResult:
        """Regenerate the workspace descriptor and return what was produced.

        With ``dry_run`` the workspace is neither cleaned nor written; the
        rendered text is available through :meth:`render`.
        """
        config = self.resolve_config(
            path,
            project_name=project_name,
            standard=standard,
            output_dir=output_dir,
            exclude_paths=exclude_paths,
        )
        return self.generate(config, clean=clean, dry_run=dry_run)

    def generate(
        self, config: GeneratorConfig, *, clean: bool = True, dry_run: bool = False
    ) -> GenerationResult:
        root = config.root
        self._logger.info("Generating %s for %s", DESCRIPTOR_FILENAME, root)

        removed: tuple[str, ...] = ()
        if clean and not dry_run:
            removed = clean_workspace(root, config.output_dir)

        discovery = scan_workspace(root, config.exclusions)
        include_dirs = derive_include_dirs(discovery.headers)
        self._logger.debug("Include directories: %s", ", ".join(include_dirs) or "(none)")

        descriptor = build_descriptor(
            config.project_name,
            config.standard,
            discovery.sources,
            discovery.headers,
            include_dirs,
            config.output_dir,
            workspace=root,
            exclusions=config.exclusions,
        )
        result = GenerationResult(
            path=root / DESCRIPTOR_FILENAME,
            descriptor=descriptor,
            discovery=discovery,
            removed=removed,
            written=False,
        )
        if dry_run:
            return result

        self._write(result.path, render_descriptor(descriptor))
        result.written = True
        if result.degraded:
            self._logger.warning("No source files found under %s; wrote %s without a target", root, result.path)
        else:
            self._logger.info(
                "Wrote %s with %d build unit(s)", result.path, len(descriptor.target.units)
            )
        return result

    @staticmethod
    def render(result: GenerationResult) -> str:
        """Return the descriptor text for a (possibly dry-run) result."""
        return render_descriptor(result.descriptor)

    def _write(self, path: Path, text: str) -> None:
        try:
            path.write_text(text, encoding="utf-8", newline="\n")
        except OSError as exc:
            raise FilesystemAccessError(f"Cannot write {path}: {exc}") from exc


__all__ = ["Generator"]
