"""CLI entrypoint for cmakegen."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

from .config import SUPPORTED_STANDARDS
from .errors import FilesystemAccessError, MalformedConfigurationError
from .generator import Generator
from .logging import configure_logging


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="cmakegen",
        description="Scan a C/C++ source tree and write a CMakeLists.txt for it.",
    )
    parser.add_argument(
        "-v",
        "--verbose",
        action="store_true",
        default=False,
        help="Increase log verbosity for troubleshooting.",
    )
    parser.add_argument(
        "path",
        nargs="?",
        default=".",
        help="Path to the workspace root (defaults to current directory).",
    )
    parser.add_argument(
        "--name",
        dest="project_name",
        default=None,
        help="Project and target name (defaults to MyProject or .cmakegen.yml).",
    )
    parser.add_argument(
        "--std",
        dest="standard",
        choices=SUPPORTED_STANDARDS,
        default=None,
        help="C++ language standard (defaults to 17 or .cmakegen.yml).",
    )
    parser.add_argument(
        "--output-dir",
        default=None,
        help="Build output directory name, excluded from discovery (defaults to build).",
    )
    parser.add_argument(
        "--exclude",
        dest="exclude_paths",
        action="append",
        default=[],
        metavar="PATTERN",
        help="Additional directory or file name pattern to skip; may be repeated.",
    )
    parser.add_argument(
        "--no-clean",
        action="store_true",
        help="Keep existing build artifacts instead of removing them first.",
    )
    parser.add_argument(
        "--dry-run",
        action="store_true",
        help="Print the generated CMakeLists.txt without cleaning or writing.",
    )
    parser.add_argument(
        "--log-file",
        type=Path,
        default=None,
        help="Also write detailed logs to this file.",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """CLI entrypoint for cmakegen."""
    parser = _build_parser()
    args = parser.parse_args(argv)

    try:
        configure_logging(verbose=bool(args.verbose), log_file=args.log_file)
        result = Generator().run(
            args.path,
            project_name=args.project_name,
            standard=args.standard,
            output_dir=args.output_dir,
            exclude_paths=args.exclude_paths,
            clean=not args.no_clean,
            dry_run=bool(args.dry_run),
        )
    except MalformedConfigurationError as exc:
        parser.exit(2, f"cmakegen: invalid configuration: {exc}\n")
    except FilesystemAccessError as exc:
        parser.exit(1, f"cmakegen failed: {exc}\nRun with --verbose for more details.\n")

    if args.dry_run:
        sys.stdout.write(Generator.render(result))
        return

    rel_path = _relativize(result.path)
    if result.degraded:
        print(f"CMakeLists.txt written to {rel_path} without a target: no source files found")
    else:
        print(
            f"CMakeLists.txt written to {rel_path} "
            f"({len(result.discovery.sources)} sources, {len(result.discovery.headers)} headers)"
        )


def _relativize(path: Path) -> str:
    try:
        return str(path.relative_to(Path.cwd()))
    except ValueError:
        return str(path)


if __name__ == "__main__":
    main(sys.argv[1:])
