"""CLI entry points for the shared re-export generator."""

from __future__ import annotations

import argparse
import sys
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.table import Table

from shared_reexports.core import layout as layout_mod
from shared_reexports.core.layout import LayoutError
from shared_reexports.core.logging import configure_logger

from .config import (
    CONFIG_FILENAME,
    ConfigOverrides,
    LoadResult,
    ReExportConfigError,
    load_config,
    write_config_template,
)
from .executor import FileStatus, GenerationSummary, run_generation
from .manifest import ManifestError, ReExportManifest, load_manifest

LOGGER_NAME = "shared_reexports.generator"


def _add_config_arguments(parser: argparse.ArgumentParser) -> None:
    parser.add_argument(
        "--root",
        type=Path,
        help=(
            "Package root holding the manifest (defaults to "
            "REEXPORTS_PACKAGE_ROOT or the current directory)."
        ),
    )
    parser.add_argument(
        "--config",
        type=Path,
        help=f"Path to a TOML config (defaults to <root>/{CONFIG_FILENAME}).",
    )
    parser.add_argument(
        "--manifest",
        type=Path,
        help="Manifest holding the re-export lists (default: package.json).",
    )
    parser.add_argument(
        "--field",
        help="Manifest field with the re-export lists.",
    )


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reexports generate",
        description=(
            "Generate shared re-export stubs and the markdown index from the "
            "package manifest. Existing stubs are never overwritten."
        ),
        epilog=(
            "Run `reexports generate config init` to scaffold the default "
            "reexports.toml template."
        ),
    )
    _add_config_arguments(parser)
    parser.add_argument(
        "--shared-dir",
        type=Path,
        help="Directory receiving the generated stubs (default: shared).",
    )
    parser.add_argument(
        "--markdown",
        type=Path,
        help="Markdown index to rewrite (default: EXPORTS.md).",
    )
    parser.add_argument(
        "--log-level",
        help="Set the logging level for the run (defaults to INFO).",
    )
    parser.add_argument(
        "--verbose",
        action="store_true",
        help="Mirror log records to stderr.",
    )
    return parser


def _build_packages_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reexports packages",
        description="Print the sorted list of re-exported packages.",
    )
    _add_config_arguments(parser)
    return parser


def main(argv: Sequence[str] | None = None) -> int:
    args_list = list(argv) if argv is not None else list(sys.argv[1:])

    if args_list[:1] == ["config"]:
        return config_main(args_list[1:])

    parser = _build_parser()
    args = parser.parse_args(args_list)

    overrides = ConfigOverrides(
        manifest_path=args.manifest,
        field=args.field,
        shared_dir=args.shared_dir,
        markdown_path=args.markdown,
        log_level=args.log_level,
    )
    try:
        load_result = load_config(
            config_path=args.config,
            overrides=overrides,
            root=args.root,
        )
        manifest = load_manifest(
            load_result.config.manifest_path,
            field=load_result.config.field,
        )
    except (ReExportConfigError, ManifestError) as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        logger, log_path = configure_logger(
            LOGGER_NAME,
            log_dir=load_result.layout.log_dir,
            level=load_result.config.log_level,
            verbose=args.verbose,
        )
    except OSError as exc:
        sys.stderr.write(f"Unable to open log file: {exc}\n")
        return 1

    logger.debug(
        "reexports generate invoked",
        extra={"config_path": load_result.config_path},
    )

    summary = run_generation(
        manifest,
        config=load_result.config,
        logger=logger,
        package_name=_package_name(manifest, load_result),
    )
    _print_summary(summary, load_result, log_path)
    return summary.exit_code


def packages_main(argv: Sequence[str] | None = None) -> int:
    parser = _build_packages_parser()
    args = parser.parse_args(list(argv) if argv is not None else None)

    try:
        load_result = load_config(
            config_path=args.config,
            overrides=ConfigOverrides(
                manifest_path=args.manifest, field=args.field
            ),
            root=args.root,
        )
        manifest = load_manifest(
            load_result.config.manifest_path,
            field=load_result.config.field,
        )
    except (ReExportConfigError, ManifestError) as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    packages = manifest.packages()
    if packages:
        sys.stdout.write("\n".join(packages) + "\n")
    return 0


def _package_name(manifest: ReExportManifest, load_result: LoadResult) -> str:
    if manifest.package_name:
        return manifest.package_name
    return load_result.layout.name


def _print_summary(
    summary: GenerationSummary, load_result: LoadResult, log_path: Path
) -> None:
    console = Console(highlight=False)
    table = Table(title="reexports summary", show_header=False)
    table.add_column("key", style="bold")
    table.add_column("value")
    table.add_row("written", str(summary.written_count))
    table.add_row("skipped", str(summary.skipped_count))
    table.add_row("shared dir", str(load_result.config.shared_dir))
    table.add_row("markdown", str(load_result.config.markdown_path))
    table.add_row("log file", str(log_path))
    console.print(table)

    written = [
        item.path
        for item in summary.outcomes
        if item.status is FileStatus.WRITTEN
    ]
    for path in written:
        console.print(f"  wrote {path}", soft_wrap=True)

    if summary.error is not None:
        sys.stderr.write(f"reexports generate failed: {summary.error}\n")


def config_main(argv: Sequence[str]) -> int:
    parser = _build_config_parser()
    args = parser.parse_args(list(argv))
    return _handle_config_init(args)


def _build_config_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="reexports config",
        description="Manage configuration files for the re-export generator.",
    )
    subparsers = parser.add_subparsers(dest="command", required=True)

    init_parser = subparsers.add_parser(
        "init",
        help="Write the default reexports.toml template.",
    )
    init_parser.add_argument(
        "--path",
        type=Path,
        help=(
            "Destination for the config TOML (defaults to "
            "<root>/reexports.toml)."
        ),
    )
    init_parser.add_argument(
        "--root",
        type=Path,
        help="Package root used when resolving the default config path.",
    )
    init_parser.add_argument(
        "--force",
        action="store_true",
        help="Overwrite the destination if a config already exists.",
    )
    return parser


def _handle_config_init(args: argparse.Namespace) -> int:
    try:
        target = _resolve_config_target(args)
    except LayoutError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    try:
        written = write_config_template(target, overwrite=args.force)
    except ReExportConfigError as exc:
        sys.stderr.write(str(exc) + "\n")
        return 1

    sys.stdout.write(f"Wrote reexports config to {written}\n")
    return 0


def _resolve_config_target(args: argparse.Namespace) -> Path:
    if args.path is not None:
        candidate = args.path.expanduser()
        if not candidate.is_absolute():
            candidate = (Path.cwd() / candidate).resolve()
        return candidate

    layout = layout_mod.resolve_layout(root=args.root)
    return layout.root / CONFIG_FILENAME


if __name__ == "__main__":  # pragma: no cover - module CLI guard
    raise SystemExit(main())
