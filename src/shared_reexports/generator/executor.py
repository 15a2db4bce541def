"""Concurrent executor for re-export generation runs."""

from __future__ import annotations

import logging
from concurrent.futures import Future, ThreadPoolExecutor
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Callable, Optional

from shared_reexports.core.files import (
    prepare_shared_package,
    write_text,
    write_text_if_missing,
)

from . import templates
from .config import OptionalShim, ReExportConfig
from .manifest import ReExportDeclaration, ReExportManifest


class FileStatus(Enum):
    WRITTEN = "written"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class FileOutcome:
    path: Path
    status: FileStatus


@dataclass(frozen=True)
class GenerationSummary:
    """Files touched by a run, plus the first error if the run failed."""

    outcomes: tuple[FileOutcome, ...]
    error: Optional[str] = None

    @property
    def written_count(self) -> int:
        return sum(
            1 for item in self.outcomes if item.status is FileStatus.WRITTEN
        )

    @property
    def skipped_count(self) -> int:
        return sum(
            1 for item in self.outcomes if item.status is FileStatus.SKIPPED
        )

    @property
    def succeeded(self) -> bool:
        return self.error is None

    @property
    def exit_code(self) -> int:
        return 0 if self.succeeded else 1


class PartialWriteError(RuntimeError):
    """A unit failed after writing some of its files."""

    def __init__(
        self, cause: BaseException, outcomes: tuple[FileOutcome, ...]
    ) -> None:
        super().__init__(str(cause))
        self.outcomes = outcomes


Unit = Callable[[], list[FileOutcome]]


def run_generation(
    manifest: ReExportManifest,
    *,
    config: ReExportConfig,
    logger: logging.Logger,
    package_name: str,
    platform: Optional[str] = None,
    max_workers: Optional[int] = None,
) -> GenerationSummary:
    """Generate every stub pair, the optional shim and the markdown index.

    All units run concurrently. The first failure observed is logged and
    reported in the summary; files written by other units are kept, and a
    unit that fails halfway still reports the files it wrote.
    """

    logger.info(
        "Starting re-export generation",
        extra={
            "star_count": len(manifest.star),
            "equals_count": len(manifest.equals),
            "shared_dir": str(config.shared_dir),
            "markdown": str(config.markdown_path),
        },
    )

    units: list[Unit] = []
    if config.optional is not None:
        shim = config.optional
        units.append(
            lambda: generate_optional_shim(
                shim, shared_dir=config.shared_dir, platform=platform
            )
        )
    for declaration in manifest.star:
        units.append(_bind(generate_star, declaration, config, platform))
    for declaration in manifest.equals:
        units.append(_bind(generate_equals, declaration, config, platform))
    units.append(
        lambda: generate_markdown(
            config.markdown_path,
            package_name=package_name,
            packages=manifest.packages(),
            platform=platform,
        )
    )

    outcomes: list[FileOutcome] = []
    error: Optional[BaseException] = None
    with ThreadPoolExecutor(max_workers=max_workers) as pool:
        futures: list[Future[list[FileOutcome]]] = [
            pool.submit(unit) for unit in units
        ]
        for future in futures:
            exc = future.exception()
            if exc is None:
                produced = future.result()
            elif isinstance(exc, PartialWriteError):
                produced = list(exc.outcomes)
            else:
                produced = []
            if exc is not None and error is None:
                error = exc
            for outcome in produced:
                outcomes.append(outcome)
                _log_outcome(logger, outcome)

    if error is not None:
        logger.error(
            "Re-export generation failed",
            exc_info=(type(error), error, error.__traceback__),
        )
        return GenerationSummary(outcomes=tuple(outcomes), error=str(error))

    summary = GenerationSummary(outcomes=tuple(outcomes))
    logger.info(
        "Completed re-export generation",
        extra={
            "written_count": summary.written_count,
            "skipped_count": summary.skipped_count,
        },
    )
    return summary


def generate_star(
    declaration: ReExportDeclaration,
    *,
    shared_dir: Path,
    platform: Optional[str] = None,
) -> list[FileOutcome]:
    """Stub pair forwarding every named binding of the package."""

    base = prepare_shared_package(shared_dir, declaration.target)
    return _write_pair(
        base,
        templates.render_star_js(declaration.package),
        templates.render_star_dts(declaration.package),
        platform,
    )


def generate_equals(
    declaration: ReExportDeclaration,
    *,
    shared_dir: Path,
    platform: Optional[str] = None,
) -> list[FileOutcome]:
    """Stub pair forwarding the package's single module value."""

    base = prepare_shared_package(shared_dir, declaration.target)
    return _write_pair(
        base,
        templates.render_equals_js(declaration.package),
        templates.render_equals_dts(declaration.package, declaration.name),
        platform,
    )


def generate_optional_shim(
    shim: OptionalShim,
    *,
    shared_dir: Path,
    platform: Optional[str] = None,
) -> list[FileOutcome]:
    base = prepare_shared_package(shared_dir, shim.name)
    namespace = templates.shim_namespace(shim.name)
    return _write_pair(
        base,
        templates.render_optional_js(shim.package),
        templates.render_optional_dts(shim.package, namespace),
        platform,
    )


def generate_markdown(
    path: Path,
    *,
    package_name: str,
    packages: list[str],
    platform: Optional[str] = None,
) -> list[FileOutcome]:
    """Rewrite the markdown index unconditionally."""

    path.parent.mkdir(parents=True, exist_ok=True)
    write_text(
        path,
        templates.render_markdown(package_name, packages),
        platform=platform,
    )
    return [FileOutcome(path=path, status=FileStatus.WRITTEN)]


def _bind(
    func: Callable[..., list[FileOutcome]],
    declaration: ReExportDeclaration,
    config: ReExportConfig,
    platform: Optional[str],
) -> Unit:
    def unit() -> list[FileOutcome]:
        return func(
            declaration, shared_dir=config.shared_dir, platform=platform
        )

    return unit


def _with_suffix(base: Path, suffix: str) -> Path:
    # Path.with_suffix would clobber dotted names such as "socket.io".
    return base.parent / f"{base.name}{suffix}"


def _write_pair(
    base: Path, js: str, dts: str, platform: Optional[str]
) -> list[FileOutcome]:
    outcomes: list[FileOutcome] = []
    try:
        for suffix, content in ((".js", js), (".d.ts", dts)):
            path = _with_suffix(base, suffix)
            outcomes.append(_write_if_missing(path, content, platform))
    except Exception as exc:
        if outcomes:
            raise PartialWriteError(exc, tuple(outcomes)) from exc
        raise
    return outcomes


def _write_if_missing(
    path: Path, content: str, platform: Optional[str]
) -> FileOutcome:
    written = write_text_if_missing(path, content, platform=platform)
    status = FileStatus.WRITTEN if written else FileStatus.SKIPPED
    return FileOutcome(path=path, status=status)


def _log_outcome(logger: logging.Logger, outcome: FileOutcome) -> None:
    if outcome.status is FileStatus.WRITTEN:
        logger.info("Wrote file", extra={"path": str(outcome.path)})
    else:
        logger.debug(
            "Skipped existing file", extra={"path": str(outcome.path)}
        )


__all__ = [
    "FileOutcome",
    "FileStatus",
    "GenerationSummary",
    "PartialWriteError",
    "generate_equals",
    "generate_markdown",
    "generate_optional_shim",
    "generate_star",
    "run_generation",
]
