"""Public APIs for the shared re-export generator."""

from __future__ import annotations

from .config import (
    ConfigOverrides,
    LoadResult,
    OptionalShim,
    ReExportConfig,
    ReExportConfigError,
    load_config,
    read_config_template,
    write_config_template,
)
from .executor import (
    FileOutcome,
    FileStatus,
    GenerationSummary,
    generate_equals,
    generate_markdown,
    generate_optional_shim,
    generate_star,
    run_generation,
)
from .manifest import (
    ExportKind,
    ManifestError,
    ReExportDeclaration,
    ReExportManifest,
    load_manifest,
    parse_reexports,
)

__all__ = [
    "ConfigOverrides",
    "LoadResult",
    "OptionalShim",
    "ReExportConfig",
    "ReExportConfigError",
    "load_config",
    "read_config_template",
    "write_config_template",
    "FileOutcome",
    "FileStatus",
    "GenerationSummary",
    "generate_equals",
    "generate_markdown",
    "generate_optional_shim",
    "generate_star",
    "run_generation",
    "ExportKind",
    "ManifestError",
    "ReExportDeclaration",
    "ReExportManifest",
    "load_manifest",
    "parse_reexports",
]
