"""Core shared helpers for the re-export commands."""

from __future__ import annotations

from .config import (
    TomlConfigError,
    load_toml,
    merge_defaults,
    write_toml_template,
)
from .files import (
    prepare_shared_package,
    to_platform_eol,
    write_text,
    write_text_if_missing,
)
from .layout import (
    LOG_DIR_ENV,
    ROOT_ENV,
    LayoutError,
    PackageLayout,
    resolve_layout,
)
from .logging import JsonLogFormatter, configure_logger

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
    "prepare_shared_package",
    "to_platform_eol",
    "write_text",
    "write_text_if_missing",
    "LOG_DIR_ENV",
    "ROOT_ENV",
    "LayoutError",
    "PackageLayout",
    "resolve_layout",
    "configure_logger",
    "JsonLogFormatter",
]
