"""Configuration loader for the re-export generator."""

from __future__ import annotations

import os
from dataclasses import dataclass
from importlib import resources
from pathlib import Path
from typing import Mapping, MutableMapping, Optional

from dotenv import dotenv_values

from shared_reexports.core import config as core_config
from shared_reexports.core import layout as layout_mod

from .manifest import DEFAULT_FIELD

CONFIG_FILENAME = "reexports.toml"
CONFIG_ENV = "REEXPORTS_CONFIG"
ENV_PREFIX = "REEXPORTS_"
DOTENV_FILENAME = ".env"

_DEFAULT_MANIFEST = "package.json"
_DEFAULT_SHARED_DIR = "shared"
_DEFAULT_MARKDOWN = "EXPORTS.md"
_DEFAULT_OPTIONAL_PACKAGE = "@theia/electron"
_DEFAULT_OPTIONAL_NAME = "electron"
_DEFAULT_LOG_LEVEL = "INFO"


class ReExportConfigError(RuntimeError):
    """Raised when configuration parsing or validation fails."""


@dataclass(frozen=True)
class OptionalShim:
    """Optional dependency wrapped in a shim that tolerates its absence."""

    package: str
    name: str


@dataclass(frozen=True)
class ReExportConfig:
    """Fully resolved configuration for a generator run."""

    manifest_path: Path
    field: str
    shared_dir: Path
    markdown_path: Path
    optional: Optional[OptionalShim]
    log_level: str


@dataclass(frozen=True)
class ConfigOverrides:
    """CLI-sourced overrides applied on top of file/env options."""

    manifest_path: Optional[Path] = None
    field: Optional[str] = None
    shared_dir: Optional[Path] = None
    markdown_path: Optional[Path] = None
    log_level: Optional[str] = None


@dataclass(frozen=True)
class LoadResult:
    """Resolved configuration together with the package layout."""

    config: ReExportConfig
    layout: layout_mod.PackageLayout
    config_path: Optional[Path]


def load_config(
    *,
    config_path: Optional[Path] = None,
    overrides: Optional[ConfigOverrides] = None,
    env: Optional[Mapping[str, str]] = None,
    root: Optional[Path] = None,
) -> LoadResult:
    """Load configuration applying precedence CLI > env > TOML > defaults."""

    overrides = overrides or ConfigOverrides()
    env_map = _with_dotenv(env if env is not None else os.environ, root)

    try:
        layout = layout_mod.resolve_layout(env=env_map, root=root)
    except layout_mod.LayoutError as exc:
        raise ReExportConfigError(str(exc)) from exc

    requested_path = _resolve_config_path(
        config_path=config_path,
        env_map=env_map,
        layout=layout,
    )

    table = _default_table()
    loaded_path: Optional[Path] = None
    if requested_path.exists():
        loaded_path = requested_path
        try:
            parsed = core_config.load_toml(requested_path)
            core_config.merge_defaults(table, parsed)
        except core_config.TomlConfigError as exc:
            raise ReExportConfigError(str(exc)) from exc
    elif config_path is not None or _env_config(env_map):
        raise ReExportConfigError(f"Config file not found: {requested_path}")

    manifest_path = _pick_path(
        overrides.manifest_path,
        _env_string(env_map, "MANIFEST"),
        table["manifest"]["path"],
        key="manifest.path",
    )
    shared_dir = _pick_path(
        overrides.shared_dir,
        _env_string(env_map, "SHARED_DIR"),
        table["output"]["shared_dir"],
        key="output.shared_dir",
    )
    markdown_path = _pick_path(
        overrides.markdown_path,
        _env_string(env_map, "MARKDOWN"),
        table["output"]["markdown"],
        key="output.markdown",
    )
    field = _pick_string(
        overrides.field,
        _env_string(env_map, "FIELD"),
        table["manifest"]["field"],
        key="manifest.field",
    )
    log_level = _pick_string(
        overrides.log_level,
        _env_string(env_map, "LOG_LEVEL"),
        table["logging"]["level"],
        key="logging.level",
    ).upper()

    config = ReExportConfig(
        manifest_path=layout.resolve(manifest_path),
        field=field,
        shared_dir=layout.resolve(shared_dir),
        markdown_path=layout.resolve(markdown_path),
        optional=_resolve_optional(table["optional"]),
        log_level=log_level,
    )
    return LoadResult(config=config, layout=layout, config_path=loaded_path)


def read_config_template() -> str:
    """Return the packaged default ``reexports.toml`` template."""

    resource = resources.files(__package__).joinpath(CONFIG_FILENAME)
    return resource.read_text(encoding="utf-8")


def write_config_template(path: Path, *, overwrite: bool = False) -> Path:
    try:
        return core_config.write_toml_template(
            path, template=read_config_template(), overwrite=overwrite
        )
    except core_config.TomlConfigError as exc:
        raise ReExportConfigError(str(exc)) from exc


def _default_table() -> MutableMapping[str, MutableMapping[str, object]]:
    return {
        "manifest": {"path": _DEFAULT_MANIFEST, "field": DEFAULT_FIELD},
        "output": {
            "shared_dir": _DEFAULT_SHARED_DIR,
            "markdown": _DEFAULT_MARKDOWN,
        },
        "optional": {
            "package": _DEFAULT_OPTIONAL_PACKAGE,
            "name": _DEFAULT_OPTIONAL_NAME,
        },
        "logging": {"level": _DEFAULT_LOG_LEVEL},
    }


def _with_dotenv(
    env_map: Mapping[str, str], root: Optional[Path]
) -> Mapping[str, str]:
    # Variables already set in the environment win over the .env file.
    base = root if root is not None else _root_hint(env_map)
    dotenv_path = base / DOTENV_FILENAME
    if not dotenv_path.is_file():
        return env_map
    merged = {
        key: value
        for key, value in dotenv_values(dotenv_path).items()
        if value is not None
    }
    merged.update(env_map)
    return merged


def _root_hint(env_map: Mapping[str, str]) -> Path:
    custom = (env_map.get(layout_mod.ROOT_ENV) or "").strip()
    return Path(custom).expanduser() if custom else Path.cwd()


def _resolve_config_path(
    *,
    config_path: Optional[Path],
    env_map: Mapping[str, str],
    layout: layout_mod.PackageLayout,
) -> Path:
    if config_path is not None:
        return layout.resolve(config_path)
    env_candidate = _env_config(env_map)
    if env_candidate:
        return layout.resolve(Path(env_candidate))
    return layout.root / CONFIG_FILENAME


def _resolve_optional(table: Mapping[str, object]) -> Optional[OptionalShim]:
    package = table.get("package")
    name = table.get("name")
    if not isinstance(package, str) or not isinstance(name, str):
        raise ReExportConfigError(
            "optional.package and optional.name must be strings."
        )
    if not package.strip():
        return None
    if not name.strip():
        raise ReExportConfigError(
            "optional.name must be set when optional.package is."
        )
    return OptionalShim(package=package.strip(), name=name.strip())


def _pick_path(*candidates: object, key: str) -> Path:
    value = _pick_first(*candidates)
    if isinstance(value, Path):
        return value
    if isinstance(value, str) and value.strip():
        return Path(value.strip())
    raise ReExportConfigError(f"{key} must be a non-empty string.")


def _pick_string(*candidates: object, key: str) -> str:
    value = _pick_first(*candidates)
    if not isinstance(value, str) or not value.strip():
        raise ReExportConfigError(f"{key} must be a non-empty string.")
    return value.strip()


def _env_config(env_map: Mapping[str, str]) -> Optional[str]:
    value = (env_map.get(CONFIG_ENV) or "").strip()
    return value or None


def _env_string(env_map: Mapping[str, str], key: str) -> Optional[str]:
    raw = env_map.get(f"{ENV_PREFIX}{key}")
    if raw is None:
        return None
    value = raw.strip()
    return value or None


def _pick_first(*candidates: object) -> object:
    for candidate in candidates:
        if candidate is not None:
            return candidate
    return None
