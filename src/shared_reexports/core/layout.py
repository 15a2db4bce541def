"""Resolve the package root and the paths the generator reads and writes."""

from __future__ import annotations

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping


ROOT_ENV = "REEXPORTS_PACKAGE_ROOT"
LOG_DIR_ENV = "REEXPORTS_LOG_DIR"
DEFAULT_LOG_DIR = Path.home() / ".shared-reexports" / "logs"


class LayoutError(RuntimeError):
    """Raised when the package layout cannot be resolved."""


@dataclass(frozen=True)
class PackageLayout:
    """Resolved package root plus the log directory for generator runs."""

    root: Path
    log_dir: Path

    def resolve(self, candidate: Path) -> Path:
        """Anchor ``candidate`` at the package root unless it is absolute."""

        expanded = candidate.expanduser()
        if expanded.is_absolute():
            return expanded
        return self.root / expanded

    @property
    def name(self) -> str:
        return self.root.name


def resolve_layout(
    *,
    env: Mapping[str, str] | None = None,
    root: Path | None = None,
    log_dir: Path | None = None,
) -> PackageLayout:
    """Resolve the package root from ``root``, the environment, or the cwd."""

    env_map = _coerce_env(env)
    base = _resolve_root(env_map, override=root)
    if not base.exists():
        raise LayoutError(f"Package root does not exist: {base}")
    if not base.is_dir():
        raise LayoutError(f"Package root is not a directory: {base}")
    return PackageLayout(
        root=base,
        log_dir=_resolve_log_dir(env_map, override=log_dir),
    )


def _coerce_env(env: Mapping[str, str] | None) -> Mapping[str, str]:
    if env is None:
        return os.environ
    return env


def _resolve_root(env: Mapping[str, str], *, override: Path | None) -> Path:
    if override is not None:
        target = override
    else:
        custom = (env.get(ROOT_ENV) or "").strip()
        target = Path(custom) if custom else Path.cwd()
    try:
        return target.expanduser().resolve()
    except FileNotFoundError:
        return target.expanduser().absolute()


def _resolve_log_dir(env: Mapping[str, str], *, override: Path | None) -> Path:
    if override is not None:
        return override.expanduser()
    custom = (env.get(LOG_DIR_ENV) or "").strip()
    if custom:
        return Path(custom).expanduser()
    return DEFAULT_LOG_DIR
