"""TOML configuration helpers shared by the re-export commands."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Mapping, MutableMapping

try:  # Python >= 3.11 ships ``tomllib`` in the stdlib.
    import tomllib
except ModuleNotFoundError as exc:  # pragma: no cover - interpreter guard
    raise RuntimeError("Python 3.11+ is required for tomllib support.") from exc

__all__ = [
    "TomlConfigError",
    "load_toml",
    "merge_defaults",
    "write_toml_template",
]


class TomlConfigError(RuntimeError):
    """Raised when a TOML config cannot be read, parsed or merged."""


def load_toml(path: Path) -> Mapping[str, Any]:
    """Parse the UTF-8 TOML document at ``path``.

    Read, decode and syntax failures all become :class:`TomlConfigError`.
    """

    try:
        raw = path.read_bytes()
    except FileNotFoundError as exc:
        raise TomlConfigError(f"Config file not found: {path}") from exc
    except IsADirectoryError as exc:
        raise TomlConfigError(f"Config path is a directory: {path}") from exc
    except OSError as exc:
        raise TomlConfigError(f"Unable to read config {path}: {exc}") from exc

    try:
        return tomllib.loads(raw.decode("utf-8"))
    except UnicodeDecodeError as exc:
        raise TomlConfigError(f"Config is not valid UTF-8: {path}") from exc
    except tomllib.TOMLDecodeError as exc:
        raise TomlConfigError(f"Failed to parse config TOML: {exc}") from exc


def merge_defaults(
    base: MutableMapping[str, Any],
    override: Mapping[str, Any],
    *,
    path: str = "",
) -> None:
    """Copy ``override`` onto ``base`` table by table.

    Only keys already present in ``base`` are accepted, and a table may not
    stand in for a scalar or the other way round.
    """

    for key, value in override.items():
        dotted = f"{path}{key}"
        if key not in base:
            raise TomlConfigError(f"Unknown configuration key '{dotted}'.")
        current = base[key]
        expects_table = isinstance(current, MutableMapping)
        if expects_table != isinstance(value, Mapping):
            found = "a table" if not expects_table else type(value).__name__
            wanted = "table" if expects_table else "a value"
            raise TomlConfigError(
                f"Expected {wanted} for '{dotted}', found {found}."
            )
        if expects_table:
            merge_defaults(current, value, path=f"{dotted}.")
        else:
            base[key] = value


def write_toml_template(
    path: Path,
    *,
    template: str,
    overwrite: bool = False,
) -> Path:
    """Write ``template`` to ``path``; an existing file needs ``overwrite``."""

    if path.exists() and not overwrite:
        raise TomlConfigError(f"Config already exists: {path}")
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(template, encoding="utf-8")
    return path
