"""Read re-export declarations from a package manifest."""

from __future__ import annotations

import json
from dataclasses import dataclass
from enum import Enum
from pathlib import Path
from typing import Any, Mapping, Optional, Sequence

DEFAULT_FIELD = "theiaReExports"
STAR_KEY = "export *"
EQUALS_KEY = "export ="

STAR_SEPARATOR = ":"
EQUALS_SEPARATOR = " as "


class ManifestError(RuntimeError):
    """Raised when the manifest cannot be read or has the wrong shape."""


class ExportKind(Enum):
    """Re-export flavours supported in the manifest."""

    STAR = "export *"
    EQUALS = "export ="


@dataclass(frozen=True)
class ReExportDeclaration:
    """A package to re-export plus its alias (star) or namespace (equals)."""

    kind: ExportKind
    package: str
    name: str

    @property
    def target(self) -> str:
        """Path stem of the generated stub pair, relative to the shared dir."""

        if self.kind is ExportKind.STAR:
            return self.name
        return self.package


@dataclass(frozen=True)
class ReExportManifest:
    """Parsed re-export declarations in manifest order."""

    package_name: Optional[str]
    star: tuple[ReExportDeclaration, ...]
    equals: tuple[ReExportDeclaration, ...]
    source: Optional[Path] = None

    @property
    def declarations(self) -> tuple[ReExportDeclaration, ...]:
        return self.star + self.equals

    def packages(self) -> list[str]:
        """Every re-exported package identifier, sorted by code point."""

        return sorted(item.package for item in self.declarations)


def parse_star_entry(entry: str) -> ReExportDeclaration:
    """Parse ``"package"`` or ``"package:alias"``."""

    package, name = _split_entry(entry, STAR_SEPARATOR)
    return ReExportDeclaration(kind=ExportKind.STAR, package=package, name=name)


def parse_equals_entry(entry: str) -> ReExportDeclaration:
    """Parse ``"package"`` or ``"package as Namespace"``."""

    package, name = _split_entry(entry, EQUALS_SEPARATOR)
    return ReExportDeclaration(
        kind=ExportKind.EQUALS, package=package, name=name
    )


def parse_reexports(
    table: Mapping[str, Any],
    *,
    package_name: Optional[str] = None,
    source: Optional[Path] = None,
) -> ReExportManifest:
    """Build a :class:`ReExportManifest` from the re-export field value."""

    if not isinstance(table, Mapping):
        raise ManifestError(
            "Re-export field must be an object, found {0}.".format(
                type(table).__name__
            )
        )
    star = tuple(
        parse_star_entry(entry) for entry in _entries(table, STAR_KEY)
    )
    equals = tuple(
        parse_equals_entry(entry) for entry in _entries(table, EQUALS_KEY)
    )
    return ReExportManifest(
        package_name=package_name,
        star=star,
        equals=equals,
        source=source,
    )


def load_manifest(
    path: Path, *, field: str = DEFAULT_FIELD
) -> ReExportManifest:
    """Load ``path`` as JSON and parse the declarations under ``field``."""

    try:
        with Path(path).open("r", encoding="utf-8") as fh:
            raw = json.load(fh)
    except FileNotFoundError as exc:
        raise ManifestError(f"Manifest not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(f"Failed to parse manifest JSON: {exc}") from exc
    except UnicodeDecodeError as exc:
        raise ManifestError(f"Manifest is not valid UTF-8: {path}") from exc
    except OSError as exc:
        raise ManifestError(f"Unable to read manifest {path}: {exc}") from exc

    if not isinstance(raw, dict):
        raise ManifestError(f"Manifest must be a JSON object: {path}")
    if field not in raw:
        raise ManifestError(f"Manifest {path} has no '{field}' field.")

    name = raw.get("name")
    return parse_reexports(
        raw[field],
        package_name=name if isinstance(name, str) and name else None,
        source=Path(path),
    )


def _split_entry(entry: str, separator: str) -> tuple[str, str]:
    # Pieces past the second are dropped; a bare entry names itself.
    pieces = entry.split(separator)
    package = pieces[0]
    name = pieces[1] if len(pieces) > 1 else entry
    return package, name


def _entries(table: Mapping[str, Any], key: str) -> Sequence[str]:
    value = table.get(key)
    if value is None:
        return ()
    if not isinstance(value, list):
        raise ManifestError(
            f"'{key}' must be a list, found {type(value).__name__}."
        )
    for item in value:
        if not isinstance(item, str):
            raise ManifestError(
                f"'{key}' entries must be strings, found {item!r}."
            )
    return value
