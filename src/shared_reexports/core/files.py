"""File writing helpers for generated re-export artifacts."""

from __future__ import annotations

import sys
from pathlib import Path
from typing import Optional

__all__ = [
    "prepare_shared_package",
    "to_platform_eol",
    "write_text",
    "write_text_if_missing",
]

WINDOWS_PLATFORM = "win32"


def prepare_shared_package(shared_dir: Path, name: str) -> Path:
    """Return the path stem for ``name`` inside ``shared_dir``.

    Scoped names such as ``@scope/pkg`` map onto sub-folders, so the parent
    directory of the returned stem is created as needed.
    """

    base = shared_dir / name
    base.parent.mkdir(parents=True, exist_ok=True)
    return base


def to_platform_eol(content: str, platform: Optional[str] = None) -> str:
    """Translate ``\\n`` line endings to the convention of ``platform``."""

    target = platform if platform is not None else sys.platform
    if target == WINDOWS_PLATFORM:
        return content.replace("\n", "\r\n")
    return content


def write_text(
    path: Path, content: str, *, platform: Optional[str] = None
) -> Path:
    """Write ``content`` to ``path`` using the platform line endings."""

    # newline="" keeps Python from translating the endings a second time.
    with Path(path).open("w", encoding="utf-8", newline="") as fh:
        fh.write(to_platform_eol(content, platform))
    return path


def write_text_if_missing(
    path: Path, content: str, *, platform: Optional[str] = None
) -> bool:
    """Write ``content`` only when ``path`` does not exist yet.

    Returns ``True`` when the file was written. The existence check and the
    write are not atomic.
    """

    if Path(path).exists():
        return False
    write_text(path, content, platform=platform)
    return True
