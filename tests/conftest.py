from __future__ import annotations

import logging
import sys
from pathlib import Path
from typing import Iterator

import pytest

TESTS_DIR = Path(__file__).resolve().parent
if str(TESTS_DIR) not in sys.path:
    sys.path.insert(0, str(TESTS_DIR))

from fixtures import PackageBuilder  # noqa: E402

ROOT = TESTS_DIR.parent
SRC = str(ROOT / "src")
if SRC not in sys.path:
    sys.path.insert(0, SRC)

GENERATOR_LOGGER = "shared_reexports.generator"


@pytest.fixture(autouse=True)
def _isolate_environment(
    tmp_path: Path, monkeypatch: pytest.MonkeyPatch
) -> Iterator[None]:
    """Keep logs and env overrides from leaking between tests."""

    for key in (
        "REEXPORTS_PACKAGE_ROOT",
        "REEXPORTS_CONFIG",
        "REEXPORTS_MANIFEST",
        "REEXPORTS_FIELD",
        "REEXPORTS_SHARED_DIR",
        "REEXPORTS_MARKDOWN",
        "REEXPORTS_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)
    monkeypatch.setenv("REEXPORTS_LOG_DIR", str(tmp_path / "logs"))
    yield
    logger = logging.getLogger(GENERATOR_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


@pytest.fixture
def package(tmp_path: Path) -> PackageBuilder:
    """A package root bound to pytest's per-test tmp directory."""

    root = tmp_path / "pkg"
    root.mkdir()
    return PackageBuilder(root)
