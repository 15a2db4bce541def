from __future__ import annotations

import json
import logging
import tempfile
from pathlib import Path

from shared_reexports.core import logging as core_logging


def _close(logger: logging.Logger) -> None:
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


def test_configure_logger_writes_json(tmp_path):
    logger, log_path = core_logging.configure_logger(
        "shared_reexports.test",
        log_dir=tmp_path / "logs",
        level="INFO",
        filename="test.log",
    )

    logger.info("wrote stub", extra={"path": Path("shared/lodash.js")})
    logger.debug("hidden at INFO")
    try:
        raise PermissionError("denied")
    except PermissionError:
        logger.exception(
            "generation failed",
            extra={"targets": [Path("a"), ("b", 1)], "meta": {"k": object}},
        )
    for handler in logger.handlers:
        handler.flush()

    lines = log_path.read_text(encoding="utf-8").strip().splitlines()
    assert len(lines) == 2

    first = json.loads(lines[0])
    assert first["message"] == "wrote stub"
    assert first["level"] == "INFO"
    assert first["extra"] == {"path": "shared/lodash.js"}

    last = json.loads(lines[-1])
    assert "PermissionError" in last["exception"]
    assert last["extra"]["targets"] == ["a", ["b", 1]]
    assert last["extra"]["meta"]["k"] == repr(object)

    _close(logger)


def test_configure_logger_verbose_adds_single_console_handler(tmp_path):
    name = "shared_reexports.test_verbose"

    def console_handlers(logger):
        return [
            handler
            for handler in logger.handlers
            if getattr(handler, core_logging._CONSOLE_MARKER, False)
        ]

    logger, _ = core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="v.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=True, filename="v.log"
    )
    assert len(console_handlers(logger)) == 1

    core_logging.configure_logger(
        name, log_dir=tmp_path, verbose=False, filename="v.log"
    )
    assert not console_handlers(logger)

    _close(logger)


def test_configure_logger_reuses_file_handler(tmp_path):
    name = "shared_reexports.test_reuse"
    logger, first = core_logging.configure_logger(
        name, log_dir=tmp_path, filename="reuse.log"
    )
    _, second = core_logging.configure_logger(
        name, log_dir=tmp_path, filename="reuse.log"
    )

    file_handlers = [
        handler
        for handler in logger.handlers
        if getattr(handler, core_logging._FILE_MARKER, False)
    ]
    assert len(file_handlers) == 1
    assert first == second

    _close(logger)


def test_configure_logger_switches_file_when_dir_changes(tmp_path):
    name = "shared_reexports.test_switch"
    logger, first = core_logging.configure_logger(
        name, log_dir=tmp_path / "one", filename="switch.log"
    )
    _, second = core_logging.configure_logger(
        name, log_dir=tmp_path / "two", filename="switch.log"
    )

    assert first.parent.name == "one"
    assert second.parent.name == "two"
    file_handlers = [
        handler
        for handler in logger.handlers
        if getattr(handler, core_logging._FILE_MARKER, False)
    ]
    assert len(file_handlers) == 1

    _close(logger)


def test_configure_logger_falls_back_on_permission_error(
    tmp_path, monkeypatch
):
    calls = {"count": 0}
    fallback_dir = tmp_path / "fallback"
    original_handler = core_logging.RotatingFileHandler

    def fake_handler(path, *args, **kwargs):  # noqa: ANN001
        calls["count"] += 1
        if calls["count"] == 1:
            raise PermissionError("denied")
        return original_handler(path, *args, **kwargs)

    monkeypatch.setattr(core_logging, "RotatingFileHandler", fake_handler)
    monkeypatch.setattr(core_logging, "_fallback_log_dir", lambda: fallback_dir)

    logger, log_path = core_logging.configure_logger(
        "shared_reexports.test_fallback",
        log_dir=tmp_path / "primary",
        filename="fallback.log",
    )

    assert log_path.parent == fallback_dir
    assert calls["count"] == 2

    _close(logger)


def test_fallback_log_dir_uses_tempdir(tmp_path, monkeypatch):
    monkeypatch.setattr(tempfile, "gettempdir", lambda: str(tmp_path))

    assert core_logging._fallback_log_dir() == tmp_path / "shared-reexports-logs"


def test_coerce_level_defaults():
    assert core_logging._coerce_level("bogus") == logging.INFO
    assert core_logging._coerce_level("warning") == logging.WARNING
