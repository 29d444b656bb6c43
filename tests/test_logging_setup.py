# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from task_platform.logging_setup import setup_logging


@pytest.fixture()
def restore_root_logger():
    root = logging.getLogger()
    handlers, level = list(root.handlers), root.level
    yield root
    for h in list(root.handlers):
        root.removeHandler(h)
    for h in handlers:
        root.addHandler(h)
    root.setLevel(level)


def test_setup_logging_installs_one_filtered_handler(restore_root_logger: logging.Logger) -> None:
    setup_logging("debug")
    setup_logging("DEBUG")

    root = restore_root_logger
    assert len(root.handlers) == 1
    assert root.level == logging.DEBUG

    handler = root.handlers[0]

    def _record(name: str, level: int) -> logging.LogRecord:
        return logging.LogRecord(name, level, __file__, 1, "msg", None, None)

    assert handler.filter(_record("task_platform.auth.service", logging.DEBUG))
    assert not handler.filter(_record("passlib.registry", logging.INFO))
    assert handler.filter(_record("passlib.registry", logging.WARNING))


def test_unknown_level_falls_back_to_info(restore_root_logger: logging.Logger) -> None:
    setup_logging("chatty")
    assert restore_root_logger.level == logging.INFO
