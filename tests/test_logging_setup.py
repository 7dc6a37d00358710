# tests/test_logging_setup.py

from __future__ import annotations

import logging

import pytest

from delegation_hub.logging_setup import _ConsoleNoiseFilter


def _record(name: str, level: int) -> logging.LogRecord:
    return logging.LogRecord(name, level, __file__, 1, "msg", None, None)


@pytest.mark.parametrize(
    ("name", "level", "shown"),
    [
        ("delegation_hub.core.controller", logging.DEBUG, True),
        ("httpx", logging.INFO, False),
        ("httpx", logging.WARNING, True),
        ("httpcore.connection", logging.DEBUG, False),
        ("py.warnings", logging.WARNING, False),
        ("somelib", logging.WARNING, False),
        ("somelib", logging.ERROR, True),
        ("delegation_hubx", logging.INFO, False),
    ],
)
def test_console_filter(name: str, level: int, shown: bool) -> None:
    assert _ConsoleNoiseFilter().filter(_record(name, level)) is shown
