"""Unit tests for per-category logging configuration."""

import logging

import pytest

from inventory.config import Settings
from inventory.infrastructure.logging.log_config import setup_logging

_LOGGERS = ("", "sqlalchemy.engine", "aiosqlite", "httpx", "inventory.sync")


@pytest.fixture(autouse=True)
def _restore_levels():
    saved = {name: logging.getLogger(name).level for name in _LOGGERS}
    yield
    for name, level in saved.items():
        logging.getLogger(name).setLevel(level)


def test_category_levels_follow_settings():
    setup_logging(
        Settings(log_level="WARNING", log_level_sql="ERROR", log_level_sync="DEBUG")
    )

    assert logging.getLogger().level == logging.WARNING
    assert logging.getLogger("sqlalchemy.engine").level == logging.ERROR
    assert logging.getLogger("aiosqlite").level == logging.ERROR
    assert logging.getLogger("inventory.sync").level == logging.DEBUG
    # Client and server sync loggers inherit the category level
    assert logging.getLogger("inventory.sync.client").getEffectiveLevel() == logging.DEBUG


def test_unknown_level_name_falls_back_to_info():
    setup_logging(Settings(log_level_http="chatty"))

    assert logging.getLogger("httpx").level == logging.INFO
