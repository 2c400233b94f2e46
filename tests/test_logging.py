"""Tests for the Rich logging setup in app.logging."""

from __future__ import annotations

import logging

import pytest
from rich.logging import RichHandler

from app.logging import get_logger, reset_logging, setup_logging


@pytest.fixture(autouse=True)
def _clean_logging():
    root = logging.getLogger()
    level = root.level
    reset_logging()
    yield
    reset_logging()
    root.setLevel(level)


def _rich_handlers() -> list[logging.Handler]:
    return [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]


class TestSetupLogging:
    def test_attaches_one_handler(self, isolated_config) -> None:
        setup_logging()
        setup_logging()
        assert len(_rich_handlers()) == 1

    def test_explicit_level(self, isolated_config) -> None:
        setup_logging("debug")
        assert logging.getLogger().level == logging.DEBUG
        assert _rich_handlers()[0].level == logging.DEBUG

    def test_level_from_config(self, isolated_config) -> None:
        isolated_config({"log_level": "WARNING"})
        setup_logging()
        assert logging.getLogger().level == logging.WARNING

    def test_unknown_level_falls_back_to_info(self, isolated_config) -> None:
        setup_logging("chatty")
        assert logging.getLogger().level == logging.INFO

    def test_reset_removes_handler(self, isolated_config) -> None:
        setup_logging()
        reset_logging()
        assert _rich_handlers() == []


class TestGetLogger:
    def test_returns_named_logger(self, isolated_config) -> None:
        logger = get_logger("indicators.test")
        assert logger.name == "indicators.test"
        assert len(_rich_handlers()) == 1
