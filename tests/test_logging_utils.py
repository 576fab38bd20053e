"""
Tests for logging setup helpers.
"""

import logging
import pytest
from rich.logging import RichHandler

from genomesim.utils.logging_utils import (
    PACKAGE_LOGGER,
    add_file_handler,
    resolve_level,
    set_package_level,
    setup_rich_logging,
)


@pytest.fixture
def restore_logging():
    """Put root handlers and genomesim logger levels back after the test."""
    root_logger = logging.getLogger()
    handlers = list(root_logger.handlers)
    handler_levels = [h.level for h in handlers]
    root_level = root_logger.level
    levels = {
        name: logging.getLogger(name).level
        for name in list(logging.Logger.manager.loggerDict)
        if name.startswith(PACKAGE_LOGGER)
    }
    yield
    for handler in list(root_logger.handlers):
        if handler not in handlers:
            root_logger.removeHandler(handler)
            handler.close()
    for handler, level in zip(handlers, handler_levels):
        handler.setLevel(level)
    root_logger.setLevel(root_level)
    for name, level in levels.items():
        logging.getLogger(name).setLevel(level)


class TestLevels:

    @pytest.mark.unit
    @pytest.mark.parametrize("name,expected", [
        ('debug', logging.DEBUG),
        ('WARNING', logging.WARNING),
        ('Error', logging.ERROR),
        ('chatty', logging.INFO),
    ])
    def test_resolve_level(self, name, expected):
        assert resolve_level(name) == expected

    @pytest.mark.unit
    def test_package_level_reaches_child_loggers(self, restore_logging):
        child = logging.getLogger("genomesim.core.regions")
        other = logging.getLogger("someone.else")
        other.setLevel(logging.DEBUG)

        set_package_level("ERROR")
        assert child.level == logging.ERROR
        assert logging.getLogger(PACKAGE_LOGGER).level == logging.ERROR
        assert other.level == logging.DEBUG


class TestHandlers:

    @pytest.mark.unit
    def test_file_handler_added_once_per_path(self, temp_dir, restore_logging):
        log_path = temp_dir / "run.log"
        first = add_file_handler(str(log_path))
        second = add_file_handler(str(log_path), level="DEBUG")

        assert first is second
        assert first.level == logging.DEBUG
        file_handlers = [
            h for h in logging.getLogger().handlers
            if isinstance(h, logging.FileHandler) and h.baseFilename == str(log_path.resolve())
        ]
        assert len(file_handlers) == 1

    @pytest.mark.unit
    def test_file_handler_writes_records(self, temp_dir, restore_logging):
        log_path = temp_dir / "run.log"
        setup_rich_logging("INFO", log_file=str(log_path))
        logging.getLogger("genomesim.data.simulator").info("generated genome 3")

        for handler in logging.getLogger().handlers:
            handler.flush()
        text = log_path.read_text()
        assert "generated genome 3" in text
        assert "[INFO] genomesim.data.simulator" in text

    @pytest.mark.unit
    def test_repeated_setup_keeps_single_rich_handler(self, restore_logging):
        setup_rich_logging("INFO")
        setup_rich_logging("DEBUG")

        rich_handlers = [h for h in logging.getLogger().handlers if isinstance(h, RichHandler)]
        assert len(rich_handlers) == 1
        assert rich_handlers[0].level == logging.DEBUG
        assert logging.getLogger().level == logging.DEBUG
