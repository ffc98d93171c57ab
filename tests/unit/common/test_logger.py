"""Tests for logging setup."""

import logging
import uuid

import pytest

from memberfiles.common.config import LoggingConfig
from memberfiles.common.logger import configure_from_settings, get_logger, setup_logger
from memberfiles.core.config import Settings


@pytest.fixture
def logger_name():
    name = f"memberfiles-test-{uuid.uuid4().hex[:8]}"
    yield name
    logger = logging.getLogger(name)
    for handler in list(logger.handlers):
        handler.close()
        logger.removeHandler(handler)


class TestSetupLogger:
    """Tests for setup_logger."""

    def test_file_and_console_handlers(self, tmp_path, logger_name):
        logger = setup_logger(logger_name, log_dir=str(tmp_path), level="debug")

        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 2
        logger.info("hello")
        for handler in logger.handlers:
            handler.flush()
        assert "hello" in (tmp_path / f"{logger_name}.log").read_text()

    def test_console_only(self, tmp_path, logger_name):
        logger = setup_logger(logger_name, log_dir=str(tmp_path), file_logging=False)
        assert len(logger.handlers) == 1
        assert not (tmp_path / f"{logger_name}.log").exists()

    def test_no_duplicate_handlers(self, tmp_path, logger_name):
        setup_logger(logger_name, log_dir=str(tmp_path))
        logger = setup_logger(logger_name, log_dir=str(tmp_path), level="WARNING")
        assert len(logger.handlers) == 2
        assert logger.level == logging.WARNING

    def test_invalid_level(self, logger_name):
        with pytest.raises(ValueError, match="Invalid log level"):
            setup_logger(logger_name, level="LOUD", file_logging=False)

    def test_get_logger(self, logger_name):
        assert get_logger(logger_name) is logging.getLogger(logger_name)


class TestConfigureFromSettings:
    """Tests for building the logger from configuration objects."""

    def test_from_settings(self, tmp_path, logger_name):
        settings = Settings(log_level="ERROR", log_dir=str(tmp_path), file_logging=True)
        logger = configure_from_settings(settings, name=logger_name)
        assert logger.level == logging.ERROR
        assert (tmp_path / f"{logger_name}.log").exists()

    def test_from_logging_config(self, tmp_path, logger_name):
        config = LoggingConfig(level="DEBUG", log_dir=str(tmp_path), file_logging=False)
        logger = configure_from_settings(config, name=logger_name)
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1
