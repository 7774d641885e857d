"""Tests for the package logging setup."""

import logging

import pytest

from deepfield.logging_config import setup_logging


@pytest.fixture
def package_logger():
    logger = logging.getLogger("deepfield")
    saved_handlers, saved_level = list(logger.handlers), logger.level
    yield logger
    for handler in logger.handlers:
        handler.close()
    logger.handlers = saved_handlers
    logger.setLevel(saved_level)


def test_console_handler(package_logger):
    setup_logging(logging.DEBUG)
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1


def test_repeat_setup_does_not_duplicate(package_logger):
    setup_logging()
    setup_logging()
    assert len(package_logger.handlers) == 1


def test_file_handler(package_logger, tmp_path):
    log_file = tmp_path / "deepfield.log"
    setup_logging(logging.INFO, str(log_file))
    logging.getLogger("deepfield.models.universe").info("hello from the web")
    for handler in package_logger.handlers:
        handler.flush()
    assert "hello from the web" in log_file.read_text()


def test_reconfigure_closes_previous_file_handler(package_logger, tmp_path):
    setup_logging(logging.INFO, tmp_path / "first.log")
    (old_file_handler,) = [h for h in package_logger.handlers if isinstance(h, logging.FileHandler)]

    setup_logging(logging.INFO)
    assert old_file_handler not in package_logger.handlers
    assert old_file_handler.stream is None
    assert len(package_logger.handlers) == 1


def test_returns_package_logger(package_logger):
    assert setup_logging() is package_logger
