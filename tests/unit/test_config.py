"""
Unit tests for runtime configuration, logging setup and the error hierarchy.
"""

import logging

import pytest

from coursekit import config
from coursekit.errors import (
    CourseError,
    DatasetUnavailableError,
    InputTypeError,
    InsufficientDataError,
    LengthMismatchError,
)
from coursekit.logging_config import setup_logging


class TestDataDir:
    """Test data directory resolution."""

    def test_env_var_wins(self, data_dir):
        assert config.get_data_dir() == data_dir.resolve()

    def test_result_is_cached_until_reset(self, data_dir, monkeypatch, tmp_path_factory):
        first = config.get_data_dir()
        other = tmp_path_factory.mktemp("other")
        monkeypatch.setenv("COURSEKIT_DATA_DIR", str(other))
        assert config.get_data_dir() == first
        config._reset_data_dir()
        assert config.get_data_dir() == other.resolve()

    def test_bundled_files_ignore_data_dir(self, data_dir):
        path = config.bundled_data_path("mtcars.csv")
        assert path.exists()
        assert data_dir not in path.parents


class TestSwitches:
    """Test offline flag and log level parsing."""

    @pytest.mark.parametrize("value", ["1", "true", "YES", " on "])
    def test_offline_truthy(self, monkeypatch, value):
        monkeypatch.setenv("COURSEKIT_OFFLINE", value)
        assert config.is_offline()

    @pytest.mark.parametrize("value", ["0", "false", "", "off"])
    def test_offline_falsy(self, monkeypatch, value):
        monkeypatch.setenv("COURSEKIT_OFFLINE", value)
        assert not config.is_offline()

    def test_log_level_from_env(self, monkeypatch):
        monkeypatch.setenv("COURSEKIT_LOG_LEVEL", "debug")
        assert config.get_log_level() == logging.DEBUG

    def test_unknown_log_level_falls_back_to_info(self, monkeypatch):
        monkeypatch.setenv("COURSEKIT_LOG_LEVEL", "chatty")
        assert config.get_log_level() == logging.INFO

    def test_missing_key_returns_default(self):
        assert config.get("no.such.key", 5) == 5


class TestSetupLogging:
    """Test the 'coursekit' logger setup."""

    def test_single_console_handler(self, clean_logger):
        logger = setup_logging(level=logging.DEBUG)
        assert logger.name == "coursekit"
        assert logger.level == logging.DEBUG
        assert len(logger.handlers) == 1

    def test_rerun_does_not_duplicate_handlers(self, clean_logger):
        setup_logging(level=logging.INFO)
        logger = setup_logging(level=logging.INFO)
        assert len(logger.handlers) == 1

    def test_log_file(self, clean_logger, tmp_path):
        log_file = tmp_path / "course.log"
        logger = setup_logging(level=logging.INFO, log_file=str(log_file))
        assert len(logger.handlers) == 2
        logging.getLogger("coursekit.test").info("hello from the test")
        for handler in logger.handlers:
            handler.flush()
        assert "hello from the test" in log_file.read_text(encoding="utf-8")


class TestErrors:
    """Test the exception hierarchy."""

    def test_builtin_bases(self):
        assert issubclass(InputTypeError, TypeError)
        assert issubclass(LengthMismatchError, ValueError)
        assert issubclass(InsufficientDataError, ValueError)
        for cls in (InputTypeError, LengthMismatchError, InsufficientDataError, DatasetUnavailableError):
            assert issubclass(cls, CourseError)

    def test_dataset_message(self):
        err = DatasetUnavailableError("diamonds", "offline mode is on")
        assert str(err) == "Dataset 'diamonds' is unavailable: offline mode is on"
        assert err.name == "diamonds"

    def test_dataset_message_without_hint(self):
        assert str(DatasetUnavailableError("temps")) == "Dataset 'temps' is unavailable"
