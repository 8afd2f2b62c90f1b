"""
Tests for settings, logging and error messages.

Requires Python 3.11+.
"""

import logging
from pathlib import Path

import pytest
import structlog
from pydantic import ValidationError

from utils.config import LoggingSettings, RunnerSettings, Settings, get_settings
from utils.errors import CueError, PathNotFoundError, SpawnError, WatchSetupError
from utils.logger import LoggerMixin, configure_logging


class TestSettings:
    """Test cases for pydantic settings."""

    def test_defaults(self, monkeypatch):
        """Test the documented defaults."""
        monkeypatch.delenv("CUE_DEBOUNCE_MS", raising=False)
        settings = RunnerSettings()

        assert settings.debounce_ms == 150
        assert settings.quiet is False
        assert settings.no_clear is False

    def test_environment_prefix(self, monkeypatch):
        """Test that CUE_ variables are read."""
        monkeypatch.setenv("CUE_DEBOUNCE_MS", "0")
        monkeypatch.setenv("CUE_QUIET", "true")

        settings = RunnerSettings()

        assert settings.debounce_ms == 0
        assert settings.quiet is True

    def test_negative_debounce_rejected(self, monkeypatch):
        """Test that the interval cannot be negative."""
        monkeypatch.setenv("CUE_DEBOUNCE_MS", "-1")

        with pytest.raises(ValidationError):
            RunnerSettings()

    def test_log_format_validated(self, monkeypatch):
        """Test that only known renderers are accepted."""
        monkeypatch.setenv("LOG_FORMAT", "xml")

        with pytest.raises(ValidationError):
            LoggingSettings()

    def test_get_settings_cached(self):
        """Test that settings are a singleton."""
        assert get_settings() is get_settings()
        assert isinstance(get_settings(), Settings)


class TestLogging:
    """Test cases for structlog configuration."""

    @pytest.fixture(autouse=True)
    def reset(self, monkeypatch):
        get_settings.cache_clear()
        yield
        get_settings.cache_clear()
        structlog.reset_defaults()

    @pytest.mark.parametrize("fmt", ["json", "console"])
    def test_configure(self, monkeypatch, capsys, fmt):
        """Test that both renderers write warnings to stderr."""
        monkeypatch.setenv("LOG_FORMAT", fmt)
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        get_settings.cache_clear()

        configure_logging()

        class Thing(LoggerMixin):
            pass

        Thing().log.warning("something_odd", path="src")

        captured = capsys.readouterr()
        assert "something_odd" in captured.err
        assert "something_odd" not in captured.out

    def test_filters_below_level(self, monkeypatch, capsys):
        """Test that debug output is dropped at the default level."""
        monkeypatch.setenv("LOG_LEVEL", "WARNING")
        get_settings.cache_clear()
        configure_logging()

        class Thing(LoggerMixin):
            pass

        Thing().log.debug("noise")

        assert "noise" not in capsys.readouterr().err

    def test_leaves_stdlib_root_alone(self):
        """Test that only the watchdog logger is touched."""
        root_handlers = list(logging.getLogger().handlers)
        configure_logging()

        assert logging.getLogger().handlers == root_handlers
        assert logging.getLogger("watchdog").level == logging.WARNING


class TestErrors:
    """Test cases for user-facing messages."""

    def test_hierarchy(self):
        """Test that every error is a CueError."""
        for error in (
            PathNotFoundError("x"),
            WatchSetupError("x", "No space left on device"),
            SpawnError("x", "Permission denied"),
        ):
            assert isinstance(error, CueError)

    def test_messages(self):
        """Test the single-line diagnostics."""
        assert str(PathNotFoundError("src")) == "'src' doesn't exist"
        assert PathNotFoundError("src").path == Path("src")
        assert "No space left" in str(WatchSetupError("src", "No space left on device"))
