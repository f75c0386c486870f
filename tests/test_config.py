"""Tests for application configuration and logging setup."""

import logging
import sys
from pathlib import Path

import pytest
from pydantic import ValidationError
from rich.logging import RichHandler

from intentzero.config import AppConfig
from intentzero.log import LOGGER_NAME, configure_logging


class TestAppConfig:
    """Test AppConfig defaults and environment loading."""

    def test_defaults(self) -> None:
        config = AppConfig()
        assert config.support_root == Path.home() / ".intentzero"
        assert config.service_dir_name == "IntentZeroDebugService"
        assert config.resource_archive is None
        assert config.language == "ko"
        assert config.python_executable == sys.executable
        assert config.generator_script == "scripts/generate_specs.py"
        assert config.log_level == "WARNING"

    def test_service_root(self, tmp_path: Path) -> None:
        config = AppConfig(support_root=tmp_path, service_dir_name="Svc")
        assert config.service_root == tmp_path / "Svc"

    def test_from_environment_defaults(self) -> None:
        assert AppConfig.from_environment() == AppConfig()

    def test_from_environment(self, monkeypatch: pytest.MonkeyPatch, tmp_path: Path) -> None:
        monkeypatch.setenv("INTENTZERO_HOME", str(tmp_path))
        monkeypatch.setenv("INTENTZERO_RESOURCE_ZIP", str(tmp_path / "res.zip"))
        monkeypatch.setenv("INTENTZERO_LANG", "en")
        monkeypatch.setenv("INTENTZERO_PYTHON", "/usr/bin/python3")
        monkeypatch.setenv("INTENTZERO_LOG_LEVEL", "debug")

        config = AppConfig.from_environment()
        assert config.support_root == tmp_path
        assert config.resource_archive == tmp_path / "res.zip"
        assert config.language == "en"
        assert config.python_executable == "/usr/bin/python3"
        assert config.log_level == "DEBUG"

    def test_unknown_log_level_rejected(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("INTENTZERO_LOG_LEVEL", "verbose")

        with pytest.raises(ValidationError, match="log_level"):
            AppConfig.from_environment()


class TestConfigureLogging:
    """Test the rich logging setup."""

    def test_handler_added_once(self) -> None:
        logger = configure_logging("INFO")
        configure_logging("DEBUG")

        handlers = [h for h in logger.handlers if isinstance(h, RichHandler)]
        assert logger.name == LOGGER_NAME
        assert len(handlers) == 1
        assert logger.level == logging.DEBUG

        configure_logging("WARNING")

    def test_module_loggers_nest(self) -> None:
        configure_logging("WARNING")
        child = logging.getLogger("intentzero.pipeline.pipeline")
        assert child.getEffectiveLevel() == logging.WARNING
