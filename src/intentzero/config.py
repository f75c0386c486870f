"""Application configuration.

Plain BaseModel with an environment loader; the CLI loads .env first.
"""

from __future__ import annotations

import os
import sys
from pathlib import Path
from typing import Literal

from pydantic import BaseModel, Field


LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


def _default_support_root() -> Path:
    return Path.home() / ".intentzero"


class AppConfig(BaseModel):
    """Where resources live and how the generator is run."""

    support_root: Path = Field(default_factory=_default_support_root)
    service_dir_name: str = "IntentZeroDebugService"
    resource_archive: Path | None = None
    language: str = "ko"
    python_executable: str = Field(default_factory=lambda: sys.executable)
    generator_script: str = "scripts/generate_specs.py"
    log_level: LogLevel = "WARNING"

    @property
    def service_root(self) -> Path:
        """Default service directory under the support root."""
        return self.support_root / self.service_dir_name

    @classmethod
    def from_environment(cls) -> AppConfig:
        """Build config from INTENTZERO_* environment variables.

        INTENTZERO_HOME: support root directory
        INTENTZERO_RESOURCE_ZIP: resource archive to unpack on first run
        INTENTZERO_LANG: language tag for catalogs and generated specs
        INTENTZERO_PYTHON: interpreter used to run the generator script
        INTENTZERO_LOG_LEVEL: logging level name
        """
        values: dict[str, object] = {}
        if home := os.environ.get("INTENTZERO_HOME"):
            values["support_root"] = Path(home).expanduser()
        if archive := os.environ.get("INTENTZERO_RESOURCE_ZIP"):
            values["resource_archive"] = Path(archive).expanduser()
        if language := os.environ.get("INTENTZERO_LANG"):
            values["language"] = language
        if python := os.environ.get("INTENTZERO_PYTHON"):
            values["python_executable"] = python
        if level := os.environ.get("INTENTZERO_LOG_LEVEL"):
            values["log_level"] = level.upper()
        return cls.model_validate(values)
