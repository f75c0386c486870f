"""ResourceBootstrapper — materialize the service directory before first use.

The service directory holds SpecAgent/ (question and domain catalogs) and the
generator script. It is extracted from a zip archive when one is configured,
otherwise the catalog bundled with this package is copied in.
"""

from __future__ import annotations

import logging
import shutil
import zipfile
from pathlib import Path

from intentzero.pipeline.errors import (
    PipelineError,
    ResourceMissingError,
    UnpackFailedError,
)

logger = logging.getLogger(__name__)

AGENT_DIR_NAME = "SpecAgent"
BUNDLED_RESOURCES = Path(__file__).resolve().parent.parent / "resources"


class ResourceBootstrapper:
    """Guarantees a readable catalog directory under the support root."""

    def __init__(
        self,
        support_root: Path,
        service_dir_name: str,
        archive: Path | None = None,
        bundled_dir: Path = BUNDLED_RESOURCES,
    ) -> None:
        self.support_root = support_root
        self.service_root = support_root / service_dir_name
        self.archive = archive
        self.bundled_dir = bundled_dir

    @property
    def agent_dir(self) -> Path:
        """Directory holding the question and domain catalogs."""
        return self.service_root / AGENT_DIR_NAME

    def prepare(self) -> Path:
        """Create the service directory if it does not exist yet.

        Returns:
            The resolved service root.

        Raises:
            ResourceMissingError: If there is nothing to materialize from.
            UnpackFailedError: If extraction fails or yields no catalog.
        """
        self.support_root.mkdir(parents=True, exist_ok=True)
        if self.service_root.exists():
            return self.service_root

        if self.archive is not None:
            self._extract_archive(self.archive)
        else:
            self._copy_bundled()
        return self.service_root

    def prepare_or_warn(self) -> Path:
        """Run prepare(), logging failures instead of raising.

        A later catalog load fails on its own if resources are truly absent.
        """
        try:
            return self.prepare()
        except (PipelineError, OSError) as e:
            logger.warning("Resource preparation failed: %s", e)
            return self.service_root

    def _extract_archive(self, archive: Path) -> None:
        if not archive.exists():
            raise ResourceMissingError(f"Resource archive not found: {archive}")
        try:
            with zipfile.ZipFile(archive) as zf:
                zf.extractall(self.support_root)
        except zipfile.BadZipFile as e:
            raise UnpackFailedError(f"Failed to unpack {archive.name}: {e}") from e

        if self.service_root.exists():
            return
        # Archive without a top-level service directory: catalogs landed
        # directly in the support root.
        if (self.support_root / AGENT_DIR_NAME).exists():
            self.service_root = self.support_root
            return
        raise UnpackFailedError(
            f"Archive {archive.name} contains neither {self.service_root.name}/ "
            f"nor {AGENT_DIR_NAME}/"
        )

    def _copy_bundled(self) -> None:
        if not (self.bundled_dir / AGENT_DIR_NAME).exists():
            raise ResourceMissingError(f"Bundled catalog not found in {self.bundled_dir}")
        logger.info("Copying bundled resources into %s", self.service_root)
        shutil.copytree(
            self.bundled_dir,
            self.service_root,
            ignore=shutil.ignore_patterns("__pycache__"),
        )
