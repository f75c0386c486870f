"""Tests for ResourceBootstrapper."""

from __future__ import annotations

import logging
import zipfile
from pathlib import Path

import pytest

from intentzero.pipeline.errors import ResourceMissingError, UnpackFailedError
from intentzero.pipeline.resources import AGENT_DIR_NAME, ResourceBootstrapper


def _zip(path: Path, members: dict[str, str]) -> Path:
    with zipfile.ZipFile(path, "w") as zf:
        for name, content in members.items():
            zf.writestr(name, content)
    return path


class TestBundledCopy:
    """Test copying the packaged resources."""

    def test_copies_bundled_tree(self, tmp_path: Path) -> None:
        bootstrapper = ResourceBootstrapper(tmp_path / "support", "Service")
        root = bootstrapper.prepare()

        assert root == tmp_path / "support" / "Service"
        assert (root / AGENT_DIR_NAME / "questions_generic_ko.json").exists()
        assert (root / AGENT_DIR_NAME / "domain_catalog.json").exists()
        assert (root / "scripts" / "generate_specs.py").exists()
        assert bootstrapper.agent_dir == root / AGENT_DIR_NAME

    def test_existing_service_root_untouched(self, tmp_path: Path) -> None:
        service = tmp_path / "support" / "Service"
        service.mkdir(parents=True)
        (service / "marker.txt").write_text("keep", encoding="utf-8")

        ResourceBootstrapper(tmp_path / "support", "Service").prepare()

        assert (service / "marker.txt").read_text(encoding="utf-8") == "keep"
        assert not (service / AGENT_DIR_NAME).exists()

    def test_missing_bundle(self, tmp_path: Path) -> None:
        bootstrapper = ResourceBootstrapper(
            tmp_path / "support", "Service", bundled_dir=tmp_path / "empty"
        )
        with pytest.raises(ResourceMissingError):
            bootstrapper.prepare()


class TestArchiveExtraction:
    """Test unpacking a resource zip."""

    def test_extracts_service_dir(self, tmp_path: Path) -> None:
        archive = _zip(
            tmp_path / "res.zip",
            {f"Service/{AGENT_DIR_NAME}/questions_generic_ko.json": '{"groups": []}'},
        )
        bootstrapper = ResourceBootstrapper(tmp_path / "support", "Service", archive=archive)
        root = bootstrapper.prepare()

        assert root == tmp_path / "support" / "Service"
        assert (root / AGENT_DIR_NAME / "questions_generic_ko.json").exists()

    def test_flat_archive_uses_support_root(self, tmp_path: Path) -> None:
        archive = _zip(
            tmp_path / "res.zip",
            {f"{AGENT_DIR_NAME}/domain_catalog.json": "{}"},
        )
        bootstrapper = ResourceBootstrapper(tmp_path / "support", "Service", archive=archive)
        root = bootstrapper.prepare()

        assert root == tmp_path / "support"
        assert bootstrapper.agent_dir == tmp_path / "support" / AGENT_DIR_NAME

    def test_archive_without_catalog(self, tmp_path: Path) -> None:
        archive = _zip(tmp_path / "res.zip", {"README.txt": "nothing here"})
        bootstrapper = ResourceBootstrapper(tmp_path / "support", "Service", archive=archive)

        with pytest.raises(UnpackFailedError, match="neither"):
            bootstrapper.prepare()

    def test_missing_archive(self, tmp_path: Path) -> None:
        bootstrapper = ResourceBootstrapper(
            tmp_path / "support", "Service", archive=tmp_path / "absent.zip"
        )
        with pytest.raises(ResourceMissingError):
            bootstrapper.prepare()

    def test_corrupt_archive(self, tmp_path: Path) -> None:
        archive = tmp_path / "res.zip"
        archive.write_bytes(b"not a zip")
        bootstrapper = ResourceBootstrapper(tmp_path / "support", "Service", archive=archive)

        with pytest.raises(UnpackFailedError, match="Failed to unpack"):
            bootstrapper.prepare()


class TestPrepareOrWarn:
    """Test the non-raising entry point."""

    def test_logs_and_returns_service_root(
        self, tmp_path: Path, caplog: pytest.LogCaptureFixture
    ) -> None:
        bootstrapper = ResourceBootstrapper(
            tmp_path / "support", "Service", archive=tmp_path / "absent.zip"
        )
        with caplog.at_level(logging.WARNING, logger="intentzero"):
            root = bootstrapper.prepare_or_warn()

        assert root == tmp_path / "support" / "Service"
        assert "Resource preparation failed" in caplog.text
