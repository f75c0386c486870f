"""Tests for catalog file loading."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from intentzero.pipeline.errors import CatalogNotFoundError, CatalogParseError
from intentzero.pipeline.loader import (
    catalog_file_name,
    load_catalog,
    read_catalog,
    resolve_catalog_path,
)
from intentzero.pipeline.resources import AGENT_DIR_NAME, BUNDLED_RESOURCES


def _write_catalog(path: Path, keys: list[str]) -> Path:
    payload = {
        "groups": [
            {"title": "Basics", "questions": [{"key": k, "prompt": f"{k}?"} for k in keys]}
        ]
    }
    path.write_text(json.dumps(payload, ensure_ascii=False), encoding="utf-8")
    return path


class TestResolveCatalogPath:
    """Test domain → file resolution."""

    def test_file_name(self) -> None:
        assert catalog_file_name("education", "ko") == "questions_education_ko.json"

    def test_domain_file_preferred(self, tmp_path: Path) -> None:
        _write_catalog(tmp_path / "questions_generic_ko.json", ["project_name"])
        domain = _write_catalog(tmp_path / "questions_education_ko.json", ["project_name"])

        assert resolve_catalog_path(tmp_path, "education", "ko") == domain

    def test_generic_fallback(self, tmp_path: Path) -> None:
        generic = _write_catalog(tmp_path / "questions_generic_ko.json", ["project_name"])

        assert resolve_catalog_path(tmp_path, "communication", "ko") == generic

    def test_missing_everything(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogNotFoundError, match="communication"):
            resolve_catalog_path(tmp_path, "communication", "ko")

    def test_language_matters(self, tmp_path: Path) -> None:
        _write_catalog(tmp_path / "questions_generic_ko.json", ["project_name"])

        with pytest.raises(CatalogNotFoundError):
            resolve_catalog_path(tmp_path, "generic", "en")


class TestReadCatalog:
    """Test catalog parsing."""

    def test_reads_groups(self, tmp_path: Path) -> None:
        path = _write_catalog(tmp_path / "c.json", ["project_name", "core_value"])
        payload = read_catalog(path)

        assert len(payload.groups) == 1
        assert [e.key for e in payload.groups[0].questions] == ["project_name", "core_value"]

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogNotFoundError):
            read_catalog(tmp_path / "absent.json")

    def test_invalid_json(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text("{not json", encoding="utf-8")

        with pytest.raises(CatalogParseError, match="Invalid JSON"):
            read_catalog(path)

    def test_undecodable_bytes(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_bytes(b'{"groups": \xff\xfe}')

        with pytest.raises(CatalogParseError, match="Cannot read"):
            read_catalog(path)

    def test_schema_mismatch(self, tmp_path: Path) -> None:
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"groups": [{"questions": [{"key": "x"}]}]}), encoding="utf-8")

        with pytest.raises(CatalogParseError, match="schema"):
            read_catalog(path)

    def test_errors_carry_message(self, tmp_path: Path) -> None:
        with pytest.raises(CatalogNotFoundError) as exc_info:
            read_catalog(tmp_path / "absent.json")
        assert "absent.json" in exc_info.value.message


class TestBundledCatalog:
    """The generic catalog shipped with the package."""

    def test_bundled_generic_catalog_loads(self) -> None:
        payload = load_catalog(BUNDLED_RESOURCES / AGENT_DIR_NAME, "generic", "ko")
        keys = [e.key for g in payload.groups for e in g.questions]
        assert "project_name" in keys
        assert "primary_flow" in keys
