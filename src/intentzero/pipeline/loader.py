"""Catalog file loading — locate and parse questions_<domain>_<lang>.json."""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import ValidationError

from intentzero.interview.catalog import CatalogPayload
from intentzero.pipeline.errors import CatalogNotFoundError, CatalogParseError

GENERIC_DOMAIN = "generic"


def catalog_file_name(domain: str, language: str) -> str:
    """Return the catalog file name for a domain and language."""
    return f"questions_{domain}_{language}.json"


def resolve_catalog_path(agent_dir: Path, domain: str, language: str) -> Path:
    """Pick the domain catalog, falling back to the generic one.

    Raises:
        CatalogNotFoundError: If neither file exists.
    """
    candidate = agent_dir / catalog_file_name(domain, language)
    if candidate.exists():
        return candidate
    fallback = agent_dir / catalog_file_name(GENERIC_DOMAIN, language)
    if fallback.exists():
        return fallback
    raise CatalogNotFoundError(
        f"Question catalog not found for domain '{domain}' ({language}) in {agent_dir}"
    )


def read_catalog(path: Path) -> CatalogPayload:
    """Read and validate a catalog file.

    Raises:
        CatalogNotFoundError: If the file does not exist.
        CatalogParseError: If the file is unreadable, not valid JSON, or doesn't match the schema.
    """
    if not path.exists():
        raise CatalogNotFoundError(f"Question catalog not found: {path}")

    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise CatalogParseError(f"Cannot read catalog {path.name}: {e}") from e

    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise CatalogParseError(f"Invalid JSON in catalog {path.name}: {e}") from e

    try:
        return CatalogPayload.model_validate(data)
    except ValidationError as e:
        raise CatalogParseError(f"Catalog {path.name} doesn't match the schema: {e}") from e


def load_catalog(agent_dir: Path, domain: str, language: str) -> CatalogPayload:
    """Resolve and read the catalog for a domain."""
    return read_catalog(resolve_catalog_path(agent_dir, domain, language))
