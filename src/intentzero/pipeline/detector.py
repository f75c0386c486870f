"""Domain detection — keyword scoring of the idea against a domain catalog.

domain_catalog.json maps each domain to a keyword list. A domain scores one
point per keyword found (case-insensitive substring) in the idea. The best
positive score wins; otherwise a small built-in table is consulted, and
"generic" is the last resort.
"""

from __future__ import annotations

import json
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, ValidationError

from intentzero.pipeline.errors import DomainCatalogError
from intentzero.pipeline.loader import GENERIC_DOMAIN

FALLBACK_DOMAIN_KEYWORDS: tuple[tuple[str, tuple[str, ...]], ...] = (
    ("communication", ("번역", "통역", "대화", "언어", "translation", "translator", "interpret")),
    ("education", ("학습", "교육", "study", "lesson", "학생", "강의")),
)


class DomainCatalogEntry(BaseModel):
    """Keywords for one domain."""

    keywords: list[str] = Field(default_factory=list)


class DomainDetectionResult(BaseModel):
    """Outcome of domain detection."""

    domain: str
    confidence: float = Field(ge=0.0, le=1.0)
    scores: dict[str, float] = Field(default_factory=dict)

    model_config = ConfigDict(frozen=True)

    @classmethod
    def generic(cls) -> DomainDetectionResult:
        """Result used when detection is skipped or fails."""
        return cls(domain=GENERIC_DOMAIN, confidence=0.0)


def load_domain_catalog(path: Path) -> dict[str, DomainCatalogEntry]:
    """Read domain_catalog.json.

    Raises:
        DomainCatalogError: If the file is missing, unreadable, not JSON, or malformed.
    """
    if not path.exists():
        raise DomainCatalogError(f"Domain catalog not found: {path}")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise DomainCatalogError(f"Cannot read domain catalog {path.name}: {e}") from e
    try:
        data = json.loads(text)
    except json.JSONDecodeError as e:
        raise DomainCatalogError(f"Invalid JSON in domain catalog: {e}") from e
    if not isinstance(data, dict):
        raise DomainCatalogError("Domain catalog must map domain names to keyword entries")
    try:
        return {domain: DomainCatalogEntry.model_validate(entry) for domain, entry in data.items()}
    except ValidationError as e:
        raise DomainCatalogError(f"Domain catalog doesn't match the schema: {e}") from e


def fallback_domain(lowered_idea: str) -> str | None:
    """Match the built-in keyword table against an already lower-cased idea."""
    for domain, keywords in FALLBACK_DOMAIN_KEYWORDS:
        if any(keyword.lower() in lowered_idea for keyword in keywords):
            return domain
    return None


def score_idea(idea: str, catalog: dict[str, DomainCatalogEntry]) -> DomainDetectionResult:
    """Score an idea against every domain in the catalog.

    Ties go to the domain listed first in the catalog.
    """
    lowered = idea.lower()
    scores: dict[str, float] = {}
    for domain, entry in catalog.items():
        score = 0.0
        for keyword in entry.keywords:
            needle = keyword.lower().strip()
            if needle and needle in lowered:
                score += 1
        scores[domain] = score

    best_domain = max(scores, key=lambda d: scores[d]) if scores else None
    best_score = scores[best_domain] if best_domain is not None else 0.0
    total = sum(scores.values())
    confidence = best_score / total if total > 0 and best_score > 0 else 0.0

    if best_domain is not None and best_score > 0:
        resolved = best_domain
    else:
        resolved = fallback_domain(lowered) or GENERIC_DOMAIN

    return DomainDetectionResult(domain=resolved, confidence=confidence, scores=scores)


def detect_domain(idea: str, catalog_path: Path) -> DomainDetectionResult:
    """Load the domain catalog and score the idea against it."""
    return score_idea(idea, load_domain_catalog(catalog_path))
