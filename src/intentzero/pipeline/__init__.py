"""IntentZero pipeline — collaborators around the interview.

Public API:
    Facade: IntentPipeline
    Detection: DomainDetectionResult, detect_domain, score_idea
    Generation: SpecGenerator, SpecGenerationSummary
    Resources: ResourceBootstrapper
    Errors: PipelineError and subclasses
"""

from intentzero.pipeline.detector import DomainDetectionResult, detect_domain, score_idea
from intentzero.pipeline.errors import (
    CatalogNotFoundError,
    CatalogParseError,
    DomainCatalogError,
    PipelineError,
    ResourceMissingError,
    SpecGenerationError,
    UnpackFailedError,
)
from intentzero.pipeline.generator import SpecGenerationSummary, SpecGenerator
from intentzero.pipeline.pipeline import IntentPipeline
from intentzero.pipeline.resources import ResourceBootstrapper

__all__ = [
    "CatalogNotFoundError",
    "CatalogParseError",
    "DomainCatalogError",
    "DomainDetectionResult",
    "IntentPipeline",
    "PipelineError",
    "ResourceBootstrapper",
    "ResourceMissingError",
    "SpecGenerationError",
    "SpecGenerationSummary",
    "SpecGenerator",
    "UnpackFailedError",
    "detect_domain",
    "score_idea",
]
