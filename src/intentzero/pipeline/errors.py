"""Pipeline errors — collaborator failures surfaced to the controller."""

from __future__ import annotations


class PipelineError(Exception):
    """Base error for resource, catalog, detection and generation failures."""

    def __init__(self, message: str) -> None:
        """Initialize PipelineError with a message."""
        self.message = message
        super().__init__(message)


class ResourceMissingError(PipelineError):
    """No archive or bundled catalog to materialize resources from."""


class UnpackFailedError(PipelineError):
    """Resource archive could not be extracted into the support root."""


class CatalogNotFoundError(PipelineError):
    """Neither the domain catalog nor the generic fallback exists."""


class CatalogParseError(PipelineError):
    """Catalog file is not valid JSON or does not match the payload schema."""


class DomainCatalogError(PipelineError):
    """Domain keyword catalog is missing or malformed."""


class SpecGenerationError(PipelineError):
    """The external spec generator failed."""
