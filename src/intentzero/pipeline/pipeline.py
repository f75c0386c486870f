"""IntentPipeline — facade over resources, detection, catalogs and generation.

Every method here is blocking and may be slow; the controller runs them on
its background worker.
"""

from __future__ import annotations

import logging
from pathlib import Path

from intentzero.config import AppConfig
from intentzero.interview.catalog import build_session, shape_questions
from intentzero.interview.models import InterviewSession, QuestionDefinition
from intentzero.pipeline.detector import DomainDetectionResult, detect_domain
from intentzero.pipeline.errors import DomainCatalogError
from intentzero.pipeline.generator import SpecGenerationSummary, SpecGenerator
from intentzero.pipeline.loader import load_catalog
from intentzero.pipeline.resources import AGENT_DIR_NAME, ResourceBootstrapper

logger = logging.getLogger(__name__)

DOMAIN_CATALOG_FILE = "domain_catalog.json"


class IntentPipeline:
    """Everything between an idea and a folder of generated specs."""

    def __init__(
        self,
        config: AppConfig | None = None,
        bootstrapper: ResourceBootstrapper | None = None,
    ) -> None:
        self.config = config if config is not None else AppConfig()
        if bootstrapper is None:
            bootstrapper = ResourceBootstrapper(
                support_root=self.config.support_root,
                service_dir_name=self.config.service_dir_name,
                archive=self.config.resource_archive,
            )
        self.service_root = bootstrapper.prepare_or_warn()

    @property
    def agent_dir(self) -> Path:
        return self.service_root / AGENT_DIR_NAME

    @property
    def language(self) -> str:
        return self.config.language

    def detect_domain(self, idea: str) -> DomainDetectionResult:
        """Score the idea against domain_catalog.json.

        Raises:
            DomainCatalogError: If the domain catalog can't be read.
        """
        return detect_domain(idea, self.agent_dir / DOMAIN_CATALOG_FILE)

    def load_questions(self, domain: str, language: str | None = None) -> list[QuestionDefinition]:
        """Load and shape the question catalog for a domain.

        Raises:
            CatalogNotFoundError: If no catalog exists for the domain or generic.
            CatalogParseError: If the catalog file is malformed.
        """
        payload = load_catalog(self.agent_dir, domain, language or self.language)
        return shape_questions(payload)

    def start_interview(self, detection: DomainDetectionResult) -> InterviewSession:
        """Create a session over the detected domain's questions."""
        questions = self.load_questions(detection.domain)
        return build_session(detection.domain, questions)

    def begin_interview(self, idea: str) -> tuple[DomainDetectionResult, InterviewSession]:
        """Detect the domain (falling back to generic) and start a session."""
        try:
            detection = self.detect_domain(idea)
        except DomainCatalogError as e:
            logger.warning("Domain detection failed, using generic catalog: %s", e)
            detection = DomainDetectionResult.generic()

        session = self.start_interview(detection)
        logger.info(
            "Interview started: domain=%s questions=%d core=%d",
            session.domain,
            len(session.questions),
            session.core_question_count,
        )
        return detection, session

    def generator(self) -> SpecGenerator:
        return SpecGenerator(
            service_root=self.service_root,
            python_executable=self.config.python_executable,
            script=self.config.generator_script,
        )

    def save_answers(self, answers: dict[str, str], domain: str, language: str) -> Path:
        """Persist answers without running the generator."""
        return self.generator().save_answers(answers, domain, language)

    def generate_specs(
        self, answers: dict[str, str], domain: str, language: str | None = None
    ) -> SpecGenerationSummary:
        """Persist answers and run the generator.

        Raises:
            SpecGenerationError: If the generator fails.
        """
        return self.generator().generate(answers, domain, language or self.language)
