"""Shared test fixtures."""

from __future__ import annotations

from collections.abc import Callable, Iterator
from pathlib import Path

import pytest
from pydantic_ai import models

from intentzero.config import AppConfig
from intentzero.interview.models import InterviewSession, QuestionDefinition, QuestionStage
from intentzero.pipeline.detector import DomainDetectionResult
from intentzero.pipeline.generator import SpecGenerationSummary


@pytest.fixture(autouse=True)
def _prevent_real_api_calls() -> Iterator[None]:
    """Safety: block real API calls in all tests."""
    original = models.ALLOW_MODEL_REQUESTS
    models.ALLOW_MODEL_REQUESTS = False
    yield
    models.ALLOW_MODEL_REQUESTS = original


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep developer INTENTZERO_* / LLM_* settings out of tests."""
    for name in (
        "INTENTZERO_HOME",
        "INTENTZERO_RESOURCE_ZIP",
        "INTENTZERO_LANG",
        "INTENTZERO_PYTHON",
        "INTENTZERO_LOG_LEVEL",
        "LLM_PROVIDER",
        "LLM_API_KEY",
        "LLM_MODEL",
        "LLM_BASE_URL",
    ):
        monkeypatch.delenv(name, raising=False)


def _three_core_two_optional() -> InterviewSession:
    """Session with keys a, b, c (core) then d, e (optional)."""
    questions = tuple(
        QuestionDefinition(
            key=key,
            text=f"Question {key}?",
            stage=QuestionStage.CORE if key in "abc" else QuestionStage.OPTIONAL,
        )
        for key in ("a", "b", "c", "d", "e")
    )
    return InterviewSession(domain="generic", questions=questions, core_question_count=3)


class FakeBackend:
    """In-memory interview backend recording what the controller asked for."""

    def __init__(
        self,
        session_factory: Callable[[], InterviewSession] = _three_core_two_optional,
        begin_error: Exception | None = None,
        generate_error: Exception | None = None,
    ) -> None:
        self.session_factory = session_factory
        self.begin_error = begin_error
        self.generate_error = generate_error
        self.ideas: list[str] = []
        self.generated: list[tuple[dict[str, str], str, str | None]] = []

    def begin_interview(self, idea: str) -> tuple[DomainDetectionResult, InterviewSession]:
        self.ideas.append(idea)
        if self.begin_error is not None:
            raise self.begin_error
        session = self.session_factory()
        return DomainDetectionResult(domain=session.domain, confidence=1.0), session

    def generate_specs(
        self, answers: dict[str, str], domain: str, language: str | None = None
    ) -> SpecGenerationSummary:
        self.generated.append((answers, domain, language))
        if self.generate_error is not None:
            raise self.generate_error
        output = Path("/tmp/GeneratedSpecs-ko")
        return SpecGenerationSummary(
            output_directory=output,
            generated_files=[output / "01_product_brief.md", output / "03_scope.md"],
            todo_count=2,
        )


@pytest.fixture
def make_backend() -> Callable[..., FakeBackend]:
    """Factory for FakeBackend (session_factory, begin_error, generate_error)."""
    return FakeBackend


@pytest.fixture
def fake_backend() -> FakeBackend:
    """FakeBackend serving the a, b, c (core) / d, e (optional) session."""
    return FakeBackend()


@pytest.fixture
def app_config(tmp_path: Path) -> AppConfig:
    """Config rooted in tmp_path; resources get copied from the bundled tree."""
    return AppConfig(support_root=tmp_path / "support")
