"""Interview data models — question definitions, session state, transcript.

QuestionDefinition is immutable and loaded once per domain. InterviewSession is
the state machine: an ordered question list, a cursor, recorded answers, and
transient draft state for selection questions. ChatMessage entries form the
append-only transcript the controller owns.
"""

from __future__ import annotations

from enum import StrEnum
from uuid import UUID, uuid4

from pydantic import BaseModel, ConfigDict, Field, model_validator


class QuestionStage(StrEnum):
    """Stage of a question.

    CORE: asked first, before the optional decision point.
    OPTIONAL: asked only if the user opts in to deeper questions.
    """

    CORE = "core"
    OPTIONAL = "optional"


class QuestionInputKind(StrEnum):
    """How a question is answered."""

    FREE_TEXT = "free_text"
    MULTI_SELECT = "multi_select"
    MULTI_SELECT_WITH_OTHER = "multi_select_with_other"


class SessionState(StrEnum):
    """Progress of a session relative to the core/optional boundary."""

    AWAITING_CORE = "awaiting_core"
    AWAITING_OPTIONAL = "awaiting_optional"
    COMPLETED = "completed"


class QuestionOption(BaseModel):
    """A selectable option for a selection question."""

    id: str
    title: str
    detail: str | None = None

    model_config = ConfigDict(frozen=True)


class QuestionDefinition(BaseModel):
    """A single interview question, shaped from a catalog entry."""

    key: str = Field(description="Stable identifier, unique within a catalog")
    text: str = Field(description="Prompt text shown to the user")
    hint: str | None = None
    example: str | None = None
    required: bool = True
    default_answer: str | None = None
    group_title: str | None = None
    stage: QuestionStage = QuestionStage.CORE
    input_kind: QuestionInputKind = QuestionInputKind.FREE_TEXT
    options: tuple[QuestionOption, ...] = ()
    allows_multiple_selection: bool = False
    allows_other_entry: bool = False

    model_config = ConfigDict(frozen=True)

    @model_validator(mode="after")
    def _check_option_ids(self) -> QuestionDefinition:
        ids = [option.id for option in self.options]
        if len(ids) != len(set(ids)):
            raise ValueError(f"Duplicate option ids in question '{self.key}'")
        return self

    @property
    def is_selection(self) -> bool:
        """Check if this question is answered by picking options."""
        return self.input_kind != QuestionInputKind.FREE_TEXT

    def has_option(self, option_id: str) -> bool:
        """Check if option_id belongs to this question."""
        return any(option.id == option_id for option in self.options)


class InterviewSession(BaseModel):
    """Cursor-based interview state machine over a fixed question list.

    The cursor only moves forward. Editing an answer goes through
    update_answer and never touches current_index.
    """

    domain: str = Field(default="generic", frozen=True)
    questions: tuple[QuestionDefinition, ...] = Field(frozen=True)
    core_question_count: int = Field(default=0, ge=0, frozen=True)
    current_index: int = 0
    answers: dict[str, str] = Field(default_factory=dict)
    draft_selections: dict[str, set[str]] = Field(default_factory=dict)
    draft_other_text: dict[str, str] = Field(default_factory=dict)

    @model_validator(mode="after")
    def _check_questions(self) -> InterviewSession:
        keys = [q.key for q in self.questions]
        if len(keys) != len(set(keys)):
            raise ValueError("Question keys must be unique within a session")
        if self.core_question_count > len(self.questions):
            raise ValueError("core_question_count exceeds the number of questions")
        return self

    @property
    def is_completed(self) -> bool:
        """Check if every question has been answered or skipped."""
        return self.current_index >= len(self.questions)

    @property
    def current_question(self) -> QuestionDefinition | None:
        """The question under the cursor, or None once completed."""
        if self.current_index >= len(self.questions):
            return None
        return self.questions[self.current_index]

    @property
    def has_optional_questions(self) -> bool:
        """Check if questions remain beyond the core prefix."""
        return self.core_question_count < len(self.questions)

    @property
    def state(self) -> SessionState:
        """Where the cursor sits relative to the core/optional boundary."""
        if self.is_completed:
            return SessionState.COMPLETED
        if self.current_index < self.core_question_count:
            return SessionState.AWAITING_CORE
        return SessionState.AWAITING_OPTIONAL

    def has_question(self, key: str) -> bool:
        """Check if key belongs to one of this session's questions."""
        return any(q.key == key for q in self.questions)

    def question_for_key(self, key: str) -> QuestionDefinition | None:
        """Look up a question by key."""
        for question in self.questions:
            if question.key == key:
                return question
        return None

    def record_answer(self, answer: str) -> None:
        """Record an answer for the current question and advance the cursor.

        No-op when the session is already completed.
        """
        question = self.current_question
        if question is None:
            return
        self.answers[question.key] = answer
        self.current_index += 1

    def update_answer(self, answer: str, key: str) -> None:
        """Overwrite the answer for key without moving the cursor.

        Unknown keys are ignored.
        """
        if not self.has_question(key):
            return
        self.answers[key] = answer

    def skip_current_question(self) -> None:
        """Advance the cursor without recording an answer."""
        if self.is_completed:
            return
        self.current_index += 1

    def clear_draft(self, key: str) -> None:
        """Drop draft selections and other-text for key."""
        self.draft_selections[key] = set()
        self.draft_other_text[key] = ""

    def exported_answers(self) -> dict[str, str]:
        """Snapshot of all recorded answers."""
        return dict(self.answers)


class ChatRoleKind(StrEnum):
    """Who a transcript message comes from."""

    USER = "user"
    ASSISTANT = "assistant"
    SYSTEM = "system"
    PIPELINE_NOTE = "pipeline_note"


PIPELINE_LABEL = "파이프라인"


class ChatRole(BaseModel):
    """Message role with an optional label (pipeline notes carry one)."""

    kind: ChatRoleKind
    label: str | None = None

    model_config = ConfigDict(frozen=True)

    @classmethod
    def user(cls) -> ChatRole:
        return cls(kind=ChatRoleKind.USER)

    @classmethod
    def assistant(cls) -> ChatRole:
        return cls(kind=ChatRoleKind.ASSISTANT)

    @classmethod
    def system(cls) -> ChatRole:
        return cls(kind=ChatRoleKind.SYSTEM)

    @classmethod
    def pipeline(cls, label: str = PIPELINE_LABEL) -> ChatRole:
        return cls(kind=ChatRoleKind.PIPELINE_NOTE, label=label)


class ChatMessage(BaseModel):
    """A transcript entry.

    question_key links a rendered question or a given answer back to its
    QuestionDefinition. Edits replace the entry with a copy that keeps its id.
    """

    id: UUID = Field(default_factory=uuid4)
    role: ChatRole
    text: str
    question_key: str | None = None

    model_config = ConfigDict(frozen=True)


class PipelinePhase(StrEnum):
    """Background phase the controller is in."""

    DOMAIN_DETECTION = "domain_detection"
    INTERVIEW = "interview"
    SPEC_GENERATION = "spec_generation"
    CODING = "coding"

    @property
    def display_name(self) -> str:
        return _PHASE_TITLES[self]

    @property
    def subtitle(self) -> str:
        return _PHASE_SUBTITLES[self]


_PHASE_TITLES: dict[PipelinePhase, str] = {
    PipelinePhase.DOMAIN_DETECTION: "도메인 감지",
    PipelinePhase.INTERVIEW: "인터뷰 진행",
    PipelinePhase.SPEC_GENERATION: "명세 생성",
    PipelinePhase.CODING: "코딩 준비",
}

_PHASE_SUBTITLES: dict[PipelinePhase, str] = {
    PipelinePhase.DOMAIN_DETECTION: "아이디어에서 도메인 추론 중",
    PipelinePhase.INTERVIEW: "질문을 통해 의도를 정리합니다",
    PipelinePhase.SPEC_GENERATION: "명세서를 자동 작성 중",
    PipelinePhase.CODING: "코딩 에이전트에게 핸드오프 준비",
}


class MilestoneStatus(StrEnum):
    """Sidebar status of a question."""

    PENDING = "pending"
    CURRENT = "current"
    ANSWERED = "answered"


class QuestionMilestone(BaseModel):
    """Sidebar entry for one question."""

    key: str
    index: int
    title: str
    status: MilestoneStatus
    answer: str | None = None
    stage: QuestionStage

    model_config = ConfigDict(frozen=True)


class QuestionInputState(BaseModel):
    """Draft state of the selection question currently on screen."""

    question: QuestionDefinition
    selected_option_ids: frozenset[str] = frozenset()
    other_text: str = ""

    model_config = ConfigDict(frozen=True)

    @property
    def can_submit(self) -> bool:
        """Check if the draft holds something worth submitting."""
        if not self.question.is_selection:
            return True
        return len(self.selected_option_ids) > 0 or len(self.other_text.strip()) > 0
