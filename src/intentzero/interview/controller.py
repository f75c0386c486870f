"""InterviewController — drives an InterviewSession and owns the transcript.

The controller is the only owner of session and transcript state. Slow work
(catalog loading, spec generation, question elaboration) runs on a
BackgroundWorker; its results are applied when the owning thread calls
process_events() or wait_idle(). Every dispatch is tagged with the current
epoch and reset bumps the epoch, so results from before a reset are dropped.

Flow:
    idea → begin_interview (background) → ask question → answer → ...
    → at the core/optional boundary: ask "generate now or continue?"
    → completed (or "generate") → generate_specs (background) → summary
"""

from __future__ import annotations

import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any, Protocol
from uuid import UUID

from pydantic import BaseModel, ConfigDict

from intentzero.interview import prompts
from intentzero.interview.models import (
    ChatMessage,
    ChatRole,
    ChatRoleKind,
    InterviewSession,
    MilestoneStatus,
    PipelinePhase,
    QuestionInputState,
    QuestionMilestone,
)
from intentzero.interview.prompts import OptionalDecision
from intentzero.interview.worker import BackgroundWorker

if TYPE_CHECKING:
    from intentzero.pipeline.detector import DomainDetectionResult
    from intentzero.pipeline.generator import SpecGenerationSummary
    from intentzero.providers.client import LLMClient

logger = logging.getLogger(__name__)


class InterviewBackend(Protocol):
    """What the controller needs from the pipeline."""

    def begin_interview(self, idea: str) -> tuple[DomainDetectionResult, InterviewSession]: ...

    def generate_specs(
        self, answers: dict[str, str], domain: str, language: str | None = None
    ) -> SpecGenerationSummary: ...


class ControllerSnapshot(BaseModel):
    """Immutable view of the controller for observers."""

    messages: tuple[ChatMessage, ...]
    phase: PipelinePhase | None
    is_busy: bool
    header_status: str
    has_captured_initial_idea: bool
    awaiting_optional_decision: bool
    milestones: tuple[QuestionMilestone, ...]
    input_state: QuestionInputState | None
    domain: str | None

    model_config = ConfigDict(frozen=True)

    @property
    def can_submit(self) -> bool:
        return not self.is_busy


Listener = Callable[[ControllerSnapshot], None]


class InterviewController:
    """View-model for the idea → interview → specs conversation."""

    def __init__(
        self,
        backend: InterviewBackend,
        worker: BackgroundWorker | None = None,
        llm_client: LLMClient | None = None,
        language: str = "ko",
    ) -> None:
        self.backend = backend
        self.worker = worker if worker is not None else BackgroundWorker()
        self.llm_client = llm_client
        self.language = language

        self._messages: list[ChatMessage] = []
        self._session: InterviewSession | None = None
        self._detection: DomainDetectionResult | None = None
        self._initial_idea: str | None = None
        self._phase: PipelinePhase | None = None
        self._busy = False
        self._has_captured_initial_idea = False
        self._awaiting_optional_decision = False
        self._bootstrapped = False
        self._question_message_ids: dict[str, UUID] = {}
        self._answer_message_ids: dict[str, UUID] = {}
        self._epoch = 0
        self._listeners: list[Listener] = []

    # --- Read-only state ---

    @property
    def messages(self) -> tuple[ChatMessage, ...]:
        return tuple(self._messages)

    @property
    def session(self) -> InterviewSession | None:
        return self._session

    @property
    def detection(self) -> DomainDetectionResult | None:
        return self._detection

    @property
    def initial_idea(self) -> str | None:
        return self._initial_idea

    @property
    def phase(self) -> PipelinePhase | None:
        return self._phase

    @property
    def is_busy(self) -> bool:
        return self._busy

    @property
    def has_captured_initial_idea(self) -> bool:
        return self._has_captured_initial_idea

    @property
    def awaiting_optional_decision(self) -> bool:
        return self._awaiting_optional_decision

    @property
    def epoch(self) -> int:
        return self._epoch

    def header_status(self) -> str:
        """One-line status for the window header."""
        if not self._has_captured_initial_idea:
            return "아이디어를 입력해 주세요."
        if self._busy:
            return "작업 중…"
        if self._phase is not None:
            return self._phase.subtitle
        if self._session is not None:
            return "질문에 답변해 주세요."
        return "아이디어를 입력하면 인터뷰가 시작됩니다."

    def current_input_state(self) -> QuestionInputState | None:
        """Draft state of the current selection question, if one is showing."""
        if self._awaiting_optional_decision or self._session is None:
            return None
        question = self._session.current_question
        if question is None or not question.is_selection:
            return None
        return QuestionInputState(
            question=question,
            selected_option_ids=frozenset(self._session.draft_selections.get(question.key, set())),
            other_text=self._session.draft_other_text.get(question.key, ""),
        )

    def milestones(self) -> list[QuestionMilestone]:
        """Sidebar entries: answered, current, or pending per question."""
        if self._session is None:
            return []
        session = self._session
        entries: list[QuestionMilestone] = []
        for index, question in enumerate(session.questions):
            if index < session.current_index:
                status = MilestoneStatus.ANSWERED
            elif index == session.current_index:
                status = MilestoneStatus.CURRENT
            else:
                status = MilestoneStatus.PENDING
            entries.append(
                QuestionMilestone(
                    key=question.key,
                    index=index,
                    title=question.text,
                    status=status,
                    answer=session.answers.get(question.key),
                    stage=question.stage,
                )
            )
        return entries

    def answer_for(self, question_key: str) -> str | None:
        if self._session is None:
            return None
        return self._session.answers.get(question_key)

    def message_for_question(self, question_key: str) -> UUID | None:
        """Transcript id of the rendered question, else of its latest answer."""
        return self._question_message_ids.get(question_key) or self._answer_message_ids.get(
            question_key
        )

    def snapshot(self) -> ControllerSnapshot:
        return ControllerSnapshot(
            messages=tuple(self._messages),
            phase=self._phase,
            is_busy=self._busy,
            header_status=self.header_status(),
            has_captured_initial_idea=self._has_captured_initial_idea,
            awaiting_optional_decision=self._awaiting_optional_decision,
            milestones=tuple(self.milestones()),
            input_state=self.current_input_state(),
            domain=self._session.domain if self._session is not None else None,
        )

    # --- Observers ---

    def subscribe(self, listener: Listener) -> None:
        """Register a listener called with a snapshot after each change."""
        self._listeners.append(listener)

    def unsubscribe(self, listener: Listener) -> None:
        if listener in self._listeners:
            self._listeners.remove(listener)

    def _notify(self) -> None:
        if not self._listeners:
            return
        snapshot = self.snapshot()
        for listener in list(self._listeners):
            listener(snapshot)

    # --- Public operations ---

    def bootstrap_if_needed(self) -> None:
        """Emit the opening greeting once per (re)start."""
        if self._bootstrapped:
            return
        self._bootstrapped = True
        self._append(ChatRole.system(), prompts.GREETING)
        self._notify()

    def capture_initial_idea(self, text: str) -> None:
        """Start a new interview for an idea, replacing any current one."""
        idea = text.strip()
        if not idea or self._busy:
            return
        if self._has_captured_initial_idea:
            self._reset_state()
            self.bootstrap_if_needed()
        self._has_captured_initial_idea = True
        self._initial_idea = idea
        self._append_user(idea, question_key=None)
        self._start_pipeline(idea)
        self._notify()

    def submit_free_text_response(self, text: str) -> None:
        """Answer the current question, or decide at the optional boundary."""
        answer = text.strip()
        if not answer or self._busy:
            return

        if self._awaiting_optional_decision:
            self._append_user(answer, question_key=None)
            self._handle_optional_decision(answer)
            self._notify()
            return

        question = self._session.current_question if self._session is not None else None
        if question is None:
            # No interview in progress: treat the input as a new idea
            self.capture_initial_idea(answer)
            return

        self._append_user(answer, question_key=question.key)
        self._handle_answer(answer)
        self._notify()

    def toggle_option(self, option_id: str) -> None:
        """Toggle an option in the current selection question's draft."""
        state = self.current_input_state()
        if state is None or self._session is None:
            return
        question = state.question
        if not question.has_option(option_id):
            return

        selections = set(state.selected_option_ids)
        if option_id in selections:
            selections.remove(option_id)
        elif question.allows_multiple_selection:
            selections.add(option_id)
        else:
            selections = {option_id}
        self._session.draft_selections[question.key] = selections
        self._notify()

    def update_other_text(self, text: str) -> None:
        """Set the draft "other" entry of the current selection question."""
        state = self.current_input_state()
        if state is None or self._session is None or not state.question.allows_other_entry:
            return
        self._session.draft_other_text[state.question.key] = text
        self._notify()

    def submit_current_selection(self) -> None:
        """Submit the current selection draft as the answer."""
        if self._busy:
            return
        state = self.current_input_state()
        if state is None or self._session is None:
            return

        other = state.other_text.strip()
        if not state.selected_option_ids and not other:
            return

        question = state.question
        summary = prompts.format_selection_response(question, state.selected_option_ids, other)
        self._append_user(summary, question_key=question.key)
        self._session.clear_draft(question.key)
        self._handle_answer(summary)
        self._notify()

    def edit_answer(self, question_key: str, text: str) -> None:
        """Rewrite an already-given answer in place.

        Never moves the cursor or re-runs boundary/completion logic.
        """
        answer = text.strip()
        if not answer or self._busy or self._session is None:
            return
        if question_key not in self._session.answers:
            return

        self._session.update_answer(answer, question_key)
        if not self._replace_answer_message(question_key, answer):
            self._append_user(answer, question_key=question_key)
        self._notify()

    def request_elaboration(self) -> None:
        """Ask the language model to explain the current question."""
        if self.llm_client is None or self._busy or self._awaiting_optional_decision:
            return
        question = self._session.current_question if self._session is not None else None
        if question is None:
            return

        client = self.llm_client
        prompt = prompts.build_elaboration_prompt(question, self._initial_idea)
        question_key = question.key

        def on_success(reply: str) -> None:
            self._append(ChatRole.assistant(), reply, question_key=question_key)

        def on_failure(error: Exception) -> None:
            self._append_pipeline_note(f"부연 설명 생성 중 오류: {error}")

        self._busy = True
        self._dispatch(
            lambda: self.worker.run_coroutine(client.generate_response(prompt)),
            on_success,
            on_failure,
        )
        self._notify()

    def reset_conversation(self) -> None:
        """Drop the session and transcript and greet again.

        Allowed while busy: in-flight results are discarded by epoch.
        """
        self._reset_state()
        self.bootstrap_if_needed()
        self._notify()

    # --- Background work ---

    def process_events(self) -> int:
        """Apply finished background results on the calling thread."""
        return self.worker.drain()

    def wait_idle(self, timeout: float | None = None) -> None:
        """Block until no background work is outstanding, applying results."""
        while self.worker.has_pending:
            self.worker.wait(timeout=timeout)
            self.worker.drain()
            if timeout is not None:
                break

    def close(self) -> None:
        self.worker.shutdown(wait=False)

    def _dispatch(
        self,
        fn: Callable[[], Any],
        on_success: Callable[[Any], None],
        on_failure: Callable[[Exception], None],
    ) -> None:
        epoch = self._epoch

        def settle(callback: Callable[[Any], None], value: Any) -> None:
            if epoch != self._epoch:
                logger.debug("Discarding background result from epoch %d", epoch)
                return
            # Cleared first: the callback may start the next piece of work.
            self._busy = False
            callback(value)
            self._notify()

        self.worker.submit(
            fn,
            lambda value: settle(on_success, value),
            lambda error: settle(on_failure, error),
        )

    def _start_pipeline(self, idea: str) -> None:
        self._busy = True
        self._phase = PipelinePhase.DOMAIN_DETECTION
        backend = self.backend

        def on_success(result: tuple[DomainDetectionResult, InterviewSession]) -> None:
            detection, session = result
            self._detection = detection
            self._session = session
            self._phase = PipelinePhase.INTERVIEW
            self._ask_next_question()

        def on_failure(error: Exception) -> None:
            logger.warning("Interview preparation failed: %s", error)
            self._append_pipeline_note(f"도메인 감지 또는 질문 준비 중 오류: {error}")
            self._phase = None

        self._dispatch(lambda: backend.begin_interview(idea), on_success, on_failure)

    def _finalize_interview(self) -> None:
        if self._session is None:
            return
        self._phase = PipelinePhase.SPEC_GENERATION
        self._busy = True
        self._awaiting_optional_decision = False

        answers = self._session.exported_answers()
        domain = self._session.domain
        language = self.language
        backend = self.backend

        def on_success(summary: SpecGenerationSummary) -> None:
            self._append_pipeline_note(
                prompts.generation_report(
                    summary.file_names, summary.todo_count, str(summary.output_directory)
                )
            )
            self._append(ChatRole.assistant(), prompts.HANDOFF_MESSAGE)
            self._phase = None

        def on_failure(error: Exception) -> None:
            logger.warning("Spec generation failed: %s", error)
            self._append_pipeline_note(f"명세 생성 중 오류: {error}")
            self._phase = None

        self._dispatch(
            lambda: backend.generate_specs(answers, domain, language),
            on_success,
            on_failure,
        )

    # --- Transitions ---

    def _handle_answer(self, answer: str) -> None:
        session = self._session
        if session is None:
            return
        question = session.current_question
        if question is None:
            self._append_pipeline_note(prompts.NO_MORE_QUESTIONS)
            return

        session.record_answer(answer)
        session.clear_draft(question.key)

        if session.is_completed:
            self._finalize_interview()
        elif session.current_index == session.core_question_count and session.has_optional_questions:
            self._prompt_optional_decision()
        else:
            self._ask_next_question()

    def _ask_next_question(self) -> None:
        question = self._session.current_question if self._session is not None else None
        if question is None:
            self._append(ChatRole.assistant(), prompts.ALL_ANSWERED)
            self._finalize_interview()
            return
        text = prompts.render_question_prompt(question, self._initial_idea)
        message = self._append(ChatRole.assistant(), text, question_key=question.key)
        self._question_message_ids[question.key] = message.id

    def _prompt_optional_decision(self) -> None:
        self._awaiting_optional_decision = True
        self._append(ChatRole.assistant(), prompts.OPTIONAL_DECISION_PROMPT)

    def _handle_optional_decision(self, text: str) -> None:
        decision = prompts.match_optional_decision(text)
        if decision == OptionalDecision.GENERATE:
            self._awaiting_optional_decision = False
            self._finalize_interview()
        elif decision == OptionalDecision.CONTINUE:
            self._awaiting_optional_decision = False
            self._append(ChatRole.assistant(), prompts.CONTINUE_ACK)
            self._ask_next_question()
        else:
            self._append(ChatRole.assistant(), prompts.OPTIONAL_DECISION_RETRY)

    def _reset_state(self) -> None:
        self._epoch += 1
        self._messages.clear()
        self._phase = None
        self._busy = False
        self._detection = None
        self._session = None
        self._initial_idea = None
        self._question_message_ids.clear()
        self._answer_message_ids.clear()
        self._awaiting_optional_decision = False
        self._has_captured_initial_idea = False
        self._bootstrapped = False

    # --- Transcript ---

    def _append(
        self, role: ChatRole, text: str, question_key: str | None = None
    ) -> ChatMessage:
        message = ChatMessage(role=role, text=text, question_key=question_key)
        self._messages.append(message)
        return message

    def _append_user(self, text: str, question_key: str | None) -> ChatMessage:
        message = self._append(ChatRole.user(), text, question_key=question_key)
        if question_key is not None:
            self._answer_message_ids[question_key] = message.id
        return message

    def _append_pipeline_note(self, text: str) -> ChatMessage:
        return self._append(ChatRole.pipeline(), text)

    def _replace_answer_message(self, question_key: str, text: str) -> bool:
        """Rewrite the latest user message for question_key. False if none."""
        for index in range(len(self._messages) - 1, -1, -1):
            message = self._messages[index]
            if message.role.kind == ChatRoleKind.USER and message.question_key == question_key:
                self._messages[index] = message.model_copy(update={"text": text})
                return True
        return False
