"""IntentZero interview — question catalog, session state machine, controller.

Public API:
    Models: QuestionDefinition, QuestionOption, QuestionStage, QuestionInputKind,
            InterviewSession, ChatMessage, ChatRole, PipelinePhase,
            QuestionMilestone, QuestionInputState
    Catalog: CANONICAL_ORDER, shape_questions, build_session
    Controller: InterviewController, ControllerSnapshot
    Worker: BackgroundWorker
"""

from intentzero.interview.catalog import CANONICAL_ORDER, build_session, shape_questions
from intentzero.interview.controller import ControllerSnapshot, InterviewController
from intentzero.interview.models import (
    ChatMessage,
    ChatRole,
    ChatRoleKind,
    InterviewSession,
    MilestoneStatus,
    PipelinePhase,
    QuestionDefinition,
    QuestionInputKind,
    QuestionInputState,
    QuestionMilestone,
    QuestionOption,
    QuestionStage,
    SessionState,
)
from intentzero.interview.worker import BackgroundWorker

__all__ = [
    "CANONICAL_ORDER",
    "BackgroundWorker",
    "ChatMessage",
    "ChatRole",
    "ChatRoleKind",
    "ControllerSnapshot",
    "InterviewController",
    "InterviewSession",
    "MilestoneStatus",
    "PipelinePhase",
    "QuestionDefinition",
    "QuestionInputKind",
    "QuestionInputState",
    "QuestionMilestone",
    "QuestionOption",
    "QuestionStage",
    "SessionState",
    "build_session",
    "shape_questions",
]
