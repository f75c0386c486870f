"""Unit tests for the interview CLI helpers.

Tests selection parsing, line routing against a controller, and the chat loop
driven by a scripted input source.
"""

from __future__ import annotations

import io
from collections.abc import Iterator

import pytest
from rich.console import Console

from intentzero.config import AppConfig
from intentzero.interview.cli import (
    TranscriptPrinter,
    chat_command,
    handle_line,
    parse_selection_input,
    questions_command,
)
from intentzero.interview.controller import InterviewController
from intentzero.interview.models import (
    ChatRoleKind,
    InterviewSession,
    QuestionDefinition,
    QuestionInputKind,
    QuestionOption,
)

# --- Test Helpers ---


def _selection(allows_other: bool = True) -> QuestionDefinition:
    return QuestionDefinition(
        key="features",
        text="Pick features",
        input_kind=(
            QuestionInputKind.MULTI_SELECT_WITH_OTHER
            if allows_other
            else QuestionInputKind.MULTI_SELECT
        ),
        options=(
            QuestionOption(id="voice", title="Voice"),
            QuestionOption(id="camera", title="Camera"),
            QuestionOption(id="offline", title="Offline"),
        ),
        allows_multiple_selection=True,
        allows_other_entry=allows_other,
    )


def _selection_session() -> InterviewSession:
    return InterviewSession(
        questions=(_selection(), QuestionDefinition(key="notes", text="Notes?")),
        core_question_count=2,
    )


def _script(*lines: str):
    remaining = list(lines)

    def read_line() -> str:
        if not remaining:
            raise EOFError
        return remaining.pop(0)

    return read_line


@pytest.fixture
def out() -> Console:
    return Console(file=io.StringIO(), width=120)


@pytest.fixture
def controller(make_backend) -> Iterator[InterviewController]:
    c = InterviewController(make_backend(session_factory=_selection_session))
    c.bootstrap_if_needed()
    yield c
    c.worker.shutdown(wait=True)


def _output(console: Console) -> str:
    return console.file.getvalue()  # type: ignore[attr-defined]


# --- parse_selection_input ---


class TestParseSelectionInput:
    """Test parsing typed selections."""

    def test_numbers(self) -> None:
        assert parse_selection_input(_selection(), "1, 3") == (["voice", "offline"], "")

    def test_ids(self) -> None:
        assert parse_selection_input(_selection(), "camera,voice") == (["camera", "voice"], "")

    def test_other_segment_keeps_commas(self) -> None:
        result = parse_selection_input(_selection(), "1, 2, 기타: custom flow, with commas")
        assert result == (["voice", "camera"], "custom flow, with commas")

    def test_english_other_prefix(self) -> None:
        assert parse_selection_input(_selection(), "Other: mine") == ([], "mine")

    def test_other_not_allowed(self) -> None:
        assert parse_selection_input(_selection(allows_other=False), "기타: mine") is None

    def test_unknown_token_means_free_text(self) -> None:
        assert parse_selection_input(_selection(), "voice and camera") is None

    def test_out_of_range_number(self) -> None:
        assert parse_selection_input(_selection(), "4") is None

    def test_nothing_selected(self) -> None:
        assert parse_selection_input(_selection(), " , ") is None


# --- handle_line ---


class TestHandleLine:
    """Test routing of typed lines to controller operations."""

    def test_first_line_is_idea(self, controller: InterviewController, out: Console) -> None:
        assert handle_line(controller, "habit tracker", out) is True
        controller.wait_idle()

        assert controller.initial_idea == "habit tracker"

    def test_selection_submitted(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "2, 1, 기타: custom flow", out)
        controller.wait_idle()

        assert controller.answer_for("features") == "Voice, Camera, 기타: custom flow"

    def test_unparsed_selection_is_free_text(
        self, controller: InterviewController, out: Console
    ) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "whatever works", out)
        controller.wait_idle()

        assert controller.answer_for("features") == "whatever works"

    def test_edit_command(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "1", out)
        controller.wait_idle()
        handle_line(controller, "/edit features Only voice for now", out)

        assert controller.answer_for("features") == "Only voice for now"

    def test_edit_unanswered(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "/edit notes hi", out)

        assert "수정할 답변이 없습니다: notes" in _output(out)

    def test_reset_command(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "/reset", out)

        assert controller.has_captured_initial_idea is False
        assert controller.session is None

    def test_progress_command(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "/progress", out)

        text = _output(out)
        assert "features" in text
        assert "current" in text

    def test_explain_without_client(self, controller: InterviewController, out: Console) -> None:
        handle_line(controller, "/explain", out)
        assert "LLM_PROVIDER" in _output(out)

    def test_unknown_command(self, controller: InterviewController, out: Console) -> None:
        assert handle_line(controller, "/dance", out) is True
        assert "알 수 없는 명령" in _output(out)

    def test_quit(self, controller: InterviewController, out: Console) -> None:
        assert handle_line(controller, "/quit", out) is False

    def test_blank_line(self, controller: InterviewController, out: Console) -> None:
        assert handle_line(controller, "   ", out) is True
        assert controller.has_captured_initial_idea is False


# --- TranscriptPrinter ---


class TestTranscriptPrinter:
    """Test incremental transcript rendering."""

    def test_prints_new_and_edited(self, controller: InterviewController, out: Console) -> None:
        printer = TranscriptPrinter(out)
        controller.subscribe(printer)
        handle_line(controller, "habit tracker", out)
        controller.wait_idle()
        handle_line(controller, "1", out)
        controller.wait_idle()
        controller.edit_answer("features", "Camera only")

        text = _output(out)
        assert "Voice" in text
        assert "Camera only" in text
        assert "(수정됨)" in text

    def test_pipeline_note_label(self, out: Console) -> None:
        printer = TranscriptPrinter(out)
        c = InterviewController(backend=None)  # type: ignore[arg-type]
        c._append_pipeline_note("note body")
        printer(c.snapshot())
        c.worker.shutdown(wait=True)

        text = _output(out)
        assert "파이프라인" in text
        assert "note body" in text

    def test_messages_only_once(self, controller: InterviewController, out: Console) -> None:
        printer = TranscriptPrinter(out)
        printer(controller.snapshot())
        printer(controller.snapshot())

        assert _output(out).count("안녕하세요") == 1

    def test_transcript_kinds(self, controller: InterviewController) -> None:
        assert controller.messages[0].role.kind == ChatRoleKind.SYSTEM


# --- chat_command / questions_command ---


class TestCommands:
    """Test the command functions with the bundled resources."""

    def test_chat_flow(self, app_config: AppConfig, capsys: pytest.CaptureFixture[str]) -> None:
        exit_code = chat_command(
            app_config,
            read_line=_script("habit tracker", "HabitBridge", "/progress", "/quit"),
        )

        assert exit_code == 0
        output = capsys.readouterr().out
        assert "HabitBridge" in output
        assert "job1_when" in output

    def test_questions_json(self, app_config: AppConfig, capsys: pytest.CaptureFixture[str]) -> None:
        assert questions_command(app_config, format="json") == 0
        assert '"project_name"' in capsys.readouterr().out

    def test_questions_error(self, tmp_path, capsys: pytest.CaptureFixture[str]) -> None:
        config = AppConfig(support_root=tmp_path, language="fr")
        assert questions_command(config, format="human") == 1
        assert "Error" in capsys.readouterr().out
