"""CLI commands for the interactive interview and catalog listing."""

from __future__ import annotations

import json
from collections.abc import Callable
from uuid import UUID

from rich.console import Console
from rich.panel import Panel
from rich.table import Table

from intentzero.config import AppConfig
from intentzero.interview.controller import ControllerSnapshot, InterviewController
from intentzero.interview.models import (
    ChatMessage,
    ChatRoleKind,
    MilestoneStatus,
    QuestionDefinition,
)
from intentzero.interview.prompts import OTHER_PREFIX
from intentzero.pipeline.errors import PipelineError
from intentzero.pipeline.pipeline import IntentPipeline
from intentzero.providers.client import LLMClient

console = Console()

_OTHER_PREFIXES = (f"{OTHER_PREFIX}:", "other:")
_ROLE_STYLES: dict[ChatRoleKind, tuple[str, str]] = {
    ChatRoleKind.USER: ("나", "cyan"),
    ChatRoleKind.ASSISTANT: ("인터뷰어", "green"),
    ChatRoleKind.SYSTEM: ("시스템", "magenta"),
    ChatRoleKind.PIPELINE_NOTE: ("파이프라인", "yellow"),
}

HELP_TEXT = (
    "답변을 입력하세요. 선택형 질문은 번호나 id를 쉼표로 구분하고 '기타: 내용'을 덧붙일 수 있습니다.\n"
    "/edit <key> <답변>  이전 답변 수정\n"
    "/explain           현재 질문 부연 설명 (LLM 설정 필요)\n"
    "/progress          진행 상황\n"
    "/reset             처음부터 다시\n"
    "/quit              종료"
)


def parse_selection_input(
    question: QuestionDefinition, line: str
) -> tuple[list[str], str] | None:
    """Parse "1, camera, 기타: text" against a selection question.

    Tokens are 1-based option numbers or option ids; a token starting with
    "기타:" or "other:" carries the other-text (which may itself contain commas).

    Returns:
        (option_ids, other_text), or None if any token is not recognized.
    """
    option_ids: list[str] = []
    other_text = ""

    body = line
    lowered = line.lower()
    for prefix in _OTHER_PREFIXES:
        position = lowered.find(prefix)
        if position != -1:
            if not question.allows_other_entry:
                return None
            other_text = line[position + len(prefix) :].strip()
            body = line[:position]
            break

    for raw in body.split(","):
        token = raw.strip()
        if not token:
            continue
        if token.isdigit() and 1 <= int(token) <= len(question.options):
            option_ids.append(question.options[int(token) - 1].id)
        elif question.has_option(token):
            option_ids.append(token)
        else:
            return None

    if not option_ids and not other_text:
        return None
    return option_ids, other_text


class TranscriptPrinter:
    """Prints transcript messages as they appear (and again when edited)."""

    def __init__(self, out: Console) -> None:
        self.out = out
        self._seen: dict[UUID, str] = {}

    def __call__(self, snapshot: ControllerSnapshot) -> None:
        current = {message.id for message in snapshot.messages}
        # Reset wipes the transcript: forget what was printed
        if self._seen and not current & self._seen.keys():
            self._seen.clear()
        for message in snapshot.messages:
            previous = self._seen.get(message.id)
            if previous == message.text:
                continue
            self._print(message, edited=previous is not None)
            self._seen[message.id] = message.text

    def _print(self, message: ChatMessage, edited: bool) -> None:
        name, style = _ROLE_STYLES[message.role.kind]
        if message.role.label:
            name = message.role.label
        title = f"{name} (수정됨)" if edited else name
        self.out.print(Panel(message.text, title=title, title_align="left", border_style=style))


def print_progress(controller: InterviewController, out: Console) -> None:
    """Print the milestone table."""
    milestones = controller.milestones()
    if not milestones:
        out.print("[dim]진행 중인 인터뷰가 없습니다.[/dim]")
        return

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Stage")
    table.add_column("Status")
    table.add_column("Answer")
    for entry in milestones:
        status_style = {
            MilestoneStatus.ANSWERED: "green",
            MilestoneStatus.CURRENT: "bold yellow",
            MilestoneStatus.PENDING: "dim",
        }[entry.status]
        table.add_row(
            str(entry.index + 1),
            entry.key,
            entry.stage.value,
            f"[{status_style}]{entry.status.value}[/{status_style}]",
            entry.answer or "",
        )
    out.print(table)


def handle_line(controller: InterviewController, line: str, out: Console = console) -> bool:
    """Route one line of user input. Returns False when the user quits."""
    text = line.strip()
    if not text:
        return True

    if text.startswith("/"):
        command, _, rest = text.partition(" ")
        if command in ("/quit", "/exit"):
            return False
        if command == "/help":
            out.print(HELP_TEXT)
        elif command == "/reset":
            controller.reset_conversation()
        elif command == "/progress":
            print_progress(controller, out)
        elif command == "/explain":
            if controller.llm_client is None:
                out.print("[yellow]LLM_PROVIDER / LLM_API_KEY가 설정되지 않았습니다.[/yellow]")
            controller.request_elaboration()
        elif command == "/edit":
            key, _, answer = rest.strip().partition(" ")
            if controller.answer_for(key) is None:
                out.print(f"[yellow]수정할 답변이 없습니다: {key}[/yellow]")
            else:
                controller.edit_answer(key, answer)
        else:
            out.print(f"[yellow]알 수 없는 명령: {command}[/yellow] (/help)")
        return True

    if not controller.has_captured_initial_idea:
        controller.capture_initial_idea(text)
        return True

    state = controller.current_input_state()
    parsed = parse_selection_input(state.question, text) if state is not None else None
    if parsed is None:
        controller.submit_free_text_response(text)
        return True

    option_ids, other_text = parsed
    for option_id in option_ids:
        controller.toggle_option(option_id)
    if other_text:
        controller.update_other_text(other_text)
    controller.submit_current_selection()
    return True


def _wait(controller: InterviewController, out: Console) -> None:
    if not controller.worker.has_pending:
        return
    with out.status(controller.header_status()):
        controller.wait_idle()


def chat_command(
    config: AppConfig,
    idea: str | None = None,
    read_line: Callable[[], str] | None = None,
) -> int:
    """Run the interactive interview loop.

    Args:
        config: Application configuration.
        idea: Optional idea to start with instead of prompting.
        read_line: Input source (defaults to a rich prompt).

    Returns:
        Exit code (0 = normal exit).
    """
    if read_line is None:

        def read_line() -> str:
            return console.input("[bold cyan]> [/bold cyan]")

    pipeline = IntentPipeline(config)
    controller = InterviewController(
        pipeline,
        llm_client=LLMClient.from_environment(),
        language=config.language,
    )
    controller.subscribe(TranscriptPrinter(console))
    console.print(f"[dim]{HELP_TEXT}[/dim]")
    controller.bootstrap_if_needed()

    try:
        if idea:
            controller.capture_initial_idea(idea)
            _wait(controller, console)
        while True:
            try:
                line = read_line()
            except (EOFError, KeyboardInterrupt):
                break
            if not handle_line(controller, line, console):
                break
            _wait(controller, console)
    finally:
        controller.close()
    return 0


def questions_command(config: AppConfig, domain: str = "generic", format: str = "human") -> int:
    """List the shaped question catalog for a domain.

    Returns:
        Exit code (0 = success, 1 = catalog error).
    """
    try:
        pipeline = IntentPipeline(config)
        questions = pipeline.load_questions(domain)
    except PipelineError as e:
        if format == "human":
            console.print(f"[red]Error:[/red] {e}")
        else:
            print(json.dumps({"error": str(e)}))
        return 1

    if format == "json":
        print(json.dumps([q.model_dump(mode="json") for q in questions], ensure_ascii=False, indent=2))
        return 0

    table = Table(show_header=True, header_style="bold", title=f"Questions: {domain}")
    table.add_column("#", justify="right")
    table.add_column("Key", style="cyan")
    table.add_column("Stage")
    table.add_column("Kind")
    table.add_column("Prompt")
    for index, question in enumerate(questions, start=1):
        table.add_row(
            str(index),
            question.key,
            question.stage.value,
            question.input_kind.value,
            question.text,
        )
    console.print(table)
    return 0
