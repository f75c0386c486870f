"""Conversation text — question prompts, examples, and fixed messages.

Pure functions, no state. The controller decides when to say what; this
module decides how it reads.
"""

from __future__ import annotations

import re
from collections.abc import Iterable
from enum import StrEnum

from intentzero.interview.models import QuestionDefinition

GREETING = "안녕하세요! 만들고 싶은 제품 아이디어를 한 줄로 적어주세요."
OPTIONAL_DECISION_PROMPT = (
    "핵심 질문이 모두 완료됐어요. 지금 바로 '명세 생성'을 입력하면 결과를 받고, "
    "'계속'이라고 입력하면 심화 질문을 이어갈게요."
)
OPTIONAL_DECISION_RETRY = "'명세 생성' 또는 '계속'이라고 입력해 주세요."
CONTINUE_ACK = "좋아요! 심화 질문을 이어갈게요."
ALL_ANSWERED = "모든 질문에 답해 주셨어요! 명세서를 생성합니다."
NO_MORE_QUESTIONS = "추가 질문은 없습니다. 새로운 아이디어를 입력하려면 '초기화'를 눌러주세요."
HANDOFF_MESSAGE = (
    "agents/commands/3_coding_agent.prompt에 생성된 명세서를 전달하면 "
    "코딩 에이전트가 구현을 이어갈 수 있습니다."
)
ELABORATION_INVITE = "추가적인 부연 설명을 해드릴까요?"
OTHER_ENTRY_HINT = "필요하면 '기타' 항목에 자유롭게 입력해 주세요."
OTHER_PREFIX = "기타"

GENERATE_KEYWORDS: tuple[str, ...] = ("명세 생성", "생성", "generate", "spec", "finish")
CONTINUE_KEYWORDS: tuple[str, ...] = ("계속", "심화", "continue", "more", "추가")

_TRANSLATION_KEYWORDS = ("번역", "통역", "translator", "translation", "언어", "language")
_ELLIPSIS = "…"


class OptionalDecision(StrEnum):
    """What the user chose at the core/optional boundary."""

    GENERATE = "generate"
    CONTINUE = "continue"


def match_optional_decision(text: str) -> OptionalDecision | None:
    """Match free text against the decision keywords.

    Case-insensitive substring match. Generate keywords are checked first, so
    input containing both kinds resolves to GENERATE.
    """
    normalized = text.strip().lower()
    if any(keyword in normalized for keyword in GENERATE_KEYWORDS):
        return OptionalDecision.GENERATE
    if any(keyword in normalized for keyword in CONTINUE_KEYWORDS):
        return OptionalDecision.CONTINUE
    return None


def format_selection_response(
    question: QuestionDefinition,
    selections: Iterable[str],
    other_text: str = "",
) -> str:
    """Render a selection answer as transcript text.

    Selected option titles come first in catalog order, then the other-text
    segment. Example: "Voice, Camera, 기타: custom flow".
    """
    selected = set(selections)
    parts = [option.title for option in question.options if option.id in selected]
    if other_text:
        parts.append(f"{OTHER_PREFIX}: {other_text}")
    return ", ".join(parts)


def idea_snippet(idea: str, limit: int = 18) -> str:
    """Trim the idea to at most limit characters, marking truncation."""
    trimmed = idea.strip()
    if len(trimmed) <= limit:
        return trimmed
    return trimmed[:limit] + _ELLIPSIS


def suggested_name(idea: str) -> str:
    """Coin a placeholder project name from the idea."""
    lower = idea.lower()
    if any(keyword in lower for keyword in _TRANSLATION_KEYWORDS):
        return "LinguaBridge"

    words = [word for word in re.split(r"[\W_]+", idea) if word]
    if not words:
        return "IdeaBridge"
    base = "".join(words[:2]).replace(_ELLIPSIS, "")
    return base[:10] + "Talk"


def idea_specific_example(question: QuestionDefinition, idea: str) -> str:
    """Build an example line tailored to the captured idea."""
    snippet = idea_snippet(idea) or idea
    if question.key == "project_name":
        return f'예시: "{suggested_name(idea)}" — {snippet}에 바로 떠오르는 이름'
    if question.key == "job1_when":
        return f"예시: {snippet} 상황에서 통역이 급히 필요했던 순간"
    if question.key == "core_value":
        return f"예시: {snippet} 사용자에게 즉각적인 의사소통 자신감을 줍니다."
    if question.default_answer:
        return f"예시: {question.default_answer} — {snippet}을(를) 염두에 둔 답변"
    if question.example:
        return f"예시: {question.example}"
    return f'"{snippet}" 맥락을 떠올리며 구체적으로 설명해보세요.'


def example_line(question: QuestionDefinition, idea: str | None) -> str | None:
    """Pick the example line for a free-text question, if any."""
    if question.options:
        return None
    if idea:
        return idea_specific_example(question, idea)
    if question.example:
        return question.example
    if question.default_answer:
        return f"예시: {question.default_answer}"
    return None


def render_question_prompt(question: QuestionDefinition, idea: str | None = None) -> str:
    """Render a question as the assistant's chat message."""
    lines = [question.text]
    if question.hint:
        lines.append(f"힌트: {question.hint}")

    if question.options:
        bullets = []
        for option in question.options:
            if option.detail:
                bullets.append(f"• {option.title} — {option.detail}")
            else:
                bullets.append(f"• {option.title}")
        lines.append("예시 답변:\n" + "\n".join(bullets))
        if question.allows_other_entry:
            lines.append(OTHER_ENTRY_HINT)
    else:
        example = example_line(question, idea)
        if example:
            lines.append(example)

    lines.append(ELABORATION_INVITE)
    return "\n".join(lines)


def build_elaboration_prompt(question: QuestionDefinition, idea: str | None) -> str:
    """Build the language-model prompt that explains a question in context."""
    lines = [
        "You are helping a user write a product specification through a short interview.",
        "Explain the interview question below in 2-4 short sentences, in Korean.",
        "Tie the explanation to the user's product idea and suggest what a good answer covers.",
        "",
        f"Product idea: {idea or '(not provided)'}",
        f"Question: {question.text}",
    ]
    if question.hint:
        lines.append(f"Hint: {question.hint}")
    if question.options:
        lines.append("Options: " + ", ".join(option.title for option in question.options))
    return "\n".join(lines)


def generation_report(file_names: list[str], todo_count: int, output_location: str) -> str:
    """Render the pipeline note summarizing a finished generation run."""
    lines = [
        f"명세서 {len(file_names)}종 생성 완료 (TODO: {todo_count}개)",
        f"출력 위치: {output_location}",
    ]
    lines.extend(f"• {name}" for name in file_names)
    return "\n".join(lines)
