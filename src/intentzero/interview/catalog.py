"""Question catalog shaping.

Turns a raw catalog payload (groups of question entries) into the ordered
QuestionDefinition list an InterviewSession runs over:

1. Each group is classified as core or optional.
2. Entries get prompt/hint overrides and selection metadata by key.
3. Questions are filtered and reordered by CANONICAL_ORDER. Keys outside the
   list are dropped; listed keys missing from the payload are not synthesized.
"""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from intentzero.interview.models import (
    InterviewSession,
    QuestionDefinition,
    QuestionInputKind,
    QuestionOption,
    QuestionStage,
)

CANONICAL_ORDER: tuple[str, ...] = (
    "project_name",
    "job1_when",
    "core_value",
    "in_scope_items",
    "primary_flow",
    "session_types",
    "cycle_goal",
    "out_scope_items",
    "bounds",
    "recordable_operator",
    "recordable_threshold_sec",
    "session_types_rule",
)

# Group titles containing this marker ("needed") hold optional questions
_OPTIONAL_GROUP_MARKER = "필요"

# Groups at or below this index are core unless their title says otherwise
_LAST_CORE_GROUP_INDEX = 1


# --- Payload schema ---


class CatalogEntry(BaseModel):
    """One question entry as stored in a catalog file."""

    key: str
    prompt: str
    hint: str | None = None
    example: str | None = None
    required: bool | None = None
    default_value: str | None = Field(default=None, alias="default")

    model_config = ConfigDict(frozen=True, populate_by_name=True)


class CatalogGroup(BaseModel):
    """A titled group of catalog entries."""

    title: str | None = None
    questions: list[CatalogEntry] = Field(default_factory=list)


class CatalogPayload(BaseModel):
    """Top-level catalog file contents."""

    groups: list[CatalogGroup] = Field(default_factory=list)


# --- Overrides ---


class QuestionOverride(BaseModel):
    """Per-key replacements applied on top of a catalog entry."""

    prompt: str | None = None
    hint: str | None = None
    example: str | None = None
    input_kind: QuestionInputKind = QuestionInputKind.FREE_TEXT
    options: tuple[QuestionOption, ...] = ()
    allows_multiple: bool = False
    allows_other: bool = False

    model_config = ConfigDict(frozen=True)

    @classmethod
    def free_text(
        cls,
        prompt: str | None = None,
        hint: str | None = None,
        example: str | None = None,
    ) -> QuestionOverride:
        return cls(prompt=prompt, hint=hint, example=example)

    @classmethod
    def multi_select(
        cls,
        options: list[QuestionOption],
        prompt: str | None = None,
        hint: str | None = None,
        allows_other: bool = False,
    ) -> QuestionOverride:
        return cls(
            prompt=prompt,
            hint=hint,
            input_kind=_selection_kind(allows_other),
            options=tuple(options),
            allows_multiple=True,
            allows_other=allows_other,
        )

    @classmethod
    def single_select(
        cls,
        options: list[QuestionOption],
        prompt: str | None = None,
        hint: str | None = None,
        allows_other: bool = False,
    ) -> QuestionOverride:
        return cls(
            prompt=prompt,
            hint=hint,
            input_kind=_selection_kind(allows_other),
            options=tuple(options),
            allows_multiple=False,
            allows_other=allows_other,
        )


def _selection_kind(allows_other: bool) -> QuestionInputKind:
    if allows_other:
        return QuestionInputKind.MULTI_SELECT_WITH_OTHER
    return QuestionInputKind.MULTI_SELECT


def _options(*pairs: tuple[str, str]) -> list[QuestionOption]:
    return [QuestionOption(id=option_id, title=title) for option_id, title in pairs]


QUESTION_OVERRIDES: dict[str, QuestionOverride] = {
    "project_name": QuestionOverride.free_text(
        prompt="프로젝트를 소개해 주세요!",
        hint="한 줄로 프로젝트를 요약해 주세요.",
    ),
    "job1_when": QuestionOverride.free_text(
        prompt="언제/어디서 이 서비스가 필요했나요?",
        hint="실제로 겪은 상황을 떠올려 보세요.",
    ),
    "core_value": QuestionOverride.free_text(
        prompt="사용자가 느끼는 핵심 가치는 무엇인가요?",
        hint="사용자가 느끼는 변화 한 문장",
    ),
    "in_scope_items": QuestionOverride.multi_select(
        prompt="누가 이 서비스를 사용하나요?",
        hint="해당하는 사용자를 모두 선택하거나 기타로 적어주세요.",
        allows_other=True,
        options=_options(
            ("traveler", "해외/국내 여행자"),
            ("business", "비즈니스 출장자"),
            ("resident", "재외 거주자"),
            ("guide", "현지 가이드/통역사"),
            ("support", "외국인 고객 지원 상담사"),
        ),
    ),
    "primary_flow": QuestionOverride.free_text(
        prompt="앱의 사용자 플로우를 알려주세요!",
        hint="핵심 플로우를 단계 순서로 작성",
    ),
    "session_types": QuestionOverride.multi_select(
        prompt="핵심 기능을 골라주세요.",
        hint="우선 제공할 기능을 선택하세요.",
        allows_other=True,
        options=_options(
            ("voice", "실시간 음성 통역"),
            ("camera", "카메라/OCR 번역"),
            ("conversation", "대화 기록 저장 및 검색"),
            ("favorites", "즐겨찾기/자주 쓰는 문구 관리"),
            ("offline", "오프라인 번역 모드"),
        ),
    ),
    "cycle_goal": QuestionOverride.multi_select(
        prompt="이번에 꼭 할 3가지 체크",
        hint="이번 스프린트에서 반드시 끝낼 항목",
        allows_other=True,
        options=_options(
            ("stable_voice", "음성 통역 안정화"),
            ("camera_accuracy", "카메라 번역 정확도 확보"),
            ("conversation_log", "대화 로그 저장"),
            ("favorites_feature", "즐겨찾기 문구 관리"),
            ("tts_quality", "자연스러운 TTS 음성"),
        ),
    ),
    "out_scope_items": QuestionOverride.multi_select(
        prompt="지금은 안 할 기능을 고르세요.",
        hint="후순위 기능 또는 제외할 항목",
        allows_other=True,
        options=_options(
            ("offline_mode", "완전 오프라인 지원"),
            ("wearable", "웨어러블 연동"),
            ("analytics", "고급 분석 리포트"),
            ("community", "사용자 커뮤니티 기능"),
        ),
    ),
    "bounds": QuestionOverride.single_select(
        prompt="최소 지원 iOS 버전을 선택해 주세요.",
        allows_other=True,
        options=_options(
            ("ios18", "iOS 18.0"),
            ("ios17", "iOS 17.0"),
            ("ios16", "iOS 16.4"),
            ("ios15", "iOS 15.7"),
        ),
    ),
    "recordable_operator": QuestionOverride.multi_select(
        prompt="개발 언어 및 아키텍처를 확정해 주세요.",
        allows_other=True,
        options=_options(
            ("swift", "Swift 5.8 이상"),
            ("swiftui", "SwiftUI"),
            ("architecture", "MVVM + Clean Architecture"),
        ),
    ),
    "recordable_threshold_sec": QuestionOverride.multi_select(
        prompt="센싱/번역 관련 프레임워크 선택",
        allows_other=True,
        options=_options(
            ("vision", "Vision Framework"),
            ("avfoundation", "AVFoundation (카메라)"),
            ("speech", "Speech Framework"),
            ("translation", "Translation Framework"),
            ("tts", "AVSpeechSynthesizer"),
        ),
    ),
    "session_types_rule": QuestionOverride.multi_select(
        prompt="인프라 및 보안 구성",
        allows_other=True,
        options=_options(
            ("coredata", "Core Data"),
            ("networking", "URLSession + Combine"),
            ("security", "Keychain Services"),
        ),
    ),
}


# --- Shaping ---


def classify_stage(group_index: int, group_title: str | None) -> QuestionStage:
    """Classify a catalog group as core or optional.

    A title mentioning "필요" marks an optional group; otherwise the first two
    groups are core and the rest optional.
    """
    if group_title is not None and _OPTIONAL_GROUP_MARKER in group_title:
        return QuestionStage.OPTIONAL
    if group_index <= _LAST_CORE_GROUP_INDEX:
        return QuestionStage.CORE
    return QuestionStage.OPTIONAL


def build_question(
    entry: CatalogEntry,
    stage: QuestionStage,
    group_title: str | None = None,
    override: QuestionOverride | None = None,
) -> QuestionDefinition:
    """Build a QuestionDefinition from a catalog entry and optional override."""
    if override is None:
        override = QuestionOverride()
    return QuestionDefinition(
        key=entry.key,
        text=override.prompt or entry.prompt,
        hint=override.hint or entry.hint,
        example=override.example or entry.example,
        required=entry.required if entry.required is not None else stage == QuestionStage.CORE,
        default_answer=entry.default_value,
        group_title=group_title,
        stage=stage,
        input_kind=override.input_kind,
        options=override.options,
        allows_multiple_selection=override.allows_multiple,
        allows_other_entry=override.allows_other,
    )


def shape_questions(
    payload: CatalogPayload,
    order: tuple[str, ...] = CANONICAL_ORDER,
    overrides: dict[str, QuestionOverride] | None = None,
) -> list[QuestionDefinition]:
    """Classify, override, filter and reorder catalog entries.

    Args:
        payload: Parsed catalog file
        order: Canonical key order; keys outside it are dropped
        overrides: Per-key overrides (defaults to QUESTION_OVERRIDES)

    Returns:
        Questions in canonical order. When a key appears more than once in
        the payload, the first occurrence wins.
    """
    if overrides is None:
        overrides = QUESTION_OVERRIDES
    position = {key: index for index, key in enumerate(order)}

    shaped: dict[str, QuestionDefinition] = {}
    for group_index, group in enumerate(payload.groups):
        stage = classify_stage(group_index, group.title)
        for entry in group.questions:
            if entry.key not in position or entry.key in shaped:
                continue
            shaped[entry.key] = build_question(
                entry,
                stage,
                group_title=group.title,
                override=overrides.get(entry.key),
            )

    return sorted(shaped.values(), key=lambda q: position[q.key])


def core_prefix_length(questions: list[QuestionDefinition]) -> int:
    """Count the contiguous leading run of core questions."""
    count = 0
    for question in questions:
        if question.stage != QuestionStage.CORE:
            break
        count += 1
    return count


def build_session(domain: str, questions: list[QuestionDefinition]) -> InterviewSession:
    """Start a fresh session over already-shaped questions."""
    return InterviewSession(
        domain=domain,
        questions=tuple(questions),
        core_question_count=core_prefix_length(questions),
    )
