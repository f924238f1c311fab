"""Renderer contract — pure projection from form state to a view model.

``render(state)`` describes what to draw for the current segment; it never
mutates state or touches any UI toolkit.  Pass the ``SegmentValidation`` from
a failed ``go_next`` to attach inline error messages.
"""

from __future__ import annotations

from typing import Optional

from applyform.answers import display_text, format_phone
from applyform.constants import (
    LABEL_CONTINUE,
    LABEL_OK,
    LABEL_SUBMIT,
    SINGLE_PLACEHOLDER,
    SUBMIT_PENDING_MESSAGE,
)
from applyform.models.question import ChoiceQuestion, Question
from applyform.models.segment import SegmentType
from applyform.models.view import ProgressView, QuestionView, SegmentView
from applyform.state import FormState
from applyform.validator import SegmentValidation


def count_questions(state: FormState) -> int:
    """Number of answerable questions across all segments."""
    return sum(len(s.steps) for s in state.segments if s.is_question)


def question_number(state: FormState, question_id: str) -> int:
    """1-based position of ``question_id`` among answerable questions."""
    num = 1
    for seg in state.segments:
        if not seg.is_question:
            continue
        for step in seg.steps:
            if step.id == question_id:
                return num
            num += 1
    return num


def _progress(state: FormState) -> ProgressView:
    segment = state.current_segment
    if not segment.is_question:
        return ProgressView(visible=False)
    # Exclude the welcome and success segments from the denominator
    total_segments = max(len(state.segments) - 2, 1)
    percent = min(state.segment_index / total_segments * 100, 100.0)
    first = question_number(state, segment.steps[0].id)
    return ProgressView(
        visible=True,
        percent=round(percent, 2),
        counter=f"{first} / {count_questions(state)}",
    )


def _question_view(
    state: FormState,
    question: Question,
    *,
    single: bool,
    total: int,
    errors: dict[str, str],
) -> QuestionView:
    raw = state.answers.get(question.id)
    value = display_text(raw)
    shown = format_phone(value) if question.type == "tel" and value else value

    placeholder = getattr(question, "placeholder", None) or ""
    if single and not placeholder and question.type not in ("select", "options", "file"):
        placeholder = SINGLE_PLACEHOLDER

    return QuestionView(
        id=question.id,
        number=question_number(state, question.id),
        total=total,
        type=question.type,
        input_type=question.type,
        title=question.title,
        placeholder=placeholder,
        options=list(question.options) if isinstance(question, ChoiceQuestion) else None,
        required=question.required,
        value=value,
        display_value=shown,
        error=errors.get(question.id),
    )


def render(
    state: FormState, validation: Optional[SegmentValidation] = None,
) -> SegmentView:
    """Describe the current segment of ``state`` for a presentation layer."""
    segment = state.current_segment
    index = state.segment_index
    errors = validation.messages() if validation is not None else {}
    progress = _progress(state)
    can_go_back = (
        index > 0
        and segment.type is not SegmentType.SUCCESS
        and state.segments[index - 1].type is not SegmentType.WELCOME
    )

    if segment.type is SegmentType.WELCOME:
        step = segment.steps[0]
        return SegmentView(
            index=index,
            type="welcome",
            title=step.title,
            subtitle=step.subtitle,
            button_text=step.button_text,
            progress=progress,
            next_label=step.button_text,
        )

    if segment.type is SegmentType.SUCCESS:
        step = segment.steps[0]
        return SegmentView(
            index=index,
            type="success",
            title=step.title,
            subtitle=step.subtitle,
            message=state.message or (SUBMIT_PENDING_MESSAGE if state.submitted else None),
            progress=progress,
        )

    total = count_questions(state)
    single = segment.type is SegmentType.SINGLE
    questions = [
        _question_view(state, q, single=single, total=total, errors=errors)
        for q in segment.steps
    ]

    if single:
        return SegmentView(
            index=index,
            type="single",
            questions=questions,
            progress=progress,
            can_go_back=can_go_back,
            next_label=LABEL_OK,
        )

    first = questions[0].number
    last = min(first + len(questions) - 1, total)
    # The segment before success is the last one holding questions
    is_last = index == len(state.segments) - 2
    return SegmentView(
        index=index,
        type="page",
        header=f"Questions {first}–{last} of {total}",
        questions=questions,
        progress=progress,
        can_go_back=can_go_back,
        next_label=LABEL_SUBMIT if is_last else LABEL_CONTINUE,
    )
