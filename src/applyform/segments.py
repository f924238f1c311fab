"""Segment builder — partitions a flat question list into renderable segments.

Consecutive ``page``-mode questions sharing a ``page_group`` are gathered into
one page segment; every ``single``-mode question becomes its own segment; the
welcome and success steps bracket the flow.

Usage::

    segments = build_segments(questions, welcome=welcome, success=success)
    # (welcome, page[q1..q8], page[q9..q16], single[q17], success)
"""

from __future__ import annotations

from typing import Iterable, Sequence

from applyform.constants import DEFAULT_PAGE_GROUP
from applyform.models.question import Question, Step, SuccessStep, WelcomeStep
from applyform.models.segment import Segment, SegmentType


def build_segments(
    questions: Sequence[Question],
    *,
    welcome: WelcomeStep,
    success: SuccessStep,
) -> tuple[Segment, ...]:
    """Bracket ``questions`` with the synthetic steps and group them."""
    return group_steps([welcome, *questions, success])


def group_steps(flow: Iterable[Step]) -> tuple[Segment, ...]:
    """Group a flat flow (markers included) into segments, preserving order.

    A ``page`` question whose group differs from the pending buffer's group
    flushes the buffer first.  A ``single`` question or a welcome/success
    marker always flushes.  Questions without a ``page_group`` fall into the
    anonymous default group, so adjacent ungrouped page questions merge.
    """
    segments: list[Segment] = []
    buffer: list[Question] = []
    current_group: object = None

    def flush() -> None:
        if buffer:
            segments.append(Segment(SegmentType.PAGE, tuple(buffer)))
            buffer.clear()

    for step in flow:
        if isinstance(step, WelcomeStep):
            flush()
            segments.append(Segment(SegmentType.WELCOME, (step,)))
            current_group = None
        elif isinstance(step, SuccessStep):
            flush()
            segments.append(Segment(SegmentType.SUCCESS, (step,)))
            current_group = None
        elif step.is_page:
            group = step.page_group if step.page_group is not None else DEFAULT_PAGE_GROUP
            if buffer and group != current_group:
                flush()
            buffer.append(step)
            current_group = group
        else:
            flush()
            segments.append(Segment(SegmentType.SINGLE, (step,)))
            current_group = None

    flush()
    return tuple(segments)


def questions_of(segments: Iterable[Segment]) -> list[Question]:
    """Concatenate the answerable steps of ``segments`` in order."""
    return [step for seg in segments if seg.is_question for step in seg.steps]
