"""Form state — the single owned, mutable object of a running form.

The segment tuple is fixed at construction.  Everything else is mutated only
through :meth:`FormState.set_answer` (answer capture) and the
:class:`applyform.navigator.FormNavigator` transition methods.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from applyform.models.question import Question
from applyform.models.segment import Segment, SegmentType
from applyform.models.submission import SubmissionResult
from applyform.segments import questions_of


@dataclass
class FormState:
    """State of one applicant's pass through the form.

    Attributes:
        segments: built once, never mutated
        segment_index: position in ``segments``; always a valid index
        answers: raw answers keyed by question id (ids in ``segments`` only)
        transitioning: true only while a segment switch is in flight
        submitted: set on the first arrival at the success segment
        submission: outcome reported by the sink, once known
        message: success-screen status line
    """

    segments: tuple[Segment, ...]
    segment_index: int = 0
    answers: dict[str, Any] = field(default_factory=dict)
    transitioning: bool = False
    submitted: bool = False
    submission: Optional[SubmissionResult] = None
    message: Optional[str] = None

    def __post_init__(self) -> None:
        self.segments = tuple(self.segments)
        if not self.segments:
            raise ValueError("A form needs at least one segment")
        if not 0 <= self.segment_index < len(self.segments):
            raise ValueError(f"segment_index out of range: {self.segment_index}")
        self._questions = {q.id: q for q in questions_of(self.segments)}
        unknown = set(self.answers) - set(self._questions)
        if unknown:
            raise KeyError(f"Answers for unknown questions: {sorted(unknown)}")

    # ------------------------------------------------------------------
    # Lookups
    # ------------------------------------------------------------------

    @property
    def current_segment(self) -> Segment:
        return self.segments[self.segment_index]

    @property
    def last_index(self) -> int:
        return len(self.segments) - 1

    @property
    def is_terminal(self) -> bool:
        """True when the current segment is the success screen."""
        return self.current_segment.type is SegmentType.SUCCESS

    @property
    def questions(self) -> list[Question]:
        """All answerable questions in display order."""
        return list(self._questions.values())

    @property
    def question_ids(self) -> set[str]:
        return set(self._questions)

    def question(self, question_id: str) -> Question:
        return self._questions[question_id]

    # ------------------------------------------------------------------
    # Answer capture
    # ------------------------------------------------------------------

    def set_answer(self, question_id: str, value: Any) -> None:
        """Store the raw value of a control change, unconditionally.

        ``None`` clears the answer.  Raises ``KeyError`` for ids that are not
        part of this form.
        """
        if question_id not in self._questions:
            raise KeyError(f"Unknown question id: {question_id}")
        if value is None:
            self.answers.pop(question_id, None)
        else:
            self.answers[question_id] = value
