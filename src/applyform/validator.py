"""Answer validation — per-question and per-segment.

Rules, applied in order for each question:

  1. ``required`` and the answer is empty/absent → :class:`MissingRequiredField`
  2. a format predicate is attached and rejects the answer → :class:`InvalidFormat`

Built-in predicates exist for ``email``, ``tel``, ``number`` and ``month``.
A schema-supplied ``pattern`` replaces the built-in check.  An empty answer
to an optional question skips the predicate.

Segment validation never short-circuits: every step of a page is checked so
all invalid inputs can be marked at once, and the first failure is reported
as the scroll target.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from functools import lru_cache
from typing import Any, Callable, Iterable, Mapping, Optional

from applyform.answers import FileRef, digits_of, is_empty
from applyform.constants import TEL_MIN_DIGITS
from applyform.errors import AnswerValidationError, InvalidFormat, MissingRequiredField
from applyform.models.question import ChoiceQuestion, Question
from applyform.models.segment import Segment

Predicate = Callable[[str], bool]

_EMAIL_RE = re.compile(r"^[^\s@]+@[^\s@]+\.[^\s@]+$")
_NUMBER_RE = re.compile(r"^\d+(\.\d+)?$")
_MONTH_RE = re.compile(r"^(\d{4}-(0[1-9]|1[0-2])|(0[1-9]|1[0-2])/\d{4})$")


def _is_email(value: str) -> bool:
    return bool(_EMAIL_RE.match(value))


def _is_phone(value: str) -> bool:
    return len(digits_of(value)) >= TEL_MIN_DIGITS


def _is_number(value: str) -> bool:
    return bool(_NUMBER_RE.match(value))


def _is_month(value: str) -> bool:
    return bool(_MONTH_RE.match(value))


# Built-in format checks keyed by question type.
BUILTIN_PREDICATES: dict[str, Predicate] = {
    "email": _is_email,
    "tel": _is_phone,
    "number": _is_number,
    "month": _is_month,
}


@lru_cache(maxsize=256)
def _compile(pattern: str) -> re.Pattern[str]:
    return re.compile(pattern)


def predicate_for(question: Question) -> Optional[Predicate]:
    """Return the format check attached to ``question``, if any.

    Patterns are checked when the schema is parsed, so compiling here
    cannot fail for a question that came through ``parse_schema``.
    """
    if question.pattern:
        compiled = _compile(question.pattern)
        return lambda v: bool(compiled.fullmatch(v))
    return BUILTIN_PREDICATES.get(question.type)


def validate_answer(question: Question, value: Any) -> None:
    """Raise if ``value`` is not an acceptable answer to ``question``."""
    if is_empty(value):
        if question.required:
            raise MissingRequiredField(question.id, question.error_message)
        return

    # A file answer is a FileRef client-side, or the stored upload path
    # once the server has saved it
    if question.type == "file":
        if not isinstance(value, (FileRef, str)):
            raise InvalidFormat(question.id, question.error_message)
        return

    text = value.strip() if isinstance(value, str) else str(value)

    # Choice answers must be one of the offered labels
    if isinstance(question, ChoiceQuestion) and text not in question.options:
        raise InvalidFormat(question.id, question.error_message)

    check = predicate_for(question)
    if check is not None and not check(text):
        raise InvalidFormat(question.id, question.error_message)


@dataclass
class SegmentValidation:
    """Outcome of validating every step of a segment."""

    errors: dict[str, AnswerValidationError] = field(default_factory=dict)
    # Id of the first invalid step in display order (scroll target)
    first_invalid: Optional[str] = None

    @property
    def ok(self) -> bool:
        return not self.errors

    def messages(self) -> dict[str, str]:
        return {qid: err.message for qid, err in self.errors.items()}


def validate_questions(
    questions: Iterable[Question], answers: Mapping[str, Any],
) -> SegmentValidation:
    """Validate each question against ``answers`` and collect every failure."""
    result = SegmentValidation()
    for q in questions:
        try:
            validate_answer(q, answers.get(q.id))
        except AnswerValidationError as exc:
            result.errors[q.id] = exc
            if result.first_invalid is None:
                result.first_invalid = q.id
    return result


def validate_segment(
    segment: Segment, answers: Mapping[str, Any],
) -> SegmentValidation:
    """Validate the answerable steps of ``segment``.

    Welcome and success segments hold no questions and always pass.
    """
    if not segment.is_question:
        return SegmentValidation()
    return validate_questions(segment.steps, answers)


def validate_answers(
    questions: Iterable[Question], answers: Mapping[str, Any],
) -> dict[str, str]:
    """Validate a complete answer map; returns ``{qid: message}`` failures."""
    return validate_questions(questions, answers).messages()
