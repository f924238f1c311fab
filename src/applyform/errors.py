"""Error kinds raised by the form engine.

Validation errors (``MissingRequiredField``, ``InvalidFormat``) are
recoverable: they are surfaced inline next to the offending question and only
block navigation.  ``ConfigLoadFailure`` is recovered by falling back to the
built-in schema.  ``SubmissionFailure`` is surfaced as a fallback message on
the success screen.  None of them leave the navigator in an inconsistent
state.
"""

from applyform.constants import DEFAULT_INVALID_MESSAGE, DEFAULT_REQUIRED_MESSAGE


class AnswerValidationError(ValueError):
    """Base class for per-question validation failures."""

    default_message = DEFAULT_INVALID_MESSAGE

    def __init__(self, question_id: str, message: str | None = None) -> None:
        self.question_id = question_id
        self.message = message or self.default_message
        super().__init__(f"{question_id}: {self.message}")


class MissingRequiredField(AnswerValidationError):
    """A required question has no answer (or only whitespace)."""

    default_message = DEFAULT_REQUIRED_MESSAGE


class InvalidFormat(AnswerValidationError):
    """An answer is present but fails the question's format check."""

    default_message = DEFAULT_INVALID_MESSAGE


class ConfigLoadFailure(RuntimeError):
    """The schema source could not be reached or returned garbage."""


class SubmissionFailure(RuntimeError):
    """The submission sink could not be reached or answered unreadably."""
