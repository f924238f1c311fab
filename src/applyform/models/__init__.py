"""Public model re-exports for applyform.

Consumers should import from ``applyform.models`` rather than reaching into
sub-modules directly.
"""

# --- Questions ---
from applyform.models.question import (
    BaseQuestion,
    ChoiceQuestion,
    EmailQuestion,
    FileQuestion,
    MonthQuestion,
    NumberQuestion,
    OptionsQuestion,
    Question,
    SchemaError,
    SelectQuestion,
    Step,
    SuccessStep,
    TelQuestion,
    TextQuestion,
    WelcomeStep,
    dump_schema,
    parse_schema,
    question_mapper,
)

# --- Segments ---
from applyform.models.segment import Segment, SegmentType

# --- Submission ---
from applyform.models.submission import SubmissionResult

# --- Views ---
from applyform.models.view import ProgressView, QuestionView, SegmentView

__all__ = [
    # Questions
    "BaseQuestion",
    "ChoiceQuestion",
    "EmailQuestion",
    "FileQuestion",
    "MonthQuestion",
    "NumberQuestion",
    "OptionsQuestion",
    "Question",
    "SchemaError",
    "SelectQuestion",
    "Step",
    "SuccessStep",
    "TelQuestion",
    "TextQuestion",
    "WelcomeStep",
    "dump_schema",
    "parse_schema",
    "question_mapper",
    # Segments
    "Segment",
    "SegmentType",
    # Submission
    "SubmissionResult",
    # Views
    "ProgressView",
    "QuestionView",
    "SegmentView",
]
