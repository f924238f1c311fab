"""applyform — multi-step application form engine.

Public API:
    ApplicationForm — runs one applicant through the form (load → navigate → submit)
    FormNavigator   — segment state machine with validation gates and transition lock
    FormState       — explicitly owned state: segments, index, answers, flags
    SchemaStore     — built-in default schema and stored-schema resolution
    build_segments  — groups a flat question list into renderable segments
    render          — pure projection of the current segment into a SegmentView

Validation:
    validate_answer   — per-question check, raises MissingRequiredField / InvalidFormat
    validate_segment  — per-segment check, collects every failure

Collaborators:
    SchemaSource / SubmissionSink — interfaces for the schema and ingestion endpoints
    HttpFormClient                — httpx implementation of both
    FileRef                       — opaque file answer (switches submission to multipart)
"""

from applyform.answers import FileRef
from applyform.client import HttpFormClient
from applyform.errors import (
    AnswerValidationError,
    ConfigLoadFailure,
    InvalidFormat,
    MissingRequiredField,
    SubmissionFailure,
)
from applyform.flow import ApplicationForm
from applyform.interfaces import SchemaSource, SubmissionSink
from applyform.models import (
    Question,
    Segment,
    SegmentType,
    SegmentView,
    SubmissionResult,
    parse_schema,
)
from applyform.navigator import FormNavigator, Navigation
from applyform.schema import SchemaStore
from applyform.segments import build_segments
from applyform.state import FormState
from applyform.validator import SegmentValidation, validate_answer, validate_segment
from applyform.view import render

__all__ = [
    # Flow
    "ApplicationForm",
    "FormNavigator",
    "FormState",
    "Navigation",
    "SchemaStore",
    "build_segments",
    "render",
    # Models
    "FileRef",
    "Question",
    "Segment",
    "SegmentType",
    "SegmentView",
    "SubmissionResult",
    "parse_schema",
    # Validation
    "SegmentValidation",
    "validate_answer",
    "validate_segment",
    # Errors
    "AnswerValidationError",
    "ConfigLoadFailure",
    "InvalidFormat",
    "MissingRequiredField",
    "SubmissionFailure",
    # Collaborators
    "HttpFormClient",
    "SchemaSource",
    "SubmissionSink",
]
