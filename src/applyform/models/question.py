"""Question type models for the application form schema.

Each question type maps to a specific input control and validation rule:

  Free input:
    - text: single-line text input
    - email: text input checked against a basic ``local@domain.tld`` shape
    - tel: phone input; at least 10 digits once formatting is stripped
    - number: non-negative numeric input
    - month: month picker (``YYYY-MM`` or ``MM/YYYY``)

  Choice:
    - select: dropdown with a fixed option list
    - options: button grid with a fixed option list

  Upload:
    - file: a single file attachment (licence scan, resume, ...)

The discriminated ``Question`` union uses ``type`` as its discriminator.
The ``question_mapper`` dict maps type strings to their Pydantic classes.

``WelcomeStep`` and ``SuccessStep`` are synthetic steps the segment builder
places at the start and end of every form; they are never answered.
"""

from __future__ import annotations

import re
from typing import Annotated, List, Literal, Optional, Union

from pydantic import BaseModel, ConfigDict, Field, TypeAdapter, ValidationError, field_validator

from applyform.constants import SUCCESS_ID, WELCOME_ID


class SchemaError(ValueError):
    """Raised when a question schema cannot be parsed."""


# --- Base question type ---

class BaseQuestion(BaseModel):
    """Fields shared by all question types."""

    # Stored schemas may carry keys from older admin editors.
    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    id: str = Field(min_length=1)
    title: str
    display_mode: Literal["single", "page"] = "single"
    page_group: Optional[Union[int, str]] = None
    required: bool = False
    error_message: Optional[str] = Field(default=None, alias="errorMessage")
    # Optional regex that replaces the type's built-in format check
    pattern: Optional[str] = None

    @field_validator("pattern")
    @classmethod
    def _pattern_compiles(cls, value: Optional[str]) -> Optional[str]:
        """Reject a pattern that is not a valid regular expression."""
        if value:
            try:
                re.compile(value)
            except re.error as exc:
                raise ValueError(f"invalid pattern {value!r}: {exc}") from exc
        return value

    @property
    def is_page(self) -> bool:
        return self.display_mode == "page"


class PlaceholderQuestion(BaseQuestion):
    """A free-input question with an optional placeholder."""

    placeholder: Optional[str] = None


class ChoiceQuestion(BaseQuestion):
    """A question answered by picking one of ``options``."""

    options: List[str] = Field(min_length=1)


# --- Free input ---

class TextQuestion(PlaceholderQuestion):
    type: Literal["text"] = "text"


class EmailQuestion(PlaceholderQuestion):
    type: Literal["email"] = "email"


class TelQuestion(PlaceholderQuestion):
    type: Literal["tel"] = "tel"


class NumberQuestion(PlaceholderQuestion):
    type: Literal["number"] = "number"


class MonthQuestion(PlaceholderQuestion):
    type: Literal["month"] = "month"


# --- Choice ---

class SelectQuestion(ChoiceQuestion):
    type: Literal["select"] = "select"


class OptionsQuestion(ChoiceQuestion):
    type: Literal["options"] = "options"


# --- Upload ---

class FileQuestion(BaseQuestion):
    """A single file attachment.  ``accept`` mirrors the HTML attribute."""

    type: Literal["file"] = "file"
    accept: Optional[str] = None


# --- Synthetic steps ---

class WelcomeStep(BaseModel):
    """First screen of every form; advancing past it is one-way."""

    id: Literal["__welcome__"] = WELCOME_ID
    type: Literal["welcome"] = "welcome"
    title: str
    subtitle: str = ""
    button_text: str = "Start"


class SuccessStep(BaseModel):
    """Terminal screen; arriving here triggers the submission."""

    id: Literal["__success__"] = SUCCESS_ID
    type: Literal["success"] = "success"
    title: str
    subtitle: str = ""


# --- Discriminated union of all question types ---

Question = Annotated[
    Union[
        TextQuestion,
        EmailQuestion,
        TelQuestion,
        NumberQuestion,
        MonthQuestion,
        SelectQuestion,
        OptionsQuestion,
        FileQuestion,
    ],
    Field(discriminator="type"),
]

Step = Union[WelcomeStep, SuccessStep, Question]

# Maps type string → Pydantic class for building questions in code.
question_mapper = {
    "text": TextQuestion,
    "email": EmailQuestion,
    "tel": TelQuestion,
    "number": NumberQuestion,
    "month": MonthQuestion,
    "select": SelectQuestion,
    "options": OptionsQuestion,
    "file": FileQuestion,
}

_schema_adapter = TypeAdapter(List[Question])


def parse_schema(raw: object) -> list[Question]:
    """Validate a JSON-decoded question array into typed questions.

    Raises ``SchemaError`` when ``raw`` is not a list, when an entry fails
    validation, or when two questions share an id.
    """
    if not isinstance(raw, list):
        raise SchemaError("Invalid configuration format: must be an array")
    try:
        questions = _schema_adapter.validate_python(raw)
    except ValidationError as exc:
        raise SchemaError(f"Invalid question schema: {exc}") from exc

    seen: set[str] = set()
    for q in questions:
        if q.id in seen:
            raise SchemaError(f"Invalid question schema: duplicate id '{q.id}'")
        if q.id in (WELCOME_ID, SUCCESS_ID):
            raise SchemaError(f"Invalid question schema: reserved id '{q.id}'")
        seen.add(q.id)
    return questions


def dump_schema(questions: list[Question]) -> list[dict]:
    """Serialize questions back to the JSON shape the admin editor stores."""
    return _schema_adapter.dump_python(
        questions, mode="json", by_alias=True, exclude_none=True,
    )
