"""View models — the contract between the engine and a presentation layer.

The renderer in :mod:`applyform.view` projects ``(segment, state)`` into these
models.  They carry only what a UI needs to draw the current screen, so any
toolkit (terminal, HTML template, native widget) can consume them without
touching the state machine.

View types:
  - QuestionView: one input control with its current value and error
  - ProgressView: progress bar and "n / total" counter
  - SegmentView: everything needed to draw the current segment
"""

from typing import Literal, Optional

from pydantic import BaseModel


class QuestionView(BaseModel):
    """Flattened question for drawing one input control."""

    id: str
    # 1-based position among all answerable questions
    number: int
    total: int
    type: str
    # HTML-style input kind: text/email/tel/number/month/file/select/options
    input_type: str
    title: str
    placeholder: str = ""
    # Option labels for select/options questions
    options: list[str] | None = None
    required: bool = False
    # Raw stored answer (file answers are shown by filename)
    value: Optional[str] = None
    # Value formatted for display (e.g. phone numbers)
    display_value: Optional[str] = None
    # Inline error message, set only after a failed navigation attempt
    error: Optional[str] = None


class ProgressView(BaseModel):
    """Progress indicator; hidden on the welcome and success screens."""

    visible: bool
    percent: float = 0.0
    counter: str = ""


class SegmentView(BaseModel):
    """Everything a presentation layer needs to draw the current segment."""

    index: int
    type: Literal["welcome", "single", "page", "success"]
    title: str = ""
    subtitle: str = ""
    # Welcome call-to-action label
    button_text: Optional[str] = None
    # Success-screen status line (updated by the submission outcome)
    message: Optional[str] = None
    # Page header such as "Questions 1–8 of 31"
    header: Optional[str] = None
    questions: list[QuestionView] = []
    progress: ProgressView
    can_go_back: bool = False
    next_label: Optional[str] = None
