"""FormNavigator — the segment state machine.

The navigator is the only code that moves ``FormState.segment_index``.  Each
move follows the same lock discipline:

    transitioning = True → index changes → on_render(state) → (next tick)
    transitioning = False

so at most one transition is in flight and re-entrant navigation (a second
click or key press during a switch) is ignored.

Gates:
  - ``go_next`` validates the current question segment and stays put when
    any step is invalid.
  - ``go_previous`` never returns to the welcome screen and never leaves the
    success screen.
  - The first transition into the success segment marks the state as
    submitted and reports ``submit_due``; re-entering it never does.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass
from typing import Callable, Literal, Optional

from applyform.constants import TEXT_LIKE_TYPES
from applyform.models.segment import SegmentType
from applyform.state import FormState
from applyform.validator import SegmentValidation, validate_segment

logger = logging.getLogger(__name__)

Reason = Literal[
    "moved", "locked", "invalid", "at_start", "at_end", "welcome_gate", "terminal",
]


@dataclass
class Navigation:
    """Outcome of a navigation attempt."""

    moved: bool
    index: int
    reason: Reason
    validation: Optional[SegmentValidation] = None
    # True exactly once: on the first arrival at the success segment
    submit_due: bool = False


def _next_tick(callback: Callable[[], None]) -> None:
    """Run ``callback`` on the next event-loop iteration, or now if idle."""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        callback()
        return
    loop.call_soon(callback)


class FormNavigator:
    """Advances and retreats through the segments of a :class:`FormState`.

    Args:
        state: the form state to drive
        on_render: called with the state after every index change
        defer: schedules the release of the transition lock; defaults to the
            running asyncio loop's ``call_soon``
    """

    def __init__(
        self,
        state: FormState,
        *,
        on_render: Callable[[FormState], None] | None = None,
        defer: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        self._state = state
        self._on_render = on_render
        self._defer = defer or _next_tick

    @property
    def state(self) -> FormState:
        return self._state

    # ------------------------------------------------------------------
    # Transitions
    # ------------------------------------------------------------------

    def go_next(self) -> Navigation:
        """Advance one segment if the current one validates."""
        state = self._state
        if state.transitioning:
            return Navigation(False, state.segment_index, "locked")

        segment = state.current_segment
        if segment.is_question:
            self._trim_answers()
            validation = validate_segment(segment, state.answers)
            if not validation.ok:
                logger.debug(
                    "Segment %d invalid: %s",
                    state.segment_index, sorted(validation.errors),
                )
                return Navigation(
                    False, state.segment_index, "invalid", validation=validation,
                )

        if state.segment_index >= state.last_index:
            return Navigation(False, state.segment_index, "at_end")

        submit_due = self._transition(state.segment_index + 1)
        return Navigation(True, state.segment_index, "moved", submit_due=submit_due)

    def go_previous(self) -> Navigation:
        """Retreat one segment unless a gate forbids it."""
        state = self._state
        if state.transitioning:
            return Navigation(False, state.segment_index, "locked")
        if state.segment_index <= 0:
            return Navigation(False, state.segment_index, "at_start")
        if state.is_terminal:
            return Navigation(False, state.segment_index, "terminal")
        if state.segments[state.segment_index - 1].type is SegmentType.WELCOME:
            return Navigation(False, state.segment_index, "welcome_gate")

        self._transition(state.segment_index - 1)
        return Navigation(True, state.segment_index, "moved")

    def can_go_back(self) -> bool:
        """Whether :meth:`go_previous` would move (ignoring the lock)."""
        state = self._state
        return (
            state.segment_index > 0
            and not state.is_terminal
            and state.segments[state.segment_index - 1].type is not SegmentType.WELCOME
        )

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _transition(self, index: int) -> bool:
        """Switch to ``index`` under the lock; return True if submission is due."""
        state = self._state
        state.transitioning = True
        state.segment_index = index

        submit_due = False
        if state.is_terminal and not state.submitted:
            state.submitted = True
            submit_due = True

        logger.debug("Transition to segment %d (%s)", index, state.current_segment.type.value)
        try:
            if self._on_render is not None:
                self._on_render(state)
        finally:
            self._defer(self._release)
        return submit_due

    def _release(self) -> None:
        self._state.transitioning = False

    def _trim_answers(self) -> None:
        """Write back trimmed text answers of the current segment."""
        state = self._state
        for step in state.current_segment.steps:
            value = state.answers.get(step.id)
            if step.type in TEXT_LIKE_TYPES and isinstance(value, str):
                state.answers[step.id] = value.strip()
