"""ApplicationForm — drives one applicant through the form.

Wraps the navigator and adds the two asynchronous edges of the flow:

  1. **Load** — fetch the schema from a :class:`SchemaSource`, falling back
     to the built-in default schema when the source fails or is empty.
  2. **Submit** — on the first arrival at the success segment, hand the
     answers to a :class:`SubmissionSink` exactly once and record the
     outcome as the success-screen message.

Usage::

    client = HttpFormClient("https://example.com/api/v1")
    form = await ApplicationForm.load(client, client)

    await form.next()                       # leave the welcome screen
    form.answer("full_name", "Jane Smith")
    nav = await form.next()
    if nav.reason == "invalid":
        view = form.view()                  # inline errors attached
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Sequence

from applyform.constants import (
    SUBMIT_NETWORK_MESSAGE,
    SUBMIT_OK_MESSAGE,
    SUBMIT_REJECTED_MESSAGE,
)
from applyform.errors import ConfigLoadFailure, SubmissionFailure
from applyform.interfaces import SchemaSource, SubmissionSink
from applyform.models.question import Question, SchemaError
from applyform.models.submission import SubmissionResult
from applyform.models.view import SegmentView
from applyform.navigator import FormNavigator, Navigation
from applyform.schema import SchemaStore
from applyform.segments import build_segments
from applyform.state import FormState
from applyform.validator import SegmentValidation
from applyform.view import render

logger = logging.getLogger(__name__)


class ApplicationForm:
    """A running form: state, navigation, and the one-shot submission.

    Args:
        state: a freshly built :class:`FormState`
        sink: where the finished answers go
        on_render: forwarded to the navigator; called after each transition
        defer: forwarded to the navigator; schedules the lock release
    """

    def __init__(
        self,
        state: FormState,
        sink: SubmissionSink,
        *,
        on_render: Callable[[FormState], None] | None = None,
        defer: Callable[[Callable[[], None]], None] | None = None,
    ) -> None:
        self.state = state
        self._sink = sink
        self._navigator = FormNavigator(state, on_render=on_render, defer=defer)
        self._validation: SegmentValidation | None = None

    # ==================================================================
    # Construction
    # ==================================================================

    @classmethod
    def from_questions(
        cls,
        questions: Sequence[Question],
        sink: SubmissionSink,
        *,
        store: SchemaStore | None = None,
        **kwargs: Any,
    ) -> "ApplicationForm":
        """Build a form from already-parsed questions."""
        store = _loaded(store)
        segments = build_segments(
            questions, welcome=store.welcome, success=store.success,
        )
        return cls(FormState(segments), sink, **kwargs)

    @classmethod
    async def load(
        cls,
        source: SchemaSource,
        sink: SubmissionSink,
        *,
        store: SchemaStore | None = None,
        **kwargs: Any,
    ) -> "ApplicationForm":
        """Fetch the schema once and build the form.

        A failing source or a malformed stored schema is never fatal: the
        built-in default schema is used instead.
        """
        store = _loaded(store)
        try:
            raw = await source.fetch_schema()
            questions = store.resolve(raw)
        except (ConfigLoadFailure, SchemaError) as exc:
            logger.warning("Config fetch failed, using fallback: %s", exc)
            questions = list(store.defaults)
        return cls.from_questions(questions, sink, store=store, **kwargs)

    # ==================================================================
    # Interaction
    # ==================================================================

    @property
    def navigator(self) -> FormNavigator:
        return self._navigator

    def answer(self, question_id: str, value: Any) -> None:
        """Capture a control change; clears that question's inline error."""
        self.state.set_answer(question_id, value)
        if self._validation is not None:
            self._validation.errors.pop(question_id, None)

    async def next(self) -> Navigation:
        """Advance; submits when this move reaches the success screen."""
        nav = self._navigator.go_next()
        if nav.reason == "invalid":
            self._validation = nav.validation
        elif nav.moved:
            self._validation = None
        if nav.submit_due:
            await self._submit()
        return nav

    def previous(self) -> Navigation:
        nav = self._navigator.go_previous()
        if nav.moved:
            self._validation = None
        return nav

    def view(self) -> SegmentView:
        return render(self.state, self._validation)

    # ==================================================================
    # Submission
    # ==================================================================

    async def _submit(self) -> SubmissionResult | None:
        """Single submission attempt; the outcome only changes the message."""
        try:
            result = await self._sink.submit(dict(self.state.answers))
        except SubmissionFailure as exc:
            logger.error("Application submission failed: %s", exc)
            self.state.message = SUBMIT_NETWORK_MESSAGE
            return None

        self.state.submission = result
        if result.success:
            logger.info("Application submitted (id=%s)", result.id)
            self.state.message = SUBMIT_OK_MESSAGE
        else:
            logger.warning("Application rejected by sink: %s", result.message)
            self.state.message = SUBMIT_REJECTED_MESSAGE
        return result


def _loaded(store: SchemaStore | None) -> SchemaStore:
    if store is None:
        store = SchemaStore()
    if not store.loaded:
        store.load()
    return store
