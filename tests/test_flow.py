"""ApplicationForm tests — load fallback, one-shot submission, outcomes.

The sink and source are in-memory fakes; the transition lock is released
immediately so each ``next()`` can be awaited back to back.
"""

import pytest

from applyform.constants import (
    SUBMIT_NETWORK_MESSAGE,
    SUBMIT_OK_MESSAGE,
    SUBMIT_REJECTED_MESSAGE,
)
from applyform.errors import ConfigLoadFailure, SubmissionFailure
from applyform.flow import ApplicationForm
from applyform.models.submission import SubmissionResult

from helpers.forms import FakeSink, FakeSource, immediate, q, questions


def _form(*entries, sink=None, store=None):
    return ApplicationForm.from_questions(
        questions(*entries), sink or FakeSink(), store=store, defer=immediate,
    )


class TestLoad:

    @pytest.mark.asyncio
    async def test_uses_fetched_schema(self, store):
        source = FakeSource([q("name", mode="single", required=True)])
        form = await ApplicationForm.load(source, FakeSink(), store=store, defer=immediate)
        assert [x.id for x in form.state.questions] == ["name"]

    @pytest.mark.asyncio
    @pytest.mark.parametrize("source", [
        FakeSource(None),
        FakeSource([]),
        FakeSource(error=ConfigLoadFailure("HTTP 500")),
        FakeSource([{"id": "x", "type": "hologram", "title": "?"}]),
    ])
    async def test_falls_back_to_defaults(self, store, source):
        form = await ApplicationForm.load(source, FakeSink(), store=store, defer=immediate)
        assert form.state.questions == store.defaults
        assert form.view().title == store.welcome.title

    @pytest.mark.asyncio
    async def test_unreachable_source_uses_packaged_defaults(self):
        form = await ApplicationForm.load(
            FakeSource(error=ConfigLoadFailure("down")), FakeSink(), defer=immediate,
        )
        assert len(form.state.questions) == 31
        assert form.view().title == "Drive Your Future With Us"

    @pytest.mark.asyncio
    async def test_malformed_pattern_falls_back_to_defaults(self, store):
        source = FakeSource([q("plate", mode="single", pattern="[A-Z")])
        form = await ApplicationForm.load(source, FakeSink(), store=store, defer=immediate)
        assert form.state.questions == store.defaults


class TestSubmission:

    @pytest.mark.asyncio
    async def test_two_page_questions_submit_exactly_once(self, store):
        sink = FakeSink()
        form = _form(q("q1", required=True), q("q2", required=True), sink=sink, store=store)
        assert len(form.state.segments) == 3

        await form.next()
        form.answer("q1", "one")
        form.answer("q2", "two")
        nav = await form.next()

        assert nav.moved and form.state.segment_index == 2
        assert sink.calls == [{"q1": "one", "q2": "two"}]
        assert form.state.message == SUBMIT_OK_MESSAGE
        assert form.view().message == SUBMIT_OK_MESSAGE

        # Terminal: nothing moves, nothing resubmits
        assert (await form.next()).reason == "at_end"
        assert form.previous().reason == "terminal"
        assert len(sink.calls) == 1

    @pytest.mark.asyncio
    async def test_rejected_submission_keeps_success_screen(self, store):
        sink = FakeSink(SubmissionResult(success=False, message="db down", status_code=500))
        form = _form(q("a", required=True), sink=sink, store=store)
        await form.next()
        form.answer("a", "x")
        await form.next()

        assert form.state.is_terminal
        assert form.state.message == SUBMIT_REJECTED_MESSAGE
        assert form.state.submission.success is False
        assert form.previous().moved is False
        assert form.state.is_terminal

    @pytest.mark.asyncio
    async def test_network_failure_message(self, store):
        sink = FakeSink(error=SubmissionFailure("connection refused"))
        form = _form(q("a"), sink=sink, store=store)
        await form.next()
        await form.next()

        assert form.state.is_terminal
        assert form.state.message == SUBMIT_NETWORK_MESSAGE
        assert form.state.submission is None

    @pytest.mark.asyncio
    async def test_optional_blank_answers_still_submitted_trimmed(self, store):
        sink = FakeSink()
        form = _form(q("name", required=True), q("note"), sink=sink, store=store)
        await form.next()
        form.answer("name", "  Jane ")
        await form.next()
        assert sink.calls == [{"name": "Jane"}]


class TestInlineErrors:

    @pytest.mark.asyncio
    async def test_error_shown_then_cleared_by_answer(self, store):
        form = _form(q("name", mode="single", required=True), store=store)
        await form.next()

        nav = await form.next()
        assert nav.reason == "invalid"
        assert form.view().questions[0].error == "This field is required."

        form.answer("name", "Jane")
        assert form.view().questions[0].error is None
        assert (await form.next()).moved


class TestCaptureRoundTrip:

    @pytest.mark.asyncio
    @pytest.mark.parametrize("raw", ["Jane Smith", "  padded  ", "(555) 123-4567"])
    async def test_page_and_single_store_identical_values(self, store, raw):
        stored = []
        for mode in ("page", "single"):
            sink = FakeSink()
            form = _form(q("answer", mode=mode, required=True), sink=sink, store=store)
            await form.next()
            form.answer("answer", raw)
            await form.next()
            stored.append(sink.calls[0]["answer"])
        assert stored[0] == stored[1] == raw.strip()
