"""Terminal presentation layer driven with scripted prompt replies."""

import io

import pytest
from rich.console import Console

from applyform import console as console_mod
from applyform.answers import FileRef
from applyform.console import BACK_COMMAND, OfflineClient, ask, run
from applyform.flow import ApplicationForm
from applyform.models.view import QuestionView

from helpers.forms import FakeSink, q, questions


def _script(monkeypatch, replies):
    replies = iter(replies)
    monkeypatch.setattr(console_mod.Prompt, "ask", lambda *a, **kw: next(replies))


def _console():
    return Console(file=io.StringIO(), width=100)


def _view(**kwargs):
    base = dict(id="x", number=1, total=1, type="text", input_type="text", title="X")
    return QuestionView(**{**base, **kwargs})


class TestAsk:

    def test_numeric_reply_picks_option(self, monkeypatch):
        _script(monkeypatch, ["2"])
        assert ask(_console(), _view(type="options", options=["Yes", "No"])) == "No"

    def test_back(self, monkeypatch):
        _script(monkeypatch, [" Back "])
        assert ask(_console(), _view()) == BACK_COMMAND

    def test_file_reply_reads_path(self, monkeypatch, tmp_path):
        path = tmp_path / "cv.pdf"
        path.write_bytes(b"%PDF")
        _script(monkeypatch, [str(path)])
        value = ask(_console(), _view(type="file", input_type="file"))
        assert isinstance(value, FileRef) and value.filename == "cv.pdf"

    def test_missing_file(self, monkeypatch, tmp_path):
        _script(monkeypatch, [str(tmp_path / "nope.pdf")])
        assert ask(_console(), _view(type="file", input_type="file")) is None


class TestRun:

    @pytest.mark.asyncio
    async def test_reprompts_until_valid_then_submits(self, monkeypatch, store):
        sink = FakeSink()
        form = ApplicationForm.from_questions(
            questions(q("name", mode="single", required=True)), sink, store=store,
        )
        _script(monkeypatch, ["", "", "Jane"])

        final = await run(form, _console())

        assert final.type == "success"
        assert sink.calls == [{"name": "Jane"}]

    @pytest.mark.asyncio
    async def test_offline_client(self, store):
        out = _console()
        client = OfflineClient(out)
        assert await client.fetch_schema() is None
        result = await client.submit({"name": "Jane", "cv": FileRef("cv.pdf", b"x")})
        assert result.success
        assert '"cv": "cv.pdf"' in out.file.getvalue()
