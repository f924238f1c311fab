"""Terminal presentation layer — ``applyform`` console script.

Draws each :class:`SegmentView` with ``rich`` and feeds typed answers back
into an :class:`ApplicationForm`.  Everything the screen shows comes from the
view model; this module holds no form logic of its own.

Examples::

    # Fill the form served by a running applyform-server
    uv run applyform --api-url http://localhost:8080/api/v1

    # Offline: built-in schema, answers printed instead of submitted
    uv run applyform --offline
"""

from __future__ import annotations

import argparse
import asyncio
import json
import logging
from typing import Any, Mapping, Optional

from rich.console import Console
from rich.panel import Panel
from rich.prompt import Prompt

from applyform.answers import FileRef, split_answers
from applyform.client import HttpFormClient
from applyform.flow import ApplicationForm
from applyform.interfaces import SchemaSource, SubmissionSink
from applyform.models.submission import SubmissionResult
from applyform.models.view import QuestionView, SegmentView

logger = logging.getLogger(__name__)

BACK_COMMAND = "back"


class OfflineClient(SchemaSource, SubmissionSink):
    """Uses the built-in schema and prints the answers it is given."""

    def __init__(self, console: Console) -> None:
        self._console = console

    async def fetch_schema(self) -> Optional[list[dict]]:
        return None

    async def submit(self, answers: Mapping[str, Any]) -> SubmissionResult:
        scalars, files = split_answers(answers)
        payload = {**scalars, **{qid: f.filename for qid, f in files.items()}}
        self._console.print_json(json.dumps(payload, ensure_ascii=False))
        return SubmissionResult(success=True, message="Printed locally")


# ------------------------------------------------------------------
# Drawing
# ------------------------------------------------------------------

def draw(console: Console, view: SegmentView) -> None:
    """Print the current segment."""
    if view.type in ("welcome", "success"):
        body = view.subtitle
        if view.message:
            body = f"{body}\n\n{view.message}"
        console.print(Panel(body, title=view.title, expand=False))
        return

    if view.progress.visible:
        console.print(f"[dim]{view.progress.counter}  ({view.progress.percent:.0f}%)[/dim]")
    if view.header:
        console.print(f"[bold]{view.header}[/bold]")


def _label(q: QuestionView) -> str:
    star = " [red]*[/red]" if q.required else ""
    return f"[cyan]{q.number}[/cyan] of {q.total}  {q.title}{star}"


def ask(console: Console, q: QuestionView) -> Any:
    """Prompt for one answer; returns the raw value or ``BACK_COMMAND``."""
    console.print(_label(q))
    if q.error:
        console.print(f"  [red]{q.error}[/red]")
    if q.options:
        for i, opt in enumerate(q.options, start=1):
            console.print(f"  {i}. {opt}")

    raw = Prompt.ask("  ", default=q.display_value or "", show_default=bool(q.value))
    if raw.strip().lower() == BACK_COMMAND:
        return BACK_COMMAND

    if q.options and raw.strip().isdigit():
        pos = int(raw.strip())
        if 1 <= pos <= len(q.options):
            return q.options[pos - 1]
    if q.input_type == "file":
        if not raw.strip():
            return None
        try:
            return FileRef.from_path(raw.strip())
        except OSError as exc:
            console.print(f"  [red]Cannot read file: {exc}[/red]")
            return None
    return raw


# ------------------------------------------------------------------
# Main loop
# ------------------------------------------------------------------

async def run(form: ApplicationForm, console: Console) -> SegmentView:
    """Drive ``form`` until the success screen; returns its final view."""
    while True:
        view = form.view()
        draw(console, view)

        if view.type == "success":
            return view
        if view.type == "welcome":
            Prompt.ask(f"[bold]{view.button_text}[/bold] (press Enter)", default="", show_default=False)
            await form.next()
        else:
            went_back = False
            for q in view.questions:
                value = ask(console, q)
                if value == BACK_COMMAND:
                    if view.can_go_back:
                        form.previous()
                        went_back = True
                        break
                    console.print("  [yellow]Cannot go back from here.[/yellow]")
                    continue
                form.answer(q.id, value)
            if not went_back:
                nav = await form.next()
                if nav.reason == "invalid":
                    console.print("[red]Please fix the highlighted answers.[/red]")

        # Let the navigator release its transition lock
        await asyncio.sleep(0)


async def _main(args: argparse.Namespace) -> int:
    console = Console()
    if args.offline:
        client: Any = OfflineClient(console)
    else:
        client = HttpFormClient(args.api_url, timeout=args.timeout)

    form = await ApplicationForm.load(client, client)
    final = await run(form, console)
    draw(console, final)
    submission = form.state.submission
    return 0 if submission is not None and submission.success else 1


def cli() -> None:
    """Console-script entry point: ``applyform``."""
    parser = argparse.ArgumentParser(
        prog="applyform",
        description="Fill in the driver application from the terminal.",
    )
    parser.add_argument(
        "--api-url",
        default="http://localhost:8080/api/v1",
        help="Application API root (default: http://localhost:8080/api/v1)",
    )
    parser.add_argument(
        "--offline",
        action="store_true",
        default=False,
        help="Use the built-in schema and print answers instead of submitting",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        default=None,
        help="HTTP timeout in seconds (default: httpx default)",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Log level (default: WARNING)",
    )
    args = parser.parse_args()

    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
    )
    raise SystemExit(asyncio.run(_main(args)))
