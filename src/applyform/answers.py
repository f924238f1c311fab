"""Answer values and helpers shared by capture, validation and submission.

Answers are stored raw: a string for every free-input and choice question,
or a :class:`FileRef` for ``file`` questions.  The submission client branches
on that distinction to pick JSON or multipart encoding.
"""

from __future__ import annotations

import mimetypes
import re
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Mapping, Union

_NON_DIGITS = re.compile(r"\D")


@dataclass(frozen=True)
class FileRef:
    """Opaque reference to a file chosen for a ``file`` question."""

    filename: str
    content: bytes
    content_type: str = "application/octet-stream"

    @classmethod
    def from_path(cls, path: Union[str, Path]) -> "FileRef":
        """Read ``path`` into a reference, guessing its content type."""
        path = Path(path)
        guessed, _ = mimetypes.guess_type(path.name)
        return cls(
            filename=path.name,
            content=path.read_bytes(),
            content_type=guessed or "application/octet-stream",
        )

    def __repr__(self) -> str:
        return f"<FileRef {self.filename!r} ({len(self.content)} bytes)>"


AnswerValue = Union[str, FileRef]


def is_file_ref(value: Any) -> bool:
    return isinstance(value, FileRef)


def is_empty(value: Any) -> bool:
    """True for an absent answer: ``None`` or a blank string."""
    if value is None:
        return True
    if isinstance(value, str):
        return value.strip() == ""
    return False


def split_answers(
    answers: Mapping[str, Any],
) -> tuple[dict[str, Any], dict[str, FileRef]]:
    """Separate scalar answers from file references."""
    scalars: dict[str, Any] = {}
    files: dict[str, FileRef] = {}
    for qid, value in answers.items():
        if isinstance(value, FileRef):
            files[qid] = value
        else:
            scalars[qid] = value
    return scalars, files


def digits_of(value: str) -> str:
    return _NON_DIGITS.sub("", value)


def format_phone(value: str) -> str:
    """Format a US phone number as ``(555) 123-4567`` while it is typed.

    Only the first ten digits are kept; partial input formats progressively
    (``555`` → ``555``, ``5551`` → ``(555) 1``).
    """
    digits = digits_of(value)[:10]
    area, prefix, line = digits[:3], digits[3:6], digits[6:10]
    if not prefix:
        return area
    formatted = f"({area}) {prefix}"
    if line:
        formatted += f"-{line}"
    return formatted


def display_text(value: Any) -> str | None:
    """Render a stored answer as text (files by filename)."""
    if value is None:
        return None
    if isinstance(value, FileRef):
        return value.filename
    return str(value)
