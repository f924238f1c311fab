"""Segment model — one renderable unit of the form flow.

A segment is either the welcome screen, one standalone question ("single"),
a page of grouped questions ("page"), or the success screen.  Segments are
produced once by :func:`applyform.segments.build_segments` and never mutated
afterwards, so they are frozen dataclasses holding tuples.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from applyform.models.question import Step


class SegmentType(str, enum.Enum):
    """Kinds of segment, in the order they can appear in a flow."""

    WELCOME = "welcome"
    SINGLE = "single"
    PAGE = "page"
    SUCCESS = "success"


@dataclass(frozen=True)
class Segment:
    """An ordered, non-empty run of steps rendered together."""

    type: SegmentType
    steps: tuple[Step, ...]

    def __post_init__(self) -> None:
        if not self.steps:
            raise ValueError("A segment must contain at least one step")
        if self.type is not SegmentType.PAGE and len(self.steps) != 1:
            raise ValueError(
                f"A {self.type.value} segment must contain exactly one step"
            )

    @property
    def is_question(self) -> bool:
        """True for segments that hold answerable questions."""
        return self.type in (SegmentType.SINGLE, SegmentType.PAGE)

    @property
    def step_ids(self) -> list[str]:
        return [s.id for s in self.steps]
