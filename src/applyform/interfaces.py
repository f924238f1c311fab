"""Abstract interfaces for the form engine's external collaborators.

The engine consumes two services it does not own:

  - a **schema source** that supplies the question list at form load, and
  - a **submission sink** that ingests the finished answer map.

:class:`applyform.client.HttpFormClient` implements both against the REST
API in ``applyform_server``; tests and offline runs plug in their own.

Typical integration flow::

    client = HttpFormClient("https://example.com/api/v1")
    form = await ApplicationForm.load(client, client)
    form.answer("full_name", "Jane Smith")
    await form.next()
"""

from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from applyform.models.submission import SubmissionResult


class SchemaSource(ABC):
    """Supplies the raw question schema for a form."""

    @abstractmethod
    async def fetch_schema(self) -> Optional[list[dict]]:
        """Return the raw JSON question array.

        ``None`` or an empty list means "use the built-in default schema".
        Implementations raise :class:`applyform.errors.ConfigLoadFailure`
        when the source cannot be read.
        """
        ...


class SubmissionSink(ABC):
    """Ingests a completed application."""

    @abstractmethod
    async def submit(self, answers: Mapping[str, Any]) -> SubmissionResult:
        """Hand the answer map (scalars and file references) to the sink.

        Exactly one attempt is made; implementations must not retry.  A sink
        that answers but refuses returns ``success=False``; a sink that cannot
        be reached raises :class:`applyform.errors.SubmissionFailure`.
        """
        ...
