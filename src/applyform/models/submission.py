"""Submission result model returned by a :class:`SubmissionSink`."""

from typing import Optional, Union

from pydantic import BaseModel


class SubmissionResult(BaseModel):
    """Outcome reported by the ingestion endpoint.

    ``success`` is false when the endpoint answered but refused or failed to
    store the application; transport failures raise
    :class:`applyform.errors.SubmissionFailure` instead.
    """

    success: bool
    id: Optional[Union[int, str]] = None
    message: Optional[str] = None
    # HTTP status code when the sink is remote
    status_code: Optional[int] = None
