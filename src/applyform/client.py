"""HTTP client for the application API — schema source and submission sink.

Encoding policy for submissions:
  - no file answers → the whole answer map as one ``application/json`` body
  - any file answer → ``multipart/form-data`` with one part per file question
    (named by question id) plus a ``data`` part holding the JSON-encoded
    scalar answers
"""

from __future__ import annotations

import json
import logging
from typing import Any, Mapping, Optional

import httpx

from applyform.answers import split_answers
from applyform.errors import ConfigLoadFailure, SubmissionFailure
from applyform.interfaces import SchemaSource, SubmissionSink
from applyform.models.submission import SubmissionResult

logger = logging.getLogger(__name__)


class HttpFormClient(SchemaSource, SubmissionSink):
    """Talks to ``applyform_server`` over HTTP.

    Args:
        base_url: API root, e.g. ``https://example.com/api/v1``
        http: optional pre-built ``httpx.AsyncClient`` (tests pass one with a
            mock transport); when omitted a client is created per call
        timeout: transport timeout; ``None`` keeps httpx's default
    """

    def __init__(
        self,
        base_url: str,
        *,
        http: httpx.AsyncClient | None = None,
        timeout: float | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http
        self._timeout = timeout

    def _client(self) -> httpx.AsyncClient:
        if self._timeout is None:
            return httpx.AsyncClient()
        return httpx.AsyncClient(timeout=self._timeout)

    async def _request(self, method: str, path: str, **kwargs: Any) -> httpx.Response:
        url = f"{self._base_url}{path}"
        if self._http is not None:
            return await self._http.request(method, url, **kwargs)
        async with self._client() as http:
            return await http.request(method, url, **kwargs)

    # ------------------------------------------------------------------
    # SchemaSource
    # ------------------------------------------------------------------

    async def fetch_schema(self) -> Optional[list[dict]]:
        """GET ``/form-config``; raises ``ConfigLoadFailure`` on any problem."""
        try:
            response = await self._request("GET", "/form-config")
            response.raise_for_status()
            config = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            raise ConfigLoadFailure(f"Config load failed: {exc}") from exc

        if config is None:
            return None
        if not isinstance(config, list):
            raise ConfigLoadFailure("Config load failed: expected a JSON array")
        return config

    # ------------------------------------------------------------------
    # SubmissionSink
    # ------------------------------------------------------------------

    async def submit(self, answers: Mapping[str, Any]) -> SubmissionResult:
        """POST ``/applications`` once; no retry."""
        scalars, files = split_answers(answers)
        if files:
            kwargs: dict[str, Any] = {
                "data": {"data": json.dumps(scalars, ensure_ascii=False)},
                "files": {
                    qid: (ref.filename, ref.content, ref.content_type)
                    for qid, ref in files.items()
                },
            }
        else:
            kwargs = {"json": scalars}

        try:
            response = await self._request("POST", "/applications", **kwargs)
            body = response.json()
        except (httpx.HTTPError, ValueError) as exc:
            logger.warning("Submission failed: %s", exc)
            raise SubmissionFailure(str(exc)) from exc

        if not isinstance(body, dict):
            raise SubmissionFailure("Unexpected response body")

        success = bool(body.get("success")) and response.is_success
        note = body.get("message") or body.get("detail")
        if not isinstance(note, str):
            note = None
        if not success:
            logger.warning("Submission rejected [%d]: %s", response.status_code, note)
        return SubmissionResult(
            success=success,
            id=body.get("id"),
            message=note,
            status_code=response.status_code,
        )
