"""New-application email notification through the Resend HTTP API.

The message body is rendered from ``templates/new_application.html.jinja2``.
Delivery is best effort: every failure is logged and swallowed so a mail
outage never fails a submission.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping

import httpx
import jinja2

logger = logging.getLogger(__name__)

RESEND_URL = "https://api.resend.com/emails"
TEMPLATE_NAME = "new_application.html.jinja2"


def applicant_name(data: Mapping[str, Any]) -> str:
    """Best display name found in an application's answers."""
    full = str(data.get("full_name") or "").strip()
    if full:
        return full
    parts = [str(data.get(k) or "").strip() for k in ("first_name", "last_name")]
    return " ".join(p for p in parts if p) or "A new applicant"


class Notifier:
    """Sends the admin an email for each new application.

    Args:
        api_key: Resend API key; ``None`` disables sending.
        to: admin address; ``None`` disables sending.
        sender: ``From`` header.
        http: optional shared ``httpx.AsyncClient`` (tests pass a mock
            transport here).
    """

    def __init__(
        self,
        api_key: str | None,
        to: str | None,
        sender: str,
        *,
        http: httpx.AsyncClient | None = None,
        template_dir: Path | None = None,
    ) -> None:
        if template_dir is None:
            template_dir = Path(__file__).parent / "templates"
        self._api_key = api_key
        self._to = to
        self._sender = sender
        self._http = http
        self._env = jinja2.Environment(
            loader=jinja2.FileSystemLoader(str(template_dir)),
            autoescape=True,
            trim_blocks=True,
            lstrip_blocks=True,
        )

    @property
    def enabled(self) -> bool:
        return bool(self._api_key and self._to)

    def render(self, application_id: int, data: Mapping[str, Any]) -> tuple[str, str]:
        """Return ``(subject, html)`` for an application."""
        name = applicant_name(data)
        position = str(data.get("position") or "Unknown Position")
        html = self._env.get_template(TEMPLATE_NAME).render(
            application_id=application_id,
            applicant=name,
            position=position,
            email=data.get("email") or "",
            phone=data.get("phone") or "",
        )
        return f"New Application Notification: {name}", html

    async def application_received(
        self, application_id: int, data: Mapping[str, Any],
    ) -> bool:
        """Email the admin about a new application.  Returns True if sent."""
        if not self.enabled:
            logger.debug("Notification skipped for application %d (not configured)", application_id)
            return False

        subject, html = self.render(application_id, data)
        payload = {
            "from": self._sender,
            "to": [self._to],
            "subject": subject,
            "html": html,
        }
        headers = {"Authorization": f"Bearer {self._api_key}"}
        try:
            if self._http is not None:
                response = await self._http.post(RESEND_URL, json=payload, headers=headers)
            else:
                async with httpx.AsyncClient(timeout=10.0) as client:
                    response = await client.post(RESEND_URL, json=payload, headers=headers)
            response.raise_for_status()
        except httpx.HTTPError as exc:
            logger.error("Notification for application %d failed: %s", application_id, exc)
            return False

        logger.info("Notification sent for application %d", application_id)
        return True
