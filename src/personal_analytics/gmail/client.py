"""Gmail API client implementation.

This module provides the email transport used to deliver reports. Only the
send scope is needed; nothing is read from the mailbox.
"""

from __future__ import annotations

import asyncio
import base64
from email.message import EmailMessage
from typing import Any

import structlog

from personal_analytics.exceptions import EmailDispatchError
from personal_analytics.google_auth import GoogleServiceClient

logger = structlog.get_logger()


def build_html_message(to: str, subject: str, html_body: str, cc: str | None = None) -> EmailMessage:
    """Build a MIME message with an HTML body and a blank plain-text part."""
    message = EmailMessage()
    message["To"] = to
    if cc:
        message["Cc"] = cc
    message["Subject"] = subject
    message.set_content("")
    message.add_alternative(html_body, subtype="html")
    return message


class GmailSender(GoogleServiceClient):
    """Gmail API client for sending report emails."""

    api_name = "gmail"
    api_version = "v1"

    async def send(self, to: str, subject: str, html_body: str, cc: str | None = None) -> str:
        """Send an HTML email from the authenticated account.

        Args:
            to: Recipient address.
            subject: Subject line.
            html_body: HTML body.
            cc: Optional CC address; empty means no CC.

        Returns:
            The Gmail ID of the sent message.

        Raises:
            EmailDispatchError: If the API request fails.
        """

        self._ensure_authenticated()
        message = build_html_message(to, subject, html_body, cc)
        raw = base64.urlsafe_b64encode(message.as_bytes()).decode("utf-8")

        logger.info("sending_email", to=to, cc=cc or None, subject=subject)

        try:
            response = await asyncio.to_thread(self._send_raw_sync, raw)
        except Exception as exc:  # noqa: BLE001
            logger.exception("gmail_send_failed", to=to, error=str(exc))
            raise EmailDispatchError(str(exc)) from exc

        return str(response.get("id") or "")

    def _send_raw_sync(self, raw: str) -> dict[str, Any]:
        service = self._ensure_authenticated()
        return service.users().messages().send(userId="me", body={"raw": raw}).execute()
