"""Email notification helpers for stock events."""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.message import EmailMessage
from email.utils import formataddr
from typing import List, Optional, Sequence

from stockroom.core.config import Settings

logger = logging.getLogger(__name__)


class EmailNotificationService:
    """Lightweight SMTP helper for stock notifications."""

    def __init__(self, settings: Settings):
        self._settings = settings

    # ------------------------------------------------------------------
    # Public API
    # ------------------------------------------------------------------
    async def send(
        self,
        to: Sequence[str],
        subject: str,
        body: str,
        *,
        priority: Optional[str] = None,
    ) -> bool:
        """Send a plain-text email.

        Args:
            to: Recipient addresses; duplicates and blanks are dropped.
            subject: Subject line.
            body: Plain-text body.
            priority: ``"high"`` marks the message urgent for mail clients.

        Returns:
            True when the message was handed to the SMTP server.
        """

        recipients = self._clean_recipients(to)
        if not recipients:
            logger.warning("No recipients for '%s'; skipping email", subject)
            return False

        if not self._ready():
            logger.info("SMTP not configured; email '%s' to %s logged only:\n%s", subject, ", ".join(recipients), body)
            return False

        message = self._build_message(subject, recipients, body, priority)
        return await self._dispatch(message)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _ready(self) -> bool:
        settings = self._settings
        return bool(settings.SMTP_HOST and settings.SMTP_USERNAME and settings.SMTP_PASSWORD)

    @staticmethod
    def _clean_recipients(recipients: Sequence[str]) -> List[str]:
        return sorted({email.strip() for email in recipients if email and email.strip()})

    def _build_message(
        self,
        subject: str,
        to_addresses: Sequence[str],
        body_text: str,
        priority: Optional[str] = None,
    ) -> EmailMessage:
        message = EmailMessage()
        message["Subject"] = subject
        message["From"] = self._formatted_from_address
        message["To"] = ", ".join(to_addresses)
        if priority == "high":
            message["X-Priority"] = "1"
            message["Importance"] = "High"
        message.set_content(body_text)
        return message

    @property
    def _formatted_from_address(self) -> str:
        from_email = self._settings.SMTP_FROM_EMAIL or self._settings.SMTP_USERNAME
        from_name = self._settings.SMTP_FROM_NAME or "Stockroom Alerts"
        return formataddr((from_name, from_email))

    async def _dispatch(self, message: EmailMessage) -> bool:
        try:
            await asyncio.to_thread(self._send_sync, message)
            logger.info("Email '%s' sent to %s", message["Subject"], message["To"])
            return True
        except (smtplib.SMTPException, OSError) as exc:
            logger.error("Failed to send email '%s': %s", message["Subject"], exc, exc_info=True)
            return False

    def _send_sync(self, message: EmailMessage) -> None:
        settings = self._settings
        host = settings.SMTP_HOST
        port = settings.SMTP_PORT or (465 if settings.SMTP_USE_SSL else 587)
        timeout = settings.SMTP_TIMEOUT

        if settings.SMTP_USE_SSL:
            smtp = smtplib.SMTP_SSL(host=host, port=port, timeout=timeout)
        else:
            smtp = smtplib.SMTP(host=host, port=port, timeout=timeout)
        try:
            if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
                smtp.starttls()

            smtp.login(settings.SMTP_USERNAME, settings.SMTP_PASSWORD)
            smtp.send_message(message)
        finally:
            try:
                smtp.quit()
            except smtplib.SMTPException:
                smtp.close()