"""
SMTP mail transport.
"""

from __future__ import annotations

import asyncio
import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from email.utils import formataddr
from typing import Optional

from fastapi import Request

from csrms.core.config import Settings

logger = logging.getLogger(__name__)


class MailerNotConfigured(RuntimeError):
    """Raised when a send is attempted without SMTP host or credentials."""


class SmtpMailer:
    """
    Sends multipart (plain + HTML) email through an SMTP relay.

    ``smtplib`` blocks, so delivery runs in a worker thread and the event
    loop stays free while the relay is talking.
    """

    def __init__(
        self,
        host: str,
        port: int,
        username: str,
        password: str,
        sender_name: str,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender_name = sender_name
        self.timeout = timeout

    @classmethod
    def from_settings(cls, config: Settings) -> "SmtpMailer":
        return cls(
            host=config.EMAIL_HOST,
            port=config.EMAIL_PORT,
            username=config.EMAIL_USER,
            password=config.EMAIL_PASSWORD,
            sender_name=config.EMAIL_SENDER_NAME,
            timeout=config.EMAIL_TIMEOUT_SECONDS,
        )

    @property
    def configured(self) -> bool:
        return all([self.host, self.username, self.password])

    def build_message(
        self,
        to: str,
        subject: str,
        body: str,
        html: Optional[str] = None,
    ) -> MIMEMultipart:
        msg = MIMEMultipart("alternative")
        msg["Subject"] = subject
        msg["From"] = formataddr((self.sender_name, self.username))
        msg["To"] = to

        # Attach parts
        msg.attach(MIMEText(body, "plain"))
        if html:
            msg.attach(MIMEText(html, "html"))
        return msg

    async def send(
        self,
        to: str,
        subject: str,
        body: str,
        html: Optional[str] = None,
    ) -> None:
        """
        Deliver one message.

        Raises:
            MailerNotConfigured: SMTP host or credentials are missing
            smtplib.SMTPException, OSError: delivery failed
        """
        if not self.configured:
            raise MailerNotConfigured("SMTP not configured")

        msg = self.build_message(to, subject, body, html)
        await asyncio.to_thread(self._deliver, to, msg)
        logger.info("Email sent to %s", to)

    def _deliver(self, to: str, msg: MIMEMultipart) -> None:
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as server:
            server.starttls()
            server.login(self.username, self.password)
            server.sendmail(self.username, to, msg.as_string())


def get_mailer(request: Request) -> SmtpMailer:
    """Dependency returning the mailer created during startup."""
    return request.app.state.mailer
