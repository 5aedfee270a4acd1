"""
Notification utilities: persisted notifications and email alerts.
"""

import html
import logging
from datetime import datetime, timezone
from typing import List, Optional

from sqlalchemy import select, update

from csrms.core.database import Database
from csrms.core.effects import best_effort
from csrms.core.mail import MailerNotConfigured, SmtpMailer
from csrms.core.metrics import record_notification
from csrms.models.notification import Notification, NotificationType
from csrms.models.user import User
from csrms.utils.identifiers import generate_notification_id

logger = logging.getLogger(__name__)

DEFAULT_SUBJECT = "Service Request Update"


def format_email_body(message: str, request_id: Optional[str] = None) -> str:
    """Render the HTML email body. ``message`` is escaped."""
    request_line = (
        f"<p><strong>Request ID:</strong> {html.escape(request_id)}</p>"
        if request_id
        else ""
    )
    return (
        '<div style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto;">'
        '<h2 style="color: #2b5db7;">Community Service Request Update</h2>'
        f"<p>{html.escape(message)}</p>"
        f"{request_line}"
        '<hr style="border: none; border-top: 1px solid #eee; margin: 20px 0;">'
        '<p style="color: #666; font-size: 12px;">'
        "This is an automated message from the Community Service Request "
        "and Management System."
        "</p>"
        "</div>"
    )


def format_email_text(message: str, request_id: Optional[str] = None) -> str:
    """Plain-text alternative of :func:`format_email_body`."""
    lines = [message]
    if request_id:
        lines.append(f"Request ID: {request_id}")
    return "\n\n".join(lines)


class NotificationService:
    """Service for persisting notifications and sending them by email."""

    def __init__(self, database: Database, mailer: SmtpMailer):
        self.database = database
        self.mailer = mailer

    async def send_notification(
        self,
        recipient_id: str,
        message: str,
        notification_type: str = NotificationType.EMAIL.value,
        request_id: Optional[str] = None,
    ) -> bool:
        """
        Notify a recipient.

        Steps, in order: resolve the recipient's email, store a Notification
        row (best-effort), and for Email notifications dispatch the message.

        Args:
            recipient_id: User ID of the recipient
            message: Notification text
            notification_type: "Email" or "System"
            request_id: Optional related service request

        Returns:
            True if the recipient exists and any required email went out.
            Never raises.
        """
        try:
            notification_type = NotificationType(notification_type).value
        except ValueError:
            logger.error(f"Unknown notification type: {notification_type}")
            return False

        try:
            recipient_email = await self.get_recipient_email(recipient_id)
        except Exception as e:
            logger.error(f"Failed to look up notification recipient {recipient_id}: {e}")
            record_notification(notification_type, "failed")
            return False

        if recipient_email is None:
            logger.error(f"Recipient not found: {recipient_id}")
            record_notification(notification_type, "skipped")
            return False

        await best_effort(
            "notification",
            self._save_notification(recipient_id, message, notification_type, request_id),
        )

        if notification_type == NotificationType.EMAIL.value:
            sent = await self.send_email_notification(
                to=recipient_email,
                message=message,
                request_id=request_id,
            )
            if not sent:
                logger.warning("Failed to send email notification to %s", recipient_id)
                record_notification(notification_type, "failed")
                return False

        record_notification(notification_type, "sent")
        return True

    async def send_email_notification(
        self,
        to: str,
        message: str,
        subject: Optional[str] = None,
        request_id: Optional[str] = None,
    ) -> bool:
        """Send the formatted email; returns False instead of raising."""
        try:
            await self.mailer.send(
                to=to,
                subject=subject or DEFAULT_SUBJECT,
                body=format_email_text(message, request_id),
                html=format_email_body(message, request_id),
            )
        except MailerNotConfigured:
            logger.warning("SMTP not configured; email to %s not sent", to)
            return False
        except Exception as e:
            logger.error(f"Failed to send email: {e}")
            return False
        return True

    async def get_recipient_email(self, recipient_id: str) -> Optional[str]:
        stmt = select(User.email).where(User.user_id == recipient_id)
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return result.scalar_one_or_none()

    async def _save_notification(
        self,
        recipient_id: str,
        message: str,
        notification_type: str,
        request_id: Optional[str],
    ) -> None:
        notification = Notification(
            notification_id=generate_notification_id(),
            recipient_id=recipient_id,
            message=message,
            type=notification_type,
            sent_date=datetime.now(timezone.utc),
            is_read=False,
            request_id=request_id,
        )
        async with self.database.session() as session:
            session.add(notification)
            await session.commit()
        logger.info("Notification saved to database: %s", notification.notification_id)

    async def get_unread_notifications(self, user_id: str) -> List[Notification]:
        """Unread notifications for a user, newest first."""
        stmt = (
            select(Notification)
            .where(Notification.recipient_id == user_id, Notification.is_read.is_(False))
            .order_by(Notification.sent_date.desc())
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            return list(result.scalars().all())

    async def mark_as_read(self, notification_id: str) -> bool:
        """Acknowledge a notification; False if it does not exist."""
        stmt = (
            update(Notification)
            .where(Notification.notification_id == notification_id)
            .values(is_read=True)
        )
        async with self.database.session() as session:
            result = await session.execute(stmt)
            await session.commit()
        return bool(result.rowcount)
