"""
Email notification service using SMTP.

Composes the post-call email (transcript in the body, recording attached)
and delivers it. smtplib is blocking, so delivery runs in the default
thread pool to keep the event loop free.
"""
import asyncio
import logging
import smtplib
from email.message import EmailMessage
from typing import Callable, Optional

from src.config import Settings
from src.exceptions import DeliveryError
from src.models.notification import NotificationMessage

logger = logging.getLogger(__name__)

# Port 465 speaks TLS from the first byte; anything else upgrades with STARTTLS
IMPLICIT_TLS_PORT = 465


class EmailService:
    """Sends one email with one audio attachment per notification."""

    def __init__(
        self,
        username: str,
        password: str,
        recipient: Optional[str] = None,
        host: str = "smtp.gmail.com",
        port: int = IMPLICIT_TLS_PORT,
        timeout: float = 30.0,
        smtp_factory: Optional[Callable[..., smtplib.SMTP]] = None,
    ):
        if not username or not password:
            raise RuntimeError("EMAIL_USER and EMAIL_PASS environment variables are required")

        self.username = username
        self.password = password
        self.sender = username
        self.recipient = recipient or username
        self.host = host
        self.port = port
        self.timeout = timeout
        if smtp_factory is None:
            smtp_factory = smtplib.SMTP_SSL if port == IMPLICIT_TLS_PORT else smtplib.SMTP
        self._smtp_factory = smtp_factory

    @classmethod
    def from_settings(cls, settings: Settings) -> "EmailService":
        return cls(
            username=settings.email_user,
            password=settings.email_password,
            recipient=settings.email_to,
            host=settings.smtp_host,
            port=settings.smtp_port,
        )

    def build_email(self, notification: NotificationMessage) -> EmailMessage:
        """Render a NotificationMessage as a MIME email."""
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = self.recipient
        message["Subject"] = notification.subject
        message.set_content(notification.body_text)

        attachment = notification.attachment
        maintype, _, subtype = attachment.content_type.partition("/")
        message.add_attachment(
            attachment.content,
            maintype=maintype or "audio",
            subtype=subtype or "mpeg",
            filename=attachment.filename,
        )
        return message

    def _deliver(self, message: EmailMessage):
        with self._smtp_factory(self.host, self.port, timeout=self.timeout) as smtp:
            if self.port != IMPLICIT_TLS_PORT:
                smtp.starttls()
            smtp.login(self.username, self.password)
            smtp.send_message(message)

    async def send(self, notification: NotificationMessage):
        """
        Deliver the notification email.

        Raises:
            DeliveryError: SMTP rejected the message or the server was unreachable
        """
        message = self.build_email(notification)
        conversation_id = notification.attachment.conversation_id

        try:
            loop = asyncio.get_running_loop()
            await loop.run_in_executor(None, self._deliver, message)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"❌ Failed to send email for conversation {conversation_id}: {e}")
            raise DeliveryError(type(e).__name__)

        logger.info(f"📤 Email sent to {self.recipient} for conversation {conversation_id}")
