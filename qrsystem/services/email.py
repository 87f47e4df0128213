"""Outgoing email over SMTP."""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from qrsystem.config import Settings, get_settings
from qrsystem.errors import DeliveryError

logger = logging.getLogger(__name__)


@dataclass
class InlineImage:
    """A PNG image embedded in an HTML body and referenced by Content-ID."""

    content_id: str
    data: bytes


@dataclass
class Attachment:
    """A PNG file attached to an email."""

    filename: str
    data: bytes


class EmailService:
    """Service for sending HTML email through the configured SMTP relay."""

    def __init__(self, settings: Settings | None = None) -> None:
        self.settings = settings or get_settings()

    @property
    def is_configured(self) -> bool:
        """Check if an SMTP relay is configured."""
        return self.settings.smtp_configured

    @property
    def sender(self) -> str:
        return self.settings.mail_from or self.settings.smtp_user or ""

    def build_message(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        inline_images: list[InlineImage] | None = None,
        attachments: list[Attachment] | None = None,
    ) -> MIMEMultipart:
        """Build a multipart message with related inline images and attachments."""
        msg = MIMEMultipart("mixed")
        msg["Subject"] = subject
        msg["From"] = self.sender
        msg["To"] = to_email

        body = MIMEMultipart("related")
        body.attach(MIMEText(html_content, "html"))
        for image in inline_images or []:
            part = MIMEImage(image.data, _subtype="png")
            part.add_header("Content-ID", f"<{image.content_id}>")
            part.add_header("Content-Disposition", "inline")
            body.attach(part)
        msg.attach(body)

        for attachment in attachments or []:
            part = MIMEImage(attachment.data, _subtype="png")
            part.add_header("Content-Disposition", "attachment", filename=attachment.filename)
            msg.attach(part)

        return msg

    def send(self, msg: MIMEMultipart) -> None:
        """Send a message.

        Raises DeliveryError if SMTP is not configured or the relay rejects the message.
        """
        to_email = msg["To"]
        if not self.is_configured:
            logger.error(f"SMTP not configured, cannot send email to {to_email}")
            raise DeliveryError("Email delivery is not configured")

        try:
            with smtplib.SMTP(
                self.settings.smtp_host, self.settings.smtp_port, timeout=self.settings.smtp_timeout
            ) as server:
                if self.settings.smtp_use_tls:
                    server.starttls()
                if self.settings.smtp_user and self.settings.smtp_password:
                    server.login(self.settings.smtp_user, self.settings.smtp_password)
                server.send_message(msg)
        except (smtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise DeliveryError(f"Failed to send email: {e}") from e

        logger.info(f"Email sent to {to_email}")
