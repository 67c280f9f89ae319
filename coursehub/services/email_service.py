"""
Outbound email over SMTP (aiosmtplib, STARTTLS).

Used for password-reset links and for enrollment confirmations carrying the
acceptance letter and invoice PDFs.
"""

import logging
from email.mime.application import MIMEApplication
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from pathlib import Path
from typing import List, Optional, Tuple

import aiosmtplib

from coursehub.core.config import settings
from coursehub.core.exceptions import EmailDeliveryError

logger = logging.getLogger(__name__)

# (filename shown to the recipient, path on disk)
Attachment = Tuple[str, str]


class EmailService:
    def __init__(self):
        self.smtp_host = settings.SMTP_HOST
        self.smtp_port = settings.SMTP_PORT
        self.smtp_user = settings.SMTP_USER
        self.smtp_password = settings.SMTP_PASSWORD
        self.from_email = settings.EMAIL_FROM or settings.SMTP_USER
        self.from_name = settings.EMAIL_FROM_NAME

    @property
    def is_configured(self) -> bool:
        return bool(self.smtp_user and self.smtp_password)

    def _build_message(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str],
        attachments: Optional[List[Attachment]],
    ) -> MIMEMultipart:
        message = MIMEMultipart("mixed")
        message["From"] = f"{self.from_name} <{self.from_email}>"
        message["To"] = to_email
        message["Subject"] = subject

        body = MIMEMultipart("alternative")
        if text_content:
            body.attach(MIMEText(text_content, "plain"))
        body.attach(MIMEText(html_content, "html"))
        message.attach(body)

        for filename, path in attachments or []:
            part = MIMEApplication(Path(path).read_bytes(), _subtype="pdf")
            part.add_header("Content-Disposition", "attachment", filename=filename)
            message.attach(part)
        return message

    async def send_email(
        self,
        to_email: str,
        subject: str,
        html_content: str,
        text_content: Optional[str] = None,
        attachments: Optional[List[Attachment]] = None,
    ) -> bool:
        """
        Send one message. Returns False when SMTP is not configured (the send is
        skipped); raises EmailDeliveryError when the server rejects it.
        """
        if not self.is_configured:
            logger.warning(f"SMTP not configured, skipping email to {to_email}: {subject}")
            return False

        message = self._build_message(to_email, subject, html_content, text_content, attachments)
        try:
            await aiosmtplib.send(
                message,
                hostname=self.smtp_host,
                port=self.smtp_port,
                username=self.smtp_user,
                password=self.smtp_password,
                start_tls=True,
            )
        except (aiosmtplib.SMTPException, OSError) as e:
            logger.error(f"Failed to send email to {to_email}: {e}")
            raise EmailDeliveryError(f"Failed to send email: {e}")

        logger.info(f"Sent email to {to_email}: {subject}")
        return True

    async def send_password_reset(self, to_email: str, reset_url: str) -> bool:
        html = f"""
        <p>You requested a password reset.</p>
        <p>Click the link below to choose a new password. The link is valid for one hour.</p>
        <p><a href="{reset_url}">{reset_url}</a></p>
        <p>If you did not request this, you can ignore this email.</p>
        """
        text = (
            "You requested a password reset.\n"
            f"Open this link to choose a new password (valid for one hour): {reset_url}\n"
        )
        return await self.send_email(to_email, "Password Reset Request", html, text)

    async def send_enrollment_confirmation(
        self,
        enrollment,
        acceptance_path: str,
        invoice_path: str,
    ) -> bool:
        training = enrollment.training_schedule.training
        html = f"""
        <h2>Enrollment Confirmation</h2>
        <p>Dear {enrollment.fullname},</p>
        <p>Thank you for enrolling in <strong>{training.title}</strong>.</p>
        <p>Please find attached your acceptance letter and invoice.</p>
        <p>Best regards,<br>{settings.ORGANIZATION_NAME}</p>
        """
        text = (
            f"Dear {enrollment.fullname},\n\n"
            f"Thank you for enrolling in {training.title}.\n"
            "Please find attached your acceptance letter and invoice.\n"
        )
        return await self.send_email(
            enrollment.email,
            f"Enrollment Confirmation: {training.title}",
            html,
            text,
            attachments=[
                ("acceptance_letter.pdf", acceptance_path),
                ("invoice.pdf", invoice_path),
            ],
        )


email_service = EmailService()
