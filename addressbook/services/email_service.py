"""Service for sending emails."""

import logging
import os
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional
from urllib.parse import quote

logger = logging.getLogger(__name__)


class EmailService:
    """Service for sending emails via SMTP."""

    def __init__(
        self,
        smtp_host: Optional[str] = None,
        smtp_port: Optional[int] = None,
        smtp_username: Optional[str] = None,
        smtp_password: Optional[str] = None,
        from_email: Optional[str] = None,
        from_name: str = "Address Book",
    ):
        self.smtp_host = smtp_host or os.getenv("SMTP_HOST", "")
        self.smtp_port = smtp_port or int(os.getenv("SMTP_PORT", "587"))
        self.smtp_username = smtp_username or os.getenv("SMTP_USERNAME", "")
        self.smtp_password = smtp_password or os.getenv("SMTP_PASSWORD", "")
        self.from_email = from_email or os.getenv("SMTP_FROM_EMAIL", "")
        self.from_name = from_name
        self.enabled = bool(self.smtp_host and self.smtp_username and self.from_email)

    def send_password_reset_email(
        self,
        to_email: str,
        reset_token: str,
        base_url: str,
        expires_in_minutes: int = 60,
    ) -> bool:
        """
        Send a password reset link.

        Args:
            to_email: Recipient email
            reset_token: Password reset token
            base_url: Base URL for the reset link
            expires_in_minutes: Token lifetime shown to the user

        Returns:
            True if sent successfully, False otherwise
        """
        reset_url = f"{base_url.rstrip('/')}/reset-password?token={quote(reset_token, safe='')}"

        if not self.enabled:
            # SMTP not configured: surface the link for development
            logger.info("Password reset URL for %s: %s", to_email, reset_url)
            return True

        subject = "Reset your password - Address Book"
        html_body = f"""
        <html>
            <body style="font-family: Arial, sans-serif; max-width: 600px; margin: 0 auto; padding: 20px;">
                <h2 style="color: #1e293b;">Password reset requested</h2>

                <p style="color: #475569; line-height: 1.6;">
                    We received a request to reset the password for your Address Book account.
                    Click the button below to choose a new password:
                </p>

                <div style="text-align: center; margin: 30px 0;">
                    <a href="{reset_url}"
                       style="background-color: #3b82f6; color: white; padding: 15px 30px;
                              text-decoration: none; border-radius: 5px; display: inline-block;
                              font-weight: bold;">
                        Reset Password
                    </a>
                </div>

                <p style="color: #64748b; font-size: 14px;">
                    This link expires in {expires_in_minutes} minutes. If you did not request a
                    password reset, you can ignore this email.
                </p>
            </body>
        </html>
        """

        text_body = f"""
        Address Book - Password Reset

        To reset your password, open the link below:
        {reset_url}

        This link expires in {expires_in_minutes} minutes.

        If you did not request a password reset, you can ignore this email.
        """

        return self._send_email(to_email, subject, html_body, text_body)

    def _send_email(self, to_email: str, subject: str, html_body: str, text_body: str) -> bool:
        """
        Send an email via SMTP.

        Args:
            to_email: Recipient email
            subject: Email subject
            html_body: HTML body
            text_body: Plain text body

        Returns:
            True if sent successfully, False otherwise
        """
        try:
            msg = MIMEMultipart("alternative")
            msg["Subject"] = subject
            msg["From"] = f"{self.from_name} <{self.from_email}>"
            msg["To"] = to_email

            msg.attach(MIMEText(text_body, "plain", "utf-8"))
            msg.attach(MIMEText(html_body, "html", "utf-8"))

            with smtplib.SMTP(self.smtp_host, self.smtp_port) as server:
                server.starttls()
                server.login(self.smtp_username, self.smtp_password)
                server.send_message(msg)

            return True

        except (smtplib.SMTPException, OSError) as e:
            logger.error("Failed to send email to %s: %s", to_email, e)
            return False
