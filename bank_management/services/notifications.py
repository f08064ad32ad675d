"""
Email notifications sent to clients.
"""

import html
import logging
import smtplib
from email.message import EmailMessage
from typing import Optional

from bank_management.core.config import settings

logger = logging.getLogger(__name__)


class EmailNotifier:
    """Sends HTML email through an SMTP server with STARTTLS."""

    def __init__(
        self,
        host: str,
        port: int,
        username: Optional[str] = None,
        password: Optional[str] = None,
        sender: Optional[str] = None,
        timeout: float = 10.0,
    ):
        self.host = host
        self.port = port
        self.username = username
        self.password = password
        self.sender = sender or username
        self.timeout = timeout

    def build_message(self, to: str, subject: str, html_body: str) -> EmailMessage:
        message = EmailMessage()
        message["From"] = self.sender
        message["To"] = to
        message["Subject"] = subject
        message.set_content("This message requires an HTML capable email client.")
        message.add_alternative(html_body, subtype="html")
        return message

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        message = self.build_message(to, subject, html_body)
        with smtplib.SMTP(self.host, self.port, timeout=self.timeout) as smtp:
            smtp.starttls()
            if self.username:
                smtp.login(self.username, self.password or "")
            smtp.send_message(message)
        logger.info("Email '%s' sent to %s", subject, to)


class LogNotifier:
    """Stand-in used when email delivery is disabled; only logs."""

    def send_email(self, to: str, subject: str, html_body: str) -> None:
        logger.info("Email delivery disabled; skipping '%s' to %s", subject, to)


def get_notifier():
    """
    Dependency returning the notifier configured in settings.
    """
    if not settings.EMAIL_ENABLED:
        return LogNotifier()
    return EmailNotifier(
        host=settings.SMTP_HOST,
        port=settings.SMTP_PORT,
        username=settings.SMTP_USERNAME,
        password=settings.SMTP_PASSWORD,
        sender=settings.EMAIL_SENDER,
    )


WELCOME_SUBJECT = "Welcome message"


def welcome_message(name: str, email: str) -> str:
    """HTML body of the registration email. Never includes the password."""
    return f"""<html>
<head>
    <meta name="viewport" content="user-scalable=no, width=device-width, initial-scale=1">
</head>
<body style="font-family: Arial, sans-serif;">
    <div style="margin: auto; text-align: center;">
        <h1 style="color: #e0500e;">WELCOME TO {html.escape(settings.BANK_NAME)}</h1>
        <p>Dear {html.escape(name)}, we welcome you to your account.</p>
        <p>You can access our network with the user <b>{html.escape(email)}</b>
        and the password you chose at registration.</p>
        <p>In case of any inconvenience, please contact us at
        <b>{html.escape(settings.SUPPORT_EMAIL)}</b>.</p>
        <p><b>Thank you for choosing us.</b></p>
    </div>
</body>
</html>"""
