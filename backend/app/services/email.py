"""
Outbound email.

``SmtpMailer`` talks to a plain SMTP relay (MailHog in development, a real
provider with STARTTLS/SSL in production). Account and referral flows call
``send_best_effort``: delivery failures are logged and never undo the
state change that triggered the message.
"""

import html
import logging
import smtplib
import ssl
from dataclasses import dataclass
from datetime import datetime
from email.message import EmailMessage
from typing import Optional, Protocol

from app.core.config import Settings

logger = logging.getLogger("email")


@dataclass(frozen=True)
class OutgoingEmail:
    to: str
    subject: str
    text: str
    html: Optional[str] = None


class Mailer(Protocol):
    def send(self, message: OutgoingEmail) -> None: ...


class SmtpMailer:
    def __init__(self, settings: Settings):
        self.host = settings.SMTP_HOST
        self.port = settings.SMTP_PORT
        self.user = settings.SMTP_USER or None
        self.password = settings.SMTP_PASSWORD or None
        self.timeout = settings.SMTP_TIMEOUT
        self.sender = settings.EMAIL_FROM

    def _build(self, message: OutgoingEmail) -> EmailMessage:
        msg = EmailMessage()
        msg["From"] = self.sender
        msg["To"] = message.to
        msg["Subject"] = message.subject
        msg.set_content(message.text)
        if message.html:
            msg.add_alternative(message.html, subtype="html")
        return msg

    def send(self, message: OutgoingEmail) -> None:
        msg = self._build(message)
        logger.info("Sending email to %s via %s:%s", message.to, self.host, self.port)

        if self.port == 465:
            context = ssl.create_default_context()
            with smtplib.SMTP_SSL(
                host=self.host, port=self.port, context=context, timeout=self.timeout
            ) as server:
                if self.user and self.password:
                    server.login(self.user, self.password)
                server.send_message(msg)
            return

        with smtplib.SMTP(host=self.host, port=self.port, timeout=self.timeout) as server:
            server.ehlo()
            # Only attempt STARTTLS for non-localhost and if server advertises it
            if self.host not in ("localhost", "127.0.0.1") and server.has_extn("starttls"):
                server.starttls(context=ssl.create_default_context())
                server.ehlo()
            if self.user and self.password:
                server.login(self.user, self.password)
            server.send_message(msg)


def send_best_effort(mailer: Mailer, message: OutgoingEmail) -> bool:
    """Deliver ``message``; on any failure log it and report False."""
    try:
        mailer.send(message)
    except Exception:
        logger.exception("Failed to send email '%s' to %s", message.subject, message.to)
        return False
    logger.info("Email '%s' sent to %s", message.subject, message.to)
    return True


def welcome_email(
    to: str, username: str, temporary_password: str, login_url: str
) -> OutgoingEmail:
    text = (
        f"Welcome to our platform!\n\n"
        f"Username: {username}\n"
        f"Temporary Password: {temporary_password}\n\n"
        f"Log in at {login_url} and change your password after first login."
    )
    body = (
        "<p>Welcome to our platform!</p>"
        f"<p>Username: <strong>{html.escape(username)}</strong></p>"
        f"<p>Temporary Password: <strong>{html.escape(temporary_password)}</strong></p>"
        f'<p>Please <a href="{html.escape(login_url)}">log in</a> and change your password after first login.</p>'
    )
    return OutgoingEmail(to=to, subject="Your New Account", text=text, html=body)


def referral_email(
    to: str,
    code: str,
    expires_at: datetime,
    valid_days: int,
    login_url: str,
    team_name: str,
    issued_by_referrer: bool,
    temporary_password: Optional[str] = None,
) -> OutgoingEmail:
    inviter = "A referrer has invited you to" if issued_by_referrer else "An administrator has generated an access code for you to log in to"
    expiry = expires_at.strftime("%a %b %d %Y")
    password_line = (
        f"Your temporary password is: {temporary_password}\n\n" if temporary_password else ""
    )
    text = (
        f"Hello,\n\n"
        f"{inviter} our Job Portal.\n\n"
        f"Your Access Code: {code}\n\n"
        f"This code is valid for {valid_days} days. Please use it to log in and "
        f"complete your profile here: {login_url}\n\n"
        f"{password_line}"
        f"Thank you!"
    )
    password_html = (
        f"<p>Your temporary password is: <strong>{html.escape(temporary_password)}</strong> "
        "(You will be prompted to change this on first login.)</p>"
        if temporary_password
        else ""
    )
    body = (
        "<p>Hello,</p>"
        f"<p>{inviter} our Job Portal.</p>"
        f"<p>Your Access Code: <strong>{html.escape(code)}</strong></p>"
        f"<p>This code is valid for {valid_days} days from now ({expiry}).</p>"
        f'<p>Please use it to <a href="{html.escape(login_url)}">log in</a> and complete your profile.</p>'
        f"{password_html}"
        "<p>We look forward to having you!</p>"
        f"<p>The {html.escape(team_name)} Team</p>"
    )
    subject = (
        "Your Job Portal Access Code & Invitation!"
        if issued_by_referrer
        else "Your Job Portal Access Code!"
    )
    return OutgoingEmail(to=to, subject=subject, text=text, html=body)
