"""
Outgoing email for candidate access.

Messages are sent with ``smtplib`` on a worker thread so the event loop never
blocks on the mail server. Delivery problems are logged and reported as a
``False`` return value; they never fail the calling request.
"""

from __future__ import annotations

import asyncio
import smtplib
from dataclasses import dataclass
from email.message import EmailMessage
from html import escape
from typing import Optional

from gradii.core.logging_config import get_logger
from gradii.server.core.config import SMTPConfig

logger = get_logger(__name__)


@dataclass(frozen=True)
class RenderedEmail:
    subject: str
    html: str
    text: str


_SUBJECTS = {
    "signup": "Verify your email for Gradii",
    "signin": "Your Gradii sign-in code",
    "candidate_access": "Your interview access code",
}


def render_otp_email(
    otp: str,
    purpose: str,
    candidate_name: Optional[str] = None,
    interview_link: Optional[str] = None,
    ttl_minutes: int = 5,
) -> RenderedEmail:
    """Build the subject and bodies of an OTP email for ``purpose``."""
    subject = _SUBJECTS.get(purpose, "Your Gradii verification code")
    greeting = f"Hi {candidate_name}," if candidate_name else "Hello,"
    if purpose == "candidate_access":
        intro = "Use the code below to access your interview."
    elif purpose == "signup":
        intro = "Use the code below to finish creating your account."
    else:
        intro = "Use the code below to sign in."

    text_lines = [greeting, "", intro, "", f"Code: {otp}", "", f"The code expires in {ttl_minutes} minutes."]
    link_html = ""
    if interview_link:
        text_lines += ["", f"Interview link: {interview_link}"]
        link_html = f'<p><a href="{escape(interview_link, quote=True)}">Open your interview</a></p>'
    text_lines += ["", "If you did not request this code, you can ignore this email."]

    html = (
        "<div style=\"font-family: Arial, sans-serif; max-width: 560px; margin: 0 auto;\">"
        f"<p>{escape(greeting)}</p>"
        f"<p>{escape(intro)}</p>"
        "<p style=\"font-size: 28px; font-weight: bold; letter-spacing: 6px;\">"
        f"{escape(otp)}</p>"
        f"<p>The code expires in {ttl_minutes} minutes.</p>"
        f"{link_html}"
        "<p style=\"color: #666; font-size: 12px;\">If you did not request this code, you can ignore this email.</p>"
        "</div>"
    )
    return RenderedEmail(subject=subject, html=html, text="\n".join(text_lines))


class EmailService:
    """Sends transactional emails through the configured SMTP server."""

    def __init__(self, config: SMTPConfig, otp_ttl_seconds: int = 300) -> None:
        self._config = config
        self._otp_ttl_minutes = max(1, otp_ttl_seconds // 60)

    @property
    def enabled(self) -> bool:
        return self._config.enabled

    def _send(self, to_email: str, rendered: RenderedEmail) -> None:
        config = self._config
        sender = config.sender or config.user
        msg = EmailMessage()
        msg["Subject"] = rendered.subject
        msg["From"] = f"{config.sender_name} <{sender}>"
        msg["To"] = to_email
        msg.set_content(rendered.text)
        msg.add_alternative(rendered.html, subtype="html")

        if config.port == 465:
            with smtplib.SMTP_SSL(config.host, config.port, timeout=config.timeout_seconds) as server:
                server.login(config.user, config.password)
                server.send_message(msg)
        else:
            with smtplib.SMTP(config.host, config.port, timeout=config.timeout_seconds) as server:
                if config.use_tls:
                    server.starttls()
                server.login(config.user, config.password)
                server.send_message(msg)

    async def send_otp_email(
        self,
        email: str,
        otp: str,
        purpose: str,
        candidate_name: Optional[str] = None,
        interview_link: Optional[str] = None,
    ) -> bool:
        """Send an OTP email.

        Returns:
            True when the mail server accepted the message
        """
        if not self.enabled:
            logger.warning("SMTP is not configured; OTP email not sent")
            return False

        rendered = render_otp_email(otp, purpose, candidate_name, interview_link, self._otp_ttl_minutes)
        try:
            await asyncio.to_thread(self._send, email, rendered)
        except smtplib.SMTPAuthenticationError:
            logger.exception(f"SMTP auth failed for {self._config.user}")
            return False
        except smtplib.SMTPException:
            logger.exception(f"SMTP error while sending email to {email}")
            return False
        except OSError:
            logger.exception(f"SMTP network error while sending email to {email}")
            return False
        logger.info(f"OTP email sent to {email} (purpose={purpose})")
        return True
