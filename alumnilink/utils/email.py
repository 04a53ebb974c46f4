from __future__ import annotations

import logging
import smtplib
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText
from typing import Optional

from alumnilink.config import settings

logger = logging.getLogger(__name__)


def is_email_enabled() -> bool:
    """Return True when outgoing mail is switched on and an SMTP relay is configured."""
    return bool(
        settings.EMAIL_NOTIFICATIONS_ENABLED
        and settings.SMTP_SERVER
        and settings.EMAIL_FROM
    )


def build_message(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> MIMEMultipart:
    msg = MIMEMultipart("alternative")
    msg["From"] = settings.EMAIL_FROM or ""
    msg["To"] = to_email
    msg["Subject"] = subject
    msg.attach(MIMEText(body_text, "plain", "utf-8"))
    if body_html:
        msg.attach(MIMEText(body_html, "html", "utf-8"))
    return msg


def _open_smtp_connection() -> smtplib.SMTP:
    if settings.SMTP_USE_SSL:
        return smtplib.SMTP_SSL(
            settings.SMTP_SERVER,
            settings.SMTP_PORT,
            timeout=settings.SMTP_TIMEOUT_SECONDS,
        )
    return smtplib.SMTP(
        settings.SMTP_SERVER,
        settings.SMTP_PORT,
        timeout=settings.SMTP_TIMEOUT_SECONDS,
    )


def send_email(
    *,
    to_email: str,
    subject: str,
    body_text: str,
    body_html: Optional[str] = None,
) -> bool:
    """
    Deliver one message through the configured SMTP relay.

    Returns True on success. Delivery problems are logged and reported as
    False; callers treat mail as best-effort.
    """
    if not is_email_enabled():
        return False

    msg = build_message(
        to_email=to_email,
        subject=subject,
        body_text=body_text,
        body_html=body_html,
    )
    username = settings.SMTP_USERNAME or settings.EMAIL_FROM
    password = settings.EMAIL_PASSWORD or ""

    try:
        with _open_smtp_connection() as server:
            if settings.SMTP_USE_TLS and not settings.SMTP_USE_SSL:
                server.starttls()
            if password:
                server.login(username, password)
            server.sendmail(settings.EMAIL_FROM, [to_email], msg.as_string())
        return True
    except (smtplib.SMTPException, OSError) as exc:
        logger.warning("Email send failed for '%s': %s", to_email, exc)
        return False
