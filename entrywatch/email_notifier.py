from __future__ import annotations

import datetime as dt
import logging
import smtplib
from email.message import EmailMessage

from entrywatch.config import Settings
from entrywatch.domain import ConfigError, LocationTarget, Slot

logger = logging.getLogger(__name__)

BOOKING_URL = "https://ttp.cbp.dhs.gov/"


def format_appointment(timestamp: str) -> str:
    """Human-readable slot time, e.g. ``Saturday, March 15, 2025 at 09:00 AM``."""
    try:
        parsed = dt.datetime.fromisoformat(timestamp)
    except ValueError:
        return timestamp
    return parsed.strftime("%A, %B %d, %Y at %I:%M %p")


def build_message(location: LocationTarget, slot: Slot, found_at: dt.datetime) -> tuple[str, str]:
    subject = f"Global Entry: Appointment Before {location.target_date}!"
    text = (
        "Great news! A Global Entry appointment is available before your target date.\n"
        "\n"
        f"Location: {location.name}\n"
        f"Location ID: {location.id}\n"
        f"Appointment: {format_appointment(slot.start_timestamp)}\n"
        f"Your Target: {location.target_date}\n"
        "\n"
        f"Book now: {BOOKING_URL}\n"
        "\n"
        f"Found at: {found_at.strftime('%Y-%m-%d %H:%M:%S')}\n"
        "\n"
        "Don't wait - appointments fill up quickly!"
    )
    return subject, text


def _require_credentials(settings: Settings) -> tuple[str, str]:
    if not settings.smtp_user or not settings.smtp_password:
        raise ConfigError("Email credentials not configured. Set SMTP_USER and SMTP_PASSWORD environment variables.")
    if not settings.email_to:
        raise ConfigError("No email recipients configured. Set EMAIL_TO or SMTP_USER.")
    return settings.smtp_user, settings.smtp_password


def _open_smtp(settings: Settings) -> smtplib.SMTP:
    if settings.smtp_secure:
        return smtplib.SMTP_SSL(settings.smtp_host, settings.smtp_port)

    server = smtplib.SMTP(settings.smtp_host, settings.smtp_port)
    try:
        server.ehlo()
        if server.has_extn("starttls"):
            server.starttls()
            server.ehlo()
    except Exception:
        server.close()
        raise
    return server


def send_email(settings: Settings, *, subject: str, text: str) -> bool:
    """Send one notification email to every configured recipient.

    Missing credentials raise ConfigError. Delivery problems are logged and
    reported as False so the slot is tried again on the next run.
    """
    user, password = _require_credentials(settings)

    msg = EmailMessage()
    msg["From"] = user
    msg["To"] = ", ".join(settings.email_to)
    msg["Subject"] = subject
    msg.set_content(text)
    msg.add_alternative(text.replace("\n", "<br>"), subtype="html")

    try:
        with _open_smtp(settings) as server:
            server.login(user, password)
            server.send_message(msg, from_addr=user, to_addrs=list(settings.email_to))
    except (smtplib.SMTPException, OSError) as e:
        logger.error("Error sending email (%s: %s)", type(e).__name__, e)
        return False

    logger.info("Email sent: %s", subject)
    return True
