"""
Outgoing mail. JobTrack sends a single kind of message: the password reset link.

Delivery goes through the Resend HTTP API when JOBTRACK_RESEND_API_KEY is
set, or through SMTP when JOBTRACK_SMTP_HOST is. With neither configured the
link is written to the log instead, so a local install can still finish a
reset.
"""
import logging
from email.message import EmailMessage

import aiosmtplib
import httpx

from ..config import settings

logger = logging.getLogger("jobtrack.email")

RESEND_URL = "https://api.resend.com/emails"

RESET_SUBJECT = "Reset your JobTrack password"
RESET_BODY = """Hi,

Someone asked to reset the password of the JobTrack account for this address.
Open the link below within {minutes} minutes to choose a new one:

{url}

If it wasn't you, ignore this message and your password stays as it is.
"""


def mail_configured() -> bool:
    return bool(settings.email.resend_api_key or settings.email.smtp_host)


async def _deliver_with_resend(to: str, subject: str, body: str):
    async with httpx.AsyncClient(timeout=10.0) as http:
        response = await http.post(
            RESEND_URL,
            headers={"Authorization": f"Bearer {settings.email.resend_api_key}"},
            json={"from": settings.email.sender, "to": [to], "subject": subject, "text": body},
        )
        response.raise_for_status()


async def _deliver_with_smtp(to: str, subject: str, body: str):
    message = EmailMessage()
    message["From"] = settings.email.sender
    message["To"] = to
    message["Subject"] = subject
    message.set_content(body)

    await aiosmtplib.send(
        message,
        hostname=settings.email.smtp_host,
        port=settings.email.smtp_port,
        username=settings.email.smtp_username,
        password=settings.email.smtp_password,
        start_tls=settings.email.smtp_use_tls,
    )


async def send_mail(to: str, subject: str, body: str) -> bool:
    """Send a plain-text message. False when delivery failed; the reason is logged."""
    try:
        if settings.email.resend_api_key:
            await _deliver_with_resend(to, subject, body)
        else:
            await _deliver_with_smtp(to, subject, body)
    except (httpx.HTTPError, aiosmtplib.SMTPException, OSError) as e:
        logger.error("Could not send %r to %s: %s", subject, to, e)
        return False

    logger.info("Sent %r to %s", subject, to)
    return True


async def send_password_reset(to: str, token: str) -> bool:
    url = f"{settings.base_url.rstrip('/')}/reset-password?token={token}"
    if not mail_configured():
        logger.info("Mail is not configured; password reset link for %s: %s", to, url)
        return False
    body = RESET_BODY.format(minutes=settings.auth.reset_link_minutes, url=url)
    return await send_mail(to, RESET_SUBJECT, body)
