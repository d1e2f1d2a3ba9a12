"""
transport.py — Email Transport Layer
=====================================
This is the ONLY file that knows about SMTP (or any delivery mechanism).
Everything above this layer is transport-agnostic.

SMTP settings come from the Settings snapshot (see settings.py).
With SMTP_HOST empty the message is written to the log instead of sent,
which is the default for local development.
"""

import logging
import smtplib
from dataclasses import dataclass
from email.mime.image import MIMEImage
from email.mime.multipart import MIMEMultipart
from email.mime.text import MIMEText

from settings import Settings

log = logging.getLogger(__name__)


@dataclass
class TransportMessage:
    """Normalized message envelope. Transport layer speaks only this."""
    to_address: str
    subject: str
    body_text: str
    body_html: str | None
    message_id: str
    attachment: bytes | None = None
    attachment_name: str | None = None
    attachment_cid: str | None = None


@dataclass
class TransportResult:
    success: bool
    error: str | None = None


def build_mime(msg: TransportMessage, settings: Settings) -> MIMEMultipart:
    """Text + optional HTML alternative, with the PNG as a related part."""
    mime = MIMEMultipart('related')
    mime['Subject'] = msg.subject
    mime['From']    = settings.smtp_from
    mime['To']      = msg.to_address
    mime['Message-ID']   = f"<{msg.message_id}@{settings.smtp_from.split('@')[-1]}>"
    mime['X-Message-ID'] = msg.message_id

    alternative = MIMEMultipart('alternative')
    alternative.attach(MIMEText(msg.body_text, 'plain', 'utf-8'))
    if msg.body_html:
        alternative.attach(MIMEText(msg.body_html, 'html', 'utf-8'))
    mime.attach(alternative)

    if msg.attachment is not None:
        image = MIMEImage(msg.attachment, 'png')
        if msg.attachment_cid:
            image.add_header('Content-ID', f"<{msg.attachment_cid}>")
        image.add_header('Content-Disposition', 'attachment',
                         filename=msg.attachment_name or 'badge.png')
        mime.attach(image)

    return mime


def _smtp_send(msg: TransportMessage, settings: Settings) -> TransportResult:
    if not settings.smtp_host:
        log.warning(f"[{msg.message_id}] SMTP_HOST not set — falling back to console output")
        _console_fallback(msg)
        return TransportResult(success=True)

    mime = build_mime(msg, settings)

    try:
        log.info(f"[{msg.message_id}] Connecting to SMTP {settings.smtp_host}:{settings.smtp_port}")
        with smtplib.SMTP(settings.smtp_host, settings.smtp_port, timeout=10) as server:
            if settings.smtp_use_tls:
                server.starttls()
            if settings.smtp_user and settings.smtp_password:
                server.login(settings.smtp_user, settings.smtp_password)
                log.info(f"[{msg.message_id}] Authenticated as {settings.smtp_user}")

            server.sendmail(settings.smtp_from, [msg.to_address], mime.as_string())

        log.info(f"[{msg.message_id}] Delivered: to={msg.to_address} subject='{msg.subject}'")
        return TransportResult(success=True)

    except smtplib.SMTPException as e:
        log.error(f"[{msg.message_id}] SMTP error: {e}")
        return TransportResult(success=False, error=f"SMTP error: {e}")
    except OSError as e:
        log.error(f"[{msg.message_id}] Connection failed to {settings.smtp_host}:{settings.smtp_port}: {e}")
        return TransportResult(success=False, error=f"Connection failed: {e}")


def _console_fallback(msg: TransportMessage) -> None:
    log.info("=" * 60)
    log.info("EMAIL (console fallback — no SMTP configured)")
    log.info(f"  message_id : {msg.message_id}")
    log.info(f"  to         : {msg.to_address}")
    log.info(f"  subject    : {msg.subject}")
    log.info(f"  attachment : {msg.attachment_name} ({len(msg.attachment or b'')} bytes)")
    log.info(f"  body       : {msg.body_text[:300]}{'...' if len(msg.body_text) > 300 else ''}")
    log.info("=" * 60)


def deliver(msg: TransportMessage, settings: Settings) -> TransportResult:
    """Public interface. Never raises; failures come back in the result."""
    try:
        return _smtp_send(msg, settings)
    except Exception as e:
        log.exception(f"Transport error for {msg.message_id}: {e}")
        return TransportResult(success=False, error=str(e))


def smtp_config_summary(settings: Settings) -> dict:
    """Return current SMTP config for the health endpoint."""
    return {
        "host": settings.smtp_host or "(not set — console fallback)",
        "port": settings.smtp_port,
        "from": settings.smtp_from,
        "auth": bool(settings.smtp_user),
        "tls":  settings.smtp_use_tls,
        "mode": "smtp" if settings.smtp_host else "console",
    }
