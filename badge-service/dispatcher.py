"""
dispatcher.py — Email Dispatcher
=================================
Turns a badge into an outgoing email and hands it to the transport layer.
SMTP is blocking, so delivery runs in a worker thread.
"""

import asyncio
import logging
import uuid

import templates
import transport
from errors import DispatchError
from identity import badge_filename
from settings import Settings

log = logging.getLogger(__name__)


async def send_badge_email(
    to_address: str,
    name: str,
    email: str,
    photo_url: str | None,
    png: bytes,
    settings: Settings,
) -> str:
    """Deliver the badge. Returns the message id, raises DispatchError."""
    message_id = str(uuid.uuid4())
    subject, body_text, body_html = templates.render_badge_email(name, email, photo_url)

    msg = transport.TransportMessage(
        to_address=to_address,
        subject=subject,
        body_text=body_text,
        body_html=body_html,
        message_id=message_id,
        attachment=png,
        attachment_name=badge_filename(name),
        attachment_cid=templates.BADGE_CID,
    )

    result = await asyncio.to_thread(transport.deliver, msg, settings)
    if not result.success:
        raise DispatchError(f"[{message_id}] {result.error}")

    log.info(f"[{message_id}] Badge email handed to transport for {to_address}")
    return message_id
