"""
pipeline.py — Badge Delivery Pipeline
======================================
Both badge routes run the same front half, then branch on delivery mode.

Steps:
1. Validate request (email required, name/photoURL optional strings)
2. Normalize identity (Guest default, no empty photo URL)
3. Generate the badge PNG, exactly once per request
4a. Inline: return the bytes, plus a download filename when asked for
4b. Email: hand the same bytes to the dispatcher as an attachment
5. Return result

Every step is a rejection point. Failures come back as a tagged Failure;
nothing here raises to the route handler.
"""

import logging
from dataclasses import dataclass

import dispatcher
import generator
from errors import Failure, ValidationFailed
from identity import NormalizedIdentity, badge_filename, normalize
from settings import Settings
from validation import parse_badge_request

log = logging.getLogger(__name__)


@dataclass
class BadgeOutcome:
    status: str                  # "ok" | "failed"
    png: bytes | None = None
    filename: str | None = None  # set only for inline delivery with download intent
    message_id: str | None = None
    failure: Failure | None = None

    @property
    def ok(self) -> bool:
        return self.status == "ok"


def _fail(exc: Exception, context: str) -> BadgeOutcome:
    if isinstance(exc, ValidationFailed):
        log.warning(f"{context}: {exc.errors}")
    else:
        log.exception(f"{context}: {exc}")
    return BadgeOutcome(status="failed", failure=Failure.from_exception(exc))


async def _render(raw, settings: Settings) -> tuple[NormalizedIdentity, bytes]:
    # ── Steps 1-3 ─────────────────────────────────────────────────────────────
    identity = normalize(parse_badge_request(raw))
    png = await generator.generate(identity, settings)
    return identity, png


async def deliver_inline(raw, download: bool, settings: Settings) -> BadgeOutcome:
    try:
        identity, png = await _render(raw, settings)
    except Exception as e:
        return _fail(e, "Error generating badge")

    # ── Step 4a ───────────────────────────────────────────────────────────────
    filename = badge_filename(identity.name) if download else None
    return BadgeOutcome(status="ok", png=png, filename=filename)


async def deliver_email(raw, settings: Settings) -> BadgeOutcome:
    try:
        identity, png = await _render(raw, settings)
        log.info(f"Badge generated for email delivery to {identity.email}")

        # ── Step 4b ───────────────────────────────────────────────────────────
        message_id = await dispatcher.send_badge_email(
            identity.email,
            identity.name,
            identity.email,
            identity.photo_url,
            png,
            settings,
        )
    except Exception as e:
        return _fail(e, "Error sending badge email")

    log.info(f"[{message_id}] Badge email sent successfully to {identity.email}")
    return BadgeOutcome(status="ok", message_id=message_id)
