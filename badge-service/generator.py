"""
generator.py — Badge Artifact Generator
=========================================
The ONLY file that knows how a badge looks. Everything above this layer
treats the result as opaque PNG bytes.

generate() returns PNG bytes or raises GenerationError. Photo download is
awaited through httpx; Pillow rendering is CPU-bound and runs in a worker
thread so the request's event loop stays free.

Accepted photo references:
  http(s)://...                 — downloaded, redirects followed
  data:image/<type>;base64,...  — decoded inline
"""

import asyncio
import base64
import binascii
import io
import logging

import httpx
from PIL import Image, ImageDraw, ImageFont, ImageOps, UnidentifiedImageError

from errors import GenerationError
from identity import NormalizedIdentity
from settings import Settings

log = logging.getLogger(__name__)

# ── Layout ────────────────────────────────────────────────────────────────────

WIDTH, HEIGHT   = 600, 900
HEADER_HEIGHT   = 160
FOOTER_HEIGHT   = 110
AVATAR_SIZE     = 280
AVATAR_TOP      = 210
TEXT_MARGIN     = 48

BACKGROUND      = (246, 248, 250)
HEADER_COLOR    = (13, 17, 23)
ACCENT          = (31, 111, 235)
NAME_COLOR      = (22, 27, 34)
MUTED           = (87, 96, 106)
WHITE           = (255, 255, 255)

MAX_PHOTO_BYTES = 5 * 1024 * 1024


# ── Photo fetch ───────────────────────────────────────────────────────────────

def _decode_data_url(url: str) -> bytes:
    header, sep, payload = url.partition(',')
    if not sep or not header.startswith('data:image/') or not header.endswith(';base64'):
        raise GenerationError("Unsupported data URL for photo")
    try:
        return base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise GenerationError(f"Photo data URL is not valid base64: {e}") from e


async def fetch_photo(url: str, timeout: float) -> bytes:
    if url.startswith('data:'):
        return _decode_data_url(url)

    if not url.lower().startswith(('http://', 'https://')):
        raise GenerationError(f"Unsupported photo URL scheme: {url[:40]}")

    # Streamed so an oversized photo is dropped before it is fully buffered.
    too_large = GenerationError(f"Photo at {url} exceeds {MAX_PHOTO_BYTES} bytes")
    chunks, size = [], 0
    try:
        async with httpx.AsyncClient(timeout=timeout, follow_redirects=True) as client:
            async with client.stream('GET', url) as resp:
                resp.raise_for_status()
                declared = resp.headers.get('Content-Length', '')
                if declared.isdigit() and int(declared) > MAX_PHOTO_BYTES:
                    raise too_large
                async for chunk in resp.aiter_bytes():
                    size += len(chunk)
                    if size > MAX_PHOTO_BYTES:
                        raise too_large
                    chunks.append(chunk)
    except httpx.HTTPError as e:
        raise GenerationError(f"Could not fetch photo {url}: {e}") from e

    log.info(f"Fetched photo {url} ({size} bytes)")
    return b''.join(chunks)


# ── Rendering ─────────────────────────────────────────────────────────────────

def _font(size: int) -> ImageFont.FreeTypeFont:
    return ImageFont.load_default(size=size)


def _fitted_font(draw: ImageDraw.ImageDraw, text: str, start: int, floor: int) -> ImageFont.FreeTypeFont:
    """Largest font between floor and start that keeps text inside the margins."""
    size = start
    font = _font(size)
    while size > floor and draw.textlength(text, font=font) > WIDTH - 2 * TEXT_MARGIN:
        size -= 2
        font = _font(size)
    return font


def initials(name: str) -> str:
    parts = name.split()
    return "".join(p[0] for p in parts[:2]).upper() or "?"


def _avatar(photo: bytes | None, name: str) -> Image.Image:
    mask = Image.new('L', (AVATAR_SIZE, AVATAR_SIZE), 0)
    ImageDraw.Draw(mask).ellipse((0, 0, AVATAR_SIZE - 1, AVATAR_SIZE - 1), fill=255)

    if photo is not None:
        try:
            source = Image.open(io.BytesIO(photo))
            source.load()
        except (UnidentifiedImageError, OSError) as e:
            raise GenerationError(f"Photo could not be decoded: {e}") from e
        face = ImageOps.fit(source.convert('RGB'), (AVATAR_SIZE, AVATAR_SIZE))
    else:
        face = Image.new('RGB', (AVATAR_SIZE, AVATAR_SIZE), ACCENT)
        ImageDraw.Draw(face).text(
            (AVATAR_SIZE // 2, AVATAR_SIZE // 2),
            initials(name),
            font=_font(AVATAR_SIZE // 3),
            fill=WHITE,
            anchor='mm',
        )

    face.putalpha(mask)
    return face


def render(identity: NormalizedIdentity, photo: bytes | None, title: str) -> bytes:
    """Draw the badge and return it PNG-encoded. Same input, same bytes."""
    canvas = Image.new('RGB', (WIDTH, HEIGHT), BACKGROUND)
    draw = ImageDraw.Draw(canvas)

    # Header
    draw.rectangle((0, 0, WIDTH, HEADER_HEIGHT), fill=HEADER_COLOR)
    draw.text((WIDTH // 2, HEADER_HEIGHT // 2), title,
              font=_fitted_font(draw, title, 48, 20), fill=WHITE, anchor='mm')

    # Photo / initials
    avatar = _avatar(photo, identity.name)
    left = (WIDTH - AVATAR_SIZE) // 2
    ring = 8
    draw.ellipse((left - ring, AVATAR_TOP - ring,
                  left + AVATAR_SIZE + ring, AVATAR_TOP + AVATAR_SIZE + ring), fill=ACCENT)
    canvas.paste(avatar, (left, AVATAR_TOP), avatar)

    # Identity
    text_top = AVATAR_TOP + AVATAR_SIZE + 70
    draw.text((WIDTH // 2, text_top), identity.name,
              font=_fitted_font(draw, identity.name, 52, 18), fill=NAME_COLOR, anchor='mm')
    draw.text((WIDTH // 2, text_top + 64), identity.email,
              font=_fitted_font(draw, identity.email, 28, 12), fill=MUTED, anchor='mm')

    # Footer
    draw.rectangle((0, HEIGHT - FOOTER_HEIGHT, WIDTH, HEIGHT), fill=ACCENT)
    draw.text((WIDTH // 2, HEIGHT - FOOTER_HEIGHT // 2), "VISITOR",
              font=_font(44), fill=WHITE, anchor='mm')

    buf = io.BytesIO()
    canvas.save(buf, format='PNG')
    return buf.getvalue()


# ── Public interface ──────────────────────────────────────────────────────────

async def generate(identity: NormalizedIdentity, settings: Settings) -> bytes:
    """Pipeline calls this. Raises GenerationError on any failure."""
    photo = None
    if identity.photo_url:
        photo = await fetch_photo(identity.photo_url, settings.photo_fetch_timeout)

    try:
        png = await asyncio.to_thread(render, identity, photo, settings.badge_title)
    except GenerationError:
        raise
    except Exception as e:
        raise GenerationError(f"Rendering failed: {e}") from e

    log.info(f"Badge rendered for {identity.email} ({len(png)} bytes)")
    return png
