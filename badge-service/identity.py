"""
identity.py — Identity Normalizer
==================================
Applies defaults to the optional badge fields. Pure: the same BadgeRequest
always yields the same NormalizedIdentity.
"""

import re
from dataclasses import dataclass

from validation import BadgeRequest

DEFAULT_NAME = "Guest"
FILENAME_SUFFIX = "_visitor_badge.png"

_WHITESPACE = re.compile(r'\s+')


@dataclass(frozen=True)
class NormalizedIdentity:
    name:      str
    email:     str
    photo_url: str | None   # never ""


def normalize(req: BadgeRequest) -> NormalizedIdentity:
    return NormalizedIdentity(
        name=req.name or DEFAULT_NAME,
        email=req.email,
        photo_url=req.photo_url or None,
    )


def badge_filename(name: str) -> str:
    """'Jane  Doe' -> 'jane_doe_visitor_badge.png'."""
    return _WHITESPACE.sub('_', name.lower()) + FILENAME_SUFFIX
