"""
origins.py — Trust Boundary (CORS Policy)
==========================================
All browser-origin admission decisions go through here.

An origin is admitted when it is absent (non-browser caller), exactly matches
a configured origin, ends with .vercel.app / .vercel.com, or contains
"localhost" / "127.0.0.1" anywhere. The last rule is a substring test, not a
hostname comparison: "https://localhost.evil.com" is admitted.

The policy is a pure function of the Settings snapshot. install() wires it
into Flask twice: a before_request gate that rejects disallowed origins
before any handler runs, and flask-cors for the credentialed response headers.
"""

import logging
import re

from flask import Flask, request
from flask_cors import CORS

import envelopes
from errors import OriginNotAllowed
from settings import Settings

log = logging.getLogger(__name__)

DEV_ORIGINS = (
    "http://localhost:3000",
    "http://localhost:3001",
    "http://localhost:5173",   # Vite default
    "http://127.0.0.1:3000",
    "http://127.0.0.1:5173",
)

SUFFIX_RULES    = (".vercel.app", ".vercel.com")
SUBSTRING_RULES = ("localhost", "127.0.0.1")

ALLOWED_METHODS = ["GET", "POST", "PUT", "DELETE", "PATCH", "OPTIONS"]
ALLOWED_HEADERS = [
    "Origin",
    "X-Requested-With",
    "Content-Type",
    "Accept",
    "Authorization",
    "Cache-Control",
    "X-Access-Token",
]
EXPOSED_HEADERS = ["X-Total-Count", "X-Page-Count"]
PREFLIGHT_MAX_AGE = 86400   # 24 hours


def allowed_origins(settings: Settings) -> tuple[str, ...]:
    """Exact-match origins for this configuration."""
    origins: list[str] = []
    if settings.is_development:
        origins.extend(DEV_ORIGINS)
    if settings.frontend_url:
        origins.append(settings.frontend_url)
    origins.extend(settings.vercel_domains)
    return tuple(origins)


def is_origin_allowed(origin: str | None, settings: Settings) -> bool:
    if not origin:
        return True
    if origin in allowed_origins(settings):
        return True
    if origin.endswith(SUFFIX_RULES):
        return True
    return any(rule in origin for rule in SUBSTRING_RULES)


def check_origin(origin: str | None, settings: Settings) -> None:
    if not is_origin_allowed(origin, settings):
        raise OriginNotAllowed(origin)


def cors_origin_patterns(settings: Settings) -> list[re.Pattern]:
    """The same policy expressed as the regex list flask-cors understands."""
    patterns = [re.compile(re.escape(o) + r'\Z') for o in allowed_origins(settings)]
    patterns += [re.compile(r'.*' + re.escape(s) + r'\Z') for s in SUFFIX_RULES]
    patterns += [re.compile(r'.*' + re.escape(s) + r'.*') for s in SUBSTRING_RULES]
    return patterns


def install(app: Flask, settings: Settings) -> None:
    @app.before_request
    def _enforce_origin():
        origin = request.headers.get('Origin')
        try:
            check_origin(origin, settings)
        except OriginNotAllowed as e:
            log.warning(f"Rejected {request.method} {request.path}: {e}")
            return envelopes.envelope(False, str(e), status=403)
        return None

    CORS(
        app,
        origins=cors_origin_patterns(settings),
        supports_credentials=True,
        methods=ALLOWED_METHODS,
        allow_headers=ALLOWED_HEADERS,
        expose_headers=EXPOSED_HEADERS,
        max_age=PREFLIGHT_MAX_AGE,
    )
