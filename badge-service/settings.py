"""
settings.py — Process Configuration
=====================================
Reads the environment exactly once, at process start, into an immutable
Settings snapshot. Everything downstream receives the snapshot instead of
touching os.environ, so request handling never sees configuration drift.

Configuration (environment variables):
  PORT                — HTTP listen port (default: 3000)
  NODE_ENV            — "development" adds the local dev origins
  FRONTEND_URL        — exact allowed browser origin (optional)
  VERCEL_DOMAINS      — comma-separated exact allowed origins (optional)
  BADGE_TITLE         — header text printed on every badge
  PHOTO_FETCH_TIMEOUT — seconds allowed for downloading a photo (default: 10)
  SMTP_HOST           — SMTP server hostname (empty: console fallback)
  SMTP_PORT           — SMTP port (default: 587)
  SMTP_USER           — Username for SMTP auth (optional)
  SMTP_PASSWORD       — Password for SMTP auth (optional)
  SMTP_FROM           — From address (default: noreply@badge-service.local)
  SMTP_USE_TLS        — Use STARTTLS (default: false)
  LOG_LEVEL           — root log level (default: INFO)
"""

import os
from dataclasses import dataclass, field
from typing import Mapping


def _split_csv(value: str) -> tuple[str, ...]:
    return tuple(part.strip() for part in value.split(',') if part.strip())


@dataclass(frozen=True)
class Settings:
    port: int = 3000
    node_env: str = 'production'
    frontend_url: str | None = None
    vercel_domains: tuple[str, ...] = field(default_factory=tuple)
    badge_title: str = 'Visitor Badge'
    photo_fetch_timeout: float = 10.0
    smtp_host: str = ''
    smtp_port: int = 587
    smtp_user: str = ''
    smtp_password: str = ''
    smtp_from: str = 'noreply@badge-service.local'
    smtp_use_tls: bool = False
    log_level: str = 'INFO'

    @property
    def is_development(self) -> bool:
        return self.node_env == 'development'

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> 'Settings':
        env = os.environ if environ is None else environ
        return cls(
            port=int(env.get('PORT', '3000')),
            node_env=env.get('NODE_ENV', 'production'),
            frontend_url=env.get('FRONTEND_URL') or None,
            vercel_domains=_split_csv(env.get('VERCEL_DOMAINS', '')),
            badge_title=env.get('BADGE_TITLE', 'Visitor Badge'),
            photo_fetch_timeout=float(env.get('PHOTO_FETCH_TIMEOUT', '10')),
            smtp_host=env.get('SMTP_HOST', ''),
            smtp_port=int(env.get('SMTP_PORT', '587')),
            smtp_user=env.get('SMTP_USER', ''),
            smtp_password=env.get('SMTP_PASSWORD', ''),
            smtp_from=env.get('SMTP_FROM', 'noreply@badge-service.local'),
            smtp_use_tls=env.get('SMTP_USE_TLS', 'false').lower() == 'true',
            log_level=env.get('LOG_LEVEL', 'INFO').upper(),
        )
