"""Shared fixtures: a Flask test client wired to fake collaborators."""

import pytest

import dispatcher
import generator
import main
from errors import DispatchError, GenerationError
from settings import Settings

FAKE_PNG_PREFIX = b"\x89PNG\r\n\x1a\nfake-"


class RecordingSink:
    def __init__(self, fail_with: Exception | None = None):
        self.records = []
        self.fail_with = fail_with

    def record(self, submission):
        if self.fail_with:
            raise self.fail_with
        self.records.append(submission)


@pytest.fixture
def settings():
    return Settings(
        node_env="production",
        frontend_url="https://badges.example.org",
        vercel_domains=("https://partner.example.net",),
    )


@pytest.fixture
def generated(monkeypatch):
    """Replaces the renderer; each call is recorded and returns fake PNG bytes."""
    calls = []

    async def _generate(identity, settings):
        calls.append(identity)
        return FAKE_PNG_PREFIX + identity.name.encode()

    monkeypatch.setattr(generator, "generate", _generate)
    return calls


@pytest.fixture
def failing_generator(monkeypatch):
    async def _generate(identity, settings):
        raise GenerationError("photo host 10.0.0.5 refused connection")

    monkeypatch.setattr(generator, "generate", _generate)


@pytest.fixture
def sent(monkeypatch):
    """Replaces the email dispatcher; each call's arguments are recorded."""
    calls = []

    async def _send(to_address, name, email, photo_url, png, settings):
        calls.append({
            "to_address": to_address,
            "name": name,
            "email": email,
            "photo_url": photo_url,
            "png": png,
        })
        return "msg-1"

    monkeypatch.setattr(dispatcher, "send_badge_email", _send)
    return calls


@pytest.fixture
def failing_dispatcher(monkeypatch):
    async def _send(*args):
        raise DispatchError("SMTP error: 421 try again later")

    monkeypatch.setattr(dispatcher, "send_badge_email", _send)


@pytest.fixture
def sink():
    return RecordingSink()


@pytest.fixture
def app(settings, sink):
    app = main.create_app(settings, sink)
    app.config["TESTING"] = True
    return app


@pytest.fixture
def client(app):
    return app.test_client()
