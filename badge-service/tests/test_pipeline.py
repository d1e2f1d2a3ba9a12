"""Tests for the badge delivery pipeline, without HTTP."""

import asyncio

from conftest import FAKE_PNG_PREFIX
from errors import ErrorKind
from pipeline import deliver_email, deliver_inline


class TestDeliverInline:
    def test_no_download_no_filename(self, settings, generated):
        outcome = asyncio.run(deliver_inline({"email": "jane@example.com"}, False, settings))

        assert outcome.ok
        assert outcome.png == FAKE_PNG_PREFIX + b"Guest"
        assert outcome.filename is None

    def test_download_sets_filename(self, settings, generated):
        outcome = asyncio.run(deliver_inline(
            {"email": "jane@example.com", "name": "Jane Doe"}, True, settings))

        assert outcome.filename == "jane_doe_visitor_badge.png"

    def test_validation_failure(self, settings, generated):
        outcome = asyncio.run(deliver_inline({"email": "bad"}, False, settings))

        assert not outcome.ok
        assert outcome.failure.kind is ErrorKind.VALIDATION
        assert outcome.failure.errors[0]["path"] == ["email"]
        assert generated == []

    def test_generation_failure(self, settings, failing_generator):
        outcome = asyncio.run(deliver_inline({"email": "jane@example.com"}, False, settings))

        assert outcome.failure.kind is ErrorKind.GENERATION
        assert outcome.png is None


class TestDeliverEmail:
    def test_emails_the_rendered_bytes(self, settings, generated, sent):
        outcome = asyncio.run(deliver_email(
            {"email": "jane@example.com", "name": "Jane", "photoURL": "https://cdn.example.com/j.png"},
            settings,
        ))

        assert outcome.ok
        assert outcome.message_id == "msg-1"
        assert outcome.png is None
        assert len(generated) == 1
        assert sent == [{
            "to_address": "jane@example.com",
            "name": "Jane",
            "email": "jane@example.com",
            "photo_url": "https://cdn.example.com/j.png",
            "png": FAKE_PNG_PREFIX + b"Jane",
        }]

    def test_does_not_trigger_inline(self, settings, generated, sent):
        outcome = asyncio.run(deliver_email({"email": "jane@example.com"}, settings))
        assert outcome.filename is None

    def test_dispatch_failure(self, settings, generated, failing_dispatcher):
        outcome = asyncio.run(deliver_email({"email": "jane@example.com"}, settings))

        assert outcome.failure.kind is ErrorKind.DISPATCH
        assert "421" in outcome.failure.message

    def test_unexpected_error_is_unknown(self, settings, monkeypatch, sent):
        import generator

        async def _explode(identity, settings):
            raise KeyError("font")

        monkeypatch.setattr(generator, "generate", _explode)
        outcome = asyncio.run(deliver_email({"email": "jane@example.com"}, settings))

        assert outcome.failure.kind is ErrorKind.UNKNOWN
        assert sent == []
