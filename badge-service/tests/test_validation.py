"""Tests for request validation."""

import pytest

from errors import ValidationFailed
from validation import parse_badge_request, parse_contact_submission


def _paths(exc_info) -> list[list[str]]:
    return [err["path"] for err in exc_info.value.errors]


class TestBadgeRequest:
    def test_email_only(self):
        req = parse_badge_request({"email": "jane@example.com"})

        assert req.email == "jane@example.com"
        assert req.name is None
        assert req.photo_url is None

    def test_photo_url_uses_camel_case_key(self):
        req = parse_badge_request({
            "email": "jane@example.com",
            "name": "Jane Doe",
            "photoURL": "https://cdn.example.com/jane.png",
        })

        assert req.name == "Jane Doe"
        assert req.photo_url == "https://cdn.example.com/jane.png"

    def test_null_optionals_accepted(self):
        req = parse_badge_request({"email": "jane@example.com", "name": None, "photoURL": None})

        assert req.name is None
        assert req.photo_url is None

    def test_email_kept_verbatim(self):
        req = parse_badge_request({"email": "Jane.Doe@Example.COM"})
        assert req.email == "Jane.Doe@Example.COM"

    def test_missing_email(self):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request({"name": "Jane"})

        assert _paths(exc_info) == [["email"]]
        assert exc_info.value.errors[0]["code"] == "missing"

    @pytest.mark.parametrize("email", ["", "not-an-email", "jane@", "@example.com", "jane doe@example.com"])
    def test_malformed_email(self, email):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request({"email": email})

        err = exc_info.value.errors[0]
        assert err["path"] == ["email"]
        assert err["code"] == "invalid_email"
        assert err["message"] == "Invalid email address"

    @pytest.mark.parametrize("email", [
        "jane@corp.local",
        "jane@app.test",
        "jane@printer.localhost",
        "jane@hidden.onion",
    ])
    def test_special_use_domains_accepted(self, email):
        assert parse_badge_request({"email": email}).email == email

    def test_domain_without_period_rejected(self):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request({"email": "jane@localhost"})

        assert exc_info.value.errors[0]["code"] == "invalid_email"

    def test_email_must_be_string(self):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request({"email": 12345})
        assert _paths(exc_info) == [["email"]]

    @pytest.mark.parametrize("field", ["name", "photoURL"])
    @pytest.mark.parametrize("value", [42, True, ["Jane"], {"first": "Jane"}])
    def test_optional_fields_reject_non_strings(self, field, value):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request({"email": "jane@example.com", field: value})
        assert _paths(exc_info) == [[field]]

    @pytest.mark.parametrize("raw", [None, [], "email=jane@example.com"])
    def test_non_object_input_is_missing_email(self, raw):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_badge_request(raw)
        assert _paths(exc_info) == [["email"]]

    def test_unknown_keys_ignored(self):
        req = parse_badge_request({"email": "jane@example.com", "download": "true"})
        assert req.email == "jane@example.com"


class TestContactSubmission:
    @pytest.fixture
    def form(self):
        return {
            "name": "Jane Doe",
            "email": "jane@example.com",
            "subject": "Hello",
            "message": "Loved the badge.",
        }

    def test_valid(self, form):
        sub = parse_contact_submission(form)
        assert sub.subject == "Hello"
        assert sub.message == "Loved the badge."

    def test_every_field_required(self):
        with pytest.raises(ValidationFailed) as exc_info:
            parse_contact_submission({})

        assert sorted(p[0] for p in _paths(exc_info)) == ["email", "message", "name", "subject"]

    @pytest.mark.parametrize("field,message", [
        ("name", "Name is required"),
        ("subject", "Subject is required"),
        ("message", "Message is required"),
    ])
    def test_empty_field(self, form, field, message):
        form[field] = ""
        with pytest.raises(ValidationFailed) as exc_info:
            parse_contact_submission(form)

        assert exc_info.value.errors == [{"code": "required", "path": [field], "message": message}]

    def test_bad_email(self, form):
        form["email"] = "nope"
        with pytest.raises(ValidationFailed) as exc_info:
            parse_contact_submission(form)
        assert _paths(exc_info) == [["email"]]
