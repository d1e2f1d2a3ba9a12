"""
validation.py — Input Validation
=================================
Parses raw, untyped request data (query string or body) into typed records.
Every failure is collected per field and raised as ValidationFailed, so the
handler can return the full list to the client in one response.
"""

from typing import Annotated, Any

import email_validator
from email_validator import EmailNotValidError, validate_email
from pydantic import AfterValidator, BaseModel, ConfigDict, Field, ValidationError
from pydantic_core import PydanticCustomError

from errors import ValidationFailed

# Grammar only: special-use domains such as .local and .test are well-formed
# addresses. A domain with a period and a letter TLD is still required.
email_validator.SPECIAL_USE_DOMAIN_NAMES.clear()


def _check_email(value: str) -> str:
    # Syntax only. The address is kept exactly as the caller sent it.
    try:
        validate_email(value, check_deliverability=False)
    except EmailNotValidError:
        raise PydanticCustomError('invalid_email', 'Invalid email address')
    return value


def _required(label: str) -> AfterValidator:
    def check(value: str) -> str:
        if not value:
            raise PydanticCustomError('required', '{label} is required', {'label': label})
        return value
    return AfterValidator(check)


EmailAddress = Annotated[str, AfterValidator(_check_email)]


class BadgeRequest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    email:     EmailAddress
    name:      str | None = None
    photo_url: str | None = Field(default=None, alias='photoURL')


class ContactSubmission(BaseModel):
    model_config = ConfigDict(frozen=True)

    name:    Annotated[str, _required('Name')]
    email:   EmailAddress
    subject: Annotated[str, _required('Subject')]
    message: Annotated[str, _required('Message')]


def _field_errors(exc: ValidationError) -> list[dict]:
    return [
        {
            "code": err["type"],
            "path": [str(part) for part in err["loc"]],
            "message": err["msg"],
        }
        for err in exc.errors()
    ]


def _parse(model: type[BaseModel], raw: Any) -> Any:
    # A missing or non-object body is an empty submission, not a crash.
    data = dict(raw) if isinstance(raw, dict) else {}
    try:
        return model.model_validate(data)
    except ValidationError as e:
        raise ValidationFailed(_field_errors(e)) from e


def parse_badge_request(raw: Any) -> BadgeRequest:
    return _parse(BadgeRequest, raw)


def parse_contact_submission(raw: Any) -> ContactSubmission:
    return _parse(ContactSubmission, raw)
