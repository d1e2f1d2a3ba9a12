"""
contact.py — Contact Form Submissions
======================================
Independent of the badge pipeline. A submission is validated as a whole
(all four fields, no partial accept) and then handed to a sink.

The only sink today writes the submission to the log. Anything with a
record(submission) method can replace it.
"""

import logging
from typing import Protocol

from errors import Failure, SinkError, ValidationFailed
from validation import ContactSubmission, parse_contact_submission

log = logging.getLogger(__name__)


class Sink(Protocol):
    def record(self, submission: ContactSubmission) -> None: ...


class LogSink:
    def record(self, submission: ContactSubmission) -> None:
        log.info(f"Contact form submission: {submission.model_dump()}")


def submit(raw, sink: Sink) -> Failure | None:
    """Returns None on success, otherwise the Failure to report."""
    try:
        submission = parse_contact_submission(raw)
    except ValidationFailed as e:
        log.warning(f"Rejected contact form: {e.errors}")
        return Failure.from_exception(e)

    try:
        sink.record(submission)
    except Exception as e:
        log.exception(f"Error processing contact form: {e}")
        err = e if isinstance(e, SinkError) else SinkError(str(e))
        return Failure.from_exception(err)

    return None
