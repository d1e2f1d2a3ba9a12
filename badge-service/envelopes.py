"""
envelopes.py — Response Formatter
=================================
Two shapes leave this service: a PNG badge with its delivery headers, or a
JSON envelope {"success", "message", "errors"?}.
"""

import unicodedata
from urllib.parse import quote

from flask import Response, jsonify

from errors import ErrorKind, Failure

NO_CACHE_HEADERS = {
    "Cache-Control": "no-cache, no-store, must-revalidate",
    "Pragma": "no-cache",
    "Expires": "0",
}


def envelope(success: bool, message: str, errors: list[dict] | None = None, status: int = 200):
    body = {"success": success, "message": message}
    if errors is not None:
        body["errors"] = errors
    return jsonify(body), status


def disposition_names(filename: str) -> dict:
    """
    Content-Disposition parameters. Non-ASCII names get an ASCII fallback plus
    an RFC 5987 filename*, the same way werkzeug's send_file does it.
    """
    try:
        filename.encode('ascii')
    except UnicodeEncodeError:
        simple = unicodedata.normalize('NFKD', filename).encode('ascii', 'ignore').decode('ascii')
        quoted = quote(filename, safe="!#$&+-.^_`|~")
        return {"filename": simple, "filename*": f"UTF-8''{quoted}"}
    return {"filename": filename}


def png_response(data: bytes, filename: str | None = None) -> Response:
    resp = Response(data, status=200, mimetype='image/png')
    for header, value in NO_CACHE_HEADERS.items():
        resp.headers[header] = value
    if filename:
        resp.headers.set('Content-Disposition', 'attachment', **disposition_names(filename))
    return resp


def failure_response(failure: Failure, generic_message: str, invalid_message: str | None = None):
    """
    Validation failures become 400 with field errors when the route has an
    invalid_message; every other kind is a 500 carrying only generic_message.
    """
    if failure.kind is ErrorKind.VALIDATION and invalid_message is not None:
        return envelope(False, invalid_message, errors=failure.errors, status=400)
    return envelope(False, generic_message, status=500)
