"""
Badge Service
=============
Language  : Python
Framework : Flask (async views) + Gunicorn

Architecture: the badge pipeline behind two routes, plus a contact form.
  origins.py     — CORS trust boundary, runs before every handler
  validation.py  — pydantic request models, per-field errors
  identity.py    — defaults for optional fields, download filename
  generator.py   — Pillow badge renderer (photo fetched with httpx)
  pipeline.py    — inline vs. email delivery, one render per request
  dispatcher.py  — badge email composition, hands off to transport.py
  contact.py     — contact form validation and submission sink
  envelopes.py   — PNG and JSON envelope responses

Run locally with `python main.py`, in production with `gunicorn main:app`.
"""

import json
import logging
import time

from flask import Flask, g, jsonify, request
from werkzeug.exceptions import HTTPException

import contact
import envelopes
import origins
import pipeline
import transport
from settings import Settings

settings = Settings.from_env()

logging.basicConfig(
    level=settings.log_level,
    format='%(asctime)s [badge-service] %(levelname)s %(message)s'
)
log = logging.getLogger(__name__)

BADGE_FIELDS = ('name', 'email', 'photoURL')
LOG_LINE_LIMIT = 80


def _request_body() -> object:
    """JSON body, or the url-encoded form when the body is not JSON."""
    if request.is_json:
        return request.get_json(silent=True)
    return request.form.to_dict()


def _install_request_log(app: Flask) -> None:
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_api_request(response):
        if not request.path.startswith('/api'):
            return response
        started = g.get('request_started', time.perf_counter())
        duration = int((time.perf_counter() - started) * 1000)
        line = f"{request.method} {request.path} {response.status_code} in {duration}ms"
        if response.is_json:
            line += f" :: {json.dumps(response.get_json(silent=True))}"
        if len(line) > LOG_LINE_LIMIT:
            line = line[:LOG_LINE_LIMIT - 1] + "…"
        log.info(line)
        return response


def create_app(config: Settings | None = None, sink: contact.Sink | None = None) -> Flask:
    config = config or settings
    sink = sink or contact.LogSink()

    app = Flask(__name__)
    app.config['SETTINGS'] = config

    _install_request_log(app)
    origins.install(app, config)

    @app.route('/ping')
    def ping():
        return jsonify({"msg": "Pong"})

    @app.route('/health')
    def health():
        return jsonify({
            "status": "healthy",
            "service": "badge-service",
            "delivery": ["inline", "email"],
            "transport": transport.smtp_config_summary(config),
            "environment": config.node_env,
        })

    @app.route('/api/generate-badge', methods=['GET', 'POST'])
    async def generate_badge():
        if request.method == 'GET':
            raw = {k: request.args[k] for k in BADGE_FIELDS if k in request.args}
            download = request.args.get('download') == 'true'
        else:
            raw = _request_body()
            download = True

        outcome = await pipeline.deliver_inline(raw, download, config)
        if not outcome.ok:
            return envelopes.failure_response(outcome.failure, "Failed to generate badge")
        return envelopes.png_response(outcome.png, outcome.filename)

    @app.route('/api/send-badge', methods=['POST'])
    async def send_badge():
        outcome = await pipeline.deliver_email(_request_body(), config)
        if not outcome.ok:
            return envelopes.failure_response(
                outcome.failure, "Failed to send badge email", "Invalid request data")
        return envelopes.envelope(True, "Badge email sent successfully")

    @app.route('/api/contact', methods=['POST'])
    def contact_form():
        failure = contact.submit(_request_body(), sink)
        if failure:
            return envelopes.failure_response(
                failure, "Failed to process contact form", "Invalid form data")
        return envelopes.envelope(True, "Message received")

    @app.errorhandler(Exception)
    def _unhandled(e):
        # 404/405 and friends keep Flask's default behaviour.
        if isinstance(e, HTTPException):
            return e
        log.exception(f"Unhandled error on {request.method} {request.path}: {e}")
        return jsonify({"message": "Internal Server Error"}), 500

    return app


app = create_app()


if __name__ == '__main__':
    log.info(f"Badge Service (Python) starting on :{settings.port}")
    log.info(f"  Environment: {settings.node_env}")
    smtp = transport.smtp_config_summary(settings)
    log.info(f"  Transport: SMTP {smtp['host']}:{smtp['port']} (mode={smtp['mode']})")
    log.info(f"serving on port {settings.port}")
    app.run(host='0.0.0.0', port=settings.port)
