"""Per-request access log: method, path, status and duration."""
import logging
import time

from flask import g, request

logger = logging.getLogger("api.requests")


def register_request_logging(app):
    @app.before_request
    def _start_timer():
        g.request_started = time.perf_counter()

    @app.after_request
    def _log_request(response):
        started = g.pop("request_started", None)
        duration_ms = (time.perf_counter() - started) * 1000 if started is not None else 0.0
        level = logging.WARNING if response.status_code >= 400 else logging.INFO
        logger.log(
            level,
            "%s %s -> %s (%.1fms)",
            request.method,
            request.full_path.rstrip("?"),
            response.status_code,
            duration_ms,
        )
        return response
