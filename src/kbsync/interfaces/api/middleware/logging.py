"""Structured logging setup and request logging middleware.

Each request is logged with method, path, status, duration and a request
id that is also returned in the X-Request-ID header. JSON output in
production, console output elsewhere.
"""

import logging
import time
import uuid

import falcon
import falcon.asgi
import structlog

logger = structlog.get_logger(__name__)


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """Configure stdlib logging and structlog processors."""
    logging.basicConfig(format="%(message)s", level=level.upper())

    processors: list = [
        structlog.contextvars.merge_contextvars,
        structlog.stdlib.add_log_level,
        structlog.stdlib.add_logger_name,
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


class LoggingMiddleware:
    """Logs every request and tags log lines with its request id."""

    async def process_request(self, req: falcon.asgi.Request, resp: falcon.asgi.Response) -> None:
        req.context.request_id = req.get_header("X-Request-ID") or str(uuid.uuid4())
        req.context.started_at = time.monotonic()
        structlog.contextvars.clear_contextvars()
        structlog.contextvars.bind_contextvars(request_id=req.context.request_id)

    async def process_response(
        self, req: falcon.asgi.Request, resp: falcon.asgi.Response, resource, req_succeeded
    ) -> None:
        request_id = getattr(req.context, "request_id", None)
        started_at = getattr(req.context, "started_at", None)
        duration_ms = round((time.monotonic() - started_at) * 1000, 2) if started_at else None
        if request_id:
            resp.set_header("X-Request-ID", request_id)

        status_code = falcon.http_status_to_code(resp.status or falcon.HTTP_200)
        log_method = logger.info if status_code < 400 else logger.warning
        if status_code >= 500:
            log_method = logger.error
        log_method(
            "request_completed",
            method=req.method,
            path=req.path,
            status_code=status_code,
            duration_ms=duration_ms,
        )
        structlog.contextvars.clear_contextvars()
