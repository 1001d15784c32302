"""Logging middleware for request/response tracking."""

import logging
import time
import uuid
from typing import Callable

import structlog
from fastapi import Request, Response
from starlette.middleware.base import BaseHTTPMiddleware

from hotel_cms.core.settings import get_settings

SENSITIVE_HEADERS = {"authorization", "cookie", "x-api-key"}


def configure_logging() -> None:
    """Configure structured logging with JSON output."""
    settings = get_settings()
    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.log_level),
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer(),
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


def get_client_ip(request: Request) -> str:
    """Client address, honouring proxy headers."""
    forwarded_for = request.headers.get("x-forwarded-for")
    if forwarded_for:
        return forwarded_for.split(",")[0].strip()

    real_ip = request.headers.get("x-real-ip")
    if real_ip:
        return real_ip

    if request.client:
        return request.client.host

    return "unknown"


class LoggingMiddleware(BaseHTTPMiddleware):
    """
    Log every request and its outcome with timing.

    The user id and website scope are read from ``request.state`` after the
    handler ran, since authentication happens inside the route dependencies.
    """

    def __init__(self, app, logger_name: str = "hotel_cms.http"):
        super().__init__(app)
        self.logger = structlog.get_logger(logger_name)

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        request_id = request.headers.get("x-request-id") or str(uuid.uuid4())
        start_time = time.time()
        request.state.request_id = request_id

        request_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "query_params": dict(request.query_params),
            "client_ip": get_client_ip(request),
            "user_agent": request.headers.get("user-agent", ""),
        }
        if get_settings().debug:
            request_data["headers"] = {
                key: "[REDACTED]" if key.lower() in SENSITIVE_HEADERS else value
                for key, value in request.headers.items()
            }

        self.logger.info("HTTP request started", **request_data)

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                "HTTP request failed with exception",
                request_id=request_id,
                method=request.method,
                path=request.url.path,
                error_type=type(e).__name__,
                error_message=str(e),
                process_time_ms=round((time.time() - start_time) * 1000, 2),
            )
            raise

        process_time = time.time() - start_time
        response_data = {
            "request_id": request_id,
            "method": request.method,
            "path": request.url.path,
            "status_code": response.status_code,
            "process_time_ms": round(process_time * 1000, 2),
            "user_id": getattr(request.state, "user_id", None),
            "website_id": getattr(request.state, "website_id", None),
        }

        if response.status_code < 400:
            self.logger.info("HTTP request completed successfully", **response_data)
        elif response.status_code < 500:
            self.logger.warning("HTTP request completed with client error", **response_data)
        else:
            self.logger.error("HTTP request completed with server error", **response_data)

        response.headers["X-Request-ID"] = request_id
        response.headers["X-Process-Time"] = str(process_time)
        return response


def get_request_logger(request: Request) -> structlog.stdlib.BoundLogger:
    """Get a logger bound with request context."""
    logger = structlog.get_logger("hotel_cms.request")
    return logger.bind(
        request_id=getattr(request.state, "request_id", "unknown"),
        user_id=getattr(request.state, "user_id", None),
        website_id=getattr(request.state, "website_id", None),
        path=request.url.path,
    )
