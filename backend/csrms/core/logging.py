"""
Structured JSON logging and the per-request context it reports.

``RequestContextMiddleware`` binds a :class:`RequestContext` (request id and
client address) for the duration of each HTTP request. Log records pick it
up through :class:`RequestContextFilter`, and the API layer reads the client
address from it when writing audit entries.
"""

from __future__ import annotations

import logging
import sys
import uuid
from contextlib import contextmanager
from contextvars import ContextVar
from dataclasses import dataclass
from typing import Any, Iterator, Optional

from fastapi import Request
from pythonjsonlogger.json import JsonFormatter
from starlette.middleware.base import BaseHTTPMiddleware

from csrms.core.config import settings

REQUEST_ID_HEADER = "X-Request-ID"


@dataclass(frozen=True)
class RequestContext:
    request_id: str = "-"
    client_ip: Optional[str] = None


_request_context: ContextVar[RequestContext] = ContextVar(
    "request_context", default=RequestContext()
)


def current_request_context() -> RequestContext:
    return _request_context.get()


def current_client_ip() -> Optional[str]:
    """Address of the client behind the current request, None outside one."""
    return _request_context.get().client_ip


@contextmanager
def request_context(request_id: str, client_ip: Optional[str] = None) -> Iterator[RequestContext]:
    """Bind request metadata for everything awaited inside the block."""
    context = RequestContext(request_id=request_id, client_ip=client_ip)
    token = _request_context.set(context)
    try:
        yield context
    finally:
        _request_context.reset(token)


class RequestContextFilter(logging.Filter):
    """Copy the bound request context onto each log record."""

    def filter(self, record: logging.LogRecord) -> bool:
        context = _request_context.get()
        record.request_id = context.request_id
        record.client_ip = context.client_ip or "-"
        return True


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Assign (or propagate) a request id and remember the caller's address."""

    async def dispatch(self, request: Request, call_next) -> Any:
        request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
        client_ip = request.client.host if request.client else None

        request.state.request_id = request_id
        with request_context(request_id, client_ip):
            response = await call_next(request)

        response.headers[REQUEST_ID_HEADER] = request_id
        return response


def build_formatter() -> JsonFormatter:
    return JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(lineno)d %(request_id)s %(client_ip)s",
        rename_fields={"asctime": "timestamp", "levelname": "level", "name": "logger"},
        static_fields={"service": "csrms", "environment": settings.ENVIRONMENT},
    )


def setup_logging(level: Optional[str] = None) -> None:
    """Send every log record to stdout as one JSON object per line."""
    log_level = getattr(logging, (level or settings.LOG_LEVEL).upper())

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(build_formatter())
    handler.addFilter(RequestContextFilter())

    root_logger = logging.getLogger()
    root_logger.handlers = [handler]
    root_logger.setLevel(log_level)

    # uvicorn installs its own handlers; route its records through root.
    for logger_name in ("uvicorn", "uvicorn.error", "uvicorn.access"):
        server_logger = logging.getLogger(logger_name)
        server_logger.handlers.clear()
        server_logger.propagate = True
        server_logger.setLevel(log_level)

    # Form parsing logs every multipart part at DEBUG.
    logging.getLogger("multipart").setLevel(logging.WARNING)


__all__ = [
    "RequestContext",
    "RequestContextFilter",
    "RequestContextMiddleware",
    "current_client_ip",
    "current_request_context",
    "request_context",
    "setup_logging",
]
