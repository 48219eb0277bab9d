import sys
from typing import Optional, TextIO

import structlog
from pydantic import BaseModel
from starlette.datastructures import Headers
from starlette.types import ASGIApp, Receive, Scope, Send

from spa_to_http.middleware.address import request_remote_address
from spa_to_http.middleware.capture import capture_metrics
from spa_to_http.models.requests import HTTPRequestRecord, ResponseMetrics

REQUEST_LOG_MESSAGE = "HTTP Request"


class LogRequestOptions(BaseModel):
    pretty: bool = False
    trust_forwarded_headers: bool = False


def make_request_logger(pretty: bool = False, stream: Optional[TextIO] = None):
    renderer = structlog.processors.LogfmtRenderer(key_order=["time", "level", "msg"]) \
        if pretty else structlog.processors.JSONRenderer()
    processors = [
        structlog.processors.add_log_level,
        structlog.processors.TimeStamper(fmt="iso", key="time"),
        structlog.processors.EventRenamer("msg"),
        renderer,
    ]

    return structlog.wrap_logger(
        structlog.PrintLogger(stream if stream is not None else sys.stdout),
        processors=processors,
        wrapper_class=structlog.BoundLogger,
    )


def log_http_request(logger, record: HTTPRequestRecord) -> None:
    try:
        logger.info(
            REQUEST_LOG_MESSAGE,
            method=record.method,
            path=record.path,
            code=record.code,
            size=record.size,
            duration=record.duration_ms,
            ipAddress=str(record.ip_address) if record.ip_address is not None else "",
            userAgent=record.user_agent,
            referer=record.referer,
        )
    except (OSError, ValueError):
        # closed or broken log stream must not fail the request
        pass


def request_target(scope: Scope) -> str:
    raw_path = scope.get("raw_path")
    if raw_path:
        # some servers leave the query on raw_path
        path = raw_path.split(b"?", 1)[0].decode("latin-1")
    else:
        path = scope.get("path", "")
    query_string = scope.get("query_string", b"")
    if query_string:
        return f"{path}?{query_string.decode('latin-1')}"
    return path


def build_request_record(
        scope: Scope,
        metrics: ResponseMetrics,
        trust_forwarded_headers: bool = False
) -> HTTPRequestRecord:
    headers = Headers(scope=scope)
    return HTTPRequestRecord(
        method=scope.get("method", ""),
        path=request_target(scope),
        code=metrics.code,
        size=metrics.written,
        duration=metrics.duration,
        ip_address=request_remote_address(scope, trust_forwarded_headers),
        user_agent=headers.get("user-agent", ""),
        referer=headers.get("referer", ""),
    )


class LogRequestMiddleware:
    def __init__(
            self,
            app: ASGIApp,
            options: Optional[LogRequestOptions] = None,
            stream: Optional[TextIO] = None
    ):
        self.app = app
        self.options = options or LogRequestOptions()
        self.logger = make_request_logger(self.options.pretty, stream)

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope["type"] != "http":
            await self.app(scope, receive, send)
            return

        metrics = ResponseMetrics()
        try:
            await capture_metrics(self.app, scope, receive, send, metrics)
        finally:
            record = build_request_record(scope, metrics, self.options.trust_forwarded_headers)
            log_http_request(self.logger, record)


def log_request_handler(
        app: ASGIApp,
        options: Optional[LogRequestOptions] = None,
        stream: Optional[TextIO] = None
) -> ASGIApp:
    return LogRequestMiddleware(app, options=options, stream=stream)
