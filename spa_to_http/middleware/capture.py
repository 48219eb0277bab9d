import os
import time
from datetime import timedelta
from typing import Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

from spa_to_http.models.requests import ResponseMetrics


class CapturingSend:
    def __init__(self, send: Send, metrics: ResponseMetrics):
        self._send = send
        self.metrics = metrics

    async def __call__(self, message: Message) -> None:
        # only what the server accepted is counted
        await self._send(message)

        message_type = message["type"]

        if message_type == "http.response.start":
            if not self.metrics.wrote_header:
                self.metrics.code = message["status"]
                self.metrics.wrote_header = True
        elif message_type == "http.response.body":
            self.metrics.written += len(message.get("body", b""))
        elif message_type == "http.response.pathsend":
            # server streams the file itself
            try:
                self.metrics.written += os.path.getsize(message["path"])
            except OSError:
                pass


async def capture_metrics(
        app: ASGIApp,
        scope: Scope,
        receive: Receive,
        send: Send,
        metrics: Optional[ResponseMetrics] = None
) -> ResponseMetrics:
    """Run ``app``, filling ``metrics`` in place so partial state survives a failure."""
    if metrics is None:
        metrics = ResponseMetrics()

    start = time.perf_counter()
    try:
        await app(scope, receive, CapturingSend(send, metrics))
    except Exception:
        if not metrics.wrote_header:
            metrics.code = 500
        raise
    finally:
        metrics.duration = timedelta(seconds=time.perf_counter() - start)

    return metrics
