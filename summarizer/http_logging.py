import logging
import os
import time
import uuid
from collections.abc import Iterable
from typing import Any, Optional

from starlette.types import ASGIApp, Message, Receive, Scope, Send

logger = logging.getLogger("summarizer.http")

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s: %(message)s"


def _env_bool(name: str, default: bool = False) -> bool:
    v = (os.getenv(name) or "").strip().lower()
    if not v:
        return default
    return v in {"1", "true", "yes", "y", "on"}


def configure_logging() -> None:
    """Set the root level and format from ``SUMMARIZER_LOG_LEVEL`` (default INFO)."""
    level = (os.getenv("SUMMARIZER_LOG_LEVEL") or "INFO").strip().upper()
    logging.basicConfig(level=level, format=LOG_FORMAT)


def _get_request_id(scope: Scope) -> Optional[str]:
    headers: Iterable[tuple[bytes, bytes]] = scope.get("headers") or []
    for k, v in headers:
        if k.lower() == b"x-request-id":
            try:
                return v.decode("latin-1")
            except UnicodeDecodeError:
                return None
    return None


class HttpLoggingMiddleware:
    """One log line per HTTP request. Bodies and headers are never logged."""

    def __init__(self, app: ASGIApp) -> None:
        self.app = app

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        if scope.get("type") != "http":
            await self.app(scope, receive, send)
            return

        started_at = time.perf_counter()
        request_id = _get_request_id(scope) or uuid.uuid4().hex[:12]
        status: Optional[int] = None

        async def send_wrapped(message: Message) -> None:
            nonlocal status
            if message.get("type") == "http.response.start":
                status = int(message.get("status") or 0)
            await send(message)

        try:
            await self.app(scope, receive, send_wrapped)
        except Exception as exc:
            logger.error(
                "%s %s %s failed: %s",
                request_id,
                scope.get("method"),
                scope.get("path"),
                type(exc).__name__,
            )
            raise
        finally:
            dur_ms = int((time.perf_counter() - started_at) * 1000)
            logger.info(
                "%s %s %s status=%s dur_ms=%s",
                request_id,
                str(scope.get("method") or "").upper(),
                scope.get("path"),
                status,
                dur_ms,
            )


def install_http_logging(app: Any) -> None:
    """Enable the access log when ``SUMMARIZER_HTTP_LOG`` is truthy."""
    if not _env_bool("SUMMARIZER_HTTP_LOG", default=False):
        return
    app.add_middleware(HttpLoggingMiddleware)
