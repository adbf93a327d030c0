"""Request logging middleware for the analytics API."""

from __future__ import annotations

import json
import logging
import time
from dataclasses import asdict, dataclass
from datetime import datetime, timezone
from typing import Optional

from fastapi import Request
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.responses import Response

logger = logging.getLogger("accesslog.middleware.structured")

SESSION_HEADER = "x-session-id"

_RESET = "\u001b[0m"
_STATUS_STYLES = {
    2: ("\u001b[32m", logging.INFO),
    3: ("\u001b[36m", logging.INFO),
    4: ("\u001b[33m", logging.WARNING),
    5: ("\u001b[31m", logging.ERROR),
}
_DEFAULT_STYLE = ("\u001b[36m", logging.INFO)


@dataclass
class RequestLogEntry:
    """What gets logged about one API request."""

    timestamp: str
    method: str
    path: str
    query: Optional[str]
    client_ip: Optional[str]
    session_id: Optional[str]
    user_agent: Optional[str]
    status_code: Optional[int] = None
    duration_ms: Optional[float] = None
    error: Optional[str] = None

    @classmethod
    def from_request(cls, request: Request) -> "RequestLogEntry":
        return cls(
            timestamp=datetime.now(timezone.utc).isoformat(),
            method=request.method,
            path=request.url.path,
            query=request.url.query or None,
            client_ip=request.client.host if request.client else None,
            session_id=request.headers.get(SESSION_HEADER),
            user_agent=request.headers.get("user-agent"),
        )

    def finish(self, status_code: int, started: float, error: Optional[str] = None) -> None:
        self.status_code = status_code
        self.duration_ms = round((time.perf_counter() - started) * 1000, 2)
        self.error = error

    @property
    def level(self) -> int:
        return _STATUS_STYLES.get((self.status_code or 0) // 100, _DEFAULT_STYLE)[1]

    def console_line(self) -> str:
        color = _STATUS_STYLES.get((self.status_code or 0) // 100, _DEFAULT_STYLE)[0]
        target = f"{self.path}?{self.query}" if self.query else self.path
        return (
            f"{color}{self.method} {target} -> {self.status_code or '-'} "
            f"in {self.duration_ms}ms "
            f"client={self.client_ip or '-'} session={self.session_id or '-'}{_RESET}"
        )

    def to_json(self) -> str:
        return json.dumps(asdict(self), default=str, separators=(",", ":"))


class StructuredLoggingMiddleware(BaseHTTPMiddleware):
    """Log each request once, coloured and levelled by status class.

    The full entry is also emitted as compact JSON at DEBUG level.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        started = time.perf_counter()
        entry = RequestLogEntry.from_request(request)

        try:
            response = await call_next(request)
        except Exception as exc:  # pragma: no cover
            entry.finish(500, started, error=repr(exc))
            logger.exception(entry.console_line())
            raise

        entry.finish(response.status_code, started)
        logger.log(entry.level, entry.console_line())
        logger.debug(entry.to_json())
        return response
