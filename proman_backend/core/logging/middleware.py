"""
Request tracking middleware for logging correlation.

Every response carries an ``x-transaction-id`` header; the same id is
attached to all log records written while the request is handled.
"""

import logging
import time
from collections.abc import Callable

from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware

from .context import generate_transaction_id, set_transaction_id

TRANSACTION_HEADER = "x-transaction-id"


def bind_transaction_id(request: Request) -> str:
    """Reuse the caller's transaction id or start a new one."""
    txn_id = request.headers.get(TRANSACTION_HEADER) or generate_transaction_id()
    set_transaction_id(txn_id)
    return txn_id


class RequestIdMiddleware(BaseHTTPMiddleware):
    """Only propagates the transaction id, without request logging."""

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = bind_transaction_id(request)
        response = await call_next(request)
        response.headers[TRANSACTION_HEADER] = txn_id
        return response


class LoggingMiddleware(BaseHTTPMiddleware):
    """Logs each request's start and outcome with its duration."""

    def __init__(self, app, logger: logging.Logger | None = None):
        super().__init__(app)
        self.logger = logger or logging.getLogger("proman_backend.requests")

    async def dispatch(self, request: Request, call_next: Callable) -> Response:
        txn_id = bind_transaction_id(request)
        started = time.perf_counter()

        self.logger.info(
            f"{request.method} {request.url.path} started",
            extra={
                "method": request.method,
                "path": request.url.path,
                "query": request.url.query,
                "client_ip": request.client.host if request.client else "unknown",
                "user_agent": request.headers.get("user-agent", "unknown"),
            },
        )

        try:
            response = await call_next(request)
        except Exception as e:
            self.logger.error(
                f"{request.method} {request.url.path} failed",
                extra={
                    "duration_ms": self._elapsed_ms(started),
                    "error_type": type(e).__name__,
                },
                exc_info=True,
            )
            return JSONResponse(
                status_code=500,
                content={"code": 500, "msg": "Internal server error", "data": None},
                headers={TRANSACTION_HEADER: txn_id},
            )

        self.logger.info(
            f"{request.method} {request.url.path} completed",
            extra={
                "status_code": response.status_code,
                "duration_ms": self._elapsed_ms(started),
                "response_size": response.headers.get("content-length"),
            },
        )
        response.headers[TRANSACTION_HEADER] = txn_id
        return response

    @staticmethod
    def _elapsed_ms(started: float) -> float:
        return round((time.perf_counter() - started) * 1000, 2)
