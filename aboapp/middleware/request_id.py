"""
AboApp Backend — Request Correlation
======================================

Every response carries an `X-Request-ID` header, and every error body
carries the same value as `request_id`. A user who reports a failed
sign-in or a scheduler that logs a failed /api/reminder-run can hand
over that ID, and it matches the access log line and the handler's
traceback.

A caller-supplied `X-Request-ID` is kept as is, so the cron runner can
pass its own job ID through.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

REQUEST_ID_HEADER = "X-Request-ID"

request_id_var: ContextVar[str] = ContextVar("request_id", default="")


def new_request_id() -> str:
    return uuid.uuid4().hex[:8]


class RequestIDMiddleware(BaseHTTPMiddleware):
    """Publishes the request's correlation ID to handlers, logs and the response."""

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        request_id = request.headers.get(REQUEST_ID_HEADER) or new_request_id()
        # read by the access log and the exception handlers in main
        request_id_var.set(request_id)

        response = await call_next(request)
        response.headers[REQUEST_ID_HEADER] = request_id
        return response
