"""
Noteful Backend — Request ID Middleware
=========================================

What:  Assigns an ID to each incoming request and echoes it in X-Request-ID.
Why:   Every log line and every error body of one request share the ID, so
       a client-reported error can be found in the server logs.
How:   Reuse the client's X-Request-ID when sent, otherwise generate one;
       store it in a ContextVar and on request.state.
"""

import uuid
from contextvars import ContextVar

from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

# Coroutine-local; concurrent requests share a thread but not this value
request_id_var: ContextVar[str] = ContextVar("request_id", default="")


class RequestIDMiddleware(BaseHTTPMiddleware):
    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        # 8 hex chars are enough for correlation and stay readable in logs
        rid = request.headers.get("X-Request-ID", uuid.uuid4().hex[:8])

        request_id_var.set(rid)
        request.state.request_id = rid

        response = await call_next(request)
        response.headers["X-Request-ID"] = rid
        return response
