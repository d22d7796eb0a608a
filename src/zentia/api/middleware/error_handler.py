"""
Error Handler Middleware

Consistent error responses and correlation ids for every request.
"""

from uuid import uuid4

import sentry_sdk
from fastapi import Request, Response
from fastapi.responses import JSONResponse
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint

from zentia.config.logging_config import bind_correlation_id, clear_context, get_logger

logger = get_logger(__name__)

CORRELATION_HEADER = "X-Correlation-ID"


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global error handling middleware.

    Binds a correlation id to the logging context, echoes it in the
    response headers and turns unhandled exceptions into a 500 with a
    user-safe message.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: RequestResponseEndpoint,
    ) -> Response:
        correlation_id = request.headers.get(CORRELATION_HEADER) or str(uuid4())
        bind_correlation_id(correlation_id)

        try:
            response = await call_next(request)
            response.headers[CORRELATION_HEADER] = correlation_id
            return response

        except Exception as e:
            # Exception text may quote request content, so only the type is logged
            logger.exception(
                "Unhandled exception",
                path=request.url.path,
                method=request.method,
                error_type=type(e).__name__,
            )
            sentry_sdk.capture_exception(e)

            return JSONResponse(
                status_code=500,
                content={
                    "error": "Internal server error",
                    "correlation_id": correlation_id,
                    "message": "An unexpected error occurred. Please try again.",
                },
                headers={CORRELATION_HEADER: correlation_id},
            )

        finally:
            clear_context()
