"""Global error handling middleware.

This module provides centralized exception handling with
structured JSON responses and request tracking.
"""

import uuid
from typing import Callable

from fastapi import FastAPI, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from loguru import logger
from starlette.middleware.base import BaseHTTPMiddleware

from noisewatch.core.exceptions import AppException


class ErrorHandlerMiddleware(BaseHTTPMiddleware):
    """Middleware for request IDs and last-resort error handling.

    Every response carries an ``X-Request-ID`` header; exceptions that
    escape the route handlers become a JSON 500 response.
    """

    async def dispatch(
        self,
        request: Request,
        call_next: Callable,
    ) -> Response:
        """Process request and handle any exceptions.

        Args:
            request: Incoming HTTP request.
            call_next: Next middleware/handler in chain.

        Returns:
            Response from handler or error response.
        """
        # Generate unique request ID for tracing
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        try:
            response = await call_next(request)
        except Exception:
            logger.exception(
                "Unhandled exception on {} {} (request {})",
                request.method,
                request.url.path,
                request_id,
            )
            return JSONResponse(
                status_code=500,
                content={"message": "Internal server error"},
                headers={"X-Request-ID": request_id},
            )

        response.headers["X-Request-ID"] = request_id
        return response


def setup_exception_handlers(app: FastAPI) -> None:
    """Configure global exception handlers for the FastAPI app.

    Args:
        app: FastAPI application instance.
    """

    @app.exception_handler(AppException)
    async def app_exception_handler(
        request: Request,
        exc: AppException,
    ) -> JSONResponse:
        """Render an AppException as its JSON body."""
        request_id = getattr(request.state, "request_id", "unknown")
        if exc.status_code >= 500:
            logger.error(
                "Application error: {} {} (request {})",
                exc.message,
                exc.details,
                request_id,
            )
        else:
            logger.warning("Rejected request {}: {}", request_id, exc.message)
        return JSONResponse(status_code=exc.status_code, content=exc.to_body())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(
        request: Request,
        exc: RequestValidationError,
    ) -> JSONResponse:
        """Report malformed requests as 400 with a readable message."""
        errors = exc.errors()
        first = errors[0] if errors else {}
        field = ".".join(str(part) for part in first.get("loc", ()) if part not in ("body", "path", "query"))
        message = first.get("msg", "Invalid request")
        if field:
            message = f"{field}: {message}"
        logger.warning("Rejected malformed request: {}", message)
        return JSONResponse(status_code=400, content={"message": message})
