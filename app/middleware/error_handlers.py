"""
Global Exception Handler Middleware for the Resume Screener API
"""
import time
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any

from fastapi import Request
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.exceptions import RequestValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException
from starlette.middleware.base import BaseHTTPMiddleware

from app.utils.exceptions import ScreenerBaseException, map_to_http_exception
from app.utils.logging_config import get_logger

logger = get_logger(__name__)


def create_error_response(request_id: str, status_code: int, detail: Any, headers: dict = None) -> JSONResponse:
    """Create standardized error response"""

    # Ensure detail is a dictionary
    if isinstance(detail, str):
        detail = {"message": detail}
    elif not isinstance(detail, dict):
        detail = {"message": str(detail)}

    # Add standard fields
    error_response = {
        "success": False,
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "request_id": request_id,
        "status_code": status_code,
        **detail
    }

    return JSONResponse(
        status_code=status_code,
        content=jsonable_encoder(error_response),
        headers={**(headers or {}), "X-Request-ID": request_id}
    )


def _request_id(request: Request) -> str:
    # Set by ExceptionHandlerMiddleware; absent when the app runs without it
    return getattr(request.state, 'request_id', None) or str(uuid.uuid4())


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    """FastAPI request validation errors (malformed form fields, wrong upload types)"""
    request_id = _request_id(request)
    errors = jsonable_encoder(exc.errors())

    logger.error(
        f"Validation error in {request.method} {request.url.path}: {exc}",
        extra={
            "request_id": request_id,
            "validation_errors": errors,
            "method": request.method,
            "path": request.url.path
        }
    )

    # Format validation errors for client
    validation_details = {
        "error": "Validation failed",
        "message": "Request data validation failed",
        "validation_errors": errors,
    }

    return create_error_response(request_id, 422, validation_details)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    """HTTP exceptions raised by routing (404, 405) or by route handlers"""
    request_id = _request_id(request)

    logger.warning(
        f"HTTP exception in {request.method} {request.url.path}: {exc.detail}",
        extra={
            "request_id": request_id,
            "status_code": exc.status_code,
            "method": request.method,
            "path": request.url.path
        }
    )

    return create_error_response(request_id, exc.status_code, exc.detail, getattr(exc, "headers", None))


class ExceptionHandlerMiddleware(BaseHTTPMiddleware):
    """
    Global exception handler middleware.

    Validation and HTTP exceptions are answered inside FastAPI by the handlers
    above; this catches what they do not: the service's own exceptions and
    anything unexpected.
    """

    async def dispatch(self, request: Request, call_next):
        # Generate request ID for tracking
        request_id = str(uuid.uuid4())
        request.state.request_id = request_id

        # Add request ID to all log messages
        logger.info(
            f"Request started: {request.method} {request.url.path}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "path": request.url.path,
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        try:
            response = await call_next(request)

            # Log successful response
            logger.info(
                f"Request completed: {request.method} {request.url.path} - {response.status_code}",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "method": request.method,
                    "path": request.url.path
                }
            )

            # Add request ID to response headers
            response.headers["X-Request-ID"] = request_id
            return response

        except ScreenerBaseException as exc:
            # Handle custom exceptions
            logger.error(
                f"Custom exception in {request.method} {request.url.path}: {exc.message}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "error_code": exc.error_code,
                    "details": exc.details,
                    "method": request.method,
                    "path": request.url.path
                }
            )

            http_exc = map_to_http_exception(exc)
            return create_error_response(request_id, http_exc.status_code, http_exc.detail)

        except Exception as exc:
            # Handle unexpected exceptions
            logger.error(
                f"Unhandled exception in {request.method} {request.url.path}: {str(exc)}",
                extra={
                    "request_id": request_id,
                    "exception_type": exc.__class__.__name__,
                    "traceback": traceback.format_exc(),
                    "method": request.method,
                    "path": request.url.path
                },
                exc_info=True
            )

            # No partial results: the whole batch fails with the error's message
            error_detail = {
                "error": "Internal server error",
                "message": str(exc) or exc.__class__.__name__,
            }

            return create_error_response(request_id, 500, error_detail)


class RequestLoggingMiddleware(BaseHTTPMiddleware):
    """Request/response logging. Bodies are never read: they carry uploaded resumes."""

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))

        # Log request details (headers only)
        logger.debug(
            f"Request details: {request.method} {request.url}",
            extra={
                "request_id": request_id,
                "method": request.method,
                "url": str(request.url),
                "content_type": request.headers.get("content-type"),
                "content_length": request.headers.get("content-length"),
                "client_ip": request.client.host if request.client else "unknown"
            }
        )

        # Process request
        try:
            response = await call_next(request)
            processing_time = time.time() - start_time

            # Log response details
            logger.info(
                f"Response: {request.method} {request.url.path} - {response.status_code} in {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "status_code": response.status_code,
                    "processing_time": processing_time
                }
            )

            return response

        except Exception as exc:
            processing_time = time.time() - start_time
            logger.error(
                f"Request failed: {request.method} {request.url.path} after {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time,
                    "exception": str(exc)
                }
            )
            raise


class PerformanceMiddleware(BaseHTTPMiddleware):
    """Middleware for performance monitoring"""

    def __init__(self, app, slow_request_threshold: float = 2.0):
        super().__init__(app)
        self.slow_request_threshold = slow_request_threshold

    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        request_id = getattr(request.state, 'request_id', str(uuid.uuid4()))

        response = await call_next(request)

        processing_time = time.time() - start_time

        # Log performance metrics
        if processing_time > self.slow_request_threshold:
            logger.warning(
                f"Slow request detected: {request.method} {request.url.path} took {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time,
                    "threshold": self.slow_request_threshold,
                    "method": request.method,
                    "path": request.url.path
                }
            )
        else:
            logger.debug(
                f"Request performance: {request.method} {request.url.path} - {processing_time:.3f}s",
                extra={
                    "request_id": request_id,
                    "processing_time": processing_time
                }
            )

        # Add performance headers
        response.headers["X-Processing-Time"] = f"{processing_time:.3f}"

        return response
