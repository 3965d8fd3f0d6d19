"""
Centralized Error Handling and Logging System
Structured error logging with trace ids, redaction of credentials, and
HTML or JSON error responses depending on what the caller accepts.
"""

import json
import logging
import traceback
import uuid
from datetime import datetime, timezone
from typing import Any, Dict, Optional, Union
from contextvars import ContextVar

from fastapi import Request
from starlette.exceptions import HTTPException
from fastapi.responses import JSONResponse, RedirectResponse, Response
from fastapi.exceptions import RequestValidationError
from starlette.middleware.base import BaseHTTPMiddleware

from config.settings import AUTH_REDIRECT_PATH
from schema.registry import UnknownCollectionError
from utils.auth import AdminAccessDenied

# Context variables for request tracing
request_id_var: ContextVar[str] = ContextVar('request_id', default='')

logger = logging.getLogger(__name__)

class ErrorHandlingConfig:
    """Centralized configuration for error handling behavior"""

    # Security settings
    SANITIZE_SENSITIVE_FIELDS = True
    SENSITIVE_FIELD_PATTERNS = [
        'password', 'token', 'key', 'secret', 'authorization',
        'auth', 'bearer', 'credential', 'cookie'
    ]

    # Logging settings
    LOG_HEADERS = True
    MAX_VALUE_LOG_SIZE = 5000  # Truncate large values

    # Error response settings
    INCLUDE_TRACE_ID = True
    INCLUDE_TIMESTAMP = True

    @classmethod
    def is_sensitive_field(cls, field_name: str) -> bool:
        """Check if a field contains sensitive data"""
        field_lower = field_name.lower()
        return any(pattern in field_lower for pattern in cls.SENSITIVE_FIELD_PATTERNS)

    @classmethod
    def sanitize_data(cls, data: Union[Dict, str, Any]) -> Any:
        """Recursively sanitize sensitive data from logs"""
        if not cls.SANITIZE_SENSITIVE_FIELDS:
            return data

        if isinstance(data, dict):
            return {
                key: "***REDACTED***" if cls.is_sensitive_field(key) else cls.sanitize_data(value)
                for key, value in data.items()
            }
        elif isinstance(data, list):
            return [cls.sanitize_data(item) for item in data]
        elif isinstance(data, str) and len(data) > cls.MAX_VALUE_LOG_SIZE:
            return data[:cls.MAX_VALUE_LOG_SIZE] + "...[TRUNCATED]"
        else:
            return data

def _utc_now() -> str:
    return datetime.now(timezone.utc).isoformat()

class StructuredLogger:
    """Structured logging with consistent format and context"""

    @staticmethod
    def log_error(
        error_type: str,
        message: str,
        request: Optional[Request] = None,
        exception: Optional[Exception] = None,
        extra_context: Optional[Dict] = None,
        include_traceback: bool = True
    ) -> str:
        """Log structured error with full context"""

        trace_id = request_id_var.get('') or str(uuid.uuid4())[:8]

        log_entry: Dict[str, Any] = {
            "timestamp": _utc_now(),
            "trace_id": trace_id,
            "error_type": error_type,
            "message": message,
            "level": "ERROR"
        }

        if request:
            headers = dict(request.headers)
            log_entry["request"] = {
                "method": request.method,
                "path": request.url.path,
                "query_params": dict(request.query_params),
                "headers": ErrorHandlingConfig.sanitize_data(headers) if ErrorHandlingConfig.LOG_HEADERS else {},
                "client_ip": request.client.host if request.client else None,
            }

        if exception:
            log_entry["exception"] = {
                "type": type(exception).__name__,
                "details": str(exception),
            }
            if include_traceback:
                log_entry["exception"]["traceback"] = traceback.format_exc()

        if extra_context:
            log_entry["context"] = ErrorHandlingConfig.sanitize_data(extra_context)

        logger.error(json.dumps(log_entry, indent=2, default=str))

        return trace_id

class RequestContextMiddleware(BaseHTTPMiddleware):
    """Middleware to assign request ids and surface them to the client"""

    async def dispatch(self, request: Request, call_next):
        trace_id = str(uuid.uuid4())[:8]
        request_id_var.set(trace_id)
        request.state.trace_id = trace_id

        response = await call_next(request)
        # Trace ID in response headers for client-side debugging
        response.headers["X-Trace-ID"] = trace_id
        return response

def wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "")

def error_response(request: Request, status_code: int, title: str, message: str, trace_id: Optional[str]) -> Response:
    """HTML page for browsers, JSON body for everything else"""
    if wants_html(request):
        from api.templating import templates
        return templates.TemplateResponse(
            request,
            "error.html",
            {"title": title, "message": message, "trace_id": trace_id},
            status_code=status_code
        )

    response_content: Dict[str, Any] = {"error": title, "message": message}
    if ErrorHandlingConfig.INCLUDE_TRACE_ID and trace_id:
        response_content["trace_id"] = trace_id
    if ErrorHandlingConfig.INCLUDE_TIMESTAMP:
        response_content["timestamp"] = _utc_now()
    return JSONResponse(status_code=status_code, content=response_content)

# Global Exception Handlers
async def admin_access_denied_handler(request: Request, exc: AdminAccessDenied) -> Response:
    """Silent redirect away from the console"""
    logger.info(f"Redirecting {request.url.path} to {AUTH_REDIRECT_PATH}: {exc.reason}")
    return RedirectResponse(AUTH_REDIRECT_PATH, status_code=303)

async def unknown_collection_handler(request: Request, exc: UnknownCollectionError) -> Response:
    logger.warning(f"Unknown collection requested: {exc.name}")
    return error_response(request, 404, "Not Found", str(exc), request_id_var.get('') or None)

async def http_exception_handler(request: Request, exc: HTTPException) -> Response:
    """Handle HTTP exceptions with logging"""
    trace_id = None
    if exc.status_code >= 500:
        trace_id = StructuredLogger.log_error(
            f"http_{exc.status_code}",
            f"HTTP {exc.status_code}: {exc.detail}",
            request=request,
            exception=exc,
            include_traceback=True
        )
    return error_response(request, exc.status_code, f"HTTP {exc.status_code}", str(exc.detail), trace_id)

async def validation_exception_handler(request: Request, exc: RequestValidationError) -> Response:
    """Handle FastAPI validation errors (HTTP 422)"""
    validation_details = [
        {
            "field": " -> ".join(str(loc) for loc in error.get("loc", [])),
            "message": error.get("msg", "Unknown validation error"),
        }
        for error in exc.errors()
    ]

    trace_id = StructuredLogger.log_error(
        "validation_error_422",
        f"Request validation failed: {len(validation_details)} validation errors",
        request=request,
        exception=exc,
        extra_context={"validation_errors": validation_details},
        include_traceback=False
    )

    if wants_html(request):
        summary = "; ".join(f"{d['field']}: {d['message']}" for d in validation_details)
        return error_response(request, 422, "Validation Error", summary, trace_id)

    return JSONResponse(
        status_code=422,
        content={
            "error": "Validation Error",
            "message": "Request validation failed",
            "detail": validation_details,
            "trace_id": trace_id,
            "timestamp": _utc_now(),
        }
    )

async def general_exception_handler(request: Request, exc: Exception) -> Response:
    """Handle all other exceptions"""
    trace_id = StructuredLogger.log_error(
        "internal_server_error",
        f"Unhandled exception: {str(exc)}",
        request=request,
        exception=exc,
        include_traceback=True
    )
    # Don't expose internal details
    return error_response(request, 500, "Internal Server Error", "An unexpected error occurred", trace_id)

def setup_error_handling(app):
    """Setup error handling for the FastAPI app"""

    app.add_middleware(RequestContextMiddleware)

    # Most specific first
    app.add_exception_handler(AdminAccessDenied, admin_access_denied_handler)
    app.add_exception_handler(UnknownCollectionError, unknown_collection_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(HTTPException, http_exception_handler)
    app.add_exception_handler(Exception, general_exception_handler)

    logger.info("Centralized error handling system initialized")
