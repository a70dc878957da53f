"""
API exception handlers.

This module provides custom exception handling for REST API responses.
"""

import logging
from typing import Any, Dict, Optional

from django.http import Http404
from rest_framework import status
from rest_framework.exceptions import APIException
from rest_framework.exceptions import ValidationError as DRFValidationError
from rest_framework.response import Response
from rest_framework.views import exception_handler

from core.domain.exceptions import DomainException, ErrorCategory, StoreError
from core.metrics import errors_total

logger = logging.getLogger(__name__)

CATEGORY_STATUS = {
    ErrorCategory.VALIDATION: status.HTTP_400_BAD_REQUEST,
    ErrorCategory.UNAUTHORIZED: status.HTTP_401_UNAUTHORIZED,
    ErrorCategory.FORBIDDEN: status.HTTP_403_FORBIDDEN,
    ErrorCategory.NOT_FOUND: status.HTTP_404_NOT_FOUND,
    ErrorCategory.CONFLICT: status.HTTP_409_CONFLICT,
    ErrorCategory.THROTTLED: status.HTTP_429_TOO_MANY_REQUESTS,
    ErrorCategory.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
    ErrorCategory.UNAVAILABLE: status.HTTP_503_SERVICE_UNAVAILABLE,
}


def status_for_exception(exc: DomainException) -> int:
    """Return the HTTP status of a domain exception."""
    if exc.status_code:
        return exc.status_code
    return CATEGORY_STATUS.get(exc.category, status.HTTP_500_INTERNAL_SERVER_ERROR)


def error_body(code: str, message: str, details: Optional[Any] = None) -> Dict[str, Any]:
    """Build the error envelope used by every endpoint."""
    error = {"code": code, "message": message}
    if details is not None:
        error["details"] = details
    return {"error": error}


def custom_exception_handler(exc: Exception, context: Dict[str, Any]) -> Response:
    """Custom exception handler for REST API."""
    trace_id = _get_trace_id(context)

    if isinstance(exc, DomainException):
        response = _handle_domain_exception(exc, context, trace_id)
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    if isinstance(exc, DRFValidationError):
        response = Response(
            error_body("VALIDATION_ERROR", "Invalid input. Please check your fields.", exc.detail),
            status=status.HTTP_400_BAD_REQUEST,
        )
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    if isinstance(exc, APIException):
        response = exception_handler(exc, context)
        if response:
            code = (
                exc.default_code.upper().replace("-", "_")
                if hasattr(exc, "default_code")
                else "API_ERROR"
            )
            message = response.data.get("detail", exc.default_detail)
            response.data = error_body(code, str(message))
            if trace_id:
                response["X-Trace-ID"] = trace_id
            return response

    if isinstance(exc, Http404):
        response = Response(
            error_body("NOT_FOUND", "Resource not found"),
            status=status.HTTP_404_NOT_FOUND,
        )
        if trace_id:
            response["X-Trace-ID"] = trace_id
        return response

    return _handle_unexpected_exception(exc, context, trace_id)


def _get_trace_id(context: Dict[str, Any]) -> Optional[str]:
    """Extract trace ID from request context."""
    request = context.get("request")
    if not request:
        return None
    return getattr(request, "trace_id", getattr(request, "correlation_id", None))


def _endpoint(context: Dict[str, Any]) -> str:
    request = context.get("request")
    return getattr(request, "path", "unknown") if request else "unknown"


def _handle_domain_exception(
    exc: DomainException, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle domain-specific exceptions."""
    status_code = status_for_exception(exc)
    if isinstance(exc, StoreError):
        logger.error(
            "Store error: %s - %s",
            exc.code,
            exc.detail,
            extra={"trace_id": trace_id, "kind": exc.kind.value},
        )
    else:
        logger.warning(
            "Domain exception: %s - %s", exc.code, exc.message, extra={"trace_id": trace_id}
        )
    if status_code >= 500:
        errors_total.labels(error_type=exc.code, endpoint=_endpoint(context)).inc()
    return Response(error_body(exc.code, exc.message), status=status_code)


def _handle_unexpected_exception(
    exc: Exception, context: Dict[str, Any], trace_id: Optional[str]
) -> Response:
    """Handle unexpected or untracked exceptions."""
    logger.error("Unexpected error: %s", exc, extra={"trace_id": trace_id}, exc_info=True)
    errors_total.labels(error_type=type(exc).__name__, endpoint=_endpoint(context)).inc()
    response = exception_handler(exc, context)
    if not response:
        response = Response(
            error_body("INTERNAL_ERROR", "An internal error occurred"),
            status=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    else:
        response.data = error_body("INTERNAL_ERROR", "An internal error occurred")
    if trace_id:
        response["X-Trace-ID"] = trace_id
    return response
