"""
Backend failure classification

Maps every failed backend call onto one error category and one envelope.
"""

from enum import Enum
from typing import Any, Dict, Tuple

import structlog

from bff_service.utils.envelope import MESSAGE_KEY, is_enveloped, wrap
from bff_service.utils.errors import (
    BackendServiceError,
    RequestSetupError,
    UpstreamRejectedError,
    UpstreamUnreachableError,
)

logger = structlog.get_logger(__name__)

GENERIC_ERROR_MESSAGE = "An error occurred"
SERVICE_UNAVAILABLE_MESSAGE = "Service temporarily unavailable"
INTERNAL_ERROR_MESSAGE = "Internal server error"


class ErrorCategory(str, Enum):
    """Error taxonomy of the gateway"""
    VALIDATION_FAILED = "validation_failed"
    UPSTREAM_REJECTED = "upstream_rejected"
    UPSTREAM_UNREACHABLE = "upstream_unreachable"
    REQUEST_SETUP_FAILED = "request_setup_failed"
    ROUTE_NOT_FOUND = "route_not_found"
    UNCAUGHT_INTERNAL = "uncaught_internal"


def categorize(failure: BackendServiceError) -> ErrorCategory:
    if isinstance(failure, UpstreamRejectedError):
        return ErrorCategory.UPSTREAM_REJECTED
    if isinstance(failure, UpstreamUnreachableError):
        return ErrorCategory.UPSTREAM_UNREACHABLE
    return ErrorCategory.REQUEST_SETUP_FAILED


def _rejection_message(body: Any) -> str:
    if isinstance(body, dict) and body.get(MESSAGE_KEY):
        return str(body[MESSAGE_KEY])
    if isinstance(body, str) and body:
        return body
    return GENERIC_ERROR_MESSAGE


def translate_failure(
    failure: BackendServiceError,
    operation: str,
    method: str,
    path: str,
) -> Tuple[int, Dict[str, Any]]:
    """
    Translate a backend failure into the status and body sent to the client.

    Args:
        failure: Failure raised by a BackendProxy call
        operation: Human readable name of the operation that failed
        method: Inbound request method
        path: Inbound request path

    Returns:
        (http_status, envelope_body)
    """
    category = categorize(failure)
    log_context = {
        "operation": operation,
        "method": method,
        "path": path,
        "category": category.value,
        "service": failure.service,
    }

    if isinstance(failure, UpstreamRejectedError):
        logger.error("Backend rejected request", upstream_status=failure.status_code, **log_context)
        if is_enveloped(failure.body):
            return failure.status_code, failure.body
        message = _rejection_message(failure.body)
        return failure.status_code, wrap(failure.status_code, message=message).to_body()

    if isinstance(failure, UpstreamUnreachableError):
        logger.error("No response received from backend", error=str(failure), **log_context)
        return 503, wrap(503, message=SERVICE_UNAVAILABLE_MESSAGE).to_body()

    reason = failure.reason if isinstance(failure, RequestSetupError) else str(failure)
    logger.error("Request setup error", reason=reason, **log_context)
    return 500, wrap(500, message=INTERNAL_ERROR_MESSAGE).to_body()
