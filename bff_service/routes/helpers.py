"""
Shared helpers for resource routes

Each handler validates, forwards one call through its BackendProxy and turns
the outcome into an envelope.
"""

from typing import Any, Callable, Dict, Iterable, Mapping, Optional, Union

from fastapi import Request
from fastapi.responses import Response
import structlog

from bff_service.services.backend_proxy import BackendProxy
from bff_service.utils.envelope import envelope_response, error_response, passthrough_or_wrap, wrap
from bff_service.utils.error_classifier import ErrorCategory, translate_failure
from bff_service.utils.errors import BackendServiceError
from bff_service.utils.validators import ValidationRule, first_failure

logger = structlog.get_logger(__name__)

SuccessMessage = Union[str, Callable[[Any], str]]


def get_backend(request: Request, name: str) -> BackendProxy:
    """Look up the proxy built at startup for a backend"""
    return request.app.state.backends[name]


def backend_dependency(name: str) -> Callable[[Request], BackendProxy]:
    """Build a FastAPI dependency resolving one named backend proxy"""
    def dependency(request: Request) -> BackendProxy:
        return get_backend(request, name)
    dependency.__name__ = f"get_{name}"
    return dependency


def log_request(request: Request, context: str, body: Optional[Mapping[str, Any]] = None) -> None:
    """Log an inbound request with parameter names only"""
    logger.info(
        context,
        method=request.method,
        path=request.url.path,
        path_params=dict(request.path_params),
        query_keys=sorted(request.query_params.keys()),
        body_keys=sorted(body) if body else None,
    )


def bad_request(request: Request, message: str) -> Response:
    logger.info(
        "Request validation failed",
        method=request.method,
        path=request.url.path,
        category=ErrorCategory.VALIDATION_FAILED.value,
        reason=message,
    )
    return error_response(400, message)


def validate(request: Request, values: Mapping[str, Any], rules: Iterable[ValidationRule]) -> Optional[Response]:
    """Run rules; return a 400 response for the first failure, else None"""
    message = first_failure(values, rules)
    if message is not None:
        return bad_request(request, message)
    return None


async def forward(
    request: Request,
    backend: BackendProxy,
    operation: str,
    method: str,
    path: str = "",
    *,
    json_body: Any = None,
    params: Optional[Dict[str, Any]] = None,
    success_status: int = 200,
    success_message: SuccessMessage = "",
) -> Response:
    """
    Forward one call and normalize the result

    A backend body that is already enveloped is passed through; anything else
    is wrapped with success_status/success_message. Failures are classified.
    """
    try:
        result = await backend.call(method, path, json_body=json_body, params=params)
    except BackendServiceError as e:
        status, body = translate_failure(e, operation, request.method, request.url.path)
        return envelope_response(status, body)

    message = success_message(result) if callable(success_message) else success_message
    status, body = passthrough_or_wrap(result, success_status, message)
    return envelope_response(status, body)


async def backend_health(backend: BackendProxy, label: str) -> Response:
    """Proxy a single backend's health endpoint"""
    try:
        result = await backend.health_check()
    except BackendServiceError as e:
        logger.error("Backend health check failed", service=backend.name, error=str(e))
        return error_response(503, f"{label} service is unhealthy")
    return envelope_response(200, wrap(200, result, f"{label} service is healthy").to_body())
