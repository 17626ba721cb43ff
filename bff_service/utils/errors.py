"""
Typed failures raised by backend calls
"""

from typing import Any


class BackendServiceError(Exception):
    """Base class for a failed call to a backend service

    Attributes:
        service: Name of the backend target the call was bound to
    """

    def __init__(self, message: str, service: str = ""):
        super().__init__(message)
        self.service = service


class UpstreamRejectedError(BackendServiceError):
    """The backend answered with a non-2xx status"""

    def __init__(self, status_code: int, body: Any, service: str = ""):
        super().__init__(f"{service or 'backend'} responded with status {status_code}", service=service)
        self.status_code = status_code
        self.body = body


class UpstreamUnreachableError(BackendServiceError, ConnectionError):
    """No response was received (connection refused, DNS failure, timeout)"""


class RequestSetupError(BackendServiceError, ValueError):
    """The request could not be built or dispatched"""

    def __init__(self, reason: str, service: str = ""):
        super().__init__(reason, service=service)
        self.reason = reason
