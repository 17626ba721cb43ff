"""
Response envelope helpers

Every body leaving the gateway has the shape ``{status, message, data?}``.
Bodies a backend already returned in that shape are forwarded untouched.
"""

from typing import Any, Dict, Optional, Tuple

from fastapi.responses import JSONResponse, Response
from pydantic import BaseModel


STATUS_KEY = "status"
MESSAGE_KEY = "message"
DATA_KEY = "data"

# Categories allowed to carry a data payload
DATA_STATUSES = frozenset({200, 201, 202})
CONTENTLESS_STATUSES = frozenset({204})


class Envelope(BaseModel):
    """Canonical gateway response body"""
    status: int
    message: str
    data: Optional[Any] = None

    def to_body(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {STATUS_KEY: self.status, MESSAGE_KEY: self.message}
        if self.status in DATA_STATUSES and self.data is not None:
            body[DATA_KEY] = self.data
        return body


def wrap(status: int, data: Any = None, message: str = "") -> Envelope:
    """Build an envelope; data is dropped for contentless and error categories"""
    if status not in DATA_STATUSES:
        data = None
    return Envelope(status=status, message=message, data=data)


def is_enveloped(body: Any) -> bool:
    """True when body is a JSON object with a numeric status and a message"""
    if not isinstance(body, dict):
        return False
    status = body.get(STATUS_KEY)
    # bool is an int subclass but never a valid status
    if isinstance(status, bool) or not isinstance(status, int):
        return False
    return MESSAGE_KEY in body


def passthrough_or_wrap(body: Any, default_status: int, default_message: str) -> Tuple[int, Any]:
    """
    Forward an already-enveloped backend body, otherwise wrap it.

    Returns:
        (http_status, body_to_send). Applying this to its own output returns
        the same pair.
    """
    if is_enveloped(body) and 100 <= body[STATUS_KEY] <= 599:
        return body[STATUS_KEY], body
    envelope = wrap(default_status, body, default_message)
    return envelope.status, envelope.to_body()


def envelope_response(status: int, body: Any) -> Response:
    """Render a status/body pair; contentless statuses go out without a body"""
    if status in CONTENTLESS_STATUSES:
        return Response(status_code=status)
    return JSONResponse(status_code=status, content=body)


def error_response(status: int, message: str) -> Response:
    """Render a plain error envelope"""
    return envelope_response(status, wrap(status, message=message).to_body())
