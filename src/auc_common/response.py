"""The JSON envelope every endpoint answers with.

    {"code": 0, "message": "success", "data": {...}, "retryable": false,
     "timestamp": "2026-10-01T12:00:00+00:00", "request_id": "req_a1b2c3d4e5f6"}

code 0 means success. Any other code is an AppError code and data is null;
retryable is true only for transient store conflicts (9003).
"""

import uuid
from typing import Any

from pydantic import BaseModel, Field

from src.auc_common.datetime_utils import utc_now
from src.auc_common.errors import AppError


def new_request_id() -> str:
    return f"req_{uuid.uuid4().hex[:12]}"


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    retryable: bool = False
    timestamp: str = Field(default_factory=lambda: utc_now().isoformat())
    request_id: str = Field(default_factory=new_request_id)


def success_response(data: Any = None, message: str = "success") -> ApiResponse:
    return ApiResponse(data=data, message=message)


def error_response(code: int, message: str, retryable: bool = False) -> ApiResponse:
    return ApiResponse(code=code, message=message, retryable=retryable)


def app_error_response(exc: AppError, request_id: str | None = None) -> ApiResponse:
    """Envelope for a raised AppError, tagged with the request's id when known."""
    resp = error_response(exc.code, exc.message, retryable=exc.retryable)
    if request_id is not None:
        resp.request_id = request_id
    return resp
