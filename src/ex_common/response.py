"""Unified API response wrapper.

All API endpoints return this format:
{
    "code": 0,           // 0=success, non-0=error code
    "message": "success",
    "data": { ... },     // null on error
    "errors": [ ... ],   // only on error
    "timestamp": "...",
    "request_id": "..."
}

Errors carry machine-readable ``extensions`` so clients can branch on
``extensions.code`` / ``extensions.type`` instead of parsing messages:

    "errors": [{"message": "Order not found",
                "extensions": {"code": "not_found", "type": "auth"}}]
"""

import uuid
from datetime import datetime, timezone
from typing import Any

from pydantic import BaseModel, Field


class ErrorExtensions(BaseModel):
    code: str
    type: str


class ErrorDetail(BaseModel):
    message: str
    extensions: ErrorExtensions


class ApiResponse(BaseModel):
    code: int = 0
    message: str = "success"
    data: Any = None
    errors: list[ErrorDetail] | None = None
    timestamp: str = Field(default_factory=lambda: datetime.now(timezone.utc).isoformat())
    request_id: str = Field(default_factory=lambda: f"req_{uuid.uuid4().hex[:12]}")


def success_response(data: Any = None) -> ApiResponse:
    return ApiResponse(code=0, message="success", data=data)


def error_response(code: int, message: str, error_code: str, error_type: str) -> ApiResponse:
    detail = ErrorDetail(
        message=message,
        extensions=ErrorExtensions(code=error_code, type=error_type),
    )
    return ApiResponse(code=code, message=message, data=None, errors=[detail])
