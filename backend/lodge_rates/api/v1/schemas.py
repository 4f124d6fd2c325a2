from __future__ import annotations

from typing import Any

from pydantic import BaseModel

RATES_FETCHED = "Rates fetched successfully"
VALIDATION_FAILED = "Validation failed"
INVALID_JSON = "Invalid JSON format"
METHOD_NOT_ALLOWED = "Method not allowed. Use POST."
INTERNAL_ERROR = "An error occurred while processing your request"

RAW_INPUT_LIMIT = 200


class RatesResponse(BaseModel):
    success: bool = True
    data: Any
    message: str = RATES_FETCHED


class ErrorResponse(BaseModel):
    success: bool = False
    message: str
    errors: dict[str, list[str]] | None = None
    error: str | None = None
    trace: str | None = None
    received_method: str | None = None
    json_error: str | None = None
    raw_input: str | None = None

    def to_content(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


__all__ = [
    "ErrorResponse",
    "INTERNAL_ERROR",
    "INVALID_JSON",
    "METHOD_NOT_ALLOWED",
    "RATES_FETCHED",
    "RAW_INPUT_LIMIT",
    "RatesResponse",
    "VALIDATION_FAILED",
]
