from __future__ import annotations

import json
import traceback
from typing import Any

from fastapi import APIRouter, Depends, Request, Response, status
from fastapi.responses import JSONResponse
from loguru import logger

from lodge_rates.api.v1.schemas import (
    INTERNAL_ERROR,
    INVALID_JSON,
    METHOD_NOT_ALLOWED,
    RAW_INPUT_LIMIT,
    VALIDATION_FAILED,
    ErrorResponse,
    RatesResponse,
)
from lodge_rates.booking.rates_client import GatewayError
from lodge_rates.booking.service import RatesService
from lodge_rates.booking.transform import TransformError
from lodge_rates.booking.validation import ValidationFailure, parse_booking_request

router = APIRouter(prefix="/rates")

ALLOWED_METHODS = "POST, OPTIONS"
UNPROCESSABLE_STATUS = 422


def get_rates_service() -> RatesService:  # pragma: no cover - overridden in main
    raise RuntimeError("Rates service dependency is not configured")


def _error(status_code: int, body: ErrorResponse, **headers: str) -> JSONResponse:
    return JSONResponse(status_code=status_code, content=body.to_content(), headers=headers or None)


def _reject_constant(name: str) -> Any:
    raise ValueError(f"Invalid JSON constant: {name}")


def _internal_error(request: Request, message: str) -> JSONResponse:
    trace = traceback.format_exc() if request.app.state.settings.include_trace else None
    return _error(
        status.HTTP_500_INTERNAL_SERVER_ERROR,
        ErrorResponse(message=INTERNAL_ERROR, error=message, trace=trace),
    )


@router.options("")
async def rates_preflight() -> Response:
    return Response(status_code=status.HTTP_200_OK)


def method_not_allowed(request: Request) -> JSONResponse:
    """405 for every method other than POST and OPTIONS, naming the one received."""

    return _error(
        status.HTTP_405_METHOD_NOT_ALLOWED,
        ErrorResponse(message=METHOD_NOT_ALLOWED, received_method=request.method),
        Allow=ALLOWED_METHODS,
    )


@router.post("")
async def fetch_rates(
    request: Request, service: RatesService = Depends(get_rates_service)
) -> JSONResponse:
    raw = await request.body()
    try:
        data: Any = json.loads(raw, parse_constant=_reject_constant)
    except ValueError as exc:
        return _error(
            status.HTTP_400_BAD_REQUEST,
            ErrorResponse(
                message=INVALID_JSON,
                json_error=str(exc),
                raw_input=raw.decode("utf-8", errors="replace")[:RAW_INPUT_LIMIT],
            ),
        )

    try:
        booking = parse_booking_request(data)
    except ValidationFailure as exc:
        return _error(
            UNPROCESSABLE_STATUS,
            ErrorResponse(message=VALIDATION_FAILED, errors=exc.errors.to_dict()),
        )

    try:
        rates = await service.fetch_rates(booking, original=data)
    except TransformError as exc:
        return _error(
            UNPROCESSABLE_STATUS,
            ErrorResponse(message=str(exc), error=exc.code, errors={exc.field: [str(exc)]}),
        )
    except GatewayError as exc:
        logger.error("Rates lookup failed: {error}", error=exc)
        return _internal_error(request, f"Failed to fetch rates: {exc}")
    except Exception as exc:
        logger.exception("Unhandled error while fetching rates")
        return _internal_error(request, str(exc))

    return JSONResponse(status_code=status.HTTP_200_OK, content=RatesResponse(data=rates).model_dump())


__all__ = ["router", "get_rates_service", "method_not_allowed"]
