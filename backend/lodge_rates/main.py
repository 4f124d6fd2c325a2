from __future__ import annotations

from contextlib import asynccontextmanager

from fastapi import FastAPI, Request, Response, status
from fastapi.exception_handlers import http_exception_handler
from fastapi.middleware.cors import CORSMiddleware
from loguru import logger
from starlette.datastructures import Headers
from starlette.exceptions import HTTPException as StarletteHTTPException

from lodge_rates.api.v1 import rates
from lodge_rates.booking.rates_client import RatesGatewayClient
from lodge_rates.booking.service import RatesService
from lodge_rates.core.config import Settings, get_settings
from lodge_rates.core.logging import setup_logging


class EmptyPreflightCORSMiddleware(CORSMiddleware):
    """Answers accepted CORS preflights with 200 and no body."""

    def preflight_response(self, request_headers: Headers) -> Response:
        response = super().preflight_response(request_headers)
        if response.status_code != status.HTTP_200_OK:
            return response
        headers = {
            key: value
            for key, value in response.headers.items()
            if key not in ("content-length", "content-type")
        }
        return Response(status_code=status.HTTP_200_OK, headers=headers)


def create_app(
    settings: Settings | None = None,
    *,
    gateway: RatesGatewayClient | None = None,
) -> FastAPI:
    settings = settings or get_settings()
    setup_logging(settings)

    gateway = gateway or RatesGatewayClient(settings)
    service = RatesService.from_settings(gateway, settings)
    rates_path = f"{settings.api_prefix}{rates.router.prefix}"

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logger.info("Rates API target: {url}", url=gateway.url)
        try:
            yield
        finally:
            await gateway.close()

    app = FastAPI(title="Lodge Rates API", lifespan=lifespan)
    app.state.settings = settings
    app.state.rates_service = service

    app.add_middleware(
        EmptyPreflightCORSMiddleware,
        allow_origins=list(settings.allowed_origins),
        allow_credentials=False,
        allow_methods=["POST", "OPTIONS"],
        allow_headers=["Content-Type", "Authorization"],
    )

    @app.exception_handler(StarletteHTTPException)
    async def rates_http_exception(request: Request, exc: StarletteHTTPException) -> Response:
        if exc.status_code == status.HTTP_405_METHOD_NOT_ALLOWED and request.url.path == rates_path:
            return rates.method_not_allowed(request)
        return await http_exception_handler(request, exc)

    app.dependency_overrides[rates.get_rates_service] = lambda: service
    app.include_router(rates.router, prefix=settings.api_prefix)

    @app.get("/health")
    def health() -> dict[str, bool]:
        return {"ok": True}

    return app


app = create_app()
