from __future__ import annotations

from typing import Any

import httpx
from loguru import logger

from lodge_rates.booking.models import OutboundRatesPayload
from lodge_rates.core.config import Settings, get_settings
from lodge_rates.core.logging import log_call

REQUEST_HEADERS = {
    "Content-Type": "application/json",
    "Accept": "application/json",
}


class GatewayError(RuntimeError):
    """Base error for calls to the upstream rates API."""


class NetworkError(GatewayError):
    """The request could not be sent or no response arrived in time."""


class NonSuccessStatusError(GatewayError):
    def __init__(self, status_code: int, body: str = "") -> None:
        super().__init__(f"Remote API returned status code: {status_code}")
        self.status_code = status_code
        self.body = body


class InvalidResponseBodyError(GatewayError):
    """The response body is not a JSON object or array."""


class RatesGatewayClient:
    """Single-shot client for the upstream rates API. No retries."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        client: httpx.AsyncClient | None = None,
    ) -> None:
        settings = settings or get_settings()
        self._url = str(settings.rates_api_url)
        if not settings.rates_verify_tls:
            logger.warning("TLS verification towards {url} is disabled", url=self._url)
        self._client = client or httpx.AsyncClient(
            timeout=settings.rates_timeout,
            verify=settings.rates_verify_tls,
        )

    @property
    def url(self) -> str:
        return self._url

    async def close(self) -> None:
        await self._client.aclose()

    async def fetch_rates(
        self,
        payload: OutboundRatesPayload,
        *,
        original: Any = None,
    ) -> dict[str, Any] | list[Any]:
        body = payload.to_wire()
        log_call("Request", {"original": original, "transformed": body})

        try:
            result = await self._post(body)
        except GatewayError as exc:
            log_call("Error", {"error": type(exc).__name__, "message": str(exc)})
            raise

        log_call("Response", result)
        return result

    async def _post(self, body: dict[str, Any]) -> dict[str, Any] | list[Any]:
        try:
            response = await self._client.post(self._url, json=body, headers=REQUEST_HEADERS)
        except httpx.RequestError as exc:
            logger.error("Rates API request to {url} failed: {error}", url=self._url, error=exc)
            raise NetworkError(f"HTTP error: {exc}") from exc

        if response.status_code != 200:
            logger.error(
                "Rates API HTTP {status} at {url}: {body}",
                status=response.status_code,
                url=self._url,
                body=response.text,
            )
            raise NonSuccessStatusError(response.status_code, response.text)

        return self._safe_json(response)

    @staticmethod
    def _safe_json(response: httpx.Response) -> dict[str, Any] | list[Any]:
        try:
            payload = response.json()
        except ValueError as exc:
            raise InvalidResponseBodyError("Invalid JSON response from remote API") from exc
        if isinstance(payload, (dict, list)):
            return payload
        raise InvalidResponseBodyError("Invalid JSON response from remote API")


__all__ = [
    "GatewayError",
    "InvalidResponseBodyError",
    "NetworkError",
    "NonSuccessStatusError",
    "RatesGatewayClient",
]
