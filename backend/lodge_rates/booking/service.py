from __future__ import annotations

from typing import Any, Protocol

from lodge_rates.booking.models import BookingRequest, OutboundRatesPayload
from lodge_rates.booking.transform import RatesTransformer, UnitTypeTable
from lodge_rates.core.config import Settings


class RatesGateway(Protocol):
    async def fetch_rates(
        self, payload: OutboundRatesPayload, *, original: Any = None
    ) -> Any: ...


class RatesService:
    def __init__(
        self, gateway: RatesGateway, transformer: RatesTransformer | None = None
    ) -> None:
        self._gateway = gateway
        self._transformer = transformer or RatesTransformer()

    @classmethod
    def from_settings(cls, gateway: RatesGateway, settings: Settings) -> "RatesService":
        return cls(gateway, RatesTransformer(UnitTypeTable.from_settings(settings)))

    async def fetch_rates(self, request: BookingRequest, *, original: Any = None) -> Any:
        # transform errors surface before any outbound call is made
        payload = self._transformer.transform(request)
        return await self._gateway.fetch_rates(payload, original=original)


__all__ = ["RatesGateway", "RatesService"]
