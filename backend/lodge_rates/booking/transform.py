from __future__ import annotations

from collections.abc import Iterable, Mapping

from loguru import logger

from lodge_rates.booking.models import (
    AgeGroup,
    BookingRequest,
    Defaulted,
    Guest,
    Matched,
    OutboundRatesPayload,
    UnitTypeLookup,
)
from lodge_rates.booking.parsers import parse_dmy
from lodge_rates.core.config import DEFAULT_UNIT_TYPE_ID, DEFAULT_UNIT_TYPE_IDS, Settings

ADULT_MIN_AGE = 18
TEEN_MIN_AGE = 13


class TransformError(ValueError):
    """A validated request that cannot be mapped to the upstream payload."""

    code = "TransformError"
    field = ""


class CountMismatchError(TransformError):
    code = "CountMismatch"
    field = "Ages"


class BadDateError(TransformError):
    code = "BadDate"

    def __init__(self, field: str, value: object) -> None:
        super().__init__(f"Invalid date format: {value}")
        self.field = field


class DepartureNotAfterArrivalError(TransformError):
    code = "DepartureNotAfterArrival"
    field = "Departure"


class UnitTypeTable:
    """Exact-match unit name lookup that falls back to a default id."""

    def __init__(
        self,
        mapping: Mapping[str, int] | None = None,
        *,
        default_id: int = DEFAULT_UNIT_TYPE_ID,
    ) -> None:
        self._mapping = dict(DEFAULT_UNIT_TYPE_IDS if mapping is None else mapping)
        self._default_id = default_id

    @classmethod
    def from_settings(cls, settings: Settings) -> "UnitTypeTable":
        return cls(settings.unit_type_ids, default_id=settings.default_unit_type_id)

    def lookup(self, unit_name: str) -> UnitTypeLookup:
        unit_type_id = self._mapping.get(unit_name)
        if unit_type_id is None:
            return Defaulted(self._default_id)
        return Matched(unit_type_id)


def age_group_for(age: int) -> AgeGroup:
    if age >= ADULT_MIN_AGE:
        return AgeGroup.ADULT
    if age >= TEEN_MIN_AGE:
        return AgeGroup.TEENS
    return AgeGroup.CHILD


def build_guests(ages: Iterable[int]) -> list[Guest]:
    return [Guest(age_group=age_group_for(age)) for age in ages]


class RatesTransformer:
    def __init__(self, unit_types: UnitTypeTable | None = None) -> None:
        self._unit_types = unit_types or UnitTypeTable()

    def transform(self, request: BookingRequest) -> OutboundRatesPayload:
        if len(request.ages) != request.occupants:
            raise CountMismatchError("Number of ages must match number of occupants")

        lookup = self._unit_types.lookup(request.unit_name)
        if isinstance(lookup, Defaulted):
            logger.warning(
                "Unknown unit name {name!r}, using default unit type {unit_type_id}",
                name=request.unit_name,
                unit_type_id=lookup.unit_type_id,
            )

        arrival = self._parse(request.arrival, field="Arrival")
        departure = self._parse(request.departure, field="Departure")
        if departure <= arrival:
            raise DepartureNotAfterArrivalError("Departure date must be after arrival date")

        return OutboundRatesPayload(
            unit_type_id=lookup.unit_type_id,
            arrival=arrival.isoformat(),
            departure=departure.isoformat(),
            guests=build_guests(request.ages),
        )

    @staticmethod
    def _parse(value: str, *, field: str):
        try:
            return parse_dmy(value)
        except ValueError as exc:
            raise BadDateError(field, value) from exc


__all__ = [
    "BadDateError",
    "CountMismatchError",
    "DepartureNotAfterArrivalError",
    "RatesTransformer",
    "TransformError",
    "UnitTypeTable",
    "age_group_for",
    "build_guests",
]
