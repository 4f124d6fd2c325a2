from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


@dataclass(frozen=True)
class BookingRequest:
    unit_name: str
    arrival: str
    departure: str
    occupants: int
    ages: tuple[int, ...]


class AgeGroup(str, Enum):
    ADULT = "Adult"
    TEENS = "Teens"
    CHILD = "Child"


class Guest(BaseModel):
    model_config = ConfigDict(populate_by_name=True, frozen=True)

    age_group: AgeGroup = Field(alias="AgeGroup")


class OutboundRatesPayload(BaseModel):
    """Request body of the upstream rates API."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    unit_type_id: int = Field(alias="Unit Type ID")
    arrival: str = Field(alias="Arrival")
    departure: str = Field(alias="Departure")
    guests: list[Guest] = Field(alias="Guests")

    def to_wire(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, mode="json")


@dataclass(frozen=True)
class Matched:
    unit_type_id: int


@dataclass(frozen=True)
class Defaulted:
    unit_type_id: int


UnitTypeLookup = Matched | Defaulted


__all__ = [
    "AgeGroup",
    "BookingRequest",
    "Defaulted",
    "Guest",
    "Matched",
    "OutboundRatesPayload",
    "UnitTypeLookup",
]
