"""Validation of raw booking requests.

Rules are small frozen dataclasses, each a pure predicate returning a
``Violation`` or ``None``. ``validate`` evaluates every rule of every field and
returns all violations at once; nothing is stored between calls.
"""

from __future__ import annotations

import json
from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lodge_rates.booking.models import BookingRequest
from lodge_rates.booking.parsers import is_valid_dmy


class ViolationKind(str, Enum):
    MISSING_FIELD = "MissingField"
    TYPE_MISMATCH = "TypeMismatch"
    BELOW_MINIMUM = "BelowMinimum"
    BAD_DATE_FORMAT = "BadDateFormat"
    INVALID_AGE = "InvalidAge"


@dataclass(frozen=True)
class Violation:
    kind: ViolationKind
    message: str


@dataclass
class ValidationErrors:
    fields: dict[str, list[Violation]] = field(default_factory=dict)

    def add(self, name: str, violation: Violation) -> None:
        self.fields.setdefault(name, []).append(violation)

    def extend(self, name: str, violations: Sequence[Violation]) -> None:
        for violation in violations:
            self.add(name, violation)

    def kinds(self, name: str) -> list[ViolationKind]:
        return [violation.kind for violation in self.fields.get(name, [])]

    def to_dict(self) -> dict[str, list[str]]:
        return {
            name: [violation.message for violation in violations]
            for name, violations in self.fields.items()
        }

    def __bool__(self) -> bool:
        return bool(self.fields)


class ValidationFailure(ValueError):
    def __init__(self, errors: ValidationErrors) -> None:
        super().__init__("Validation failed")
        self.errors = errors


def _is_integer(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _is_empty(value: Any) -> bool:
    if value is None:
        return True
    if isinstance(value, str):
        return value in ("", "0")
    if isinstance(value, (bool, int, float, list, dict)):
        return not value
    return False


@dataclass(frozen=True)
class Required:
    def check(self, name: str, value: Any) -> Violation | None:
        if _is_empty(value):
            return Violation(ViolationKind.MISSING_FIELD, f"The {name} field is required.")
        return None


@dataclass(frozen=True)
class IsString:
    def check(self, name: str, value: Any) -> Violation | None:
        if not isinstance(value, str):
            return Violation(ViolationKind.TYPE_MISMATCH, f"The {name} must be a string.")
        return None


@dataclass(frozen=True)
class IsInteger:
    def check(self, name: str, value: Any) -> Violation | None:
        if not _is_integer(value):
            return Violation(ViolationKind.TYPE_MISMATCH, f"The {name} must be an integer.")
        return None


@dataclass(frozen=True)
class IsArray:
    def check(self, name: str, value: Any) -> Violation | None:
        if not isinstance(value, list):
            return Violation(ViolationKind.TYPE_MISMATCH, f"The {name} must be an array.")
        return None


@dataclass(frozen=True)
class MinValue:
    minimum: int

    def check(self, name: str, value: Any) -> Violation | None:
        if _is_integer(value) and value < self.minimum:
            return Violation(
                ViolationKind.BELOW_MINIMUM, f"The {name} must be at least {self.minimum}."
            )
        return None


@dataclass(frozen=True)
class IsDateDMY:
    def check(self, name: str, value: Any) -> Violation | None:
        if not is_valid_dmy(value):
            return Violation(
                ViolationKind.BAD_DATE_FORMAT, f"The {name} must be in dd/mm/yyyy format."
            )
        return None


Rule = Required | IsString | IsInteger | IsArray | MinValue | IsDateDMY

UNIT_NAME = "Unit Name"
ARRIVAL = "Arrival"
DEPARTURE = "Departure"
OCCUPANTS = "Occupants"
AGES = "Ages"

BOOKING_RULES: dict[str, tuple[Rule, ...]] = {
    UNIT_NAME: (Required(), IsString()),
    ARRIVAL: (Required(), IsDateDMY()),
    DEPARTURE: (Required(), IsDateDMY()),
    OCCUPANTS: (Required(), IsInteger(), MinValue(1)),
    AGES: (Required(), IsArray()),
}


def validate(data: Mapping[str, Any], rules: Mapping[str, Sequence[Rule]]) -> ValidationErrors:
    errors = ValidationErrors()
    for name, field_rules in rules.items():
        value = data.get(name)
        for rule in field_rules:
            violation = rule.check(name, value)
            if violation is not None:
                errors.add(name, violation)
    return errors


def validate_ages(ages: Sequence[Any]) -> list[Violation]:
    """Reports every age that is not a non-negative integer."""

    violations: list[Violation] = []
    for index, age in enumerate(ages):
        if _is_integer(age) and age >= 0:
            continue
        rendered = json.dumps(age, ensure_ascii=False, default=str)
        violations.append(
            Violation(
                ViolationKind.INVALID_AGE,
                "All ages must be non-negative integers. "
                f"Invalid age at index {index}: {rendered}",
            )
        )
    return violations


def parse_booking_request(data: Any) -> BookingRequest:
    """Validates a decoded JSON body and builds a typed ``BookingRequest``.

    Raises ``ValidationFailure`` carrying every violation found.
    """

    if not isinstance(data, Mapping):
        data = {}

    errors = validate(data, BOOKING_RULES)
    ages = data.get(AGES)
    if isinstance(ages, list):
        errors.extend(AGES, validate_ages(ages))
    if errors:
        raise ValidationFailure(errors)

    return BookingRequest(
        unit_name=data[UNIT_NAME],
        arrival=data[ARRIVAL],
        departure=data[DEPARTURE],
        occupants=data[OCCUPANTS],
        ages=tuple(ages),
    )


__all__ = [
    "AGES",
    "ARRIVAL",
    "BOOKING_RULES",
    "DEPARTURE",
    "IsArray",
    "IsDateDMY",
    "IsInteger",
    "IsString",
    "MinValue",
    "OCCUPANTS",
    "Required",
    "Rule",
    "UNIT_NAME",
    "ValidationErrors",
    "ValidationFailure",
    "Violation",
    "ViolationKind",
    "parse_booking_request",
    "validate",
    "validate_ages",
]
