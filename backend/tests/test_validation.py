import sys
from pathlib import Path

import pytest

BACKEND_DIR = Path(__file__).resolve().parents[1]
if str(BACKEND_DIR) not in sys.path:
    sys.path.insert(0, str(BACKEND_DIR))

from lodge_rates.booking.models import BookingRequest
from lodge_rates.booking.validation import (
    BOOKING_RULES,
    IsDateDMY,
    MinValue,
    Required,
    ValidationFailure,
    ViolationKind,
    parse_booking_request,
    validate,
    validate_ages,
)


def _valid_body(**overrides):
    body = {
        "Unit Name": "Standard Room",
        "Arrival": "01/12/2025",
        "Departure": "05/12/2025",
        "Occupants": 2,
        "Ages": [30, 10],
    }
    body.update(overrides)
    return body


def test_valid_body_has_no_errors():
    errors = validate(_valid_body(), BOOKING_RULES)

    assert not errors
    assert errors.to_dict() == {}


@pytest.mark.parametrize("field", ["Unit Name", "Arrival", "Departure", "Occupants", "Ages"])
def test_missing_field_is_reported(field):
    body = _valid_body()
    del body[field]

    errors = validate(body, BOOKING_RULES)

    assert ViolationKind.MISSING_FIELD in errors.kinds(field)
    assert f"The {field} field is required." in errors.to_dict()[field]
    with pytest.raises(ValidationFailure):
        parse_booking_request(body)


def test_missing_string_field_also_reports_type_mismatch():
    body = _valid_body()
    del body["Unit Name"]

    errors = validate(body, BOOKING_RULES)

    assert errors.to_dict()["Unit Name"] == [
        "The Unit Name field is required.",
        "The Unit Name must be a string.",
    ]


def test_all_fields_are_reported_at_once():
    errors = validate({}, BOOKING_RULES)

    assert list(errors.to_dict()) == ["Unit Name", "Arrival", "Departure", "Occupants", "Ages"]


@pytest.mark.parametrize("value", [None, "", "0", 0, False, [], {}])
def test_required_treats_empty_values_as_missing(value):
    violation = Required().check("Occupants", value)

    assert violation is not None
    assert violation.kind is ViolationKind.MISSING_FIELD


def test_integer_rule_rejects_bool_and_float():
    assert validate(_valid_body(Occupants=True), BOOKING_RULES).kinds("Occupants") == [
        ViolationKind.TYPE_MISMATCH
    ]
    assert validate(_valid_body(Occupants=2.0), BOOKING_RULES).kinds("Occupants") == [
        ViolationKind.TYPE_MISMATCH
    ]


def test_min_value_only_applies_to_integers():
    assert MinValue(1).check("Occupants", "abc") is None
    assert MinValue(1).check("Occupants", 1) is None

    violation = MinValue(1).check("Occupants", -3)
    assert violation is not None
    assert violation.kind is ViolationKind.BELOW_MINIMUM
    assert violation.message == "The Occupants must be at least 1."


def test_zero_occupants_fails_required_not_minimum():
    errors = validate(_valid_body(Occupants=0), BOOKING_RULES)

    assert errors.kinds("Occupants") == [
        ViolationKind.MISSING_FIELD,
        ViolationKind.BELOW_MINIMUM,
    ]


@pytest.mark.parametrize(
    "value",
    ["32/01/2024", "1/12/2025", "01/1/2025", "2025-12-01", "31/02/2025", "01/12/25", 20251201],
)
def test_date_rule_rejects_values_that_do_not_round_trip(value):
    violation = IsDateDMY().check("Arrival", value)

    assert violation is not None
    assert violation.kind is ViolationKind.BAD_DATE_FORMAT
    assert violation.message == "The Arrival must be in dd/mm/yyyy format."


@pytest.mark.parametrize("value", ["01/12/2025", "29/02/2024", "31/12/1999", "01/01/0999"])
def test_date_rule_accepts_zero_padded_dates(value):
    assert IsDateDMY().check("Arrival", value) is None


def test_ages_must_be_a_list():
    errors = validate(_valid_body(Ages={"0": 30}), BOOKING_RULES)

    assert errors.kinds("Ages") == [ViolationKind.TYPE_MISMATCH]


def test_validate_ages_reports_each_offending_index():
    violations = validate_ages([30, -1, "12", 4.5, 7])

    assert [v.kind for v in violations] == [ViolationKind.INVALID_AGE] * 3
    assert "index 1: -1" in violations[0].message
    assert 'index 2: "12"' in violations[1].message
    assert "index 3: 4.5" in violations[2].message


def test_parse_merges_age_violations_into_error_set():
    with pytest.raises(ValidationFailure) as excinfo:
        parse_booking_request(_valid_body(Ages=[30, None]))

    messages = excinfo.value.errors.to_dict()["Ages"]
    assert messages == ["All ages must be non-negative integers. Invalid age at index 1: null"]


def test_parse_returns_typed_request():
    request = parse_booking_request(_valid_body())

    assert request == BookingRequest(
        unit_name="Standard Room",
        arrival="01/12/2025",
        departure="05/12/2025",
        occupants=2,
        ages=(30, 10),
    )


def test_parse_does_not_check_age_count():
    request = parse_booking_request(_valid_body(Occupants=2, Ages=[10]))

    assert request.ages == (10,)
    assert request.occupants == 2


@pytest.mark.parametrize("data", [None, [], "text", 5])
def test_non_object_body_is_validated_as_empty(data):
    with pytest.raises(ValidationFailure) as excinfo:
        parse_booking_request(data)

    assert set(excinfo.value.errors.to_dict()) == set(BOOKING_RULES)


def test_validate_does_not_mutate_input():
    body = _valid_body(Ages=[30, "x"])
    snapshot = {key: (list(value) if isinstance(value, list) else value) for key, value in body.items()}

    with pytest.raises(ValidationFailure):
        parse_booking_request(body)

    assert body == snapshot
