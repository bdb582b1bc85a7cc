"""
Form validation for notes and calculators.

Values coming from HTTP forms are always strings (or absent). The validators
normalize them into typed records, or return a ValidationFailure carrying the
raw submitted values so the form can be redisplayed unchanged.
"""
from __future__ import annotations

import re
from dataclasses import dataclass, field
from decimal import Decimal, InvalidOperation
from typing import Any, Dict, Optional, Union

from .calculators import (
    BATTERY_TYPE_MAX,
    BATTERY_TYPE_MIN,
    GRADE_MAX,
    GRADE_MIN,
    Calculator,
)
from .notes import Note

GENERIC_ERROR = "Invalid input. Please check the form fields."
NOTE_REQUIRED_ERROR = "Both title and body are required."
NOTE_BODY_REQUIRED_ERROR = "Body is required."

_NUMBER_PATTERN = re.compile(r"[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")
# Larger magnitudes are not meaningful form input
_MAX_DIGITS = 308


@dataclass(frozen=True)
class ValidationFailure:
    error: str
    values: Dict[str, str] = field(default_factory=dict)


NoteResult = Union[Note, ValidationFailure]
CalculatorResult = Union[Calculator, ValidationFailure]


def _raw(value: Any) -> str:
    if value is None:
        return ""
    return value if isinstance(value, str) else str(value)


def _clean(value: Optional[str]) -> str:
    return (value or "").strip()


def parse_int(value: Any) -> Optional[int]:
    """Return ``value`` as an exact integer, or None when it is not one."""
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if not isinstance(value, str):
        return None
    trimmed = value.strip()
    if not trimmed or not _NUMBER_PATTERN.fullmatch(trimmed):
        return None
    try:
        number = Decimal(trimmed)
    except InvalidOperation:
        return None
    if number.adjusted() > _MAX_DIGITS:
        return None
    if number != number.to_integral_value():
        return None
    return int(number)


def is_int_in_range(value: Optional[int], minimum: int, maximum: int) -> bool:
    return value is not None and minimum <= value <= maximum


def validate_note(title: Optional[str], body: Optional[str]) -> NoteResult:
    cleaned_title = _clean(title)
    cleaned_body = _clean(body)
    if not cleaned_title or not cleaned_body:
        return ValidationFailure(
            NOTE_REQUIRED_ERROR,
            {"title": _raw(title), "body": _raw(body)},
        )
    return Note(title=cleaned_title, body=cleaned_body)


def validate_note_body(body: Optional[str]) -> Union[str, ValidationFailure]:
    cleaned_body = _clean(body)
    if not cleaned_body:
        return ValidationFailure(NOTE_BODY_REQUIRED_ERROR, {"body": _raw(body)})
    return cleaned_body


def validate_calculator_fields(
    manufacturer: Optional[str],
    grade: Optional[str],
    battery_type: Optional[str],
) -> Union[Dict[str, Any], ValidationFailure]:
    """Validate the mutable calculator fields (the edit form)."""
    cleaned_manufacturer = _clean(manufacturer)
    parsed_grade = parse_int(grade)
    parsed_battery = parse_int(battery_type)
    if (
        not cleaned_manufacturer
        or not is_int_in_range(parsed_grade, GRADE_MIN, GRADE_MAX)
        or not is_int_in_range(parsed_battery, BATTERY_TYPE_MIN, BATTERY_TYPE_MAX)
    ):
        return ValidationFailure(
            GENERIC_ERROR,
            {
                "manufacturer": _raw(manufacturer),
                "grade": _raw(grade),
                "batteryType": _raw(battery_type),
            },
        )
    return {
        "manufacturer": cleaned_manufacturer,
        "grade": parsed_grade,
        "battery_type": parsed_battery,
    }


def validate_calculator(
    oid: Optional[str],
    manufacturer: Optional[str],
    grade: Optional[str],
    battery_type: Optional[str],
) -> CalculatorResult:
    fields = validate_calculator_fields(manufacturer, grade, battery_type)
    parsed_oid = parse_int(oid)
    if parsed_oid is None or isinstance(fields, ValidationFailure):
        return ValidationFailure(
            GENERIC_ERROR,
            {
                "oid": _raw(oid),
                "manufacturer": _raw(manufacturer),
                "grade": _raw(grade),
                "batteryType": _raw(battery_type),
            },
        )
    return Calculator(oid=parsed_oid, **fields)
