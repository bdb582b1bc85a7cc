"""Calculator record type."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar, Mapping

GRADE_MIN = 0
GRADE_MAX = 10
BATTERY_TYPE_MIN = 1
BATTERY_TYPE_MAX = 3


def _strict_int(value: Any, field: str) -> int:
    # bool is an int subclass; true/false on disk is not a number here
    if isinstance(value, bool):
        raise TypeError(f"{field} must be an integer")
    if isinstance(value, float) and value.is_integer():
        return int(value)
    if not isinstance(value, int):
        raise TypeError(f"{field} must be an integer")
    return value


@dataclass(frozen=True)
class Calculator:
    """A calculator keyed by its ``oid``. Stored as ``batteryType`` on disk."""

    oid: int
    manufacturer: str
    grade: int
    battery_type: int

    KEY_FIELD = "oid"
    FIELD_ALIASES: ClassVar[dict] = {"battery_type": "batteryType"}

    @property
    def key(self) -> int:
        return self.oid

    def to_dict(self) -> dict:
        return {
            "oid": self.oid,
            "manufacturer": self.manufacturer,
            "grade": self.grade,
            "batteryType": self.battery_type,
        }

    @classmethod
    def from_dict(cls, raw: Mapping[str, Any]) -> "Calculator":
        manufacturer = raw["manufacturer"]
        if not isinstance(manufacturer, str):
            raise TypeError("manufacturer must be a string")
        return cls(
            oid=_strict_int(raw["oid"], "oid"),
            manufacturer=manufacturer,
            grade=_strict_int(raw["grade"], "grade"),
            battery_type=_strict_int(raw["batteryType"], "batteryType"),
        )
