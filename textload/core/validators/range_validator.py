"""
RangeValidator - ordered values (numbers, decimals, dates) within bounds.
"""

import operator
from datetime import date
from decimal import Decimal
from typing import Any

from .base_validator import BaseValidator

# parameter -> (comparison the value must satisfy, message when it does not)
BOUNDS = {
    "min": (operator.ge, "is less than minimum"),
    "min_exclusive": (operator.gt, "must be greater than"),
    "max": (operator.le, "exceeds maximum"),
    "max_exclusive": (operator.lt, "must be less than"),
}

ORDERED_TYPES = (int, float, Decimal, date)


class RangeValidator(BaseValidator):
    """
    Parameters: any of min, max (inclusive) and min_exclusive, max_exclusive.

    Date columns are compared against dates; YAML reads an unquoted
    ``1990-01-01`` as one.
    """

    rule_type = "range"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.bounds = [
            (name, self.parameters[name]) for name in BOUNDS if self.parameters.get(name) is not None
        ]
        if not self.bounds:
            raise ValueError(f"RangeValidator requires at least one of: {', '.join(BOUNDS)}")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if isinstance(value, bool) or not isinstance(value, ORDERED_TYPES):
            raise self.violation(f"Value must be numeric or a date, got {type(value).__name__}")

        for name, bound in self.bounds:
            within, message = BOUNDS[name]
            try:
                ok = within(value, bound)
            except TypeError:
                raise self.violation(f"Value {value} is not comparable with {name} bound {bound!r}")
            if not ok:
                raise self.violation(f"Value {value} {message} {bound}")
