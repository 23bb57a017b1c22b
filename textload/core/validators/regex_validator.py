"""
RegexValidator - values must match a regular expression.
"""

import re
from typing import Any

from .base_validator import BaseValidator


def compile_pattern(pattern: Any, flags: int = 0) -> re.Pattern:
    """Compile a pattern given as a string, or pass a compiled one through."""
    if isinstance(pattern, re.Pattern):
        return pattern
    if not isinstance(pattern, str) or not pattern:
        raise ValueError("RegexValidator requires a non-empty 'pattern' parameter")
    try:
        return re.compile(pattern, flags)
    except re.error as e:
        raise ValueError(f"Invalid regex pattern {pattern!r}: {e}")


class RegexValidator(BaseValidator):
    """
    Parameters:
    - pattern: Regular expression, anchored at the start of the value
    - flags: Optional re flags (e.g., re.IGNORECASE)

    Non-string values (dates, numbers) are matched on their str() form.
    """

    rule_type = "regex"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)
        self.pattern = compile_pattern(self.parameters.get("pattern"), self.parameters.get("flags", 0))

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        text = value if isinstance(value, str) else str(value)
        if self.pattern.match(text) is None:
            raise self.violation(f"{text!r} does not match pattern {self.pattern.pattern!r}")
