"""
CustomValidator - a rule written as a plain function.
"""

from typing import Any

from .base_validator import BaseValidator


class CustomValidator(BaseValidator):
    """
    Parameters:
    - validator_func: ``(value, record) -> None``, raising ValueError on failure
    - error_message: Prefix for the violation message

    Only ValueError counts as a broken rule; anything else the function
    raises is a bug in it and propagates.
    """

    rule_type = "custom"

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        super().__init__(field_name, parameters)

        self.func = self.parameters.get("validator_func")
        if not callable(self.func):
            raise ValueError("CustomValidator requires a callable 'validator_func' parameter")
        self.error_message = self.parameters.get("error_message", "Custom validation failed")

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        try:
            self.func(value, record)
        except ValueError as e:
            raise self.violation(f"{self.error_message}: {e}")
