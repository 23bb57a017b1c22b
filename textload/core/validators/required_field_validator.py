"""
RequiredFieldValidator - the field must be present and hold a value.
"""

from typing import Any

from .base_validator import BaseValidator


class RequiredFieldValidator(BaseValidator):
    """
    Empty values in nullable columns decode to None, so this is how a load
    makes such a column mandatory again. Blank strings fail too unless
    ``allow_empty_string`` is set.
    """

    rule_type = "required_field"
    checks_null = True

    def validate(self, value: Any, record: dict[str, Any]) -> None:
        if self.field_name not in record:
            raise self.violation("Field is missing from record")
        if value is None:
            raise self.violation("Field value is null")
        if isinstance(value, str) and not value.strip() and not self.parameters.get("allow_empty_string", False):
            raise self.violation("Field value is empty string")
