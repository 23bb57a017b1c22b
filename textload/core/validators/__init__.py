"""
Validators for decoded records.

Validator is the capability the pipeline calls; the field rules (required
fields, ranges, regex patterns, custom functions) are assembled into one by
the RuleEngine.
"""

from .base_validator import BaseValidator, RuleViolation
from .custom_validator import CustomValidator
from .range_validator import RangeValidator
from .regex_validator import RegexValidator
from .required_field_validator import RequiredFieldValidator
from .validator import Validator, as_mapping

__all__ = [
    "Validator",
    "as_mapping",
    "BaseValidator",
    "RuleViolation",
    "RequiredFieldValidator",
    "RangeValidator",
    "RegexValidator",
    "CustomValidator",
]
