"""
ValidationResult model representing the outcome of validating a decoded value (ephemeral).
"""

from typing import Any, List

from pydantic import BaseModel, ConfigDict, Field, field_validator


class ValidationResult(BaseModel):
    """
    Outcome of running a Validator over one decoded value.

    Attributes:
        passed: Overall validation status
        value: The decoded value that was validated
        errors: Violation messages; non-empty exactly when passed is False
        warnings: Messages from warning-severity rules (never reject the value)
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    passed: bool
    value: Any = None
    errors: List[str] = Field(default_factory=list)
    warnings: List[str] = Field(default_factory=list)

    @field_validator("errors")
    @classmethod
    def check_passed_consistency(cls, v, info):
        """Validate that passed=True implies no errors and passed=False implies some."""
        passed = info.data.get("passed")
        if passed and len(v) > 0:
            raise ValueError("passed=True but errors is not empty")
        if passed is False and len(v) == 0:
            raise ValueError("passed=False requires at least one error")
        return v

    @classmethod
    def valid(cls, value: Any, warnings: List[str] | None = None) -> "ValidationResult":
        return cls(passed=True, value=value, warnings=warnings or [])

    @classmethod
    def invalid(cls, value: Any, errors: List[str], warnings: List[str] | None = None) -> "ValidationResult":
        return cls(passed=False, value=value, errors=errors, warnings=warnings or [])
