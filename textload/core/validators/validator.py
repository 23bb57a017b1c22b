"""
Validator: the business-rule capability the load pipeline invokes on every
successfully decoded value.
"""

from collections.abc import Mapping
from typing import Any, Callable, Iterable

from pydantic import BaseModel
from pyspark.sql import Row

from textload.core.models import ValidationResult


def as_mapping(value: Any) -> dict[str, Any]:
    """View a decoded value (pydantic model, Spark Row or mapping) as a dict."""
    if isinstance(value, BaseModel):
        return value.model_dump()
    if isinstance(value, Row):
        return value.asDict()
    if isinstance(value, Mapping):
        return dict(value)
    raise TypeError(f"Cannot read fields of {type(value).__name__}")


class Validator:
    """
    Wraps a value -> ValidationResult function.

    Build one with Validator.accept, Validator.by, Validator.of or
    Validator.all, or use a RuleEngine configured from YAML.
    """

    def __init__(self, run: Callable[[Any], ValidationResult]):
        self._run = run

    def run(self, value: Any) -> ValidationResult:
        return self._run(value)

    @classmethod
    def accept(cls) -> "Validator":
        """Accept every value."""
        return cls(ValidationResult.valid)

    @classmethod
    def of(cls, check: Callable[[Any], Iterable[str]]) -> "Validator":
        """Validator from a function returning the violation messages (none means valid)."""
        def run(value: Any) -> ValidationResult:
            errors = list(check(value))
            if errors:
                return ValidationResult.invalid(value, errors)
            return ValidationResult.valid(value)

        return cls(run)

    @classmethod
    def by(cls, predicate: Callable[[Any], bool], message: str) -> "Validator":
        """Reject with message when predicate does not hold."""
        return cls.of(lambda value: [] if predicate(value) else [message])

    @classmethod
    def all(cls, *validators: "Validator") -> "Validator":
        """Run every validator and collect all of their violations."""
        def run(value: Any) -> ValidationResult:
            errors: list[str] = []
            warnings: list[str] = []
            for validator in validators:
                result = validator.run(value)
                errors.extend(result.errors)
                warnings.extend(result.warnings)
            if errors:
                return ValidationResult.invalid(value, errors, warnings)
            return ValidationResult.valid(value, warnings)

        return cls(run)
