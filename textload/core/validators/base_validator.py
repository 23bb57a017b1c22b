"""
Field-level business rules.

A rule looks at one field of a decoded record. ``validate`` raises
RuleViolation when the value breaks the rule; ``check`` runs it against a
whole record and returns the violation instead. Rules are combined into a
Validator by the RuleEngine.
"""

from abc import ABC, abstractmethod
from typing import Any, ClassVar


class RuleViolation(Exception):
    """A decoded value broke a field rule. Rendered as ``[rule] field: message``."""

    def __init__(self, rule_name: str, field_name: str, message: str):
        self.rule_name = rule_name
        self.field_name = field_name
        self.message = message
        super().__init__(f"[{rule_name}] {field_name}: {message}")


class BaseValidator(ABC):
    """
    One rule bound to one field.

    Subclasses set ``rule_type`` and implement ``validate``. Null values are
    skipped by ``check`` unless ``checks_null`` is set, so only the
    required_field rule has to think about them.

    Args:
        field_name: Name of the decoded field to check
        parameters: Rule-specific parameters (e.g., min/max for range)
    """

    rule_type: ClassVar[str]
    checks_null: ClassVar[bool] = False

    def __init__(self, field_name: str, parameters: dict[str, Any] | None = None):
        self.field_name = field_name
        self.parameters = dict(parameters or {})

    @abstractmethod
    def validate(self, value: Any, record: dict[str, Any]) -> None:
        """Raise RuleViolation if value (the field of record) breaks the rule."""

    def check(self, record: dict[str, Any]) -> RuleViolation | None:
        value = record.get(self.field_name)
        if value is None and not self.checks_null:
            return None
        try:
            self.validate(value, record)
        except RuleViolation as violation:
            return violation
        return None

    def violation(self, message: str) -> RuleViolation:
        return RuleViolation(self.rule_type, self.field_name, message)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.field_name!r}, {self.parameters!r})"
