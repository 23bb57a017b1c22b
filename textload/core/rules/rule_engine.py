"""
Rule engine: a Validator assembled from field rules.
"""

from typing import Any, Iterable

from textload.core.models import ValidationResult
from textload.core.validators import (
    BaseValidator,
    CustomValidator,
    RangeValidator,
    RegexValidator,
    RequiredFieldValidator,
    Validator,
    as_mapping,
)

from .rule_config import RuleSpec


class RuleEngine(Validator):
    """
    Applies every enabled rule to a decoded value.

    Error-severity violations reject the value and are all reported, in rule
    order; warning-severity violations are kept on the result but never
    reject.

    Args:
        rules: RuleSpecs, or plain dicts with the same keys
    """

    VALIDATOR_REGISTRY: dict[str, type[BaseValidator]] = {
        cls.rule_type: cls
        for cls in (RequiredFieldValidator, RangeValidator, RegexValidator, CustomValidator)
    }

    def __init__(self, rules: Iterable[RuleSpec | dict[str, Any]]):
        self.rules = [rule if isinstance(rule, RuleSpec) else RuleSpec.model_validate(rule) for rule in rules]
        self.validators: list[tuple[RuleSpec, BaseValidator]] = [
            (rule, self._build(rule)) for rule in self.rules if rule.enabled
        ]

    def _build(self, rule: RuleSpec) -> BaseValidator:
        validator_class = self.VALIDATOR_REGISTRY.get(rule.rule_type)
        if validator_class is None:
            raise ValueError(f"Unknown rule type '{rule.rule_type}' in rule '{rule.rule_name}'")
        try:
            return validator_class(rule.field_name, rule.parameters)
        except ValueError as e:
            raise ValueError(f"Failed to create validator for rule '{rule.rule_name}': {e}")

    def run(self, value: Any) -> ValidationResult:
        record = as_mapping(value)
        messages: dict[str, list[str]] = {"error": [], "warning": []}

        for rule, validator in self.validators:
            violation = validator.check(record)
            if violation is not None:
                messages[rule.severity].append(str(violation))

        if messages["error"]:
            return ValidationResult.invalid(value, messages["error"], messages["warning"])
        return ValidationResult.valid(value, messages["warning"])

    def get_rule_summary(self) -> dict[str, Any]:
        """Counts of active rules by type and by severity."""
        by_type: dict[str, int] = {}
        by_severity: dict[str, int] = {}
        for rule, _ in self.validators:
            by_type[rule.rule_type] = by_type.get(rule.rule_type, 0) + 1
            by_severity[rule.severity] = by_severity.get(rule.severity, 0) + 1

        return {
            "total_rules": len(self.validators),
            "rules_by_type": by_type,
            "rules_by_severity": by_severity,
        }
