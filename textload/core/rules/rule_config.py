"""
Rule configuration: the RuleSpec model and two ways to produce it.

RuleConfigLoader reads field rules from YAML; RuleConfigBuilder assembles
them in code (tests, rules known when the load is written).
"""

from pathlib import Path
from typing import Any, Callable, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field, field_validator


class RuleSpec(BaseModel):
    """
    One configured field rule.

    Attributes:
        rule_name: Name shown in violation messages and logs
        rule_type: required_field, range, regex or custom
        field_name: Decoded field the rule applies to
        parameters: Rule-specific parameters (e.g., {"min": 0})
        severity: "error" rejects the record, "warning" only annotates it
        enabled: Disabled rules are skipped when the engine is built
    """

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    rule_name: str = Field(..., min_length=1)
    rule_type: str
    field_name: str = Field(..., min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)
    severity: Literal["error", "warning"] = "error"
    enabled: bool = True

    @field_validator("severity", mode="before")
    @classmethod
    def check_severity(cls, v, info):
        if v not in ("error", "warning"):
            raise ValueError(
                f"Invalid severity '{v}' for rule '{info.data.get('rule_name')}'. Must be 'error' or 'warning'"
            )
        return v


class RuleConfigLoader:
    """
    Loads field rules from a YAML file.

    Expected YAML format:
    ```yaml
    rules:
      customer_id:
        - type: required_field
        - type: regex
          params:
            pattern: "^C[0-9]{6}$"
      balance:
        - type: range
          params: {min: 0}
        - type: range
          name: balance_unusually_high
          severity: warning
          params: {max: 1000000}
    ```

    Rules without a name are called ``<field>_<type>_<index>``.
    """

    def __init__(self, config_path: str | Path):
        self.config_path = Path(config_path)
        if not self.config_path.exists():
            raise FileNotFoundError(f"Rule configuration file not found: {config_path}")

    def load_rules(self) -> list[RuleSpec]:
        """
        Raises:
            ValueError: If the file has no rules section or a rule is malformed
        """
        with open(self.config_path) as f:
            config = yaml.safe_load(f)

        if not isinstance(config, dict) or "rules" not in config:
            raise ValueError(f"{self.config_path} must contain a 'rules' section")

        specs = []
        for field_name, definitions in (config["rules"] or {}).items():
            if not isinstance(definitions, list):
                raise ValueError(f"Rules for field '{field_name}' must be a list")
            specs.extend(
                self._to_spec(field_name, definition, index) for index, definition in enumerate(definitions)
            )
        return specs

    @staticmethod
    def _to_spec(field_name: str, definition: dict[str, Any], index: int) -> RuleSpec:
        if not isinstance(definition, dict) or "type" not in definition:
            raise ValueError(f"Rule {index} for field '{field_name}' is missing 'type'")

        rule_type = definition["type"]
        return RuleSpec(
            rule_name=definition.get("name") or f"{field_name}_{rule_type}_{index}",
            rule_type=rule_type,
            field_name=field_name,
            parameters=definition.get("params") or definition.get("parameters") or {},
            severity=definition.get("severity", "error"),
            enabled=definition.get("enabled", True),
        )


class RuleConfigBuilder:
    """
    Fluent builder for rule lists.

    Usage:
        rules = RuleConfigBuilder() \\
            .add_required_field("customer_id") \\
            .add_range("balance", min_value=0) \\
            .build()
    """

    def __init__(self):
        self.rules: list[RuleSpec] = []

    def add(self, rule_type: str, field_name: str, severity: str = "error", name: str | None = None,
            **parameters: Any) -> "RuleConfigBuilder":
        self.rules.append(RuleSpec(
            rule_name=name or f"{field_name}_{rule_type}",
            rule_type=rule_type,
            field_name=field_name,
            parameters=parameters,
            severity=severity,
        ))
        return self

    def add_required_field(self, field_name: str, allow_empty_string: bool = False,
                           severity: str = "error") -> "RuleConfigBuilder":
        return self.add("required_field", field_name, severity, allow_empty_string=allow_empty_string)

    def add_range(self, field_name: str, min_value: Any = None, max_value: Any = None,
                  severity: str = "error") -> "RuleConfigBuilder":
        bounds = {key: value for key, value in (("min", min_value), ("max", max_value)) if value is not None}
        return self.add("range", field_name, severity, **bounds)

    def add_regex(self, field_name: str, pattern: str, severity: str = "error") -> "RuleConfigBuilder":
        return self.add("regex", field_name, severity, pattern=pattern)

    def add_custom(self, field_name: str, validator_func: Callable[[Any, dict[str, Any]], None],
                   error_message: str = "Custom validation failed",
                   severity: str = "error") -> "RuleConfigBuilder":
        return self.add("custom", field_name, severity, validator_func=validator_func, error_message=error_message)

    def build(self) -> list[RuleSpec]:
        return list(self.rules)
