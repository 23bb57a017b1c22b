"""
Rule configuration and the rule engine.
"""

from .rule_config import RuleConfigBuilder, RuleConfigLoader, RuleSpec
from .rule_engine import RuleEngine

__all__ = ["RuleEngine", "RuleSpec", "RuleConfigLoader", "RuleConfigBuilder"]
