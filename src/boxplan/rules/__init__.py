"""Rule library: validation rules and display consumers built on the combinator."""

from boxplan.rules.dispatch import RuleDispatcher, UnknownRuleError
from boxplan.rules.library import RuleContext

__all__ = ["RuleContext", "RuleDispatcher", "UnknownRuleError"]
