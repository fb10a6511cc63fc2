"""Rule implementations and types.

The registry lives in ``formrule.rules.registry`` and is re-exported from
the top-level ``formrule`` package.
"""

from formrule.rules.base import BaseRule
from formrule.rules.builtin import (
    CallbackRule,
    CompareRule,
    EmailRule,
    RangeRule,
    RegexRule,
    RequiredRule,
)
from formrule.rules.patterns import BUILTIN_PATTERNS, EMAIL_PATTERN, Pattern
from formrule.rules.types import (
    JS_VAR,
    ClientCheck,
    Rule,
    RuleApplication,
    RuleKind,
    ValidationMode,
)

__all__ = [
    # Types
    "JS_VAR",
    "ClientCheck",
    "Rule",
    "RuleApplication",
    "RuleKind",
    "ValidationMode",
    # Rules
    "BaseRule",
    "CallbackRule",
    "CompareRule",
    "EmailRule",
    "RangeRule",
    "RegexRule",
    "RequiredRule",
    # Patterns
    "BUILTIN_PATTERNS",
    "EMAIL_PATTERN",
    "Pattern",
]
