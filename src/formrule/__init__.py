r"""formrule — validation rules declared once, enforced on the server and in the browser.

Usage:
    from formrule import ElementDescriptor, RuleApplication, RuleRegistry

    registry = RuleRegistry()
    registry.register_rule("zipcode", "regex", r"^\d{5}$")

    # Server side
    registry.validate("zipcode", "12345")            # True
    registry.validate("nonzero", ["0", "5", "-3"])   # 2

    # Client side
    registry.get_validation_script(
        ElementDescriptor("zip"),
        "zip",
        RuleApplication(type="zipcode", message="Invalid zip code"),
    )
"""

from formrule.config import RuleBinding, RuleConfig
from formrule.elements import ElementDescriptor, ElementKind
from formrule.errors import (
    FormRuleError,
    FormRuleResultError,
    MalformedDescriptorError,
    RuleConfigError,
    RuleDataError,
    RuleRegistrationError,
    UnknownElementError,
    UnknownRuleError,
)
from formrule.forms import RuleSet, load_form
from formrule.rules.registry import BoundRule, RuleRegistry
from formrule.rules.types import (
    ClientCheck,
    Rule,
    RuleApplication,
    RuleKind,
    ValidationMode,
)

__all__ = [
    # Registry
    "BoundRule",
    "RuleRegistry",
    "RuleBinding",
    "RuleConfig",
    # Types
    "ClientCheck",
    "ElementDescriptor",
    "ElementKind",
    "Rule",
    "RuleApplication",
    "RuleKind",
    "ValidationMode",
    # Forms
    "RuleSet",
    "load_form",
    # Errors
    "FormRuleError",
    "FormRuleResultError",
    "MalformedDescriptorError",
    "RuleConfigError",
    "RuleDataError",
    "RuleRegistrationError",
    "UnknownElementError",
    "UnknownRuleError",
]
