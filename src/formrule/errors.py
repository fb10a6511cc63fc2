"""Exceptions raised by formrule.

Only configuration problems are exceptions. A value that does not satisfy
a rule is an ordinary result (``False`` or a count of ``0``), never an error.
"""


class FormRuleError(Exception):
    """Base class for all formrule errors."""


class UnknownRuleError(FormRuleError, LookupError):
    """A rule name was looked up that has never been registered."""

    def __init__(self, rule_name: str):
        self.rule_name = rule_name
        super().__init__(
            f"Rule '{rule_name}' is not registered. "
            "Rules must be registered before they are applied."
        )


class MalformedDescriptorError(FormRuleError, ValueError):
    """An element descriptor's kind does not match the shape of its fields."""


class RuleRegistrationError(FormRuleError, ValueError):
    """A rule could not be registered or instantiated."""


class RuleDataError(FormRuleError, ValueError):
    """A rule was applied without the data it needs (pattern, callback, operands)."""


class RuleConfigError(FormRuleError):
    """A rule or form configuration file is invalid."""


class UnknownElementError(FormRuleError, KeyError):
    """A rule targets an element that is not part of the form."""

    def __init__(self, element_name: str):
        self.element_name = element_name
        super().__init__(element_name)

    def __str__(self) -> str:
        return f"Element '{self.element_name}' does not exist in the form"


class FormRuleResultError(FormRuleError, TypeError):
    """A form-level rule returned something other than True or a mapping of errors."""
