"""Rule registry for formrule.

Provides registration and lookup of rules by name, server-side evaluation
of submitted values, and the per-rule client-side validation code.

Many rule names may share one implementation: every pattern rule is served
by the same ``RegexRule`` instance, every callback rule by the same
``CallbackRule``. The registry keeps one instance per implementation class
and hands out ``BoundRule`` objects pairing that instance with the name it
was looked up under.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import Any, ClassVar

from formrule.codegen.assembly import RuleScriptAssembler
from formrule.config import RuleConfig
from formrule.elements import ElementDescriptor
from formrule.errors import RuleRegistrationError, UnknownRuleError
from formrule.loading import import_object
from formrule.rules.builtin import CallbackRule, RegexRule
from formrule.rules.types import ClientCheck, Rule, RuleApplication, RuleKind

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class BoundRule:
    """A shared rule instance bound to the name it was resolved for.

    Attributes:
        name: The rule name
        rule: The implementation shared by every name of its class
    """

    name: str
    rule: Rule

    def validate(self, value: Any, options: Any = None) -> bool:
        return bool(self.rule.validate(self.name, value, options))

    def client_check(self, options: Any = None) -> ClientCheck:
        return ClientCheck(*self.rule.client_check(self.name, options))


class RuleRegistry:
    """Registry of validation rules.

    Built from a ``RuleConfig``; further rules can be registered at
    application startup. Rule implementations are instantiated lazily, one
    per class per registry.

    Example:
        registry = RuleRegistry()
        registry.register_rule("zipcode", "regex", r"^\\d{5}$")

        registry.validate("zipcode", "12345")        # True
        registry.validate("zipcode", ["1", "12345"])  # 1 (one value passes)
    """

    _singleton: ClassVar[RuleRegistry | None] = None
    _singleton_lock: ClassVar[threading.Lock] = threading.Lock()

    def __init__(
        self,
        config: RuleConfig | None = None,
        assembler: RuleScriptAssembler | None = None,
    ):
        self._lock = threading.RLock()
        # rule name -> implementation class, or dotted path not yet imported
        self._classes: dict[str, type | str] = {}
        self._kinds: dict[str, RuleKind] = {}
        self._instances: dict[type, Rule] = {}
        self.assembler = assembler or RuleScriptAssembler()

        config = config if config is not None else RuleConfig.default()
        for name, binding in config.bindings.items():
            self.register_rule(name, binding.kind, binding.target, binding.owner)

    @classmethod
    def singleton(cls) -> RuleRegistry:
        """Process-wide registry, configured from the environment on first use."""
        with cls._singleton_lock:
            if cls._singleton is None:
                cls._singleton = cls(RuleConfig.from_env())
            return cls._singleton

    @classmethod
    def reset_singleton(cls) -> None:
        """Drop the process-wide registry. Primarily for testing."""
        with cls._singleton_lock:
            cls._singleton = None

    # -------------------------------------------------------------------------
    # Registration
    # -------------------------------------------------------------------------

    def register_rule(
        self,
        rule_name: str,
        kind: RuleKind | str | None,
        data1: Any,
        data2: Any = None,
    ) -> None:
        """Register a validation rule.

        Args:
            rule_name: Name the rule is applied under
            kind: "regex", "function"/"callback", or anything else for rule
                classes and instances
            data1: Pattern (regex), callable or method name (callback),
                a rule instance, a rule class, or a dotted path to a rule class
            data2: Object owning the callback method (callback only)

        Raises:
            RuleRegistrationError: If the name is already bound to another
                implementation, or the data is not usable
        """
        kind_value = str(kind.value if isinstance(kind, RuleKind) else kind or "").lower()

        with self._lock:
            if kind_value == RuleKind.REGEX.value:
                self._check_rebind(rule_name, RegexRule)
                self._instance(RegexRule).add_data(rule_name, data1)  # type: ignore[attr-defined]
                self._bind(rule_name, RegexRule, RuleKind.REGEX)
            elif kind_value in (RuleKind.FUNCTION.value, RuleKind.CALLBACK.value):
                self._check_rebind(rule_name, CallbackRule)
                self._instance(CallbackRule).add_data(rule_name, data1, data2)  # type: ignore[attr-defined]
                self._bind(rule_name, CallbackRule, RuleKind(kind_value))
            elif isinstance(data1, type) or isinstance(data1, str):
                if isinstance(data1, type) and not _is_rule_class(data1):
                    raise RuleRegistrationError(
                        f"{data1.__name__} does not implement validate() and client_check()"
                    )
                self._bind(rule_name, data1, RuleKind.CLASS)
            elif isinstance(data1, Rule):
                self._bind(rule_name, type(data1), RuleKind.CUSTOM)
                self._instances[type(data1)] = data1
            else:
                raise RuleRegistrationError(
                    f"Cannot register rule '{rule_name}' from {data1!r}"
                )
        logger.debug("Registered rule '%s' (%s)", rule_name, kind_value or "class")

    def _check_rebind(self, rule_name: str, target: type | str) -> None:
        current = self._classes.get(rule_name)
        if current is not None and current != target:
            raise RuleRegistrationError(
                f"Rule '{rule_name}' is already bound to {_describe(current)}; "
                f"cannot rebind it to {_describe(target)}"
            )

    def _bind(self, rule_name: str, target: type | str, kind: RuleKind) -> None:
        self._check_rebind(rule_name, target)
        self._classes[rule_name] = target
        self._kinds[rule_name] = kind

    def _instance(self, target: type | str) -> Rule:
        """Shared instance for an implementation class, created on first use."""
        rule_class = self._resolve_class(target)
        if rule_class not in self._instances:
            try:
                self._instances[rule_class] = rule_class()
            except Exception as e:
                raise RuleRegistrationError(
                    f"Cannot instantiate rule class {rule_class.__name__}: {e}"
                ) from e
            logger.debug("Instantiated rule class %s", rule_class.__name__)
        return self._instances[rule_class]

    def _resolve_class(self, target: type | str) -> type:
        if isinstance(target, type):
            return target
        try:
            rule_class = import_object(target)
        except ImportError as e:
            raise RuleRegistrationError(f"Cannot import rule class '{target}': {e}") from e
        if not isinstance(rule_class, type) or not _is_rule_class(rule_class):
            raise RuleRegistrationError(f"'{target}' is not a rule class")
        # Later lookups of every name bound to this path skip the import
        for name, bound in self._classes.items():
            if bound == target:
                self._classes[name] = rule_class
        return rule_class

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_rule(self, rule_name: str) -> BoundRule:
        """Resolve a rule name.

        Raises:
            UnknownRuleError: If the name is not registered
        """
        with self._lock:
            if rule_name not in self._classes:
                raise UnknownRuleError(rule_name)
            return BoundRule(name=rule_name, rule=self._instance(self._classes[rule_name]))

    def is_registered(self, rule_name: str) -> bool:
        return rule_name in self._classes

    def list_registered(self) -> list[str]:
        """List all registered rule names."""
        return sorted(self._classes)

    def rule_kind(self, rule_name: str) -> RuleKind:
        """How ``rule_name`` was registered.

        Raises:
            UnknownRuleError: If the name is not registered
        """
        if rule_name not in self._kinds:
            raise UnknownRuleError(rule_name)
        return self._kinds[rule_name]

    # -------------------------------------------------------------------------
    # Server-side evaluation
    # -------------------------------------------------------------------------

    def validate(
        self,
        rule_name: str,
        values: Any,
        options: Any = None,
        multiple: bool = False,
    ) -> bool | int:
        """Validate a value or a list of values.

        Args:
            rule_name: Name of the rule
            values: A single value, or a collection of values (list, tuple,
                set, or mapping whose values are validated)
            options: Rule format (pattern, bounds, operator, ...)
            multiple: Pass a list to the rule as one unit instead of
                validating each item

        Returns:
            For a single value (or ``multiple=True``): whether it passes.
            For a collection: the number of items that pass; 0 means none did.

        Raises:
            UnknownRuleError: If the name is not registered
        """
        rule = self.get_rule(rule_name)
        if multiple:
            return rule.validate(values, options)
        if isinstance(values, Mapping):
            values = list(values.values())
        if isinstance(values, (list, tuple, set, frozenset)):
            return sum(1 for value in values if rule.validate(value, options))
        return rule.validate(values, options)

    # -------------------------------------------------------------------------
    # Client-side code
    # -------------------------------------------------------------------------

    def get_validation_script(
        self,
        element: ElementDescriptor | Sequence[ElementDescriptor],
        element_name: str,
        application: RuleApplication,
    ) -> str:
        """Client-side validation block for one rule application.

        Args:
            element: The element, or the elements of a multi-element rule
            element_name: Name of the element when a single one is given
            application: Rule name and options

        Raises:
            UnknownRuleError: If the rule is not registered
            MalformedDescriptorError: If an element kind is not supported
        """
        rule = self.get_rule(application.type)
        check = rule.client_check(application.format)
        return self.assembler.rule_block(element, element_name, application, check)


def _is_rule_class(cls: type) -> bool:
    return callable(getattr(cls, "validate", None)) and callable(
        getattr(cls, "client_check", None)
    )


def _describe(target: type | str) -> str:
    return target.__name__ if isinstance(target, type) else target
