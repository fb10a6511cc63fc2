"""Rule sets: the rules declared for one form.

A ``RuleSet`` collects rule applications against the form's element
descriptors and uses them twice:
- ``validate()`` checks submitted values on the server
- ``validation_script()`` emits the browser-side validation function
"""

from __future__ import annotations

import logging
import re
from collections.abc import Callable, Iterable, Mapping
from dataclasses import replace
from pathlib import Path
from typing import Any

import yaml

from formrule.codegen.assembly import DEFAULT_POSTFIX, DEFAULT_PREFIX, escape_js
from formrule.elements import ElementDescriptor, ElementKind
from formrule.errors import (
    FormRuleResultError,
    MalformedDescriptorError,
    RuleConfigError,
    RuleRegistrationError,
    UnknownElementError,
    UnknownRuleError,
)
from formrule.loading import import_object
from formrule.rules.registry import RuleRegistry
from formrule.rules.types import RuleApplication, ValidationMode

logger = logging.getLogger(__name__)

_NAME_PART = re.compile(r"\[([^\]]*)\]")

# Rules that make an element mandatory
REQUIRED_RULES = ("required",)

FormRule = Callable[[Mapping[str, Any]], "bool | Mapping[str, str]"]


class RuleSet:
    """Rules declared for one form.

    Example:
        rules = RuleSet([ElementDescriptor("email")], registry)
        rules.add_rule("email", "Email is required", "required", validation="client")
        rules.add_rule("email", "Not an email", "email", validation="client")

        errors = rules.validate({"email": "nope"})   # {"email": "Not an email"}
        script = rules.validation_script("signup")
    """

    def __init__(
        self,
        elements: Iterable[ElementDescriptor],
        registry: RuleRegistry | None = None,
    ):
        self.registry = registry or RuleRegistry.singleton()
        self.elements: dict[str, ElementDescriptor] = {e.name: e for e in elements}
        # target element name -> applications, in declaration order
        self.rules: dict[str, list[RuleApplication]] = {}
        self.required: list[str] = []
        self.form_rules: list[FormRule] = []

    # -------------------------------------------------------------------------
    # Declaration
    # -------------------------------------------------------------------------

    def add_rule(
        self,
        element: str | list[str],
        message: str,
        type: str,
        format: Any = None,
        validation: ValidationMode | str = ValidationMode.SERVER,
        reset: bool = False,
    ) -> None:
        """Apply a rule to an element.

        Args:
            element: Element name, or a list of names for rules reading
                several elements (the first is the target)
            message: Message reported on failure
            type: Registered rule name
            format: Rule format
            validation: "server" or "client"
            reset: Reset the element in the browser on failure

        Raises:
            UnknownElementError: If an element is not part of the form
            UnknownRuleError: If the rule is not registered
        """
        names = [element] if isinstance(element, str) else list(element)
        if not names:
            raise ValueError("add_rule() needs at least one element")
        for name in names:
            if name not in self.elements:
                raise UnknownElementError(name)
        self._check_rule(type)

        target, dependent = names[0], tuple(names[1:])
        if type in REQUIRED_RULES:
            self.required.append(target)
        self.rules.setdefault(target, []).append(
            RuleApplication(
                type=type,
                message=message,
                format=format,
                reset=reset,
                validation=validation_mode(validation),
                dependent=dependent,
            )
        )

    def add_group_rule(
        self,
        group: str,
        rules: str | Mapping[int | str, list[tuple[Any, ...]]],
        type: str | None = None,
        format: Any = None,
        howmany: int = 0,
        validation: ValidationMode | str = ValidationMode.SERVER,
        reset: bool = False,
    ) -> None:
        """Apply rules to a group.

        Either the whole group is validated (``rules`` is the message) and at
        least ``howmany`` of its values must pass, or each child gets its own
        rules (``rules`` maps a child position or name to a list of
        ``(message, type[, format[, validation[, reset]]])`` tuples) with
        failures reported once for the group.

        ``howmany`` defaults to 1 for ``required`` on a radio group and to
        the number of children otherwise.
        """
        element = self.elements.get(group)
        if element is None:
            raise UnknownElementError(group)
        if element.kind != ElementKind.GROUP:
            raise MalformedDescriptorError(f"Element '{group}' is not a group")

        if isinstance(rules, str):
            if type is None:
                raise TypeError("add_group_rule() needs a rule type for a group-wide rule")
            self._check_rule(type)
            if not howmany:
                if type in REQUIRED_RULES and element.group_type == ElementKind.RADIO:
                    howmany = 1
                else:
                    howmany = len(element.children)
            self.rules.setdefault(group, []).append(
                RuleApplication(
                    type=type,
                    message=rules,
                    format=format,
                    howmany=howmany,
                    validation=validation_mode(validation),
                    reset=reset,
                )
            )
            if type in REQUIRED_RULES:
                self.required.append(group)
            return

        required = 0
        for key, child_rules in rules.items():
            try:
                child_name = element.qualified_name(key)
            except KeyError:
                raise UnknownElementError(f"{group}[{key}]") from None
            for rule in child_rules:
                message, rule_type, *rest = rule
                self._check_rule(rule_type)
                rule_format = rest[0] if len(rest) > 0 else None
                rule_validation = validation_mode(rest[1] if len(rest) > 1 else None)
                rule_reset = bool(rest[2]) if len(rest) > 2 else False
                self.rules.setdefault(child_name, []).append(
                    RuleApplication(
                        type=rule_type,
                        message=message,
                        format=rule_format,
                        group=group,
                        validation=rule_validation,
                        reset=rule_reset,
                    )
                )
                if rule_type in REQUIRED_RULES:
                    self.required.append(child_name)
                    required += 1
        if required and required == len(element.children):
            self.required.append(group)

    def add_form_rule(self, rule: FormRule) -> None:
        """Add a rule checking the submission as a whole.

        The callable receives all submitted values and returns True when
        they are valid, or a mapping of element name to error message.
        Form rules run after the element rules and never replace an
        error already reported for an element.

        Raises:
            RuleRegistrationError: If ``rule`` is not callable
        """
        if not callable(rule):
            raise RuleRegistrationError(f"Form rule must be callable, got {rule!r}")
        self.form_rules.append(rule)

    def _check_rule(self, rule_type: str) -> None:
        if not self.registry.is_registered(rule_type):
            raise UnknownRuleError(rule_type)

    def is_required(self, name: str) -> bool:
        return name in self.required

    # -------------------------------------------------------------------------
    # Server side
    # -------------------------------------------------------------------------

    def validate(self, submitted: Mapping[str, Any]) -> dict[str, str]:
        """Validate submitted values.

        Each target stops at its first failing rule; a group reports only
        its first failure. Empty values of optional elements are not
        validated. Form rules run last.

        Returns:
            Error messages keyed by element or group name; empty if valid
        """
        errors: dict[str, str] = {}
        for target, applications in self.rules.items():
            value = submit_value(submitted, target)
            for rule in applications:
                if target in errors or (rule.group and rule.group in errors):
                    break
                if not self.is_required(target) and (value is None or value == ""):
                    break

                if rule.dependent:
                    values = [value] + [submit_value(submitted, d) for d in rule.dependent]
                    result = self.registry.validate(rule.type, values, rule.format, multiple=True)
                elif isinstance(value, list) and rule.howmany is None:
                    result = self.registry.validate(rule.type, value, rule.format, multiple=True)
                else:
                    result = self.registry.validate(rule.type, value, rule.format)

                if not result or (rule.howmany and rule.howmany > int(result)):
                    errors[rule.group or target] = rule.message

        for form_rule in self.form_rules:
            result = form_rule(submitted)
            if result is True:
                continue
            if not isinstance(result, Mapping):
                raise FormRuleResultError(
                    f"Form rule {form_rule!r} returned {result!r}; "
                    "expected True or a mapping of element name to message"
                )
            for name, message in result.items():
                errors.setdefault(name, message)
        if errors:
            logger.debug("Submission failed %d rule(s): %s", len(errors), sorted(errors))
        return errors

    # -------------------------------------------------------------------------
    # Client side
    # -------------------------------------------------------------------------

    def validation_script(
        self,
        form_id: str,
        prefix: str = DEFAULT_PREFIX,
        postfix: str = DEFAULT_POSTFIX,
    ) -> str:
        """Browser validation function for the client rules.

        Frozen elements are skipped. Returns "" if no client rule applies.
        """
        blocks = []
        for element_name, applications in self.rules.items():
            for rule in applications:
                if not rule.is_client:
                    continue
                element = self._script_target(element_name, rule)
                if element is None:
                    continue
                application = replace(rule, message=escape_js(rule.message))
                blocks.append(
                    self.registry.get_validation_script(element, element_name, application)
                )
        return self.registry.assembler.validation_function(form_id, blocks, prefix, postfix)

    def _script_target(
        self, element_name: str, rule: RuleApplication
    ) -> ElementDescriptor | list[ElementDescriptor] | None:
        """Descriptor(s) a client rule reads, or None when frozen."""
        if rule.group:
            group = self.elements[rule.group]
            if group.frozen:
                return None
            try:
                _, element = group.child(element_name)
            except KeyError:
                raise UnknownElementError(element_name) from None
            return None if element.frozen else element

        if rule.dependent:
            elements = [self.elements[element_name]]
            elements += [self.elements[name] for name in rule.dependent]
            return None if any(e.frozen for e in elements) else elements

        element = self.elements[element_name]
        return None if element.frozen else element

    # -------------------------------------------------------------------------
    # Loading
    # -------------------------------------------------------------------------

    @classmethod
    def from_dict(cls, data: dict[str, Any], registry: RuleRegistry | None = None) -> RuleSet:
        """Create a rule set from a form definition dict.

        Format:
            elements: [{name, kind, multiple, children, appendName, frozen}]
            rules:
              - {element: name | [names], message, type, format, validation, reset}
              - {group: name, message, type, format, howmany, validation, reset}
              - {group: name, rules: {child: [{message, type, format, validation, reset}]}}
            form_rules: [dotted.path:callable]
        """
        try:
            elements = [ElementDescriptor.from_dict(e) for e in data.get("elements", [])]
        except MalformedDescriptorError as e:
            raise RuleConfigError(f"Invalid element definition: {e}") from e

        rule_set = cls(elements, registry)
        for rule in data.get("rules", []):
            if "group" in rule and "rules" in rule:
                rule_set.add_group_rule(
                    rule["group"],
                    {
                        key: [
                            (
                                r.get("message", ""),
                                r["type"],
                                r.get("format"),
                                r.get("validation", "server"),
                                r.get("reset", False),
                            )
                            for r in child_rules
                        ]
                        for key, child_rules in rule["rules"].items()
                    },
                )
            elif "group" in rule:
                rule_set.add_group_rule(
                    rule["group"],
                    rule.get("message", ""),
                    rule["type"],
                    format=rule.get("format"),
                    howmany=rule.get("howmany", 0),
                    validation=rule.get("validation", "server"),
                    reset=rule.get("reset", False),
                )
            elif "element" in rule:
                rule_set.add_rule(
                    rule["element"],
                    rule.get("message", ""),
                    rule["type"],
                    format=rule.get("format"),
                    validation=rule.get("validation", "server"),
                    reset=rule.get("reset", False),
                )
            else:
                raise RuleConfigError(f"Rule needs an 'element' or a 'group': {rule!r}")
        for path in data.get("form_rules", []):
            try:
                rule_set.add_form_rule(import_object(path))
            except (ImportError, RuleRegistrationError) as e:
                raise RuleConfigError(f"Cannot load form rule '{path}': {e}") from e
        return rule_set


def load_form(path: Path, registry: RuleRegistry | None = None) -> tuple[str, RuleSet]:
    """Load a YAML form definition.

    Returns:
        The form id (``id`` key, defaulting to the file stem) and its rule set
    """
    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except OSError as e:
        raise RuleConfigError(f"Cannot read form definition {path}: {e}") from e
    except yaml.YAMLError as e:
        raise RuleConfigError(f"Invalid YAML in form definition {path}: {e}") from e
    if not isinstance(data, dict):
        raise RuleConfigError(f"Form definition {path} must contain a mapping")
    return str(data.get("id", path.stem)), RuleSet.from_dict(data, registry)


def validation_mode(value: Any) -> ValidationMode:
    """CLIENT for "client", SERVER for anything else."""
    return ValidationMode.CLIENT if value == ValidationMode.CLIENT else ValidationMode.SERVER


def submit_value(submitted: Mapping[str, Any], name: str) -> Any:
    """Submitted value for a possibly array-style name such as ``group[child]``.

    Nested mappings are walked one bracket at a time; mappings reached at
    the end are returned as the list of their values.
    """
    if name in submitted:
        value = submitted[name]
    else:
        base, _, rest = name.partition("[")
        if not rest or base not in submitted:
            return None
        value = submitted[base]
        for key in _NAME_PART.findall("[" + rest):
            if isinstance(value, Mapping) and key in value:
                value = value[key]
            elif isinstance(value, list) and key.isdigit() and int(key) < len(value):
                value = value[int(key)]
            else:
                return None
    if isinstance(value, Mapping):
        return list(value.values())
    return value
