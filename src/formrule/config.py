"""Rule configuration.

A ``RuleConfig`` maps rule names to the implementation that handles them.
It is passed to ``RuleRegistry`` at construction; nothing about which
implementation serves which name lives in module-level state.

Configuration files are YAML:

    rules:
      zipcode: {type: regex, pattern: '^\\d{5}$'}
      slug:    {type: callback, callback: "myapp.checks:is_slug"}
      iban:    {type: class, class: "myapp.rules:IbanRule"}
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

import yaml

from formrule.errors import RuleConfigError
from formrule.loading import import_object
from formrule.rules.builtin import (
    CallbackRule,
    CompareRule,
    EmailRule,
    RangeRule,
    RegexRule,
    RequiredRule,
)
from formrule.rules.patterns import BUILTIN_PATTERNS
from formrule.rules.types import RuleKind

CONFIG_ENV_VAR = "FORMRULE_CONFIG"


@dataclass(frozen=True)
class RuleBinding:
    """How one rule name is implemented.

    Attributes:
        kind: REGEX, CALLBACK/FUNCTION, CLASS or CUSTOM
        target: Pattern, callable, rule class / dotted class path, or rule instance
        owner: Object owning a callback given by method name
    """

    kind: RuleKind
    target: Any
    owner: Any = None


@dataclass
class RuleConfig:
    """Rule name to implementation table."""

    bindings: dict[str, RuleBinding] = field(default_factory=dict)

    @classmethod
    def default(cls) -> RuleConfig:
        """The built-in rules."""
        bindings = {
            "required": RuleBinding(RuleKind.CLASS, RequiredRule),
            "maxlength": RuleBinding(RuleKind.CLASS, RangeRule),
            "minlength": RuleBinding(RuleKind.CLASS, RangeRule),
            "rangelength": RuleBinding(RuleKind.CLASS, RangeRule),
            "email": RuleBinding(RuleKind.CLASS, EmailRule),
            "regex": RuleBinding(RuleKind.CLASS, RegexRule),
            "callback": RuleBinding(RuleKind.CLASS, CallbackRule),
            "compare": RuleBinding(RuleKind.CLASS, CompareRule),
        }
        for name, pattern in BUILTIN_PATTERNS.items():
            bindings[name] = RuleBinding(RuleKind.REGEX, pattern)
        return cls(bindings=bindings)

    @classmethod
    def from_dict(cls, data: dict[str, Any], include_defaults: bool = True) -> RuleConfig:
        """Create a config from a parsed YAML/JSON dict."""
        config = cls.default() if include_defaults else cls()
        rules = data.get("rules") or {}
        if not isinstance(rules, dict):
            raise RuleConfigError("'rules' must be a mapping of rule name to definition")
        for name, definition in rules.items():
            config.bindings[name] = _parse_binding(name, definition)
        return config

    @classmethod
    def from_yaml(cls, path: Path, include_defaults: bool = True) -> RuleConfig:
        """Load a config file."""
        try:
            with open(path) as f:
                data = yaml.safe_load(f) or {}
        except OSError as e:
            raise RuleConfigError(f"Cannot read rule config {path}: {e}") from e
        except yaml.YAMLError as e:
            raise RuleConfigError(f"Invalid YAML in rule config {path}: {e}") from e
        if not isinstance(data, dict):
            raise RuleConfigError(f"Rule config {path} must contain a mapping")
        return cls.from_dict(data, include_defaults=include_defaults)

    @classmethod
    def from_env(cls) -> RuleConfig:
        """Load the file named by FORMRULE_CONFIG, or the built-in rules."""
        path = os.environ.get(CONFIG_ENV_VAR)
        if path:
            return cls.from_yaml(Path(path))
        return cls.default()


def _parse_binding(name: str, definition: Any) -> RuleBinding:
    if not isinstance(definition, dict) or "type" not in definition:
        raise RuleConfigError(f"Rule '{name}' needs a mapping with a 'type'")

    try:
        kind = RuleKind(str(definition["type"]).lower())
    except ValueError:
        raise RuleConfigError(
            f"Rule '{name}' has unknown type '{definition['type']}'. "
            "Expected one of: regex, callback, function, class"
        ) from None

    if kind == RuleKind.REGEX:
        if "pattern" not in definition:
            raise RuleConfigError(f"Regex rule '{name}' needs a 'pattern'")
        return RuleBinding(kind, definition["pattern"])

    if kind in (RuleKind.CALLBACK, RuleKind.FUNCTION):
        if "callback" not in definition:
            raise RuleConfigError(f"Callback rule '{name}' needs a 'callback'")
        try:
            callback = import_object(definition["callback"])
        except ImportError as e:
            raise RuleConfigError(f"Cannot load callback for rule '{name}': {e}") from e
        return RuleBinding(kind, callback)

    if kind == RuleKind.CLASS:
        if "class" not in definition:
            raise RuleConfigError(f"Class rule '{name}' needs a 'class'")
        # Resolved lazily by the registry on first use
        return RuleBinding(kind, definition["class"])

    raise RuleConfigError(f"Rule '{name}': custom rule instances cannot be configured from files")
