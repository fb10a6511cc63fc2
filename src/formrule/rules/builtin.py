"""Built-in rules for formrule.

Available rules:
- required: Value must not be empty
- regex: Value must match a pattern (named patterns or the rule format)
- callback: Value is checked by a Python callable / JavaScript function pair
- minlength, maxlength, rangelength: String length bounds
- email: Value must be an email address
- compare: Two values compared with an operator
"""

import logging
import operator
import re
from collections.abc import Callable
from typing import Any

from formrule.codegen.templates import JAVASCRIPT
from formrule.errors import RuleDataError, RuleRegistrationError
from formrule.loading import import_object
from formrule.rules.base import BaseRule
from formrule.rules.patterns import BUILTIN_PATTERNS, EMAIL_PATTERN, Pattern
from formrule.rules.types import ClientCheck

logger = logging.getLogger(__name__)


# =============================================================================
# Required
# =============================================================================


class RequiredRule(BaseRule):
    """Fails on empty values."""

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        if value is None:
            return False
        if isinstance(value, (list, tuple, dict)):
            return len(value) > 0
        return str(value) != ""

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        return ClientCheck("", "{jsVar} == ''")


# =============================================================================
# Regex
# =============================================================================


class RegexRule(BaseRule):
    """Validates values against regular expressions.

    Holds one pattern per rule name. Names without a stored pattern (the
    generic ``regex`` rule) take the pattern from the rule format.
    """

    def __init__(self) -> None:
        self._data: dict[str, Pattern] = dict(BUILTIN_PATTERNS)

    def add_data(self, name: str, pattern: "str | re.Pattern[str] | Pattern") -> None:
        """Store (or replace) the pattern for ``name``."""
        if not isinstance(pattern, (str, re.Pattern, Pattern)):
            raise RuleRegistrationError(
                f"Pattern for rule '{name}' must be a string or compiled regex, got {pattern!r}"
            )
        parsed = Pattern.parse(pattern)
        try:
            parsed.compile()
        except re.error as e:
            raise RuleRegistrationError(f"Invalid pattern for rule '{name}': {e}") from e
        if name in self._data and self._data[name] != parsed:
            logger.warning("Replacing pattern for rule '%s'", name)
        self._data[name] = parsed

    def pattern_for(self, name: str, options: Any = None) -> Pattern:
        if name in self._data:
            return self._data[name]
        if options is None:
            raise RuleDataError(f"Rule '{name}' has no pattern and none was given as format")
        if not isinstance(options, (str, re.Pattern, Pattern)):
            raise RuleDataError(f"Rule '{name}' needs a pattern as format, got {options!r}")
        return Pattern.parse(options)

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        return self.pattern_for(name, options).search(value)

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        regex = self.pattern_for(name, options).to_js()
        return ClientCheck(
            f"  var regex = {regex};\n",
            "{jsVar} != '' && !regex.test({jsVar})",
        )


class EmailRule(BaseRule):
    """Validates email addresses.

    Only the address syntax is checked; the domain is never resolved.
    """

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        return EMAIL_PATTERN.search(value)

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        return ClientCheck(
            f"  var regex = {EMAIL_PATTERN.to_js()};\n",
            "{jsVar} != '' && !regex.test({jsVar})",
        )


# =============================================================================
# Callback
# =============================================================================


class CallbackRule(BaseRule):
    """Validates values with a registered callable.

    The Python callable runs on the server; the client check calls a browser
    function of the same name, which the page is expected to define.
    A callback may be given as a method name together with its owner object.

    Names without a stored callback (the generic ``callback`` rule) take it
    from the rule format: a callable, an ``(owner, method)`` pair, or a
    dotted import path whose last segment names the browser function.
    """

    def __init__(self) -> None:
        self._data: dict[str, tuple[Callable[..., Any] | str, Any]] = {}

    def add_data(
        self,
        name: str,
        callback: Callable[..., Any] | str,
        owner: Any = None,
    ) -> None:
        """Store (or replace) the callback for ``name``."""
        if owner is None and not callable(callback):
            raise RuleRegistrationError(
                f"Callback for rule '{name}' must be callable, got {callback!r}"
            )
        if owner is not None and isinstance(callback, str) and not hasattr(owner, callback):
            raise RuleRegistrationError(
                f"Owner {owner!r} of rule '{name}' has no method '{callback}'"
            )
        if name in self._data:
            logger.warning("Replacing callback for rule '%s'", name)
        self._data[name] = (callback, owner)

    def _resolve(self, name: str) -> Callable[..., Any]:
        callback, owner = self._data[name]
        if owner is not None and isinstance(callback, str):
            return getattr(owner, callback)
        return callback  # type: ignore[return-value]

    def _from_format(self, name: str, options: Any) -> Callable[..., Any]:
        """Callable named by the format of a rule without a stored callback.

        Raises:
            RuleDataError: If the format does not resolve to a callable
        """
        if callable(options):
            return options
        func: Any = None
        if isinstance(options, (list, tuple)) and len(options) == 2:
            owner, method = options
            func = getattr(owner, method, None) if isinstance(method, str) else None
        elif isinstance(options, str):
            try:
                func = import_object(options)
            except ImportError as e:
                raise RuleDataError(
                    f"Rule '{name}' cannot load callback '{options}': {e}"
                ) from e
        if not callable(func):
            raise RuleDataError(
                f"Rule '{name}' has no callback and its format {options!r} is not callable"
            )
        return func

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        if name in self._data:
            func = self._resolve(name)
            return bool(func(value) if options is None else func(value, options))
        return bool(self._from_format(name, options)(value))

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        if name in self._data:
            function = _js_name(self._data[name][0])
            if options is None:
                params = "{jsVar}"
            else:
                params = f"{{jsVar}}, '{JAVASCRIPT.escape(str(options))}'"
        else:
            if options is None:
                raise RuleDataError(f"Rule '{name}' has no callback and none was given as format")
            target = options[1] if isinstance(options, (list, tuple)) else options
            function = _js_name(target)
            params = "{jsVar}"
        return ClientCheck("", f"{{jsVar}} != '' && !{function}({params})")


def _js_name(callback: Callable[..., Any] | str) -> str:
    if isinstance(callback, str):
        # "pkg.module:check" is called as check() in the browser
        return re.split(r"[:.]", callback)[-1]
    return getattr(callback, "__name__", type(callback).__name__)


# =============================================================================
# Range (string length)
# =============================================================================


class RangeRule(BaseRule):
    """Checks string length against the bounds in the rule format.

    ``minlength`` and ``maxlength`` take a single number; ``rangelength``
    takes a ``[min, max]`` pair. The rule name selects the comparison.
    """

    def _bounds(self, name: str, options: Any) -> tuple[int, int]:
        try:
            if name == "minlength":
                return int(options), -1
            if name == "maxlength":
                return -1, int(options)
            low, high = options
            return int(low), int(high)
        except (TypeError, ValueError):
            raise RuleDataError(
                f"Rule '{name}' needs a length bound as format, got {options!r}"
            ) from None

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        length = len("" if value is None else str(value))
        low, high = self._bounds(name, options)
        if low >= 0 and length < low:
            return False
        if high >= 0 and length > high:
            return False
        return True

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        low, high = self._bounds(name, options)
        if name == "minlength":
            test = f"{{jsVar}}.length < {low}"
        elif name == "maxlength":
            test = f"{{jsVar}}.length > {high}"
        else:
            test = f"({{jsVar}}.length < {low} || {{jsVar}}.length > {high})"
        return ClientCheck("", f"{{jsVar}} != '' && {test}")


# =============================================================================
# Compare
# =============================================================================

OPERATOR_ALIASES = {
    "eq": "==",
    "neq": "!=",
    "gt": ">",
    "gte": ">=",
    "lt": "<",
    "lte": "<=",
}

OPERATORS: dict[str, Callable[[Any, Any], bool]] = {
    "==": operator.eq,
    "!=": operator.ne,
    ">": operator.gt,
    ">=": operator.ge,
    "<": operator.lt,
    "<=": operator.le,
}

_NUMBER_PREFIX = re.compile(r"^\s*[+-]?(\d+(\.\d*)?|\.\d+)([eE][+-]?\d+)?")


def find_operator(name: Any) -> str:
    """Normalize an operator name or symbol; defaults to ``==``."""
    if not name:
        return "=="
    if name in OPERATOR_ALIASES:
        return OPERATOR_ALIASES[name]
    if name in OPERATORS:
        return name
    return "=="


def to_number(value: Any) -> float:
    """Numeric value of the leading number in ``value``, or 0.0."""
    if isinstance(value, bool):
        return float(value)
    if isinstance(value, (int, float)):
        return float(value)
    match = _NUMBER_PREFIX.match("" if value is None else str(value))
    return float(match.group(0)) if match else 0.0


class CompareRule(BaseRule):
    """Compares the first two values of a collection.

    Applied with ``multiple=True`` to ``[value, other]``. Equality
    operators compare as strings, ordering operators as numbers.
    """

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        if not isinstance(value, (list, tuple)) or len(value) < 2:
            raise RuleDataError(f"Rule '{name}' compares two values, got {value!r}")
        op = find_operator(options)
        left, right = value[0], value[1]
        if op in ("==", "!="):
            left = "" if left is None else str(left)
            right = "" if right is None else str(right)
        else:
            left, right = to_number(left), to_number(right)
        return OPERATORS[op](left, right)

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        op = find_operator(options)
        cast = "String" if op in ("==", "!=") else "Number"
        check = f"!({cast}({{jsVar}}[0]) {op} {cast}({{jsVar}}[1]))"
        return ClientCheck("", f"'' != {{jsVar}}[0] && {check}")
