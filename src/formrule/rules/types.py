"""Core types for the formrule rule system.

A rule is evaluated twice from one declaration:
- server side, against submitted values (``Rule.validate``)
- client side, as a JavaScript test emitted into the page (``Rule.client_check``)
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, NamedTuple, Protocol, runtime_checkable

# Placeholder for "the value under test" inside a client check
JS_VAR = "{jsVar}"


class RuleKind(str, Enum):
    """How a rule name was bound to its implementation."""

    REGEX = "regex"
    CALLBACK = "callback"
    FUNCTION = "function"
    CLASS = "class"
    CUSTOM = "custom"


class ValidationMode(str, Enum):
    """Where a rule application is enforced.

    SERVER: only on submission
    CLIENT: on submission and in the browser before submitting
    """

    SERVER = "server"
    CLIENT = "client"


class ClientCheck(NamedTuple):
    """Client-side template for one rule.

    Attributes:
        prefix: Setup statements emitted before the test (may be empty)
        test: JavaScript boolean expression, true when the value is INVALID.
            ``{jsVar}`` stands for the value under test.
    """

    prefix: str
    test: str

    def bind(self, js_var: str) -> str:
        """Return the test with the placeholder replaced by ``js_var``."""
        return self.test.replace(JS_VAR, js_var)


@runtime_checkable
class Rule(Protocol):
    """Protocol that all rules implement.

    Rules are shared between every rule name bound to them, so the rule
    name is always passed in explicitly; implementations keep no per-call
    state.
    """

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        """Return True if ``value`` satisfies the rule registered as ``name``."""
        ...

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        """Return the client-side template for the rule registered as ``name``."""
        ...


@dataclass(frozen=True)
class RuleApplication:
    """One rule applied to one element (or list of elements).

    Attributes:
        type: Registered rule name
        message: User-facing text reported on failure
        format: Opaque argument forwarded to the rule (pattern, bounds, operator)
        group: Error-reporting key shared by several applications, or None
        reset: Also emit code restoring the element's default value on failure
        howmany: Minimum number of passing values for an array target
        validation: SERVER or CLIENT
        dependent: Further element names the rule reads (e.g. compare)
    """

    type: str
    message: str = ""
    format: Any = None
    group: str | None = None
    reset: bool = False
    howmany: int | None = None
    validation: ValidationMode = ValidationMode.SERVER
    dependent: tuple[str, ...] = ()

    def __post_init__(self) -> None:
        object.__setattr__(self, "validation", ValidationMode(self.validation))
        object.__setattr__(self, "dependent", tuple(self.dependent))

    @property
    def is_client(self) -> bool:
        return self.validation == ValidationMode.CLIENT
