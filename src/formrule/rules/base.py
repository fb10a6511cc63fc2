"""Base class for rules."""

from typing import Any

from formrule.rules.types import ClientCheck


class BaseRule:
    """Base class for rules with the default behaviour of accepting everything.

    Subclasses override ``validate`` and ``client_check``. An empty client
    test means the rule has no client-side counterpart.
    """

    def validate(self, name: str, value: Any, options: Any = None) -> bool:
        return True

    def client_check(self, name: str, options: Any = None) -> ClientCheck:
        return ClientCheck("", "")

    def __repr__(self) -> str:
        return f"{type(self).__name__}()"
