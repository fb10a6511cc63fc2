"""Regular expressions shared by the server and the browser.

A rule pattern is written once and used twice: compiled with :mod:`re` for
the server-side test and rendered as a JavaScript regex literal for the
client-side test. Patterns may be bare (``^\\d+$``) or delimited the way
JavaScript writes them (``/^\\d+$/i``).

Matching is a *search*, not a full match: a pattern only constrains the
whole value when it is anchored with ``^`` and ``$``.
"""

import re
from dataclasses import dataclass
from functools import lru_cache

_DELIMITED = re.compile(r"^/(?P<source>.*)/(?P<flags>[imsux]*)$", re.DOTALL)

_PY_FLAGS = {
    "i": re.IGNORECASE,
    "m": re.MULTILINE,
    "s": re.DOTALL,
    "x": re.VERBOSE,
}

# Flags JavaScript understands
_JS_FLAGS = "imsu"


@dataclass(frozen=True)
class Pattern:
    """A regular expression usable on both sides.

    Attributes:
        source: Pattern body, without delimiters
        flags: Single-letter flags (``i``, ``m``, ``s``, ``u``, ``x``)
    """

    source: str
    flags: str = ""

    @classmethod
    def parse(cls, value: "str | re.Pattern[str] | Pattern") -> "Pattern":
        """Create a Pattern from a bare, delimited or compiled expression."""
        if isinstance(value, Pattern):
            return value
        if isinstance(value, re.Pattern):
            flags = "".join(
                letter for letter, flag in _PY_FLAGS.items() if value.flags & flag
            )
            return cls(source=value.pattern, flags=flags)
        match = _DELIMITED.match(value)
        if match:
            return cls(source=match.group("source"), flags=match.group("flags"))
        return cls(source=value)

    def compile(self) -> "re.Pattern[str]":
        return _compile(self.source, self.flags)

    def search(self, value: object) -> bool:
        """Return True if the pattern matches anywhere in ``value``."""
        text = "" if value is None else str(value)
        return self.compile().search(text) is not None

    def to_js(self) -> str:
        """Render as a JavaScript regex literal."""
        flags = "".join(flag for flag in self.flags if flag in _JS_FLAGS)
        return f"/{_escape_slashes(self.source)}/{flags}"

    def __str__(self) -> str:
        return self.to_js()


@lru_cache(maxsize=256)
def _compile(source: str, flags: str) -> "re.Pattern[str]":
    # \d, \w and friends are ASCII-only in JavaScript unless the u flag is set
    value = 0 if "u" in flags else re.ASCII
    for flag in flags:
        value |= _PY_FLAGS.get(flag, 0)
    return re.compile(source, value)


def _escape_slashes(source: str) -> str:
    """Escape unescaped forward slashes so the body fits between ``/``."""
    out = []
    escaped = False
    for char in source:
        if char == "/" and not escaped:
            out.append("\\/")
        else:
            out.append(char)
        escaped = char == "\\" and not escaped
    return "".join(out)


# =============================================================================
# Built-in patterns
# =============================================================================

BUILTIN_PATTERNS: dict[str, Pattern] = {
    "lettersonly": Pattern(r"^[a-zA-Z]+$"),
    "alphanumeric": Pattern(r"^[a-zA-Z0-9]+$"),
    "numeric": Pattern(r"(^-?\d\d*\.\d*$)|(^-?\d\d*$)|(^-?\.\d\d*$)"),
    "nopunctuation": Pattern(r"^[^().\/\*\^\?#!@$%+=,\"\'><~\[\]{}]+$"),
    "nonzero": Pattern(r"^-?[1-9][0-9]*"),
}

# Quoted or dot-atom local part; IPv4 literal, bare IPv4 or host name domain
EMAIL_PATTERN = Pattern(
    r"^((\"[^\"\f\n\r\t\v\b]+\")|([\w!#$%&'*+\-~\/^`|{}]+(\.[\w!#$%&'*+\-~\/^`|{}]+)*))"
    r"@((\[(((25[0-5])|(2[0-4][0-9])|([0-1]?[0-9]?[0-9]))\.){3}"
    r"((25[0-5])|(2[0-4][0-9])|([0-1]?[0-9]?[0-9]))\])"
    r"|((((25[0-5])|(2[0-4][0-9])|([0-1]?[0-9]?[0-9]))\.){3}"
    r"((25[0-5])|(2[0-4][0-9])|([0-1]?[0-9]?[0-9])))"
    r"|((([A-Za-z0-9\-])+\.)+[A-Za-z\-]+))$"
)
