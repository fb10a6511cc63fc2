"""Client-side code generation.

- templates: the emitted JavaScript, as named templates
- values: per-element value extraction and reset fragments
- assembly: one validation block per rule application, and the enclosing function
"""

from formrule.codegen.assembly import (
    DEFAULT_POSTFIX,
    DEFAULT_PREFIX,
    RuleScriptAssembler,
    escape_js,
)
from formrule.codegen.templates import JAVASCRIPT, ScriptTemplates
from formrule.codegen.values import ValueScriptBuilder

__all__ = [
    "DEFAULT_POSTFIX",
    "DEFAULT_PREFIX",
    "JAVASCRIPT",
    "RuleScriptAssembler",
    "ScriptTemplates",
    "ValueScriptBuilder",
    "escape_js",
]
