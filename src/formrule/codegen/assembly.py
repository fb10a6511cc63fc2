"""Assembly of per-rule client-side validation blocks.

One block per rule application:
1. extraction of the element's current value(s) into ``value``
2. the rule's setup prefix
3. the rule's invalid-test, guarded by the error flag of the reporting key
4. on failure: flag the key, append the message, reset the element(s)

With ``howmany`` the test runs over every item of the ``value`` array and
the failure branch fires when fewer than ``howmany`` items pass.
"""

from collections.abc import Sequence

from formrule.codegen.templates import JAVASCRIPT, ScriptTemplates
from formrule.codegen.values import ValueScriptBuilder
from formrule.elements import ElementDescriptor
from formrule.rules.types import ClientCheck, RuleApplication

DEFAULT_PREFIX = "Invalid information entered."
DEFAULT_POSTFIX = "Please correct these fields."


class RuleScriptAssembler:
    """Stitches value fragments and a rule's client check into one block."""

    def __init__(self, templates: ScriptTemplates = JAVASCRIPT):
        self.templates = templates
        self.values = ValueScriptBuilder(templates)

    def rule_block(
        self,
        element: ElementDescriptor | Sequence[ElementDescriptor],
        element_name: str,
        application: RuleApplication,
        check: ClientCheck,
    ) -> str:
        """Build the emitted block for one rule application.

        Args:
            element: The element, or the elements of a multi-element rule
            element_name: Name of the (first) element in the live form
            application: Rule options (message, group, reset, howmany)
            check: The rule's client-side template

        Returns:
            Block text, meant for embedding in the validation function
        """
        t = self.templates
        if isinstance(element, ElementDescriptor):
            value, reset = self.values.element(element, element_name, application.reset)
        else:
            value, reset = self.values.elements(element, application.reset)

        # Failures are reported once per key: the group if any, else the element
        field = application.group or element_name

        if application.howmany is None:
            body = ""
            failed = check.bind(t.scalar_var)
        else:
            body = t.count_passing.substitute(test=check.bind(t.item_var))
            failed = t.too_few_passing.substitute(howmany=application.howmany)

        return (
            value
            + "\n"
            + check.prefix
            + body
            + t.failure.substitute(
                failed=failed,
                field=field,
                message=application.message,
                reset=reset,
            )
        )

    def validation_function(
        self,
        form_id: str,
        blocks: Sequence[str],
        prefix: str = DEFAULT_PREFIX,
        postfix: str = DEFAULT_POSTFIX,
    ) -> str:
        """Wrap rule blocks in the form's ``validate_<form_id>(frm)`` function.

        Returns "" when there are no blocks.
        """
        if not blocks:
            return ""
        t = self.templates
        return t.function.substitute(
            form_id=form_id,
            blocks=t.block_separator.join(blocks),
            prefix=t.escape(prefix),
            postfix=t.escape(postfix),
        )


def escape_js(text: str) -> str:
    """Escape ``text`` for a single-quoted JavaScript string literal."""
    return JAVASCRIPT.escape(text)
