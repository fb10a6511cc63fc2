"""Client-side value extraction and reset code.

For every element shape the builder emits two fragments:
- extraction: reads the control's current value(s) from ``frm`` into ``value``
- reset: restores the control's default value(s), run when validation fails
"""

from collections.abc import Callable, Sequence

from formrule.codegen.templates import JAVASCRIPT, ScriptTemplates
from formrule.elements import ElementDescriptor, ElementKind
from formrule.errors import MalformedDescriptorError

ValueScript = tuple[str, str]


class ValueScriptBuilder:
    """Builds ``(extraction, reset)`` fragment pairs for element descriptors.

    Dispatch is a table over every ``ElementKind``; a kind without an entry
    is rejected when the builder is created.
    """

    def __init__(self, templates: ScriptTemplates = JAVASCRIPT):
        self.templates = templates
        self._builders: dict[ElementKind, Callable[[ElementDescriptor, str, bool, str], ValueScript]] = {
            ElementKind.GROUP: self._group,
            ElementKind.SELECT: self._select,
            ElementKind.AUTOCOMPLETE: self._select,
            ElementKind.ADVCHECKBOX: self._advcheckbox,
            ElementKind.CHECKBOX: self._checkbox,
            ElementKind.RADIO: self._radio,
            ElementKind.FIELD: self._field,
        }
        missing = set(ElementKind) - set(self._builders)
        if missing:
            raise MalformedDescriptorError(
                f"No value script for element kinds: {sorted(k.value for k in missing)}"
            )

    def element(
        self,
        element: ElementDescriptor,
        element_name: str,
        reset: bool = False,
        index: int | None = None,
    ) -> ValueScript:
        """Fragments for one element.

        Args:
            element: The element descriptor
            element_name: Name addressing the element in the live form
                (the qualified name for group children)
            reset: Whether to build the reset fragment (else it is "")
            index: Position in the value array for multi-element rules
        """
        builder = self._builders.get(element.kind)
        if builder is None:
            raise MalformedDescriptorError(
                f"Element '{element_name}' has unsupported kind '{element.kind}'"
            )
        js_index = "" if index is None else f"[{index}]"
        return builder(element, element_name, reset, js_index)

    def elements(self, elements: Sequence[ElementDescriptor], reset: bool = False) -> ValueScript:
        """Fragments for several elements read into one ``value`` array, in order."""
        value = self.templates.array_value
        reset_script = ""
        for index, element in enumerate(elements):
            element_value, element_reset = self.element(element, element.name, reset, index)
            value += "\n" + element_value
            reset_script += element_reset
        return value, reset_script

    # -------------------------------------------------------------------------
    # Per-kind builders
    # -------------------------------------------------------------------------

    def _field_ref(self, name: str) -> str:
        return self.templates.reset_field_ref.substitute(name=name)

    def _group(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        members = []
        for qualified, child in zip(element.child_names, element.children):
            if child.kind.is_select and child.multiple:
                qualified += t.multiple_suffix
            members.append(t.group_member.substitute(name=qualified))
        value = t.group_members.substitute(
            name=name, members=t.group_member_separator.join(members)
        )
        value += t.group_value.substitute(name=name, index=index)
        # Groups are reset through the membership loop, not a single control
        reset_script = t.group_reset.substitute(name=name) if reset else ""
        return value, reset_script

    def _select(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        if element.multiple:
            name += t.multiple_suffix
            value = t.select_multiple_value.substitute(name=name, index=index)
        else:
            value = t.select_value.substitute(name=name, index=index)
        reset_script = self._field_ref(name) + t.select_reset if reset else ""
        return value, reset_script

    def _advcheckbox(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        value = t.advcheckbox_value.substitute(name=name, index=index)
        reset_script = self._field_ref(name) + t.advcheckbox_reset if reset else ""
        return value, reset_script

    def _checkbox(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        value = t.checkbox_value.substitute(name=name, index=index)
        reset_script = self._field_ref(name) + t.checkbox_reset if reset else ""
        return value, reset_script

    def _radio(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        value = t.radio_value.substitute(name=name, index=index)
        reset_script = self._field_ref(name) + t.radio_reset if reset else ""
        return value, reset_script

    def _field(self, element: ElementDescriptor, name: str, reset: bool, index: str) -> ValueScript:
        t = self.templates
        value = t.field_value.substitute(name=name, index=index)
        reset_script = self._field_ref(name) + t.field_reset if reset else ""
        return value, reset_script
