"""Element descriptors read by the client-side code generator.

A descriptor is the structural view of one form control (or a composite
group of controls). The form layer builds them; formrule only reads them to
decide how a control's live value is extracted and reset in the browser.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from enum import Enum
from typing import Any

from formrule.errors import MalformedDescriptorError


class ElementKind(str, Enum):
    """The closed set of control shapes the code generator understands."""

    FIELD = "field"
    CHECKBOX = "checkbox"
    ADVCHECKBOX = "advcheckbox"  # three visual states, two values
    RADIO = "radio"
    SELECT = "select"
    AUTOCOMPLETE = "autocomplete"  # select rendered as an autocomplete widget
    GROUP = "group"

    @property
    def is_select(self) -> bool:
        return self in (ElementKind.SELECT, ElementKind.AUTOCOMPLETE)


@dataclass(frozen=True)
class ElementDescriptor:
    """One form control as seen by the code generator.

    Attributes:
        name: Name used to address the control in ``frm.elements``
        kind: Control shape
        multiple: Multi-value select (select family only)
        children: Child descriptors (groups only)
        child_names: Qualified name of each child, in the same order
        frozen: Frozen controls get no client-side validation
    """

    name: str
    kind: ElementKind = ElementKind.FIELD
    multiple: bool = False
    children: tuple[ElementDescriptor, ...] = ()
    child_names: tuple[str, ...] = ()
    frozen: bool = False

    def __post_init__(self) -> None:
        try:
            kind = ElementKind(self.kind)
        except ValueError:
            raise MalformedDescriptorError(
                f"Element '{self.name}' has unknown kind '{self.kind}'"
            ) from None
        object.__setattr__(self, "kind", kind)
        object.__setattr__(self, "children", tuple(self.children))
        object.__setattr__(self, "child_names", tuple(self.child_names))

        if not self.name:
            raise MalformedDescriptorError("Element descriptors need a name")
        if self.multiple and not kind.is_select:
            raise MalformedDescriptorError(
                f"Element '{self.name}' of kind '{kind.value}' cannot be multiple; "
                "only select elements hold several values"
            )
        if kind == ElementKind.GROUP:
            if not self.children:
                raise MalformedDescriptorError(f"Group '{self.name}' has no children")
            if len(self.child_names) != len(self.children):
                raise MalformedDescriptorError(
                    f"Group '{self.name}' has {len(self.children)} children "
                    f"but {len(self.child_names)} qualified names"
                )
        elif self.children or self.child_names:
            raise MalformedDescriptorError(
                f"Element '{self.name}' of kind '{kind.value}' cannot have children"
            )

    @classmethod
    def group(
        cls,
        name: str,
        children: Iterable[ElementDescriptor],
        append_name: bool = True,
        frozen: bool = False,
    ) -> ElementDescriptor:
        """Build a group descriptor, computing the children's qualified names.

        With ``append_name`` a child ``b`` of group ``a`` is addressed as
        ``a[b]``; otherwise it keeps its own name.
        """
        children = tuple(children)
        names = []
        for child in children:
            names.append(f"{name}[{child.name}]" if append_name else child.name)
        return cls(
            name=name,
            kind=ElementKind.GROUP,
            children=children,
            child_names=tuple(names),
            frozen=frozen,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ElementDescriptor:
        """Create a descriptor from a YAML/JSON dict."""
        if "name" not in data:
            raise MalformedDescriptorError(f"Element definition without a name: {data!r}")
        kind = data.get("kind", ElementKind.FIELD.value)
        if kind == ElementKind.GROUP.value:
            return cls.group(
                data["name"],
                [cls.from_dict(child) for child in data.get("children", [])],
                append_name=data.get("appendName", True),
                frozen=data.get("frozen", False),
            )
        return cls(
            name=data["name"],
            kind=kind,
            multiple=data.get("multiple", False),
            frozen=data.get("frozen", False),
        )

    @property
    def group_type(self) -> ElementKind | None:
        """The children's kind when a group is homogeneous, else None."""
        kinds = {child.kind for child in self.children}
        return kinds.pop() if len(kinds) == 1 else None

    def qualified_name(self, key: int | str) -> str:
        """Qualified name of a child, addressed by position or own name."""
        return self.child(key)[0]

    def child(self, key: int | str) -> tuple[str, ElementDescriptor]:
        """Return ``(qualified_name, descriptor)`` for a child.

        Raises:
            KeyError: If the group has no such child
        """
        if isinstance(key, int):
            if 0 <= key < len(self.children):
                return self.child_names[key], self.children[key]
        else:
            for qualified, child in zip(self.child_names, self.children):
                if key in (child.name, qualified):
                    return qualified, child
        raise KeyError(f"Group '{self.name}' has no child {key!r}")
