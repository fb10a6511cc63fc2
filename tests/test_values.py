"""Tests for client-side value extraction and reset fragments."""

import pytest

from formrule import ElementDescriptor
from formrule.codegen import ValueScriptBuilder


@pytest.fixture
def builder():
    return ValueScriptBuilder()


class TestField:
    def test_value(self, builder):
        value, reset = builder.element(ElementDescriptor("city"), "city")
        assert value == "  value = frm.elements['city'].value;\n"
        assert reset == ""

    def test_reset(self, builder):
        _, reset = builder.element(ElementDescriptor("city"), "city", reset=True)
        assert reset == (
            "    var field = frm.elements['city'];\n"
            "    field.value = field.defaultValue;\n"
        )

    def test_index(self, builder):
        value, _ = builder.element(ElementDescriptor("city"), "city", index=2)
        assert value == "  value[2] = frm.elements['city'].value;\n"


class TestCheckbox:
    def test_value(self, builder):
        value, _ = builder.element(ElementDescriptor("agree", kind="checkbox"), "agree")
        assert value == "  value = frm.elements['agree'].checked? '1': '';\n"

    def test_reset(self, builder):
        _, reset = builder.element(
            ElementDescriptor("agree", kind="checkbox"), "agree", reset=True
        )
        assert reset.endswith("    field.checked = field.defaultChecked;\n")


class TestAdvCheckbox:
    def test_value_reads_checked_box_or_hidden_default(self, builder):
        value, _ = builder.element(ElementDescriptor("news", kind="advcheckbox"), "news")
        assert value == (
            "  value = frm.elements['news'][1].checked? "
            "frm.elements['news'][1].value: frm.elements['news'][0].value;\n"
        )

    def test_reset(self, builder):
        _, reset = builder.element(
            ElementDescriptor("news", kind="advcheckbox"), "news", reset=True
        )
        assert "field[1].checked = field[1].defaultChecked;" in reset


class TestRadio:
    def test_value(self, builder):
        value, _ = builder.element(ElementDescriptor("size", kind="radio"), "size")
        assert value.startswith("  value = '';\n")
        assert "frm.elements['size']: [ frm.elements['size'] ];" in value
        assert "      value = els[i].value;\n" in value

    def test_reset(self, builder):
        _, reset = builder.element(ElementDescriptor("size", kind="radio"), "size", reset=True)
        assert "field[i].checked = field[i].defaultChecked;" in reset


class TestSelect:
    def test_single(self, builder):
        value, _ = builder.element(ElementDescriptor("country", kind="select"), "country")
        assert value.startswith("  value = frm.elements['country'].selectedIndex == -1? '': ")

    def test_autocomplete_is_a_select(self, builder):
        select, _ = builder.element(ElementDescriptor("c", kind="select"), "c")
        auto, _ = builder.element(ElementDescriptor("c", kind="autocomplete"), "c")
        assert select == auto

    def test_multiple_uses_array_name(self, builder):
        value, reset = builder.element(
            ElementDescriptor("tags", kind="select", multiple=True), "tags", reset=True
        )
        assert "frm.elements['tags[]'].options.length" in value
        assert "value[valueIdx++] = frm.elements['tags[]'].options[i].value;" in value
        assert reset.startswith("    var field = frm.elements['tags[]'];\n")
        assert "field.options[i].selected = field.options[i].defaultSelected;" in reset


class TestGroup:
    def test_membership_lists_exactly_the_qualified_children(self, builder):
        group = ElementDescriptor.group(
            "phone", [ElementDescriptor("area"), ElementDescriptor("number")]
        )
        value, _ = builder.element(group, "phone")
        assert value.startswith(
            "  _qfGroups['phone'] = {'phone[area]': true, 'phone[number]': true};\n"
        )
        assert "if (_element.name in _qfGroups['phone'])" in value

    def test_multiple_select_child_gets_array_suffix(self, builder):
        group = ElementDescriptor.group(
            "prefs",
            [
                ElementDescriptor("tags", kind="select", multiple=True),
                ElementDescriptor("colour", kind="select"),
            ],
        )
        value, _ = builder.element(group, "prefs")
        assert "{'prefs[tags][]': true, 'prefs[colour]': true}" in value

    def test_reset_walks_members(self, builder):
        group = ElementDescriptor.group("phone", [ElementDescriptor("area")])
        _, reset = builder.element(group, "phone", reset=True)
        assert "var field" not in reset
        assert "if (_element.name in _qfGroups['phone'])" in reset
        assert "_element.value = _element.defaultValue;" in reset

    def test_no_reset(self, builder):
        group = ElementDescriptor.group("phone", [ElementDescriptor("area")])
        _, reset = builder.element(group, "phone")
        assert reset == ""


class TestElements:
    def test_values_fill_array_in_order(self, builder):
        value, reset = builder.elements(
            [ElementDescriptor("password"), ElementDescriptor("confirm")]
        )
        assert value == (
            "  value = new Array();\n"
            "\n  value[0] = frm.elements['password'].value;\n"
            "\n  value[1] = frm.elements['confirm'].value;\n"
        )
        assert reset == ""

    def test_resets_concatenated(self, builder):
        _, reset = builder.elements(
            [ElementDescriptor("password"), ElementDescriptor("confirm")], reset=True
        )
        assert reset.index("frm.elements['password']") < reset.index("frm.elements['confirm']")
