"""Named templates for the emitted client-side code.

Everything that depends on the grammar of the target language lives here.
The value and assembly builders only choose a template and fill it in, so
another target can be supported by supplying another ``ScriptTemplates``.

Placeholders use ``string.Template`` syntax (``${name}``), which leaves the
braces of the emitted JavaScript alone. Substituted values are never
rescanned for placeholders.

Ambient names the emitted blocks rely on, defined by the enclosing
function: ``frm`` (the form), ``value``, ``errFlag``, ``_qfGroups`` and
``_qfMsg``.
"""

from string import Template


class ScriptTemplates:
    """JavaScript templates (the default target)."""

    # -------------------------------------------------------------------------
    # Value extraction, per element kind. ${index} is "" or "[n]".
    # -------------------------------------------------------------------------

    group_members = Template("  _qfGroups['${name}'] = {${members}};\n")
    group_member = Template("'${name}': true")
    group_member_separator = ", "

    group_value = Template(
        "  value${index} = new Array();\n"
        "  var valueIdx = 0;\n"
        "  for (var i = 0; i < frm.elements.length; i++) {\n"
        "    var _element = frm.elements[i];\n"
        "    if (_element.name in _qfGroups['${name}']) {\n"
        "      switch (_element.type) {\n"
        "        case 'checkbox':\n"
        "        case 'radio':\n"
        "          if (_element.checked) {\n"
        "            value${index}[valueIdx++] = _element.value;\n"
        "          }\n"
        "          break;\n"
        "        case 'select-one':\n"
        "          if (-1 != _element.selectedIndex) {\n"
        "            value${index}[valueIdx++] = _element.options[_element.selectedIndex].value;\n"
        "          }\n"
        "          break;\n"
        "        case 'select-multiple':\n"
        "          var tmpVal = new Array();\n"
        "          var tmpIdx = 0;\n"
        "          for (var j = 0; j < _element.options.length; j++) {\n"
        "            if (_element.options[j].selected) {\n"
        "              tmpVal[tmpIdx++] = _element.options[j].value;\n"
        "            }\n"
        "          }\n"
        "          if (tmpIdx > 0) {\n"
        "            value${index}[valueIdx++] = tmpVal;\n"
        "          }\n"
        "          break;\n"
        "        default:\n"
        "          value${index}[valueIdx++] = _element.value;\n"
        "      }\n"
        "    }\n"
        "  }\n"
    )

    select_multiple_value = Template(
        "  value${index} = new Array();\n"
        "  var valueIdx = 0;\n"
        "  for (var i = 0; i < frm.elements['${name}'].options.length; i++) {\n"
        "    if (frm.elements['${name}'].options[i].selected) {\n"
        "      value${index}[valueIdx++] = frm.elements['${name}'].options[i].value;\n"
        "    }\n"
        "  }\n"
    )

    select_value = Template(
        "  value${index} = frm.elements['${name}'].selectedIndex == -1? '': "
        "frm.elements['${name}'].options[frm.elements['${name}'].selectedIndex].value;\n"
    )

    advcheckbox_value = Template(
        "  value${index} = frm.elements['${name}'][1].checked? "
        "frm.elements['${name}'][1].value: frm.elements['${name}'][0].value;\n"
    )

    checkbox_value = Template("  value${index} = frm.elements['${name}'].checked? '1': '';\n")

    radio_value = Template(
        "  value${index} = '';\n"
        "  var els = 'length' in frm.elements['${name}']? "
        "frm.elements['${name}']: [ frm.elements['${name}'] ];\n"
        "  for (var i = 0; i < els.length; i++) {\n"
        "    if (els[i].checked) {\n"
        "      value${index} = els[i].value;\n"
        "    }\n"
        "  }\n"
    )

    field_value = Template("  value${index} = frm.elements['${name}'].value;\n")

    # Several elements validated together fill value[0], value[1], ...
    array_value = "  value = new Array();\n"

    # -------------------------------------------------------------------------
    # Value reset, run inside the failure branch
    # -------------------------------------------------------------------------

    reset_field_ref = Template("    var field = frm.elements['${name}'];\n")

    group_reset = Template(
        "    for (var i = 0; i < frm.elements.length; i++) {\n"
        "      var _element = frm.elements[i];\n"
        "      if (_element.name in _qfGroups['${name}']) {\n"
        "        switch (_element.type) {\n"
        "          case 'checkbox':\n"
        "          case 'radio':\n"
        "            _element.checked = _element.defaultChecked;\n"
        "            break;\n"
        "          case 'select-one':\n"
        "          case 'select-multiple':\n"
        "            for (var j = 0; j < _element.options.length; j++) {\n"
        "              _element.options[j].selected = _element.options[j].defaultSelected;\n"
        "            }\n"
        "            break;\n"
        "          default:\n"
        "            _element.value = _element.defaultValue;\n"
        "        }\n"
        "      }\n"
        "    }\n"
    )

    select_reset = (
        "    for (var i = 0; i < field.options.length; i++) {\n"
        "      field.options[i].selected = field.options[i].defaultSelected;\n"
        "    }\n"
    )

    advcheckbox_reset = "    field[1].checked = field[1].defaultChecked;\n"

    checkbox_reset = "    field.checked = field.defaultChecked;\n"

    radio_reset = (
        "    for (var i = 0; i < field.length; i++) {\n"
        "      field[i].checked = field[i].defaultChecked;\n"
        "    }\n"
    )

    field_reset = "    field.value = field.defaultValue;\n"

    # Suffix of the control name of a multi-value select
    multiple_suffix = "[]"

    # -------------------------------------------------------------------------
    # Rule block assembly
    # -------------------------------------------------------------------------

    scalar_var = "value"
    item_var = "value[i]"

    failure = Template(
        "  if (${failed} && !errFlag['${field}']) {\n"
        "    errFlag['${field}'] = true;\n"
        "    _qfMsg = _qfMsg + '\\n - ${message}';\n"
        "${reset}"
        "  }\n"
    )

    count_passing = Template(
        "  var res = 0;\n"
        "  for (var i = 0; i < value.length; i++) {\n"
        "    if (!(${test})) {\n"
        "      res++;\n"
        "    }\n"
        "  }\n"
    )

    too_few_passing = Template("res < ${howmany}")

    # -------------------------------------------------------------------------
    # Enclosing validation function
    # -------------------------------------------------------------------------

    function = Template(
        "\n<script type=\"text/javascript\">\n"
        "//<![CDATA[\n"
        "function validate_${form_id}(frm) {\n"
        "  var value = '';\n"
        "  var errFlag = new Array();\n"
        "  var _qfGroups = {};\n"
        "  _qfMsg = '';\n"
        "\n"
        "${blocks}"
        "\n"
        "  if (_qfMsg != '') {\n"
        "    _qfMsg = '${prefix}' + _qfMsg;\n"
        "    _qfMsg = _qfMsg + '\\n${postfix}';\n"
        "    alert(_qfMsg);\n"
        "    return false;\n"
        "  }\n"
        "  return true;\n"
        "}\n"
        "//]]>\n"
        "</script>"
    )
    block_separator = "\n"

    # Characters escaped inside single-quoted string literals
    string_escapes = {
        "\r": "\\r",
        "\n": "\\n",
        "\t": "\\t",
        "'": "\\'",
        '"': '\\"',
        "\\": "\\\\",
    }

    def escape(self, text: str) -> str:
        """Escape ``text`` for use inside a string literal."""
        return "".join(self.string_escapes.get(char, char) for char in text)


JAVASCRIPT = ScriptTemplates()
