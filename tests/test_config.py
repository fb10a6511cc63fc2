"""Tests for rule configuration loading."""

import pytest

from formrule import RuleConfig, RuleKind, RuleRegistry
from formrule.config import RuleBinding
from formrule.errors import RuleConfigError
from formrule.loading import import_object
from formrule.rules import RequiredRule


class TestDefault:
    def test_builtin_bindings(self):
        config = RuleConfig.default()
        assert config.bindings["required"] == RuleBinding(RuleKind.CLASS, RequiredRule)
        assert config.bindings["nonzero"].kind == RuleKind.REGEX


class TestFromDict:
    def test_regex(self):
        config = RuleConfig.from_dict({"rules": {"zipcode": {"type": "regex", "pattern": "^\\d{5}$"}}})
        assert config.bindings["zipcode"] == RuleBinding(RuleKind.REGEX, "^\\d{5}$")
        assert "required" in config.bindings

    def test_without_defaults(self):
        config = RuleConfig.from_dict(
            {"rules": {"zipcode": {"type": "regex", "pattern": "^\\d{5}$"}}},
            include_defaults=False,
        )
        assert list(config.bindings) == ["zipcode"]

    def test_callback_is_imported(self):
        config = RuleConfig.from_dict(
            {"rules": {"is_dir": {"type": "callback", "callback": "os.path:isdir"}}}
        )
        binding = config.bindings["is_dir"]
        assert binding.kind == RuleKind.CALLBACK
        assert binding.target is import_object("os.path.isdir")

    def test_class_is_kept_as_path(self):
        config = RuleConfig.from_dict(
            {"rules": {"mandatory": {"type": "class", "class": "formrule.rules:RequiredRule"}}}
        )
        assert config.bindings["mandatory"].target == "formrule.rules:RequiredRule"

    def test_type_is_case_insensitive(self):
        config = RuleConfig.from_dict({"rules": {"z": {"type": "Regex", "pattern": "z"}}})
        assert config.bindings["z"].kind == RuleKind.REGEX

    @pytest.mark.parametrize(
        "definition, message",
        [
            ("regex", "needs a mapping"),
            ({"pattern": "x"}, "needs a mapping"),
            ({"type": "lambda"}, "unknown type"),
            ({"type": "regex"}, "needs a 'pattern'"),
            ({"type": "callback"}, "needs a 'callback'"),
            ({"type": "callback", "callback": "no_such_module:check"}, "Cannot load callback"),
            ({"type": "class"}, "needs a 'class'"),
            ({"type": "custom"}, "cannot be configured"),
        ],
    )
    def test_invalid_definitions(self, definition, message):
        with pytest.raises(RuleConfigError, match=message):
            RuleConfig.from_dict({"rules": {"bad": definition}})

    def test_rules_must_be_mapping(self):
        with pytest.raises(RuleConfigError):
            RuleConfig.from_dict({"rules": ["zipcode"]})

    def test_empty(self):
        assert RuleConfig.from_dict({}).bindings == RuleConfig.default().bindings


class TestFromYaml:
    def test_load(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text(
            "rules:\n"
            "  zipcode: {type: regex, pattern: '^\\d{5}$'}\n"
            "  mandatory: {type: class, class: 'formrule.rules.builtin:RequiredRule'}\n"
        )
        registry = RuleRegistry(RuleConfig.from_yaml(path))
        assert registry.validate("zipcode", "12345") is True
        assert registry.validate("zipcode", "1234") is False
        assert registry.validate("mandatory", "") is False

    def test_empty_file(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("")
        assert RuleConfig.from_yaml(path).bindings == RuleConfig.default().bindings

    def test_missing_file(self, tmp_path):
        with pytest.raises(RuleConfigError, match="Cannot read"):
            RuleConfig.from_yaml(tmp_path / "missing.yaml")

    def test_invalid_yaml(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("rules: {zipcode: [\n")
        with pytest.raises(RuleConfigError, match="Invalid YAML"):
            RuleConfig.from_yaml(path)

    def test_not_a_mapping(self, tmp_path):
        path = tmp_path / "rules.yaml"
        path.write_text("- zipcode\n")
        with pytest.raises(RuleConfigError, match="must contain a mapping"):
            RuleConfig.from_yaml(path)


class TestFromEnv:
    def test_without_env(self):
        assert RuleConfig.from_env().bindings == RuleConfig.default().bindings

    def test_with_env(self, tmp_path, monkeypatch):
        path = tmp_path / "rules.yaml"
        path.write_text("rules:\n  code: {type: regex, pattern: '^[A-Z]+$'}\n")
        monkeypatch.setenv("FORMRULE_CONFIG", str(path))
        assert "code" in RuleConfig.from_env().bindings


class TestImportObject:
    def test_colon_path(self):
        assert import_object("formrule.rules.builtin:RequiredRule") is RequiredRule

    def test_dotted_path(self):
        assert import_object("formrule.rules.builtin.RequiredRule") is RequiredRule

    def test_missing_attribute(self):
        with pytest.raises(ImportError, match="no attribute"):
            import_object("formrule.rules.builtin:Nope")

    def test_not_a_path(self):
        with pytest.raises(ImportError):
            import_object("formrule")
