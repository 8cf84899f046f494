"""
Tests for EslintConfigEditor and the ConfigList it wraps.

Covers decoding of flat config entries, rule and spread editing, pattern
matching, and the layout of synthesized entries.
"""

import pytest

from flatmorph.exceptions import PreconditionError, StructuralError
from flatmorph.mutation import UNDEFINED, DynamicImport, EslintConfigEditor, Opaque, patterns_equal
from flatmorph.parser import SourceDocument

SCENARIO_CONFIG = "export default [{files:['**/*.ts'], rules:{'no-console':'error'}}];"


def _editor(text: str, path: str = "eslint.config.mjs") -> EslintConfigEditor:
    return EslintConfigEditor(SourceDocument(text, path=path))


class TestStructure:
    """Test locating the exported config array."""

    def test_missing_export_default(self):
        """Test files without export default are rejected."""
        with pytest.raises(StructuralError) as exc_info:
            _editor("const config = [];\n")
        assert "No export default found" in str(exc_info.value)
        assert exc_info.value.file_path == "eslint.config.mjs"

    def test_export_default_not_array(self):
        """Test non-array defaults are rejected."""
        with pytest.raises(StructuralError, match="not an array literal"):
            _editor("export default { rules: {} };\n")

    def test_satisfies_wrapper(self):
        """Test `export default [...] satisfies T` is accepted."""
        editor = _editor("export default [{ files: ['a.ts'] }] satisfies Linter.Config[];\n", "eslint.config.ts")
        assert editor.get_configs() == [{"files": ["a.ts"]}]

    def test_non_object_elements_are_skipped(self, multiline_config):
        """Test spread elements of the array are not entries."""
        configs = _editor(multiline_config).get_configs()
        assert len(configs) == 1
        assert configs[0]["files"] == ["**/*.ts"]


class TestDecoding:
    """Test entries decode to plain Python values."""

    def test_full_entry(self):
        """Test each property kind decodes as expected."""
        editor = _editor(
            "export default [\n"
            "  {\n"
            "    files: ['**/*.ts', \"**/*.tsx\"],\n"
            "    ignores: ['dist/**'],\n"
            "    plugins: { foo: await import('eslint-plugin-foo') },\n"
            "    languageOptions: { parser: tsParser, ecmaVersion: 2022 },\n"
            "    rules: { ...base.rules, 'max-len': ['error', { code: 120 }] },\n"
            "    ...shared,\n"
            "  },\n"
            "];\n"
        )
        (config,) = editor.get_configs()
        assert config["files"] == ["**/*.ts", "**/*.tsx"]
        assert config["ignores"] == ["dist/**"]
        assert config["plugins"] == {"foo": DynamicImport("eslint-plugin-foo")}
        assert config["languageOptions"] == {"parser": Opaque("tsParser"), "ecmaVersion": 2022}
        assert config["rules"] == {"...base.rules": None, "max-len": ["error", {"code": 120}]}
        assert config["...shared"] is UNDEFINED

    def test_spread_placeholder_position(self):
        """Test rule spreads keep their place relative to named rules."""
        editor = _editor("export default [{ files: ['a'], rules: { 'y': 1, ...base, 'x': 'error' } }];\n")
        rules = editor.get_rules_for_pattern(["a"])
        assert list(rules) == ["y", "...base", "x"]
        assert rules["x"] == "error"

    def test_non_literal_files_omitted(self):
        """Test a files value that is not an array literal is left out."""
        editor = _editor("export default [{ files: patterns, rules: {} }];\n")
        assert editor.get_configs() == [{"rules": {}}]


class TestAddRule:
    """Test add_rule and its creation defaults."""

    def test_scenario_add_to_existing(self):
        """Test adding a rule to an existing entry."""
        editor = _editor(SCENARIO_CONFIG)
        editor.add_rule(["**/*.ts"], "no-debugger", "warn")

        configs = editor.get_configs()
        assert len(configs) == 1
        assert configs[0]["rules"] == {"no-console": "error", "no-debugger": "warn"}
        assert editor.get_content() == (
            "export default [{files:['**/*.ts'], rules:{'no-console':'error', 'no-debugger': 'warn'}}];"
        )

    def test_creates_entry(self):
        """Test a missing entry is created with the rule."""
        editor = _editor("export default [];\n")
        editor.add_rule(["**/*.js"], "semi", ["error", "always"])

        assert editor.get_configs() == [{"files": ["**/*.js"], "rules": {"semi": ["error", "always"]}}]
        assert editor.get_content() == (
            "export default [\n"
            "  {\n"
            "    files: ['**/*.js'],\n"
            "    rules: { 'semi': ['error', 'always'] }\n"
            "  }\n"
            "];\n"
        )

    def test_creates_rules_property(self):
        """Test an entry without rules gets a rules property."""
        editor = _editor("export default [{ files: ['a'] }];\n")
        editor.add_rule(["a"], "eqeqeq", "error")
        assert editor.get_rules_for_pattern(["a"]) == {"eqeqeq": "error"}

    def test_multiline_layout(self, multiline_config):
        """Test appended rules follow the surrounding indentation."""
        editor = _editor(multiline_config)
        editor.add_rule(["**/*.ts"], "eqeqeq", ["error", "always"])
        assert "      'no-debugger': 'warn',\n      'eqeqeq': ['error', 'always'],\n    }," in editor.get_content()
        assert "// project rules" in editor.get_content()

    def test_duplicate_names_are_appended(self):
        """Test add_rule does not deduplicate an existing rule name."""
        editor = _editor(SCENARIO_CONFIG)
        editor.add_rule(["**/*.ts"], "no-console", "off")
        assert editor.get_content().count("'no-console'") == 2
        # The mapping keeps the last occurrence
        assert editor.get_rule(["**/*.ts"], "no-console") == "off"

    def test_non_object_rules_left_alone(self):
        """Test rules given as an expression are not edited."""
        text = "export default [{ files: ['a'], rules: baseRules }];\n"
        editor = _editor(text)
        editor.add_rule(["a"], "eqeqeq", "error")
        assert editor.get_content() == text


class TestUpdateAndRemoveRule:
    """Test in-place updates and removals."""

    def test_update_in_place(self):
        """Test updating keeps the rule's position and key style."""
        editor = _editor("export default [{ files: ['a'], rules: { \"semi\": 'off', 'eqeqeq': 'warn' } }];\n")
        editor.update_rule(["a"], "semi", ["error", "never"])
        assert editor.get_content() == (
            "export default [{ files: ['a'], rules: { \"semi\": ['error', 'never'], 'eqeqeq': 'warn' } }];\n"
        )

    def test_update_missing_rule_appends(self):
        """Test updating an absent rule adds it."""
        editor = _editor(SCENARIO_CONFIG)
        editor.update_rule(["**/*.ts"], "curly", "error")
        assert editor.has_rule(["**/*.ts"], "curly")

    def test_update_missing_entry_creates_it(self):
        """Test updating a rule for unknown files creates the entry."""
        editor = _editor("export default [];")
        editor.update_rule(["x"], "curly", "error")
        assert editor.get_configs() == [{"files": ["x"], "rules": {"curly": "error"}}]

    def test_ensure_rule_idempotent(self):
        """Test ensure_rule twice equals ensure_rule once."""
        once = _editor(SCENARIO_CONFIG)
        once.ensure_rule(["**/*.ts"], "curly", ["error", "all"])
        twice = _editor(SCENARIO_CONFIG)
        twice.ensure_rule(["**/*.ts"], "curly", ["error", "all"])
        twice.ensure_rule(["**/*.ts"], "curly", ["error", "all"])

        assert once.get_rules_for_pattern(["**/*.ts"]) == twice.get_rules_for_pattern(["**/*.ts"])
        assert once.get_content() == twice.get_content()

    def test_remove_rule(self, multiline_config):
        """Test removing a rule removes its whole line."""
        editor = _editor(multiline_config)
        editor.remove_rule(["**/*.ts"], "no-console")
        assert "no-console" not in editor.get_content()
        assert editor.get_content() == multiline_config.replace("      'no-console': 'error',\n", "")

    def test_remove_missing_is_noop(self):
        """Test removals never fail on missing targets."""
        editor = _editor(SCENARIO_CONFIG)
        editor.remove_rule(["nope"], "no-console")
        editor.remove_rule(["**/*.ts"], "nope")
        assert editor.get_content() == SCENARIO_CONFIG

    def test_opaque_values_survive_unrelated_edits(self):
        """Test non-literal rule values keep their exact source text."""
        text = "export default [{ files: ['a'], rules: { 'x': makeRule( 'a' ,1 ), 'y': 'error' } }];\n"
        editor = _editor(text)
        editor.add_rule(["a"], "z", "warn")

        assert "'x': makeRule( 'a' ,1 )" in editor.get_content()
        assert editor.get_rule(["a"], "x") == Opaque("makeRule( 'a' ,1 )")


class TestPatternMatching:
    """Test entries are matched by their files as a set."""

    def test_patterns_equal(self):
        """Test order-independent comparison."""
        assert patterns_equal(["a", "b"], ["b", "a"])
        assert not patterns_equal(["a"], ["a", "b"])

    def test_find_by_patterns(self, multiline_config):
        """Test entry lookup returns the decoded entry or None."""
        configs = _editor(multiline_config).configs
        assert configs.find(["**/*.ts"])["rules"]["no-debugger"] == "warn"
        assert configs.find_index(["**/*.ts"]) == 0
        assert configs.find(["**/*.js"]) is None

    def test_upsert_order_independent(self):
        """Test upserting with reordered patterns updates one entry."""
        editor = _editor("export default [];\n")
        editor.add_or_update_config({"files": ["a", "b"], "rules": {"x": 1}})
        editor.add_or_update_config({"files": ["b", "a"], "rules": {"x": 2}})

        configs = editor.get_configs()
        assert len(configs) == 1
        assert configs[0]["rules"]["x"] == 2
        assert configs[0]["files"] == ["a", "b"]

    def test_duplicate_pattern_sets_first_wins(self):
        """Test the first of two entries with equal patterns is edited."""
        editor = _editor("export default [\n  { files: ['a'], rules: {} },\n  { files: ['a'], rules: {} },\n];\n")
        editor.add_rule(["a"], "eqeqeq", "error")

        first, second = editor.get_configs()
        assert first["rules"] == {"eqeqeq": "error"}
        assert second["rules"] == {}

    def test_remove_config(self, multiline_config):
        """Test removing an entry keeps the rest of the array."""
        editor = _editor(multiline_config)
        editor.remove_config(["**/*.ts"])
        assert editor.get_configs() == []
        assert "...js.configs.recommended," in editor.get_content()

    def test_upsert_merges_fields(self):
        """Test upsert patches fields and spreads into an existing entry."""
        editor = _editor("export default [{ files: ['a'], rules: { 'x': 1 } }];\n")
        editor.add_or_update_config({
            "files": ["a"],
            "ignores": ["dist"],
            "...shared": UNDEFINED,
            "rules": {"...base": None, "y": "warn"},
        })
        (config,) = editor.get_configs()
        assert config["ignores"] == ["dist"]
        assert config["...shared"] is UNDEFINED
        assert config["rules"] == {"x": 1, "...base": None, "y": "warn"}


class TestSpreads:
    """Test spread directives in entries and rules."""

    def test_add_and_remove_rules_spread(self):
        """Test rule spreads are appended and removed by expression."""
        editor = _editor(SCENARIO_CONFIG)
        editor.add_spread_to_rules(["**/*.ts"], "tseslint.configs.recommended.rules")
        assert "...tseslint.configs.recommended.rules" in editor.get_content()
        assert "...tseslint.configs.recommended.rules" in editor.get_rules_for_pattern(["**/*.ts"])

        editor.remove_spread_from_rules(["**/*.ts"], "tseslint.configs.recommended.rules")
        assert editor.get_content() == SCENARIO_CONFIG

    def test_add_config_spread(self):
        """Test entry-level spreads."""
        editor = _editor(SCENARIO_CONFIG)
        editor.add_spread_to_config(["**/*.ts"], "shared")
        assert editor.get_configs()[0]["...shared"] is UNDEFINED
        editor.remove_spread_from_config(["**/*.ts"], "shared")
        assert "...shared" not in editor.get_configs()[0]

    def test_spread_render_round_trip(self):
        """Test an untouched rules spread is re-emitted verbatim in place."""
        text = "export default [{ files: ['a'], rules: { ...base, 'x': 'error' } }];\n"
        editor = _editor(text)
        editor.add_rule(["a"], "y", "warn")
        assert editor.get_content() == (
            "export default [{ files: ['a'], rules: { ...base, 'x': 'error', 'y': 'warn' } }];\n"
        )

    def test_missing_entry_raises(self):
        """Test spread operations require an existing entry."""
        editor = _editor(SCENARIO_CONFIG)
        for operation in (
            editor.add_spread_to_rules,
            editor.remove_spread_from_rules,
            editor.add_spread_to_config,
            editor.remove_spread_from_config,
        ):
            with pytest.raises(PreconditionError, match="No config found for files: x, y"):
                operation(["x", "y"], "base")

    def test_non_object_rules_raise(self):
        """Test rules spreads require an object literal."""
        editor = _editor("export default [{ files: ['a'], rules: baseRules }];\n")
        with pytest.raises(PreconditionError, match="object literal"):
            editor.add_spread_to_rules(["a"], "base")


class TestLanguageOptions:
    """Test set_language_options."""

    def test_scenario_new_entry(self):
        """Test options on an empty config create an entry."""
        editor = _editor("export default []")
        editor.set_language_options(["**/*.ts"], "@parser", {"ecmaVersion": 2022})

        assert editor.get_configs() == [{
            "files": ["**/*.ts"],
            "languageOptions": {"parser": "@parser", "parserOptions": {"ecmaVersion": 2022}},
        }]

    def test_adds_property_to_entry(self):
        """Test an entry without languageOptions gains one."""
        editor = _editor(SCENARIO_CONFIG)
        editor.set_language_options(["**/*.ts"], parser_options={"sourceType": "module"})
        assert editor.get_configs()[0]["languageOptions"] == {"parserOptions": {"sourceType": "module"}}

    def test_updates_existing_options(self):
        """Test existing options are set in place, others kept."""
        editor = _editor("export default [{ files: ['a'], languageOptions: { globals: g, parser: old } }];\n")
        editor.set_language_options(["a"], "new-parser")
        options = editor.get_configs()[0]["languageOptions"]
        assert options == {"globals": Opaque("g"), "parser": "new-parser"}


class TestHelpers:
    """Test bulk helpers, queries, presets and migrations."""

    def test_queries(self, multiline_config):
        """Test read-only helpers."""
        editor = _editor(multiline_config)
        assert editor.has_config_for_pattern(["**/*.ts"])
        assert not editor.has_config_for_pattern(["**/*.js"])
        assert editor.get_all_configured_patterns() == [["**/*.ts"]]
        assert editor.get_rule(["**/*.ts"], "no-debugger") == "warn"
        assert editor.get_rule(["**/*.ts"], "missing", "off") == "off"
        assert editor.get_rules_for_pattern(["**/*.js"]) is None

    def test_multiple_rules(self):
        """Test adding and removing several rules."""
        editor = _editor(SCENARIO_CONFIG)
        editor.add_multiple_rules(["**/*.ts"], {"a": "error", "b": "warn"})
        editor.remove_multiple_rules(["**/*.ts"], ["no-console", "a"])
        assert editor.get_rules_for_pattern(["**/*.ts"]) == {"b": "warn"}

    def test_clear_all_rules(self):
        """Test clearing drops the rules property."""
        editor = _editor(SCENARIO_CONFIG)
        editor.clear_all_rules(["**/*.ts"])
        assert editor.get_configs() == [{"files": ["**/*.ts"]}]

    def test_merge_rules_from_pattern(self):
        """Test rules are copied to another entry."""
        editor = _editor(SCENARIO_CONFIG)
        editor.merge_rules_from_pattern(["**/*.ts"], ["**/*.js"])
        assert editor.get_rules_for_pattern(["**/*.js"]) == {"no-console": "error"}

    def test_copy_config_to_pattern(self):
        """Test a whole entry is copied under new patterns."""
        editor = _editor("export default [{ files: ['a'], ignores: ['x'], rules: { 'r': 1 } }];\n")
        editor.copy_config_to_pattern(["a"], ["b"])
        assert editor.get_configs()[1] == {"files": ["b"], "ignores": ["x"], "rules": {"r": 1}}

    def test_typescript_preset(self):
        """Test presets ensure their rules on default patterns."""
        editor = _editor("export default [];\n")
        editor.add_typescript_rules()
        rules = editor.get_rules_for_pattern(["**/*.ts", "**/*.tsx"])
        assert rules["@typescript-eslint/no-explicit-any"] == "warn"

    def test_angular_prefix(self):
        """Test the Angular preset uses the component prefix."""
        editor = _editor("export default [];\n")
        editor.add_angular_rules(component_prefix="acme")
        selector = editor.get_rule(["**/*.ts"], "@angular-eslint/component-selector")
        assert selector[1]["prefix"] == "acme"

    def test_nx_dependency_checks(self):
        """Test ignored files are appended to the defaults."""
        editor = _editor("export default [];\n")
        editor.add_nx_dependency_checks(["**/*.json"], ["{projectRoot}/vite.config.ts"])
        rule = editor.get_rule(["**/*.json"], "@nx/dependency-checks")
        assert rule[0] == "error"
        assert rule[1]["ignoredFiles"][-1] == "{projectRoot}/vite.config.ts"

    def test_renamed_and_deprecated_rules(self):
        """Test migrations rename and drop rules."""
        editor = _editor(
            "export default [{ files: ['a'], rules: { 'no-spaced-func': 'error', 'babel/semi': 'warn' } }];\n"
        )
        editor.update_renamed_rules(["a"])
        editor.remove_deprecated_rules(["a"])
        assert editor.get_rules_for_pattern(["a"]) == {"func-call-spacing": "error"}
